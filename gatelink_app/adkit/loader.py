"""
Ad content loader: script and iframe injection with timeout, retry and
fallback markup.

Every primitive settles exactly once. Timer callbacks and DOM events race
to write a ``OneShot`` cell; handlers and timers are cleared as soon as
one of them wins, so late events are ignored.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from gatelink_app.adkit.dom import DomHost, Element
from gatelink_app.adkit.errors import (
    AdLoaderError,
    ContainerNotFoundError,
    LoadError,
    LoadTimeoutError,
)
from gatelink_app.adkit.signals import OneShot

logger = logging.getLogger(__name__)

SCRIPT_TIMEOUT = 7.0
IFRAME_TIMEOUT = 7.0
RETRY_DELAY = 0.5
SOCIAL_GRACE_PERIOD = 0.8
SOCIAL_RETRIES = 2

DEFAULT_FALLBACK_HTML = '<div class="ad-fallback">Advertisement</div>'
DEFAULT_SOCIAL_FALLBACK_HTML = '<div class="social-fallback">Connect</div>'


@dataclass
class BannerOptions:
    """Where and how to load a banner; iframe_src wins over script_url"""
    container_id: str
    script_url: Optional[str] = None
    iframe_src: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    fallback_html: Optional[str] = None
    timeout: float = SCRIPT_TIMEOUT
    retries: int = 1


class AdLoader:
    def __init__(
        self,
        host: DomHost,
        retry_delay: float = RETRY_DELAY,
        iframe_timeout: float = IFRAME_TIMEOUT,
        social_grace_period: float = SOCIAL_GRACE_PERIOD,
    ):
        self.host = host
        self.retry_delay = retry_delay
        self.iframe_timeout = iframe_timeout
        self.social_grace_period = social_grace_period

    async def load_script(
        self,
        url: str,
        timeout: float = SCRIPT_TIMEOUT,
        retries: int = 1,
        is_async: bool = True,
    ) -> Element:
        """
        Insert a script tag and wait for it to load.

        Makes at most ``retries + 1`` attempts, pausing ``retry_delay``
        between them.

        Raises:
            LoadTimeoutError: The last attempt timed out
            LoadError: The last attempt errored
        """
        logger.info(f"[adLoader] loadScript start {url} (timeout={timeout}, retries={retries})")
        attempt = 0
        while True:
            attempt += 1
            logger.debug(f"[adLoader] loadScript attempt {attempt} {url}")
            try:
                return await self._load_script_once(url, timeout, is_async)
            except AdLoaderError as e:
                if attempt <= retries:
                    logger.warning(f"[adLoader] {e}, retrying (attempt {attempt})")
                    await asyncio.sleep(self.retry_delay)
                    continue
                logger.error(f"[adLoader] {e}")
                raise

    async def _load_script_once(self, url: str, timeout: float, is_async: bool) -> Element:
        loop = asyncio.get_running_loop()
        done: OneShot[Element] = OneShot(loop)

        script = self.host.create_element("script")
        script.set_attribute("src", url)
        if is_async:
            script.set_attribute("async", "")

        script.on_load = lambda: done.set_result(script)
        script.on_error = lambda: done.set_exception(LoadError(f"Script failed to load: {url}"))
        timer = loop.call_later(
            timeout,
            lambda: done.set_exception(LoadTimeoutError(f"Script load timeout: {url}")),
        )

        self.host.head.append_child(script)
        try:
            result = await done.wait()
        except AdLoaderError:
            script.remove()
            raise
        finally:
            timer.cancel()
            script.on_load = script.on_error = None

        logger.info(f"[adLoader] script loaded {url}")
        return result

    async def insert_iframe(
        self,
        container: Element,
        src: str,
        width: Optional[str] = None,
        height: Optional[str] = None,
    ) -> Element:
        """
        Replace the container's content with an iframe and wait for it to load.

        Raises:
            LoadTimeoutError: No load signal within iframe_timeout
            LoadError: The host reported an error
        """
        logger.info(f"[adLoader] insertIframe {src} into #{container.id}")
        loop = asyncio.get_running_loop()
        done: OneShot[Element] = OneShot(loop)

        iframe = self.host.create_element("iframe")
        iframe.set_attribute("width", width or "320")
        iframe.set_attribute("height", height or "50")
        iframe.set_attribute("frameborder", "0")
        iframe.set_attribute("scrolling", "no")
        iframe.set_attribute("loading", "lazy")
        iframe.style["border"] = "0"
        iframe.style["width"] = "100%"
        iframe.style["max-width"] = f"{width}px" if width else "100%"
        iframe.set_attribute("src", src)

        iframe.on_load = lambda: done.set_result(iframe)
        iframe.on_error = lambda: done.set_exception(LoadError(f"Iframe failed: {src}"))
        timer = loop.call_later(
            self.iframe_timeout,
            lambda: done.set_exception(LoadTimeoutError(f"Iframe load timeout: {src}")),
        )

        container.inner_html = ""
        container.append_child(iframe)
        try:
            result = await done.wait()
        except AdLoaderError as e:
            logger.error(f"[adLoader] {e}")
            raise
        finally:
            timer.cancel()
            iframe.on_load = iframe.on_error = None

        logger.info(f"[adLoader] iframe loaded {src}")
        return result

    def show_fallback(self, container: Element, html: Optional[str] = None) -> None:
        """Render static placeholder markup; a rendering failure is only logged"""
        try:
            container.inner_html = html or DEFAULT_FALLBACK_HTML
        except Exception as e:
            logger.warning(f"[adLoader] failed to render fallback in #{container.id}: {e}")

    def _require_container(self, container_id: str) -> Element:
        container = self.host.get_element_by_id(container_id)
        if container is None:
            logger.warning(f"[adLoader] container not found {container_id}")
            raise ContainerNotFoundError(f"Container not found: {container_id}")
        return container

    async def load_banner(self, options: BannerOptions) -> Element:
        """
        Load a banner into options.container_id.

        Tries the iframe first, then the script, then renders fallback
        markup. Once the container exists this never raises; it returns
        the container in its final state.

        Raises:
            ContainerNotFoundError: No element with options.container_id
        """
        logger.info(f"[adLoader] loadBanner #{options.container_id}")
        container = self._require_container(options.container_id)

        if options.iframe_src:
            try:
                await self.insert_iframe(container, options.iframe_src, options.width, options.height)
                return container
            except AdLoaderError as e:
                logger.warning(f"[adLoader] iframe failed, falling back to script: {e}")

        if options.script_url:
            try:
                await self.load_script(options.script_url, timeout=options.timeout, retries=options.retries)
                return container
            except AdLoaderError as e:
                logger.error(f"[adLoader] script fallback failed: {e}")

        self.show_fallback(container, options.fallback_html)
        return container

    async def load_social_bar(
        self,
        script_url: str,
        container_id: str,
        fallback_html: Optional[str] = None,
    ) -> Element:
        """
        Load a social bar script that renders itself into container_id.

        Scripts that load but render nothing get the fallback after a short
        grace period. Once the container exists this never raises.

        Raises:
            ContainerNotFoundError: No element with container_id
        """
        logger.info(f"[adLoader] loadSocialBar {script_url} #{container_id}")
        container = self._require_container(container_id)
        fallback = fallback_html or DEFAULT_SOCIAL_FALLBACK_HTML

        try:
            await self.load_script(script_url, timeout=SCRIPT_TIMEOUT, retries=SOCIAL_RETRIES)
        except AdLoaderError as e:
            logger.warning(f"[adLoader] social script failed: {e}")
            self.show_fallback(container, fallback)
            return container

        await asyncio.sleep(self.social_grace_period)
        if not container.inner_html.strip():
            logger.warning(f"[adLoader] social script loaded but container empty #{container_id}")
            self.show_fallback(container, fallback)
        return container
