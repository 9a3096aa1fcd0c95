"""
Ad-blocker detection.

One detection pass per page produces a single ``DetectionResult``. The
blocking modal and ``check_ad_block`` both read that value; nothing else
records whether blocking was seen.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from gatelink_app.adkit.dom import DomHost, Element
from gatelink_app.adkit.errors import AdLoaderError
from gatelink_app.adkit.loader import AdLoader

logger = logging.getLogger(__name__)

BAIT_CLASS_NAMES = (
    "adsbox ad-banner ad-placeholder pub_300x250 pub_300x250m pub_728x90 "
    "text-ad textAd text_ad text_ads text-ads text-ad-links"
)
BAIT_STYLE = {
    "width": "1px !important",
    "height": "1px !important",
    "position": "absolute !important",
    "left": "-10000px !important",
    "top": "-1000px !important",
}
PROBE_SCRIPT_URL = "https://pagead2.googlesyndication.com/pagead/js/adsbygoogle.js"

BAIT_SETTLE_DELAY = 0.1
CHECK_DELAY = 0.2
PROBE_TIMEOUT = 7.0

WARNING_ID = "adblock-warning"
REFRESH_BUTTON_ID = "refreshBtn"

WARNING_HTML = (
    '<div class="adblock-icon">&#128737;</div>'
    "<h2>Ad Blocker Detected</h2>"
    "<p>We noticed you're using an ad blocker. Our service is free because of ads.</p>"
    "<p>Please disable your ad blocker and refresh the page to continue.</p>"
    '<div class="adblock-steps">'
    "<h4>How to disable:</h4>"
    "<ol>"
    "<li>Click on your ad blocker icon in the browser toolbar</li>"
    '<li>Select "Disable on this site" or "Pause"</li>'
    "<li>Refresh this page</li>"
    "</ol>"
    "</div>"
)

WARNING_CSS = """
#adblock-warning {
    position: fixed; top: 0; left: 0; width: 100%; height: 100%;
    background: rgba(0, 0, 0, 0.9);
    display: flex; align-items: center; justify-content: center;
    z-index: 99999;
}
.adblock-modal {
    background: white; padding: 40px; border-radius: 20px;
    max-width: 500px; text-align: center;
}
.adblock-icon { font-size: 60px; margin-bottom: 20px; }
.adblock-modal h2 { color: #d63031; margin-bottom: 15px; }
.adblock-modal p { color: #636e72; margin-bottom: 10px; }
.adblock-steps {
    background: #f5f6fa; padding: 20px; border-radius: 10px;
    margin: 20px 0; text-align: left;
}
"""


@dataclass(frozen=True)
class DetectionResult:
    """
    Outcome of the page's detection pass.

    The bait and privacy-browser signals are known as soon as the bait has
    settled. The script check finishes later; ``probe`` resolves to True
    when the ad script could not be loaded.
    """

    bait_hidden: bool
    privacy_browser: bool
    probe: "asyncio.Future[bool]"

    @property
    def probe_failed(self) -> Optional[bool]:
        """None while the script check is still running"""
        if not self.probe.done():
            return None
        return self.probe.result()

    @property
    def blocked(self) -> bool:
        return self.bait_hidden or self.privacy_browser or self.probe_failed is True


def is_hidden(element: Element) -> bool:
    """True when a filter rule collapsed the element"""
    return (
        element.offset_parent is None
        or element.offset_height == 0
        or element.offset_width == 0
        or element.client_height == 0
        or element.client_width == 0
    )


class BlockerDetector:
    def __init__(
        self,
        host: DomHost,
        loader: Optional[AdLoader] = None,
        bait_settle_delay: float = BAIT_SETTLE_DELAY,
        check_delay: float = CHECK_DELAY,
        probe_timeout: float = PROBE_TIMEOUT,
    ):
        self.host = host
        self.loader = loader or AdLoader(host)
        self.bait_settle_delay = bait_settle_delay
        self.check_delay = check_delay
        self.probe_timeout = probe_timeout
        self._detection: Optional["asyncio.Future[DetectionResult]"] = None

    def result(self) -> "asyncio.Future[DetectionResult]":
        """The page's single detection pass, started on first use"""
        if self._detection is None:
            self._detection = asyncio.ensure_future(self.detect())
        return self._detection

    async def detect(self) -> DetectionResult:
        bait = self.host.create_element("div")
        bait.inner_html = "&nbsp;"
        bait.class_name = BAIT_CLASS_NAMES
        bait.style.update(BAIT_STYLE)
        self.host.body.append_child(bait)

        await asyncio.sleep(self.bait_settle_delay)
        bait_hidden = is_hidden(bait)
        bait.remove()

        result = DetectionResult(
            bait_hidden=bait_hidden,
            privacy_browser=bool(self.host.is_privacy_browser()),
            probe=asyncio.ensure_future(self._probe()),
        )
        logger.info(
            f"Ad blocker detection: bait_hidden={result.bait_hidden} "
            f"privacy_browser={result.privacy_browser}"
        )
        return result

    async def _probe(self) -> bool:
        """True when the ad script fails to load"""
        try:
            await self.loader.load_script(PROBE_SCRIPT_URL, timeout=self.probe_timeout, retries=0)
        except AdLoaderError:
            logger.info("Ad blocker detection: ad script blocked")
            return True
        return False

    async def run(self) -> DetectionResult:
        """
        Page-load entry point: detect once and block the page if needed.

        The modal goes up as soon as the bait or privacy signal fires; a
        failed script check raises it later if nothing else did.
        """
        result = await asyncio.shield(self.result())
        if result.blocked:
            self.show_blocker_warning()
        if await asyncio.shield(result.probe):
            self.show_blocker_warning()
        return result

    async def check_ad_block(self, callback: Callable[[bool], None]) -> None:
        """Report what the detection pass knows after check_delay, without the modal"""
        await asyncio.sleep(self.check_delay)
        result = await asyncio.shield(self.result())
        callback(result.blocked)

    def show_blocker_warning(self) -> None:
        """
        Full-screen modal with a single refresh action.

        Idempotent: a second call while the modal exists does nothing.
        """
        if self.host.get_element_by_id(WARNING_ID) is not None:
            return

        style = self.host.create_element("style")
        style.inner_html = WARNING_CSS
        self.host.head.append_child(style)

        overlay = self.host.create_element("div")
        overlay.id = WARNING_ID
        modal = self.host.create_element("div")
        modal.class_name = "adblock-modal"
        modal.inner_html = WARNING_HTML

        button = self.host.create_element("button")
        button.id = REFRESH_BUTTON_ID
        button.class_name = "btn btn-primary"
        button.inner_html = "I've Disabled It - Refresh"
        button.add_event_listener("click", self.host.reload)

        modal.append_child(button)
        overlay.append_child(modal)
        self.host.body.append_child(overlay)

        self.host.body.style["overflow"] = "hidden"
