"""
Gated redirect: GATE1 -> GATE2 -> GATE3 -> VERIFIED.

No progress is stored between steps. Every request re-resolves the short
identifier, so a visitor can open any step directly; the timers that pace
the steps live in the rendered pages and are not enforced here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

from starlette.concurrency import run_in_threadpool

from gatelink_app.config import settings
from gatelink_app.core.exceptions import CaptchaRejectedError, LinkNotFoundError
from gatelink_app.services.captcha import CaptchaVerifier
from gatelink_app.services.link_service import LinkService
from gatelink_app.services.short_id_strategies import RESERVED_IDS

logger = logging.getLogger(__name__)


class GateStep(Enum):
    GATE1 = "gate1"
    GATE2 = "gate2"
    GATE3 = "gate3"
    VERIFIED = "verified"


@dataclass(frozen=True)
class GateView:
    """What a gate page needs to render"""
    step: GateStep
    short_id: str
    delay_seconds: int
    next_url: Optional[str] = None
    site_key: Optional[str] = None


@dataclass(frozen=True)
class GateResult:
    step: GateStep
    redirect_url: str


class GateService:
    def __init__(self, links: LinkService, verifier: CaptchaVerifier):
        self.links = links
        self.verifier = verifier

    async def enter_gate1(self, short_id: str) -> GateView:
        """First gate; the only step that counts a click"""
        if short_id in RESERVED_IDS:
            raise LinkNotFoundError()
        await self.links.record_click(short_id)
        return GateView(
            step=GateStep.GATE1,
            short_id=short_id,
            delay_seconds=settings.gate1_delay_seconds,
            next_url=f"/step2/{short_id}",
        )

    async def enter_gate2(self, short_id: str) -> GateView:
        await self.links.get_original_url(short_id)
        return GateView(
            step=GateStep.GATE2,
            short_id=short_id,
            delay_seconds=settings.gate2_delay_seconds,
            next_url=f"/step3/{short_id}",
        )

    async def enter_gate3(self, short_id: str) -> GateView:
        await self.links.get_original_url(short_id)
        return GateView(
            step=GateStep.GATE3,
            short_id=short_id,
            delay_seconds=settings.gate3_delay_seconds,
            site_key=settings.recaptcha_site_key,
        )

    async def verify(self, short_id: str, captcha_token: Optional[str]) -> GateResult:
        """
        Check the CAPTCHA, then release the destination.

        The token is checked before the link is looked up, so a failed
        CAPTCHA reveals nothing about whether the identifier exists.

        Raises:
            CaptchaRejectedError: Verification failed; the visitor stays at GATE3
            LinkNotFoundError: Unknown identifier
        """
        # requests is blocking; keep it off the event loop
        accepted = await run_in_threadpool(self.verifier.verify, captcha_token)
        if not accepted:
            logger.info("CAPTCHA rejected", extra={"short_id": short_id})
            raise CaptchaRejectedError()

        redirect_url = await self.links.get_original_url(short_id)
        return GateResult(step=GateStep.VERIFIED, redirect_url=redirect_url)
