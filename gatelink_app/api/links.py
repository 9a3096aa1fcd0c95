from fastapi import APIRouter, Depends, status
from gatelink_app.schemas.link import ShortenRequest, ShortenResponse, VerifyRequest, VerifyResponse
from gatelink_app.services.link_service import LinkService
from gatelink_app.services.gate_service import GateService
from gatelink_app.dependencies import get_link_service, get_gate_service

router = APIRouter(tags=["links"])


@router.post("/shorten", response_model=ShortenResponse, status_code=status.HTTP_201_CREATED)
async def create_short_link(
    payload: ShortenRequest,
    link_service: LinkService = Depends(get_link_service)
):
    """Create a new short link; errors come back as {"error": ...}"""
    link = await link_service.create_short_link(payload.original_url)
    return ShortenResponse(short_id=link.short_id)


@router.post("/verify/{short_id}", response_model=VerifyResponse)
async def verify_captcha(
    short_id: str,
    payload: VerifyRequest,
    gate_service: GateService = Depends(get_gate_service)
):
    """
    Final gate: verify the CAPTCHA token and release the destination.

    The client performs the navigation itself using redirectUrl.
    """
    result = await gate_service.verify(short_id, payload.captcha_token)
    return VerifyResponse(redirect_url=result.redirect_url)
