from fastapi import APIRouter, Depends
from gatelink_app.schemas.link import LinkStats
from gatelink_app.services.link_service import LinkService
from gatelink_app.dependencies import get_link_service

router = APIRouter(prefix="/links", tags=["stats"])


@router.get("/{short_id}/stats", response_model=LinkStats)
async def get_link_stats(
    short_id: str,
    link_service: LinkService = Depends(get_link_service)
):
    """Click count for a short link (404 {"error"} if unknown)"""
    link = await link_service.get_link(short_id)
    return LinkStats(short_id=link.short_id, clicks=link.clicks, created_at=link.created_at)
