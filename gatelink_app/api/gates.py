import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse

from gatelink_app.core.exceptions import LinkNotFoundError
from gatelink_app.dependencies import get_gate_service
from gatelink_app.services.gate_service import GateService, GateView
from gatelink_app.views.pages import render_gate, render_not_found

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gates"])


async def _render(step_name: str, short_id: str, enter) -> HTMLResponse:
    """
    Run a gate step and turn the outcome into a page.

    Unknown links get the not-found page; anything unexpected is logged
    and rendered as the same page with a 500.
    """
    try:
        view: GateView = await enter(short_id)
    except LinkNotFoundError:
        return HTMLResponse(render_not_found(), status_code=status.HTTP_404_NOT_FOUND)
    except Exception:
        logger.exception(f"Failed to render {step_name}", extra={"short_id": short_id})
        return HTMLResponse(render_not_found(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTMLResponse(render_gate(view))


@router.get("/step2/{short_id}", response_class=HTMLResponse)
async def gate2(short_id: str, gate_service: GateService = Depends(get_gate_service)):
    return await _render("gate2", short_id, gate_service.enter_gate2)


@router.get("/step3/{short_id}", response_class=HTMLResponse)
async def gate3(short_id: str, gate_service: GateService = Depends(get_gate_service)):
    return await _render("gate3", short_id, gate_service.enter_gate3)


# Catch-all single segment route; must be registered after every other GET
@router.get("/{short_id}", response_class=HTMLResponse)
async def gate1(short_id: str, gate_service: GateService = Depends(get_gate_service)):
    """First gate: counts the click and starts the sequence"""
    return await _render("gate1", short_id, gate_service.enter_gate1)
