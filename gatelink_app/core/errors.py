from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from gatelink_app.core.exceptions import GateLinkError
from gatelink_app.schemas.link import ErrorResponse
from gatelink_app.views.pages import render_not_found

logger = logging.getLogger(__name__)


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.

    Every JSON error body has the shape {"error": "<message>"}.
    """
    @app.exception_handler(GateLinkError)
    async def gatelink_exception_handler(request: Request, exc: GateLinkError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.message).model_dump()
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)

        Unmatched page URLs get the same not-found page as unknown links;
        API paths keep the JSON body.
        """
        if (
            exc.status_code == 404
            and request.method == "GET"
            and not request.url.path.startswith("/api/")
        ):
            return HTMLResponse(render_not_found(), status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Malformed request bodies are client errors, reported as 400.
        """
        logger.info(f"Rejected request body for {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Invalid request body").model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {exc}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else "unknown"
            },
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Server error").model_dump()
        )
