from fastapi import FastAPI
from gatelink_app.config import settings
from gatelink_app.core.errors import add_exception_handlers
from gatelink_app.core.logging import setup_logging
from gatelink_app.database.connection import engine, Base
from gatelink_app.api import links, gates
from gatelink_app.api.v1 import links as links_v1

# Import models to ensure they're registered with Base
from gatelink_app.models import ShortLink

setup_logging()

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Link shortener with a three step ad gate before the redirect",
    debug=settings.debug
)
add_exception_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}


######## Include routers (gates last: it owns the catch-all /{short_id})
app.include_router(links.router)
app.include_router(links_v1.router, prefix="/api/v1")
app.include_router(gates.router)
