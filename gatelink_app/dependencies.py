"""
FastAPI dependencies for dependency injection.

Singletons for the cache and the CAPTCHA verifier, plus per-request
services built on top of the database session. Tests replace any of
these through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from gatelink_app.cache.factory import CacheFactory, CacheBackend
from gatelink_app.cache.strategies import CacheStrategy
from gatelink_app.database.connection import get_db
from gatelink_app.services.captcha import CaptchaVerifier, RecaptchaVerifier
from gatelink_app.services.gate_service import GateService
from gatelink_app.services.link_service import LinkService
from gatelink_app.config import settings


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get cache instance (singleton).

    Returns:
        CacheStrategy instance based on settings
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_captcha_verifier() -> CaptchaVerifier:
    """Get the CAPTCHA verifier configured from settings (singleton)"""
    return RecaptchaVerifier(
        secret_key=settings.recaptcha_secret_key,
        verify_url=settings.recaptcha_verify_url,
        timeout=settings.captcha_timeout
    )


def get_link_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache)
) -> LinkService:
    return LinkService(db=db, cache=cache)


def get_gate_service(
    links: LinkService = Depends(get_link_service),
    verifier: CaptchaVerifier = Depends(get_captcha_verifier)
) -> GateService:
    return GateService(links=links, verifier=verifier)
