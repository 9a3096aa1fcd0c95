from typing import Annotated, Any, Optional
import logging

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gatelink_app.models.short_link import ShortLink
from gatelink_app.config import settings
from gatelink_app.core.exceptions import (
    InvalidInputError,
    GenerationExhaustedError,
    LinkNotFoundError,
)
from gatelink_app.services.short_id_factory import ShortIdFactory
from gatelink_app.services.short_id_strategies import ShortIdStrategy
from gatelink_app.cache.strategies import CacheStrategy

logger = logging.getLogger(__name__)

# HttpUrl would also cap the length at 2083 characters
_http_url = TypeAdapter(
    Annotated[AnyUrl, UrlConstraints(allowed_schemes=["http", "https"], host_required=True)]
)


def validate_destination(original_url: Any) -> str:
    """
    Check that original_url is an absolute http(s) URL.

    Returns the string exactly as submitted; pydantic's normalized form
    (trailing slash etc.) is only used for validation so that resolving a
    link gives back the same URL that was shortened.
    """
    if not isinstance(original_url, str) or not original_url.strip():
        raise InvalidInputError()
    try:
        _http_url.validate_python(original_url)
    except ValidationError:
        raise InvalidInputError()
    return original_url


class LinkService:
    """
    Owns every read and write of the short link table.

    The cache and the identifier strategy are injected so tests can swap
    them out without touching the database layer.
    """

    def __init__(
        self,
        db: Session,
        cache: Optional[CacheStrategy] = None,
        short_id_strategy: Optional[ShortIdStrategy] = None
    ):
        self.db = db
        self.cache = cache
        self.short_id_strategy = short_id_strategy or ShortIdFactory.create_strategy()

    @staticmethod
    def _cache_key(short_id: str) -> str:
        return f"link:{short_id}"

    async def create_short_link(self, original_url: Any) -> ShortLink:
        """Create a new short link

        Process:
        1. Validate the destination (nothing is written on failure)
        2. Generate an identifier that is neither reserved nor taken
        3. Insert with clicks=0
        4. Cache the mapping for the gate lookups
        """
        destination = validate_destination(original_url)
        short_id = self.short_id_strategy.generate(self.db)

        link = ShortLink(short_id=short_id, original_url=destination, clicks=0)
        self.db.add(link)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost the check-then-insert race to a concurrent request
            self.db.rollback()
            logger.warning(f"Short id {short_id} was taken between check and insert")
            raise GenerationExhaustedError()
        self.db.refresh(link)

        if self.cache:
            await self.cache.set(self._cache_key(short_id), destination, ttl=settings.cache_ttl)

        logger.info(f"Created short link {short_id}", extra={"short_id": short_id})
        return link

    async def get_original_url(self, short_id: str) -> str:
        """
        Resolve short_id to its destination using the Cache-Aside pattern.

        Read only: never touches the click counter.

        Raises:
            LinkNotFoundError: If the identifier is unknown
        """
        cache_key = self._cache_key(short_id)

        if self.cache:
            cached_url = await self.cache.get(cache_key)
            if cached_url:
                return cached_url

        link = self.db.query(ShortLink).filter(ShortLink.short_id == short_id).first()
        if not link:
            raise LinkNotFoundError()

        if self.cache:
            await self.cache.set(cache_key, link.original_url, ttl=settings.cache_ttl)

        return link.original_url

    async def record_click(self, short_id: str) -> None:
        """
        Increment the click counter by exactly one.

        Done as a single UPDATE ... SET clicks = clicks + 1 so concurrent
        visits do not lose increments.

        Raises:
            LinkNotFoundError: If the identifier is unknown
        """
        result = self.db.execute(
            update(ShortLink)
            .where(ShortLink.short_id == short_id)
            .values(clicks=ShortLink.clicks + 1)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise LinkNotFoundError()
        self.db.commit()

    async def get_link(self, short_id: str) -> ShortLink:
        """
        Load the full row, bypassing the cache (used for stats).

        Raises:
            LinkNotFoundError: If the identifier is unknown
        """
        link = self.db.query(ShortLink).filter(ShortLink.short_id == short_id).first()
        if not link:
            raise LinkNotFoundError()
        return link
