"""
Short identifier generation strategies.
Uses Strategy Pattern so the identifier alphabet can be swapped via settings.
"""

import string
import secrets
import logging
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable
from sqlalchemy.orm import Session
from gatelink_app.core.exceptions import GenerationExhaustedError
from gatelink_app.models.short_link import ShortLink

logger = logging.getLogger(__name__)


# Path segments the router owns. A short link with one of these ids would be
# shadowed by (or shadow) a real route, so they are never handed out.
RESERVED_IDS: FrozenSet[str] = frozenset({
    "step2",
    "step3",
    "verify",
    "shorten",
    "health",
    "api",
    "docs",
    "redoc",
    "openapi.json",
    "static",
})

NANOID_ALPHABET = string.ascii_letters + string.digits + "_-"
ALPHANUMERIC_ALPHABET = string.ascii_letters + string.digits


class ShortIdStrategy(ABC):
    """Abstract base class for short identifier generation strategies"""

    @abstractmethod
    def generate(self, db_session: Session) -> str:
        """
        Generate a short identifier not yet present in the store.

        Args:
            db_session: Database session used for the existence check

        Returns:
            A short identifier string

        Raises:
            GenerationExhaustedError: If no free identifier was found
        """
        pass


class RandomShortIdStrategy(ShortIdStrategy):
    """
    Random identifier with a bounded number of collision retries.

    Each candidate is checked against the store before it is returned.
    Two concurrent requests can still pick the same free candidate between
    the check and the insert; the UNIQUE constraint on short_id turns that
    into a failed insert instead of a duplicate row.
    """

    def __init__(
        self,
        alphabet: str = NANOID_ALPHABET,
        length: int = 6,
        max_retries: int = 5,
        reserved: Iterable[str] = RESERVED_IDS,
    ):
        self.alphabet = alphabet
        self.length = length
        self.max_retries = max_retries
        self.reserved = frozenset(reserved)

    def generate(self, db_session: Session) -> str:
        for attempt in range(1, self.max_retries + 1):
            short_id = self._generate_random_string()

            if self._is_taken(short_id, db_session):
                logger.debug(f"Short id collision on attempt {attempt}: {short_id}")
                continue

            return short_id

        logger.error(f"Could not generate unique short id after {self.max_retries} attempts")
        raise GenerationExhaustedError()

    def _is_taken(self, short_id: str, db_session: Session) -> bool:
        if short_id in self.reserved:
            return True
        existing = db_session.query(ShortLink.id).filter(ShortLink.short_id == short_id).first()
        return existing is not None

    def _generate_random_string(self) -> str:
        """Generate a random string of the configured length"""
        return ''.join(secrets.choice(self.alphabet) for _ in range(self.length))
