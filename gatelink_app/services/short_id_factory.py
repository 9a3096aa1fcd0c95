"""
Factory for creating short identifier generation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from gatelink_app.services.short_id_strategies import (
    ShortIdStrategy,
    RandomShortIdStrategy,
    NANOID_ALPHABET,
    ALPHANUMERIC_ALPHABET,
)
from gatelink_app.config import settings


class ShortIdStrategyType(Enum):
    """Available short identifier alphabets"""
    NANOID = "nanoid"
    ALPHANUMERIC = "alphanumeric"


class ShortIdFactory:
    """Factory for creating short identifier strategies with caching"""

    _instances = {}

    @classmethod
    def create_strategy(
        cls,
        strategy_type: ShortIdStrategyType = None
    ) -> ShortIdStrategy:
        """
        Create or return cached short identifier strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of a ShortIdStrategy

        Raises:
            ValueError: If strategy_type is unknown
        """
        if strategy_type is None:
            strategy_type = ShortIdStrategyType(settings.short_id_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == ShortIdStrategyType.NANOID:
            alphabet = NANOID_ALPHABET
        elif strategy_type == ShortIdStrategyType.ALPHANUMERIC:
            alphabet = ALPHANUMERIC_ALPHABET
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        instance = RandomShortIdStrategy(
            alphabet=alphabet,
            length=settings.short_id_length,
            max_retries=settings.max_retries
        )
        cls._instances[strategy_type] = instance
        return instance
