"""
Oracle — адаптер внешнего фида курсов.
"""

from fxvault.oracle.feed import (
    DEFAULT_MAX_AGE_SECONDS,
    PRICE_EXPONENT,
    FeedReading,
    FeedStatus,
    OracleConfig,
    PriceFeed,
    StaticPriceFeed,
    normalize_price,
    validate_reading,
)

__all__ = [
    "DEFAULT_MAX_AGE_SECONDS",
    "PRICE_EXPONENT",
    "FeedReading",
    "FeedStatus",
    "OracleConfig",
    "PriceFeed",
    "StaticPriceFeed",
    "normalize_price",
    "validate_reading",
]
