"""
Price Feed Adapter — чтение и проверка внешних котировок

Фид возвращает сырое значение с десятичной экспонентой (value × 10^exponent).
Адаптер приводит его к масштабу PRICE_SCALE (10^9) и отклоняет:
- отрицательную цену          → NegativeOraclePriceError
- нулевую цену / плохой статус → InvalidOracleAccountError
- устаревшую котировку        → StaleOraclePriceError (age > max_age)

Только проверенная PriceQuote попадает в pricing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Final, Protocol, Tuple

from fxvault.core.domain.quote import PriceQuote
from fxvault.core.errors import (
    InvalidOracleAccountError,
    NegativeOraclePriceError,
    StaleOraclePriceError,
)
from fxvault.core.math.checked import U64_MAX, checked_div, checked_mul

logger = logging.getLogger(__name__)

# Экспонента, соответствующая PRICE_SCALE = 10^9
PRICE_EXPONENT: Final[int] = -9

DEFAULT_MAX_AGE_SECONDS: Final[int] = 60


class FeedStatus(str, Enum):
    """Статус чтения фида"""

    TRADING = "trading"
    HALTED = "halted"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OracleConfig:
    """Параметры проверки котировок."""

    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS

    def __post_init__(self) -> None:
        if self.max_age_seconds < 0:
            raise ValueError(f"max_age_seconds must be >= 0, got {self.max_age_seconds}")


@dataclass(frozen=True)
class FeedReading:
    """Сырое чтение фида (до нормализации и проверок)."""

    price: int
    exponent: int
    publish_ts: int
    status: FeedStatus = FeedStatus.TRADING


# =============================================================================
# НОРМАЛИЗАЦИЯ
# =============================================================================


def normalize_price(raw_price: int, exponent: int) -> int:
    """
    Приведение value × 10^exponent к масштабу 10^9.

    Exponent выше −9 → умножение, ниже −9 → деление с усечением.

    Args:
        raw_price: Значение фида (≥ 0)
        exponent: Десятичная экспонента фида

    Returns:
        Цена × 10^9 (u64)

    Raises:
        MathOverflowError: Результат не помещается в u64

    Examples:
        >>> normalize_price(1_100_000, -6)
        1100000000
        >>> normalize_price(110_000_000_000, -11)
        1100000000
    """
    shift = exponent - PRICE_EXPONENT
    if shift > 0:
        return checked_mul(raw_price, 10**shift, limit=U64_MAX)
    if shift < 0:
        return checked_div(raw_price, 10 ** (-shift))
    return raw_price


def validate_reading(
    reading: FeedReading,
    base_currency: str,
    quote_currency: str,
    now: int,
    config: OracleConfig | None = None,
) -> PriceQuote:
    """
    Проверка чтения фида и построение PriceQuote.

    Args:
        reading: Сырое чтение
        base_currency: Source валюта
        quote_currency: Target валюта
        now: Текущее время (unix, сек)
        config: Параметры проверки (опционально)

    Returns:
        Проверенная PriceQuote

    Raises:
        InvalidOracleAccountError: Статус не TRADING или нулевая цена
        NegativeOraclePriceError: Отрицательная цена
        StaleOraclePriceError: now − publish_ts > max_age
        MathOverflowError: Нормализованная цена не помещается в u64
    """
    cfg = config or OracleConfig()
    pair = f"{base_currency}/{quote_currency}"

    if reading.status != FeedStatus.TRADING:
        logger.warning("feed %s rejected: status=%s", pair, reading.status.value)
        raise InvalidOracleAccountError(f"feed {pair} status is {reading.status.value}")

    if reading.price < 0:
        logger.warning("feed %s rejected: negative price %d", pair, reading.price)
        raise NegativeOraclePriceError(f"feed {pair} returned {reading.price}")

    age = max(now - reading.publish_ts, 0)
    if age > cfg.max_age_seconds:
        logger.warning("feed %s rejected: age %ds > %ds", pair, age, cfg.max_age_seconds)
        raise StaleOraclePriceError(
            f"feed {pair} published {age}s ago, max age {cfg.max_age_seconds}s"
        )

    price = normalize_price(reading.price, reading.exponent)
    if price == 0:
        logger.warning("feed %s rejected: zero normalized price", pair)
        raise InvalidOracleAccountError(f"feed {pair} normalized price is zero")

    return PriceQuote(
        base_currency=base_currency,
        quote_currency=quote_currency,
        price=price,
        publish_ts=reading.publish_ts,
        age_seconds=age,
    )


# =============================================================================
# ФИДЫ
# =============================================================================


class PriceFeed(Protocol):
    """Источник котировок: цена quote за 1 base."""

    def has_pair(self, base_currency: str, quote_currency: str) -> bool:
        """Котирует ли фид пару именно в ориентации base/quote."""
        ...

    def read(self, base_currency: str, quote_currency: str) -> FeedReading:
        ...


@dataclass
class StaticPriceFeed:
    """
    In-memory фид для тестов и симуляций.

    Обратная пара выводится из прямой не автоматически: каждая пара задаётся явно.
    """

    readings: Dict[Tuple[str, str], FeedReading] = field(default_factory=dict)

    def set_price(
        self,
        base_currency: str,
        quote_currency: str,
        price: int,
        publish_ts: int,
        exponent: int = PRICE_EXPONENT,
        status: FeedStatus = FeedStatus.TRADING,
    ) -> None:
        self.readings[(base_currency, quote_currency)] = FeedReading(
            price=price, exponent=exponent, publish_ts=publish_ts, status=status
        )

    def has_pair(self, base_currency: str, quote_currency: str) -> bool:
        return (base_currency, quote_currency) in self.readings

    def read(self, base_currency: str, quote_currency: str) -> FeedReading:
        try:
            return self.readings[(base_currency, quote_currency)]
        except KeyError:
            raise InvalidOracleAccountError(
                f"no feed for {base_currency}/{quote_currency}"
            ) from None
