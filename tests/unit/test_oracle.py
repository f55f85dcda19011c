"""
Тесты для Price Feed Adapter

Проверяет:
1. Нормализацию экспоненты к масштабу 10^9
2. Отказы: отрицательная, нулевая, устаревшая котировка, плохой статус
3. StaticPriceFeed
"""

import logging

import pytest

from fxvault.core.errors import (
    ErrorKind,
    InvalidOracleAccountError,
    MathOverflowError,
    NegativeOraclePriceError,
    StaleOraclePriceError,
)
from fxvault.core.math.checked import U64_MAX
from fxvault.oracle.feed import (
    FeedReading,
    FeedStatus,
    OracleConfig,
    StaticPriceFeed,
    normalize_price,
    validate_reading,
)


class TestNormalizePrice:
    @pytest.mark.parametrize(
        "raw,exponent,expected",
        [
            (1_100_000, -6, 1_100_000_000),
            (1_100_000_000, -9, 1_100_000_000),
            (110_000_000_000, -11, 1_100_000_000),
            (1_234_567_891_234, -12, 1_234_567_891),
            (2, 1, 20_000_000_000),
            (135, -2, 1_350_000_000),
        ],
    )
    def test_rescale(self, raw: int, exponent: int, expected: int) -> None:
        assert normalize_price(raw, exponent) == expected

    def test_overflow(self) -> None:
        with pytest.raises(MathOverflowError):
            normalize_price(U64_MAX, -8)


class TestValidateReading:
    def test_fresh_quote(self) -> None:
        reading = FeedReading(price=1_100_000, exponent=-6, publish_ts=1_000)
        quote = validate_reading(reading, "EUR", "USD", now=1_030)
        assert quote.price == 1_100_000_000
        assert quote.age_seconds == 30
        assert quote.base_currency == "EUR"
        assert quote.quote_currency == "USD"

    def test_age_equal_to_max_is_fresh(self) -> None:
        reading = FeedReading(price=1, exponent=0, publish_ts=0)
        assert validate_reading(reading, "EUR", "USD", now=60).age_seconds == 60

    def test_stale_quote(self, caplog: pytest.LogCaptureFixture) -> None:
        reading = FeedReading(price=1, exponent=0, publish_ts=0)
        with caplog.at_level(logging.WARNING, logger="fxvault.oracle.feed"):
            with pytest.raises(StaleOraclePriceError) as exc_info:
                validate_reading(reading, "EUR", "USD", now=61)
        assert exc_info.value.kind == ErrorKind.STALE_ORACLE_PRICE
        assert "EUR/USD" in caplog.text

    def test_custom_max_age(self) -> None:
        reading = FeedReading(price=1, exponent=0, publish_ts=0)
        with pytest.raises(StaleOraclePriceError):
            validate_reading(reading, "EUR", "USD", now=11, config=OracleConfig(max_age_seconds=10))

    def test_future_publish_ts(self) -> None:
        reading = FeedReading(price=1, exponent=0, publish_ts=100)
        assert validate_reading(reading, "EUR", "USD", now=50).age_seconds == 0

    def test_negative_price(self) -> None:
        reading = FeedReading(price=-5, exponent=-9, publish_ts=0)
        with pytest.raises(NegativeOraclePriceError):
            validate_reading(reading, "EUR", "USD", now=0)

    @pytest.mark.parametrize("price,exponent", [(0, -9), (1, -12)])
    def test_zero_normalized_price(self, price: int, exponent: int) -> None:
        reading = FeedReading(price=price, exponent=exponent, publish_ts=0)
        with pytest.raises(InvalidOracleAccountError):
            validate_reading(reading, "EUR", "USD", now=0)

    @pytest.mark.parametrize("status", [FeedStatus.HALTED, FeedStatus.UNKNOWN])
    def test_non_trading_status(self, status: FeedStatus) -> None:
        reading = FeedReading(price=1, exponent=0, publish_ts=0, status=status)
        with pytest.raises(InvalidOracleAccountError):
            validate_reading(reading, "EUR", "USD", now=0)


class TestStaticPriceFeed:
    def test_read_configured_pair(self) -> None:
        feed = StaticPriceFeed()
        feed.set_price("EUR", "USD", 1_100_000_000, publish_ts=5)
        reading = feed.read("EUR", "USD")
        assert reading.price == 1_100_000_000
        assert reading.exponent == -9

    def test_missing_pair(self) -> None:
        feed = StaticPriceFeed()
        feed.set_price("EUR", "USD", 1_100_000_000, publish_ts=5)
        with pytest.raises(InvalidOracleAccountError):
            feed.read("USD", "EUR")

    def test_has_pair_is_orientation_specific(self) -> None:
        feed = StaticPriceFeed()
        feed.set_price("EUR", "USD", 1_100_000_000, publish_ts=5)
        assert feed.has_pair("EUR", "USD")
        assert not feed.has_pair("USD", "EUR")


class TestOracleConfig:
    def test_default_max_age(self) -> None:
        assert OracleConfig().max_age_seconds == 60

    def test_negative_max_age(self) -> None:
        with pytest.raises(ValueError):
            OracleConfig(max_age_seconds=-1)
