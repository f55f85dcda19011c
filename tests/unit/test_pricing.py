"""
Тесты для PricingEngine

Проверяет:
1. Spread: монотонность по health, границы [MIN, MAX]
2. Drift: ноль при сбалансированной паре, рост при деградации
3. Эффективную цену в обоих направлениях
4. Выход swap и комиссию (эталонный сценарий 1_000_000 @ 1.1)
5. Переполнение и невалидные входы
"""

from fractions import Fraction

import pytest

from fxvault.core.errors import InvalidAmountError, InvalidOracleAccountError, MathOverflowError
from fxvault.core.math.checked import U64_MAX
from fxvault.core.math.pricing import (
    DRIFT_SLOPE,
    MAX_SPREAD_BPS,
    MIN_SPREAD_BPS,
    PRICE_SCALE,
    PricingConfig,
    SwapDirection,
    apply_drift,
    calculate_amount_out,
    calculate_drift,
    calculate_spread_bps,
    quote_swap,
)

PRICE_1_1 = 1_100_000_000

HEALTH_GRID = [Fraction(i, 100) for i in range(0, 101, 5)]


# =============================================================================
# SPREAD
# =============================================================================


class TestSpread:
    @pytest.mark.parametrize(
        "health,expected",
        [
            (Fraction(1), 3),
            (Fraction(95, 100), 3),
            (Fraction(9, 10), 3),
            (Fraction(1, 2), 14),
            (Fraction(0), 28),
        ],
    )
    def test_reference_points(self, health: Fraction, expected: int) -> None:
        assert calculate_spread_bps(health) == expected

    def test_non_increasing_in_health(self) -> None:
        spreads = [calculate_spread_bps(h) for h in HEALTH_GRID]
        assert all(s1 >= s2 for s1, s2 in zip(spreads, spreads[1:]))

    @pytest.mark.parametrize("health", HEALTH_GRID)
    def test_within_bounds(self, health: Fraction) -> None:
        assert MIN_SPREAD_BPS <= calculate_spread_bps(health) <= MAX_SPREAD_BPS

    def test_capped_at_max(self) -> None:
        """Крутая кривая упирается в MAX_SPREAD"""
        cfg = PricingConfig(spread_slope_bps=Fraction(100))
        assert calculate_spread_bps(Fraction(0), cfg) == MAX_SPREAD_BPS

    def test_health_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            calculate_spread_bps(Fraction(11, 10))


# =============================================================================
# DRIFT
# =============================================================================


class TestDrift:
    @pytest.mark.parametrize("health", [Fraction(1), Fraction(95, 100), Fraction(9, 10)])
    def test_zero_when_balanced(self, health: Fraction) -> None:
        assert calculate_drift(health) == 0

    def test_linear_below_balanced(self) -> None:
        assert calculate_drift(Fraction(1, 2)) == DRIFT_SLOPE * Fraction(4, 10)

    def test_non_decreasing_as_health_degrades(self) -> None:
        drifts = [calculate_drift(h) for h in HEALTH_GRID]
        assert all(d1 >= d2 for d1, d2 in zip(drifts, drifts[1:]))

    def test_apply_drift_moves_against_trader(self) -> None:
        drift = Fraction(1, 100)
        assert apply_drift(PRICE_1_1, drift, SwapDirection.SOURCE_TO_TARGET) == 1_089_000_000
        assert apply_drift(PRICE_1_1, drift, SwapDirection.TARGET_TO_SOURCE) == 1_111_000_000

    def test_reverse_drift_saturates(self) -> None:
        price = apply_drift(U64_MAX - 5, Fraction(1, 100), SwapDirection.TARGET_TO_SOURCE)
        assert price == U64_MAX

    def test_apply_zero_drift(self) -> None:
        for direction in SwapDirection:
            assert apply_drift(PRICE_1_1, Fraction(0), direction) == PRICE_1_1


# =============================================================================
# SWAP QUOTE
# =============================================================================


class TestQuoteSwap:
    def test_reference_scenario(self) -> None:
        """1_000_000 @ 1.1, health 0.95 → 1_100_000 / 330 / 1_099_670"""
        q = quote_swap(
            amount_in=1_000_000,
            price=PRICE_1_1,
            source_balance=950_000,
            target_balance=1_000_000,
        )
        assert q.health == Fraction(95, 100)
        assert q.spread_bps == 3
        assert q.drift == 0
        assert q.effective_price == PRICE_1_1
        assert q.amount_out_before_fee == 1_100_000
        assert q.fee_amount == 330
        assert q.amount_out == 1_099_670

    def test_reverse_direction(self) -> None:
        q = quote_swap(
            amount_in=1_100_000,
            price=PRICE_1_1,
            source_balance=1_000,
            target_balance=1_000,
            direction=SwapDirection.TARGET_TO_SOURCE,
        )
        assert q.amount_out_before_fee == 1_000_000
        assert q.fee_amount == 300
        assert q.amount_out == 999_700

    def test_degraded_health_applies_drift_and_wider_spread(self) -> None:
        """health 0.5: spread 14 bps, drift 0.0033332"""
        q = quote_swap(
            amount_in=1_000_000,
            price=PRICE_1_1,
            source_balance=500,
            target_balance=1_000,
        )
        assert q.spread_bps == 14
        assert q.effective_price == 1_096_333_480
        assert q.amount_out_before_fee == 1_096_333
        assert q.fee_amount == 1_534
        assert q.amount_out == 1_094_799

    def test_fee_plus_out_equals_before_fee(self) -> None:
        q = quote_swap(777_777, 1_234_567_891, 10_000, 40_000)
        assert q.fee_amount + q.amount_out == q.amount_out_before_fee

    def test_output_overflow(self) -> None:
        with pytest.raises(MathOverflowError):
            quote_swap(U64_MAX, 2 * PRICE_SCALE, 1_000, 1_000)

    @pytest.mark.parametrize("price", [0, -1])
    def test_non_positive_price(self, price: int) -> None:
        with pytest.raises(InvalidOracleAccountError):
            quote_swap(1_000, price, 1_000, 1_000)

    def test_zero_amount(self) -> None:
        with pytest.raises(InvalidAmountError):
            quote_swap(0, PRICE_1_1, 1_000, 1_000)

    def test_zero_effective_price_as_divisor(self) -> None:
        with pytest.raises(MathOverflowError):
            calculate_amount_out(100, 0, 3, SwapDirection.TARGET_TO_SOURCE)


class TestPricingConfig:
    def test_defaults(self) -> None:
        cfg = PricingConfig()
        assert cfg.min_spread_bps == 3
        assert cfg.max_spread_bps == 50

    def test_min_above_max_rejected(self) -> None:
        with pytest.raises(ValueError):
            PricingConfig(min_spread_bps=60, max_spread_bps=50)

    def test_negative_slope_rejected(self) -> None:
        with pytest.raises(ValueError):
            PricingConfig(drift_slope=Fraction(-1, 100))
