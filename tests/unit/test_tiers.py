"""
Тесты для Tier Tables

Семантика границ всех ступенчатых правил:
- time tiers: half-open `elapsed < bound`
- health tiers: строгое `health > threshold`
- rebalance bands: `[lower, upper)`
"""

from fractions import Fraction

import pytest

from fxvault.core.math.fee_allocation import DEFAULT_HEALTH_TIERS
from fxvault.core.math.tiers import (
    RebalanceBand,
    TimeTier,
    select_health_tier,
    select_rebalance_band,
    select_time_tier,
    validate_rebalance_bands,
    validate_time_tiers,
)
from fxvault.ledger.positions import DEFAULT_PENALTY_TIERS
from fxvault.rebalance.controller import DEFAULT_BANDS

H = 3_600


class TestSelectTimeTier:
    @pytest.mark.parametrize(
        "elapsed,fee_bps",
        [
            (0, 200),
            (60 * H - 1, 200),
            (60 * H, 150),
            (120 * H - 1, 150),
            (120 * H, 100),
            (180 * H, 50),
            (240 * H - 1, 50),
            (240 * H, 0),
            (10**9, 0),
        ],
    )
    def test_penalty_boundaries(self, elapsed: int, fee_bps: int) -> None:
        assert select_time_tier(DEFAULT_PENALTY_TIERS, elapsed).fee_bps == fee_bps

    def test_negative_elapsed_treated_as_zero(self) -> None:
        assert select_time_tier(DEFAULT_PENALTY_TIERS, -100).fee_bps == 200

    def test_non_increasing_step_function(self) -> None:
        fees = [select_time_tier(DEFAULT_PENALTY_TIERS, t * H).fee_bps for t in range(0, 300, 7)]
        assert all(f1 >= f2 for f1, f2 in zip(fees, fees[1:]))


class TestSelectHealthTier:
    def test_fallback_below_all_thresholds(self) -> None:
        assert select_health_tier(DEFAULT_HEALTH_TIERS, Fraction(0)).health_above is None

    def test_top_tier(self) -> None:
        assert select_health_tier(DEFAULT_HEALTH_TIERS, Fraction(1)).health_above == Fraction(7, 10)

    def test_threshold_itself_falls_to_next_tier(self) -> None:
        tier = select_health_tier(DEFAULT_HEALTH_TIERS, Fraction(1, 2))
        assert tier.health_above == Fraction(3, 10)


class TestSelectRebalanceBand:
    @pytest.mark.parametrize(
        "health,injection_bps",
        [
            (Fraction(20, 100), 7_500),
            (Fraction(25, 100), 7_500),
            (Fraction(30, 100), 5_000),
            (Fraction(39, 100), 5_000),
            (Fraction(40, 100), 3_000),
            (Fraction(49, 100), 3_000),
        ],
    )
    def test_band_lookup(self, health: Fraction, injection_bps: int) -> None:
        band = select_rebalance_band(DEFAULT_BANDS, health)
        assert band is not None
        assert band.injection_bps == injection_bps

    @pytest.mark.parametrize("health", [Fraction(0), Fraction(19, 100), Fraction(1, 2), Fraction(1)])
    def test_outside_bands(self, health: Fraction) -> None:
        assert select_rebalance_band(DEFAULT_BANDS, health) is None

    def test_gap_between_bands(self) -> None:
        bands = (
            RebalanceBand(Fraction(1, 10), Fraction(2, 10), 1_000),
            RebalanceBand(Fraction(3, 10), Fraction(4, 10), 1_000),
        )
        assert select_rebalance_band(bands, Fraction(25, 100)) is None


class TestTableValidation:
    def test_default_tables_valid(self) -> None:
        validate_time_tiers(DEFAULT_PENALTY_TIERS)
        validate_rebalance_bands(DEFAULT_BANDS)

    def test_time_tiers_must_end_open(self) -> None:
        with pytest.raises(ValueError):
            validate_time_tiers((TimeTier(100, 50),))

    def test_time_bounds_strictly_ascending(self) -> None:
        with pytest.raises(ValueError):
            validate_time_tiers((TimeTier(100, 50), TimeTier(100, 20), TimeTier(None, 0)))

    def test_time_fees_strictly_descending(self) -> None:
        with pytest.raises(ValueError):
            validate_time_tiers((TimeTier(100, 50), TimeTier(200, 50), TimeTier(None, 0)))

    def test_overlapping_bands(self) -> None:
        with pytest.raises(ValueError):
            validate_rebalance_bands(
                (
                    RebalanceBand(Fraction(1, 10), Fraction(3, 10), 1_000),
                    RebalanceBand(Fraction(2, 10), Fraction(4, 10), 1_000),
                )
            )
