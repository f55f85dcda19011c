"""
FeeAllocation — распределение комиссии swap

LP получают фиксированную долю (70%) независимо от health.
Остаток (30%) делится между automated treasury и протоколом по таблице
health-тиров (доли в bps от ОБЩЕЙ комиссии):

    health > 0.70 → treasury 15%, protocol 15%
    health > 0.50 → treasury 20%, protocol 10%
    health > 0.30 → treasury 25%, protocol  5%
    иначе         → treasury 30%, protocol  0%

Чем хуже health, тем больше non-LP комиссии идёт в treasury,
который финансирует автоматическую ребалансировку.

Каждая доля усекается вниз независимо: lp + treasury + protocol ≤ fee,
остаток (remainder) остаётся в vault как нераспределённая пыль.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Final, Optional, Tuple

from fxvault.core.math.checked import (
    BPS_DENOMINATOR,
    apply_bps,
    validate_balance,
)
from fxvault.core.math.tiers import HealthTier, select_health_tier, validate_health_tiers


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

LP_FEE_SHARE_BPS: Final[int] = 7_000

DEFAULT_HEALTH_TIERS: Final[Tuple[HealthTier, ...]] = (
    HealthTier(health_above=Fraction(70, 100), treasury_bps=1_500, protocol_bps=1_500),
    HealthTier(health_above=Fraction(50, 100), treasury_bps=2_000, protocol_bps=1_000),
    HealthTier(health_above=Fraction(30, 100), treasury_bps=2_500, protocol_bps=500),
    HealthTier(health_above=None, treasury_bps=3_000, protocol_bps=0),
)


# =============================================================================
# ТИПЫ
# =============================================================================


@dataclass(frozen=True)
class FeeAllocationConfig:
    """Доля LP и таблица тиров treasury/protocol."""

    lp_share_bps: int = LP_FEE_SHARE_BPS
    health_tiers: Tuple[HealthTier, ...] = DEFAULT_HEALTH_TIERS

    def __post_init__(self) -> None:
        if not (0 <= self.lp_share_bps <= BPS_DENOMINATOR):
            raise ValueError(f"lp_share_bps must be in [0, {BPS_DENOMINATOR}]")
        validate_health_tiers(self.health_tiers, BPS_DENOMINATOR - self.lp_share_bps)


@dataclass(frozen=True)
class FeeSplit:
    """Результат распределения комиссии."""

    total_fee: int
    lp: int
    treasury: int
    protocol: int

    @property
    def allocated(self) -> int:
        return self.lp + self.treasury + self.protocol

    @property
    def remainder(self) -> int:
        """Остаток от усечения (≥ 0)"""
        return self.total_fee - self.allocated


# =============================================================================
# ALLOCATE
# =============================================================================


def allocate(
    total_fee: int,
    health: Fraction,
    config: Optional[FeeAllocationConfig] = None,
) -> FeeSplit:
    """
    Распределение комиссии между LP, treasury и протоколом.

    Args:
        total_fee: Полная комиссия swap (u64, может быть 0)
        health: Health пары vault на момент swap
        config: Параметры распределения (опционально)

    Returns:
        FeeSplit с lp + treasury + protocol ≤ total_fee

    Raises:
        MathOverflowError: Переполнение checked-арифметики
    """
    cfg = config or FeeAllocationConfig()
    validate_balance(total_fee, "total_fee")

    tier = select_health_tier(cfg.health_tiers, health)

    return FeeSplit(
        total_fee=total_fee,
        lp=apply_bps(total_fee, cfg.lp_share_bps),
        treasury=apply_bps(total_fee, tier.treasury_bps),
        protocol=apply_bps(total_fee, tier.protocol_bps),
    )
