"""
Tier Tables — упорядоченные таблицы порогов

Все ступенчатые правила системы реализованы как lookup по отсортированному
списку границ (bisect), а не вложенными if/elif:
- Withdrawal penalty: по прошедшему времени, границы half-open `elapsed < bound`
- Fee allocation: по health, границы строгие `health > threshold`
- Rebalance bands: по health, интервалы `[lower, upper)`

Семантика границ проверяется в одном месте и тестируется изолированно.
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Sequence

from fxvault.core.math.checked import BPS_DENOMINATOR


# =============================================================================
# ТИПЫ
# =============================================================================


@dataclass(frozen=True)
class TimeTier:
    """
    Ступень штрафа за ранний вывод.

    elapsed_below_seconds=None означает открытую последнюю ступень.
    """

    elapsed_below_seconds: Optional[int]
    fee_bps: int


@dataclass(frozen=True)
class HealthTier:
    """
    Ступень распределения non-LP части комиссии.

    health_above=None означает fallback-ступень (health ≤ всех порогов).
    Доли treasury/protocol указаны в bps от ОБЩЕЙ комиссии.
    """

    health_above: Optional[Fraction]
    treasury_bps: int
    protocol_bps: int


@dataclass(frozen=True)
class RebalanceBand:
    """Интервал health [lower, upper) и доля дефицита для инъекции (bps)"""

    lower: Fraction
    upper: Fraction
    injection_bps: int

    def contains(self, health: Fraction) -> bool:
        return self.lower <= health < self.upper


# =============================================================================
# LOOKUP
# =============================================================================


def select_time_tier(tiers: Sequence[TimeTier], elapsed_seconds: int) -> TimeTier:
    """
    Выбор ступени штрафа по прошедшему времени.

    Граница исключающая для нижней ступени: ровно на 60h действует
    следующая (меньшая) ступень.

    Args:
        tiers: Ступени по возрастанию времени, последняя: открытая
        elapsed_seconds: Время с последнего депозита (отрицательное → 0)

    Returns:
        Применимая TimeTier
    """
    elapsed = max(elapsed_seconds, 0)
    bounds = [t.elapsed_below_seconds for t in tiers[:-1]]
    return tiers[bisect_right(bounds, elapsed)]


def select_health_tier(tiers: Sequence[HealthTier], health: Fraction) -> HealthTier:
    """
    Выбор ступени распределения комиссии по health.

    Args:
        tiers: Ступени по убыванию порога, последняя: fallback (health_above=None)
        health: Текущий health пары vault

    Returns:
        Первая ступень с health > threshold, иначе fallback
    """
    thresholds_asc = [t.health_above for t in reversed(tiers[:-1])]
    passed = bisect_left(thresholds_asc, health)
    return tiers[len(tiers) - 1 - passed]


def select_rebalance_band(
    bands: Sequence[RebalanceBand], health: Fraction
) -> Optional[RebalanceBand]:
    """
    Выбор полосы ребалансировки.

    Args:
        bands: Непересекающиеся полосы по возрастанию lower
        health: Текущий health пары vault

    Returns:
        Полоса, содержащая health, или None
    """
    lowers = [b.lower for b in bands]
    idx = bisect_right(lowers, health) - 1
    if idx < 0:
        return None
    band = bands[idx]
    return band if band.contains(health) else None


# =============================================================================
# ВАЛИДАЦИЯ ТАБЛИЦ
# =============================================================================


def validate_time_tiers(tiers: Sequence[TimeTier]) -> None:
    """
    Время строго возрастает, штраф строго убывает, последняя ступень открыта.

    Raises:
        ValueError: Если таблица нарушает монотонность
    """
    if not tiers:
        raise ValueError("time tiers cannot be empty")
    if tiers[-1].elapsed_below_seconds is not None:
        raise ValueError("last time tier must be open-ended (elapsed_below_seconds=None)")
    bounds = [t.elapsed_below_seconds for t in tiers[:-1]]
    if any(b is None or b <= 0 for b in bounds):
        raise ValueError("only the last time tier may be open-ended; bounds must be > 0")
    if any(b2 <= b1 for b1, b2 in zip(bounds, bounds[1:])):
        raise ValueError(f"time tier bounds must be strictly ascending: {bounds}")
    fees = [t.fee_bps for t in tiers]
    if any(f < 0 or f > BPS_DENOMINATOR for f in fees):
        raise ValueError(f"time tier fees must be in [0, {BPS_DENOMINATOR}] bps: {fees}")
    if any(f2 >= f1 for f1, f2 in zip(fees, fees[1:])):
        raise ValueError(f"time tier fees must be strictly descending: {fees}")


def validate_health_tiers(tiers: Sequence[HealthTier], non_lp_bps: int) -> None:
    """
    Пороги строго убывают в [0, 1], treasury + protocol == non-LP доля на каждой ступени.

    Raises:
        ValueError: Если таблица некорректна
    """
    if not tiers:
        raise ValueError("health tiers cannot be empty")
    if tiers[-1].health_above is not None:
        raise ValueError("last health tier must be the fallback (health_above=None)")
    thresholds = [t.health_above for t in tiers[:-1]]
    if any(h is None or h < 0 or h > 1 for h in thresholds):
        raise ValueError(f"health thresholds must be in [0, 1]: {thresholds}")
    if any(h2 >= h1 for h1, h2 in zip(thresholds, thresholds[1:])):
        raise ValueError(f"health thresholds must be strictly descending: {thresholds}")
    for tier in tiers:
        if tier.treasury_bps < 0 or tier.protocol_bps < 0:
            raise ValueError(f"negative split in tier {tier}")
        if tier.treasury_bps + tier.protocol_bps != non_lp_bps:
            raise ValueError(
                f"tier {tier} splits {tier.treasury_bps + tier.protocol_bps} bps, "
                f"expected non-LP share {non_lp_bps} bps"
            )


def validate_rebalance_bands(bands: Sequence[RebalanceBand]) -> None:
    """
    Полосы непусты, отсортированы, не пересекаются и лежат в [0, 1].

    Raises:
        ValueError: Если полосы некорректны
    """
    for band in bands:
        if not (0 <= band.lower < band.upper <= 1):
            raise ValueError(f"invalid band bounds {band.lower}..{band.upper}")
        if band.injection_bps <= 0 or band.injection_bps > BPS_DENOMINATOR:
            raise ValueError(f"band injection must be in (0, {BPS_DENOMINATOR}] bps")
    for b1, b2 in zip(bands, bands[1:]):
        if b2.lower < b1.upper:
            raise ValueError(f"bands overlap or unsorted: {b1} / {b2}")
