"""
RebalanceController — автоматическая ребалансировка пары vault

Контроллер действует только при деградированном health пары:

    (0.20, 0.30) → инъекция 75% дефицита
    [0.30, 0.40) → 50%
    [0.40, 0.50) → 30%

Вне диапазона (включая health ровно 0.20 и пустую сторону) → NoRebalanceNeededError.

Дефицит: deficit = larger − smaller / health (точная дробь, clamp at 0),
injection = floor(deficit × rate). Капитал automated treasury поступает
в меньший vault. Частичное исполнение плана запрещено:
available < injection → InsufficientInjectionAmountError.
"""

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Final, Optional, Tuple

from fxvault.core.errors import InsufficientInjectionAmountError, NoRebalanceNeededError
from fxvault.core.math.checked import bps_to_fraction, floor_fraction, narrow_u64, validate_balance
from fxvault.core.math.health import health as vault_health
from fxvault.core.math.tiers import RebalanceBand, select_rebalance_band, validate_rebalance_bands

logger = logging.getLogger(__name__)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Health ровно на нижней границе не ребалансируется
MIN_HEALTH_EXCLUSIVE: Final[Fraction] = Fraction(1, 5)

DEFAULT_BANDS: Final[Tuple[RebalanceBand, ...]] = (
    RebalanceBand(lower=Fraction(20, 100), upper=Fraction(30, 100), injection_bps=7_500),
    RebalanceBand(lower=Fraction(30, 100), upper=Fraction(40, 100), injection_bps=5_000),
    RebalanceBand(lower=Fraction(40, 100), upper=Fraction(50, 100), injection_bps=3_000),
)


# =============================================================================
# ТИПЫ
# =============================================================================


@dataclass(frozen=True)
class RebalanceConfig:
    """Полосы ребалансировки и нижняя (исключающая) граница health."""

    min_health_exclusive: Fraction = MIN_HEALTH_EXCLUSIVE
    bands: Tuple[RebalanceBand, ...] = DEFAULT_BANDS

    def __post_init__(self) -> None:
        validate_rebalance_bands(self.bands)
        if not (0 <= self.min_health_exclusive <= 1):
            raise ValueError(
                f"min_health_exclusive must be in [0, 1], got {self.min_health_exclusive}"
            )


@dataclass(frozen=True)
class RebalancePlan:
    """
    План инъекции (не сохраняется).

    source_currency: больший vault, target_currency: меньший (получает капитал).
    """

    source_currency: str
    target_currency: str
    health_before: Fraction
    injection_rate_bps: int
    deficit: Fraction
    injection_amount: int
    health_after: Fraction

    # Для отладки
    details: str

    @property
    def requires_transfer(self) -> bool:
        return self.injection_amount > 0


# =============================================================================
# CONTROLLER
# =============================================================================


class RebalanceController:
    """
    Планировщик ребалансировки.

    Не изменяет состояние: возвращает RebalancePlan или отклоняет тик.
    """

    def __init__(self, config: Optional[RebalanceConfig] = None):
        self.config = config or RebalanceConfig()

    def plan(
        self,
        source_tvl: int,
        target_tvl: int,
        available_amount: int,
        source_currency: str = "source",
        target_currency: str = "target",
    ) -> RebalancePlan:
        """
        Расчёт плана инъекции для пары vault.

        Args:
            source_tvl: TVL первого vault пары
            target_tvl: TVL второго vault пары
            available_amount: Капитал automated treasury, доступный для инъекции
            source_currency, target_currency: Идентификаторы vault пары

        Returns:
            RebalancePlan (направление определяется по размеру vault)

        Raises:
            NoRebalanceNeededError: health вне полос ребалансировки
            InsufficientInjectionAmountError: available_amount < injection
        """
        validate_balance(available_amount, "available_amount")
        h = vault_health(source_tvl, target_tvl)

        band = None
        if h > self.config.min_health_exclusive:
            band = select_rebalance_band(self.config.bands, h)
        if band is None:
            logger.warning(
                "rebalance %s/%s rejected: health %.6f outside bands",
                source_currency,
                target_currency,
                float(h),
            )
            raise NoRebalanceNeededError(
                f"health {float(h):.6f} of {source_currency}/{target_currency} needs no rebalance"
            )

        if source_tvl >= target_tvl:
            larger, smaller = source_tvl, target_tvl
            larger_currency, smaller_currency = source_currency, target_currency
        else:
            larger, smaller = target_tvl, source_tvl
            larger_currency, smaller_currency = target_currency, source_currency

        # При точном health smaller / h == larger: с vault_health по умолчанию
        # deficit и injection всегда 0, перевод не выполняется. Ненулевая
        # инъекция возникает только при приближённом health.
        deficit = max(Fraction(0), larger - Fraction(smaller) / h)
        injection = narrow_u64(floor_fraction(deficit * bps_to_fraction(band.injection_bps)))

        if available_amount < injection:
            logger.warning(
                "rebalance %s→%s rejected: injection %d > available %d",
                larger_currency,
                smaller_currency,
                injection,
                available_amount,
            )
            raise InsufficientInjectionAmountError(required=injection, available=available_amount)

        health_after = vault_health(larger, narrow_u64(smaller + injection))

        return RebalancePlan(
            source_currency=larger_currency,
            target_currency=smaller_currency,
            health_before=h,
            injection_rate_bps=band.injection_bps,
            deficit=deficit,
            injection_amount=injection,
            health_after=health_after,
            details=(
                f"health={float(h):.6f} band=[{float(band.lower):.2f},{float(band.upper):.2f}) "
                f"rate={band.injection_bps}bps deficit={float(deficit):.6f} injection={injection}"
            ),
        )


def plan(
    source_tvl: int,
    target_tvl: int,
    available_amount: int,
    source_currency: str = "source",
    target_currency: str = "target",
    config: Optional[RebalanceConfig] = None,
) -> RebalancePlan:
    """
    Функциональная обёртка над RebalanceController.plan.

    Examples:
        plan(1000, 200, 10000) → NoRebalanceNeededError (health ровно 0.20)
        plan(1000, 250, 10000) → полоса 75%, deficit 0, injection 0
    """
    return RebalanceController(config).plan(
        source_tvl,
        target_tvl,
        available_amount,
        source_currency=source_currency,
        target_currency=target_currency,
    )
