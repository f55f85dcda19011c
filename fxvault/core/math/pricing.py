"""
Pricing — расчёт выхода swap по внешней котировке

Цена берётся из внешнего фида (rate × 10^9), а не из соотношения пулов.
Поверх котировки применяются две health-зависимые поправки:
- spread (bps): комиссия с выхода, расширяется при деградации health
- drift (доля): сдвиг эффективного курса против трейдера,
  препятствует дальнейшему опустошению дефицитной стороны

Формулы:
    spread = min(MAX, max(MIN, MIN − SLOPE_spread × (health − 0.9)))   [bps, floor]
    drift  = max(0, −SLOPE_drift × (health − 0.9))                     [доля]

    source→target: eff = price − floor(price × drift)   (saturating at 0)
                   out_before_fee = amount_in × eff / 10^9
    target→source: eff = price + floor(price × drift)
                   out_before_fee = amount_in × 10^9 / eff

    fee        = out_before_fee × spread / 10000
    amount_out = out_before_fee − fee

Все операции целочисленные/рациональные, округление всегда в пользу протокола.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Final, Optional

from fxvault.core.errors import InvalidOracleAccountError
from fxvault.core.math.checked import (
    BPS_DENOMINATOR,
    U64_MAX,
    apply_bps,
    checked_sub,
    floor_fraction,
    mul_div_floor,
    validate_amount,
    validate_balance,
)
from fxvault.core.math.health import health as vault_health

logger = logging.getLogger(__name__)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Масштаб котировки: 1.1 EUR/USD → 1_100_000_000
PRICE_SCALE: Final[int] = 1_000_000_000

# Spread в bps
MIN_SPREAD_BPS: Final[int] = 3  # 0.03%
MAX_SPREAD_BPS: Final[int] = 50  # 0.50%

# 0.2833% на единицу health = 28.33 bps
SPREAD_SLOPE_BPS: Final[Fraction] = Fraction(2833, 100)

# 0.8333% на единицу health
DRIFT_SLOPE: Final[Fraction] = Fraction(8333, 1_000_000)

# Health, начиная с которого spread на минимуме и drift нулевой
BALANCED_HEALTH: Final[Fraction] = Fraction(9, 10)


# =============================================================================
# ТИПЫ
# =============================================================================


class SwapDirection(str, Enum):
    """Направление конверсии относительно котировки (target за 1 source)"""

    SOURCE_TO_TARGET = "source_to_target"
    TARGET_TO_SOURCE = "target_to_source"


@dataclass(frozen=True)
class PricingConfig:
    """Параметры spread/drift кривых."""

    min_spread_bps: int = MIN_SPREAD_BPS
    max_spread_bps: int = MAX_SPREAD_BPS
    spread_slope_bps: Fraction = SPREAD_SLOPE_BPS
    drift_slope: Fraction = DRIFT_SLOPE
    balanced_health: Fraction = BALANCED_HEALTH

    def __post_init__(self) -> None:
        if not (0 <= self.min_spread_bps <= self.max_spread_bps <= BPS_DENOMINATOR):
            raise ValueError(
                f"spread bounds must satisfy 0 <= min ({self.min_spread_bps}) "
                f"<= max ({self.max_spread_bps}) <= {BPS_DENOMINATOR}"
            )
        if self.spread_slope_bps < 0 or self.drift_slope < 0:
            raise ValueError("spread/drift slopes must be non-negative")
        if self.drift_slope * self.balanced_health >= 1:
            raise ValueError("drift_slope too large: drift must stay below 100%")
        if not (0 < self.balanced_health <= 1):
            raise ValueError(f"balanced_health must be in (0, 1], got {self.balanced_health}")


@dataclass(frozen=True)
class SwapQuote:
    """Результат расчёта swap (без изменения состояния)."""

    direction: SwapDirection
    amount_in: int
    quote_price: int
    effective_price: int
    health: Fraction
    spread_bps: int
    drift: Fraction
    amount_out_before_fee: int
    fee_amount: int
    amount_out: int


# =============================================================================
# SPREAD / DRIFT
# =============================================================================


def _validate_health(health: Fraction) -> None:
    if health < 0 or health > 1:
        raise ValueError(f"health must be in [0, 1], got {health}")


def calculate_spread_bps(health: Fraction, config: Optional[PricingConfig] = None) -> int:
    """
    Spread в bps по health.

    Невозрастающая функция health, всегда в [min_spread_bps, max_spread_bps].

    Examples:
        >>> calculate_spread_bps(Fraction(95, 100))
        3
        >>> calculate_spread_bps(Fraction(0))
        28
    """
    cfg = config or PricingConfig()
    _validate_health(health)

    raw = cfg.min_spread_bps - cfg.spread_slope_bps * (health - cfg.balanced_health)
    spread = max(Fraction(cfg.min_spread_bps), raw)
    return min(floor_fraction(spread), cfg.max_spread_bps)


def calculate_drift(health: Fraction, config: Optional[PricingConfig] = None) -> Fraction:
    """
    Drift (доля от котировки) по health.

    Нулевой при health ≥ balanced_health, линейно растёт при деградации.

    Examples:
        >>> calculate_drift(Fraction(1))
        Fraction(0, 1)
    """
    cfg = config or PricingConfig()
    _validate_health(health)

    return max(Fraction(0), -cfg.drift_slope * (health - cfg.balanced_health))


def apply_drift(price: int, drift: Fraction, direction: SwapDirection) -> int:
    """
    Эффективная цена с учётом drift.

    source→target: котировка уменьшается (меньше target за source)
    target→source: котировка увеличивается (больше target нужно за source)

    В обоих направлениях курс смещается против трейдера.
    Результат насыщается в [0, U64_MAX].
    """
    adjustment = floor_fraction(price * drift)
    if direction == SwapDirection.SOURCE_TO_TARGET:
        return max(price - adjustment, 0)
    return min(price + adjustment, U64_MAX)


# =============================================================================
# SWAP QUOTE
# =============================================================================


def calculate_amount_out(
    amount_in: int,
    effective_price: int,
    spread_bps: int,
    direction: SwapDirection,
) -> tuple[int, int, int]:
    """
    Выход swap и комиссия при заданных эффективной цене и spread.

    Args:
        amount_in: Входная сумма (u64)
        effective_price: Цена после drift (× 10^9)
        spread_bps: Spread в bps
        direction: Направление конверсии

    Returns:
        (amount_out_before_fee, fee_amount, amount_out)

    Raises:
        MathOverflowError: Переполнение u128/u64 или нулевая цена как делитель
    """
    if direction == SwapDirection.SOURCE_TO_TARGET:
        before_fee = mul_div_floor(amount_in, effective_price, PRICE_SCALE)
    else:
        before_fee = mul_div_floor(amount_in, PRICE_SCALE, effective_price)

    fee_amount = apply_bps(before_fee, spread_bps)
    amount_out = checked_sub(before_fee, fee_amount)
    return before_fee, fee_amount, amount_out


def quote_swap(
    amount_in: int,
    price: int,
    source_balance: int,
    target_balance: int,
    direction: SwapDirection = SwapDirection.SOURCE_TO_TARGET,
    config: Optional[PricingConfig] = None,
) -> SwapQuote:
    """
    Полный расчёт swap: health → spread/drift → эффективная цена → выход и комиссия.

    Проверки ликвидности target vault и минимального выхода (slippage)
    выполняет вызывающая сторона: им нужно состояние vault.

    Args:
        amount_in: Входная сумма (u64, > 0)
        price: Котировка пары (× 10^9, > 0): target за 1 source для
            SOURCE_TO_TARGET, source за 1 target для TARGET_TO_SOURCE
        source_balance: TVL source vault
        target_balance: TVL target vault
        direction: Направление конверсии
        config: Параметры кривых (опционально)

    Returns:
        SwapQuote

    Raises:
        InvalidAmountError: amount_in вне (0, U64_MAX]
        InvalidOracleAccountError: Нулевая или отрицательная котировка
        MathOverflowError: Переполнение checked-арифметики
    """
    cfg = config or PricingConfig()
    validate_amount(amount_in, "amount_in")
    if price <= 0:
        raise InvalidOracleAccountError(f"quote price must be positive, got {price}")
    validate_balance(price, "price")

    h = vault_health(source_balance, target_balance)
    spread_bps = calculate_spread_bps(h, cfg)
    drift = calculate_drift(h, cfg)
    effective_price = apply_drift(price, drift, direction)

    before_fee, fee_amount, amount_out = calculate_amount_out(
        amount_in=amount_in,
        effective_price=effective_price,
        spread_bps=spread_bps,
        direction=direction,
    )

    logger.debug(
        "quote_swap: in=%d price=%d eff=%d health=%.6f spread=%dbps drift=%.6f out=%d fee=%d",
        amount_in,
        price,
        effective_price,
        float(h),
        spread_bps,
        float(drift),
        amount_out,
        fee_amount,
    )

    return SwapQuote(
        direction=direction,
        amount_in=amount_in,
        quote_price=price,
        effective_price=effective_price,
        health=h,
        spread_bps=spread_bps,
        drift=drift,
        amount_out_before_fee=before_fee,
        fee_amount=fee_amount,
        amount_out=amount_out,
    )
