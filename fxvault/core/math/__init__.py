"""
Core math modules для FX vault exchange

Целочисленные и рациональные примитивы: checked-арифметика, health,
pricing (spread/drift), распределение комиссий, таблицы тиров.
"""

# Checked arithmetic
from fxvault.core.math.checked import (
    BPS_DENOMINATOR,
    U64_MAX,
    U128_MAX,
    apply_bps,
    bps_to_fraction,
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    floor_fraction,
    mul_div_floor,
    narrow_u64,
    validate_amount,
    validate_balance,
)

# Vault health
from fxvault.core.math.health import HEALTH_BALANCED, HEALTH_ZERO, health

# Pricing
from fxvault.core.math.pricing import (
    BALANCED_HEALTH,
    DRIFT_SLOPE,
    MAX_SPREAD_BPS,
    MIN_SPREAD_BPS,
    PRICE_SCALE,
    SPREAD_SLOPE_BPS,
    PricingConfig,
    SwapDirection,
    SwapQuote,
    apply_drift,
    calculate_amount_out,
    calculate_drift,
    calculate_spread_bps,
    quote_swap,
)

# Fee allocation
from fxvault.core.math.fee_allocation import (
    DEFAULT_HEALTH_TIERS,
    LP_FEE_SHARE_BPS,
    FeeAllocationConfig,
    FeeSplit,
    allocate,
)

# Tier tables
from fxvault.core.math.tiers import (
    HealthTier,
    RebalanceBand,
    TimeTier,
    select_health_tier,
    select_rebalance_band,
    select_time_tier,
)

__all__ = [
    # Checked arithmetic
    "BPS_DENOMINATOR",
    "U64_MAX",
    "U128_MAX",
    "apply_bps",
    "bps_to_fraction",
    "checked_add",
    "checked_div",
    "checked_mul",
    "checked_sub",
    "floor_fraction",
    "mul_div_floor",
    "narrow_u64",
    "validate_amount",
    "validate_balance",
    # Health
    "HEALTH_BALANCED",
    "HEALTH_ZERO",
    "health",
    # Pricing: Constants
    "BALANCED_HEALTH",
    "DRIFT_SLOPE",
    "MAX_SPREAD_BPS",
    "MIN_SPREAD_BPS",
    "PRICE_SCALE",
    "SPREAD_SLOPE_BPS",
    # Pricing: Types
    "PricingConfig",
    "SwapDirection",
    "SwapQuote",
    # Pricing: Functions
    "apply_drift",
    "calculate_amount_out",
    "calculate_drift",
    "calculate_spread_bps",
    "quote_swap",
    # Fee allocation
    "DEFAULT_HEALTH_TIERS",
    "LP_FEE_SHARE_BPS",
    "FeeAllocationConfig",
    "FeeSplit",
    "allocate",
    # Tiers
    "HealthTier",
    "RebalanceBand",
    "TimeTier",
    "select_health_tier",
    "select_rebalance_band",
    "select_time_tier",
]
