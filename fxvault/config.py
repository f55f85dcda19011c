"""
ExchangeConfig — агрегированная конфигурация exchange

Каждый компонент владеет своей frozen dataclass конфигурацией с дефолтами.
ExchangeConfig собирает их и умеет строиться из словаря (например, JSON файла),
предварительно проверенного по контракту exchange_config.json.

Дробные параметры передаются десятичными строками ("0.2833") и
превращаются в точные Fraction без float.
"""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Optional

from fxvault.core.contracts.validators import validate_exchange_config
from fxvault.core.math.fee_allocation import FeeAllocationConfig
from fxvault.core.math.pricing import PricingConfig
from fxvault.core.math.tiers import HealthTier, RebalanceBand, TimeTier
from fxvault.ledger.positions import WithdrawalPenaltyConfig
from fxvault.oracle.feed import OracleConfig
from fxvault.rebalance.controller import RebalanceConfig


@dataclass(frozen=True)
class ExchangeConfig:
    """Конфигурация всех компонентов exchange."""

    pricing: PricingConfig = field(default_factory=PricingConfig)
    fee_allocation: FeeAllocationConfig = field(default_factory=FeeAllocationConfig)
    withdrawal_penalty: WithdrawalPenaltyConfig = field(default_factory=WithdrawalPenaltyConfig)
    rebalance: RebalanceConfig = field(default_factory=RebalanceConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExchangeConfig":
        """
        Построение конфигурации из словаря.

        Отсутствующие секции и поля берут значения по умолчанию.

        Raises:
            jsonschema.ValidationError: Словарь не соответствует контракту
            ValueError: Таблицы тиров/полос некорректны
        """
        validate_exchange_config(data)

        return cls(
            pricing=_build_pricing(data.get("pricing")),
            fee_allocation=_build_fee_allocation(data.get("fee_allocation")),
            withdrawal_penalty=_build_withdrawal_penalty(data.get("withdrawal_penalty")),
            rebalance=_build_rebalance(data.get("rebalance")),
            oracle=OracleConfig(**(data.get("oracle") or {})),
        )


def _decimal(value: Optional[str]) -> Optional[Fraction]:
    return None if value is None else Fraction(value)


def _build_pricing(section: Optional[Dict[str, Any]]) -> PricingConfig:
    if not section:
        return PricingConfig()
    kwargs: Dict[str, Any] = {}
    for key in ("min_spread_bps", "max_spread_bps"):
        if key in section:
            kwargs[key] = section[key]
    for key in ("spread_slope_bps", "drift_slope", "balanced_health"):
        if key in section:
            kwargs[key] = Fraction(section[key])
    return PricingConfig(**kwargs)


def _build_fee_allocation(section: Optional[Dict[str, Any]]) -> FeeAllocationConfig:
    if not section:
        return FeeAllocationConfig()
    kwargs: Dict[str, Any] = {}
    if "lp_share_bps" in section:
        kwargs["lp_share_bps"] = section["lp_share_bps"]
    if "health_tiers" in section:
        kwargs["health_tiers"] = tuple(
            HealthTier(
                health_above=_decimal(t["health_above"]),
                treasury_bps=t["treasury_bps"],
                protocol_bps=t["protocol_bps"],
            )
            for t in section["health_tiers"]
        )
    return FeeAllocationConfig(**kwargs)


def _build_withdrawal_penalty(section: Optional[Dict[str, Any]]) -> WithdrawalPenaltyConfig:
    if not section or "tiers" not in section:
        return WithdrawalPenaltyConfig()
    return WithdrawalPenaltyConfig(
        tiers=tuple(
            TimeTier(elapsed_below_seconds=t["elapsed_below_seconds"], fee_bps=t["fee_bps"])
            for t in section["tiers"]
        )
    )


def _build_rebalance(section: Optional[Dict[str, Any]]) -> RebalanceConfig:
    if not section:
        return RebalanceConfig()
    kwargs: Dict[str, Any] = {}
    if "min_health_exclusive" in section:
        kwargs["min_health_exclusive"] = Fraction(section["min_health_exclusive"])
    if "bands" in section:
        kwargs["bands"] = tuple(
            RebalanceBand(
                lower=Fraction(b["lower"]),
                upper=Fraction(b["upper"]),
                injection_bps=b["injection_bps"],
            )
            for b in section["bands"]
        )
    return RebalanceConfig(**kwargs)
