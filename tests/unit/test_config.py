"""
Тесты для ExchangeConfig.from_dict
"""

from fractions import Fraction

import pytest
from jsonschema import ValidationError

from fxvault.config import ExchangeConfig
from fxvault.core.math.pricing import DRIFT_SLOPE


class TestExchangeConfigFromDict:
    def test_empty_dict_gives_defaults(self) -> None:
        assert ExchangeConfig.from_dict({}) == ExchangeConfig()

    def test_partial_pricing_section(self) -> None:
        cfg = ExchangeConfig.from_dict({"pricing": {"spread_slope_bps": "40.5", "max_spread_bps": 40}})
        assert cfg.pricing.spread_slope_bps == Fraction(81, 2)
        assert cfg.pricing.max_spread_bps == 40
        assert cfg.pricing.drift_slope == DRIFT_SLOPE

    def test_decimal_strings_are_exact(self) -> None:
        cfg = ExchangeConfig.from_dict({"rebalance": {"min_health_exclusive": "0.2"}})
        assert cfg.rebalance.min_health_exclusive == Fraction(1, 5)

    def test_full_tables(self) -> None:
        cfg = ExchangeConfig.from_dict(
            {
                "fee_allocation": {
                    "lp_share_bps": 8000,
                    "health_tiers": [
                        {"health_above": "0.5", "treasury_bps": 1000, "protocol_bps": 1000},
                        {"health_above": None, "treasury_bps": 2000, "protocol_bps": 0},
                    ],
                },
                "withdrawal_penalty": {
                    "tiers": [
                        {"elapsed_below_seconds": 3600, "fee_bps": 100},
                        {"elapsed_below_seconds": None, "fee_bps": 0},
                    ]
                },
                "rebalance": {
                    "bands": [{"lower": "0.1", "upper": "0.5", "injection_bps": 2500}],
                },
                "oracle": {"max_age_seconds": 30},
            }
        )
        assert cfg.fee_allocation.lp_share_bps == 8000
        assert cfg.fee_allocation.health_tiers[0].health_above == Fraction(1, 2)
        assert cfg.withdrawal_penalty.tiers[0].fee_bps == 100
        assert cfg.rebalance.bands[0].lower == Fraction(1, 10)
        assert cfg.oracle.max_age_seconds == 30

    def test_schema_violation(self) -> None:
        with pytest.raises(ValidationError):
            ExchangeConfig.from_dict({"oracle": {"max_age_seconds": "60"}})

    def test_inconsistent_table(self) -> None:
        """Контракт пропускает, проверка таблицы отклоняет"""
        with pytest.raises(ValueError):
            ExchangeConfig.from_dict(
                {
                    "fee_allocation": {
                        "health_tiers": [
                            {"health_above": None, "treasury_bps": 100, "protocol_bps": 100}
                        ]
                    }
                }
            )
