"""
Тесты для RebalanceController

Проверяет:
1. Полосы health и исключающую нижнюю границу 0.20
2. Направление плана (капитал идёт в меньший vault)
3. Запрет частичного исполнения (InsufficientInjectionAmount)
"""

from fractions import Fraction

import pytest

from fxvault.core.errors import (
    ErrorKind,
    InsufficientInjectionAmountError,
    NoRebalanceNeededError,
)
from fxvault.rebalance import controller as rebalance_controller
from fxvault.rebalance.controller import RebalanceConfig, RebalanceController, plan


class TestPlan:
    def test_health_exactly_at_floor_needs_no_rebalance(self) -> None:
        """plan(1000, 200, 10000) → NoRebalanceNeeded"""
        with pytest.raises(NoRebalanceNeededError) as exc_info:
            plan(1_000, 200, 10_000)
        assert exc_info.value.kind == ErrorKind.NO_REBALANCE_NEEDED

    def test_bottom_band(self) -> None:
        """plan(1000, 250, 10000) → полоса 75%, deficit 0, injection 0"""
        result = plan(1_000, 250, 10_000)
        assert result.health_before == Fraction(1, 4)
        assert result.injection_rate_bps == 7_500
        assert result.deficit == 0
        assert result.injection_amount == 0
        assert not result.requires_transfer
        assert result.health_after == result.health_before

    @pytest.mark.parametrize(
        "smaller,rate_bps",
        [(300, 5_000), (399, 5_000), (400, 3_000), (450, 3_000), (499, 3_000)],
    )
    def test_band_rates(self, smaller: int, rate_bps: int) -> None:
        assert plan(1_000, smaller, 0).injection_rate_bps == rate_bps

    @pytest.mark.parametrize(
        "source_tvl,target_tvl",
        [(1_000, 500), (1_000, 900), (1_000, 1_000), (1_000, 150), (1_000, 0), (0, 0)],
    )
    def test_outside_bands(self, source_tvl: int, target_tvl: int) -> None:
        with pytest.raises(NoRebalanceNeededError):
            plan(source_tvl, target_tvl, 10_000)

    @pytest.mark.parametrize("smaller", [201, 250, 333, 399, 400, 487, 499])
    def test_exact_health_never_injects(self, smaller: int) -> None:
        """Точный health: smaller / health == larger, дефицит 0 во всех полосах"""
        result = plan(1_000_003, smaller * 1_000, 0)
        assert result.deficit == 0
        assert result.injection_amount == 0
        assert not result.requires_transfer

    def test_direction_follows_smaller_vault(self) -> None:
        result = plan(250, 1_000, 0, source_currency="EUR", target_currency="USD")
        assert result.source_currency == "USD"
        assert result.target_currency == "EUR"

    def test_negative_available_rejected(self) -> None:
        with pytest.raises(ValueError):
            plan(1_000, 250, -1)


class TestInjection:
    def test_insufficient_capital_rejects_whole_plan(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        Health с пониженной точностью даёт ненулевой дефицит:
        1000 − 240 / 0.25 = 40, injection = 40 × 75% = 30.
        """
        monkeypatch.setattr(rebalance_controller, "vault_health", lambda a, b: Fraction(1, 4))

        with pytest.raises(InsufficientInjectionAmountError) as exc_info:
            plan(1_000, 240, 10)
        assert exc_info.value.required == 30
        assert exc_info.value.available == 10

    def test_sufficient_capital(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(rebalance_controller, "vault_health", lambda a, b: Fraction(1, 4))

        result = plan(1_000, 240, 30)
        assert result.deficit == 40
        assert result.injection_amount == 30
        assert result.requires_transfer


class TestRebalanceConfig:
    def test_inclusive_floor_configurable(self) -> None:
        controller = RebalanceController(RebalanceConfig(min_health_exclusive=Fraction(0)))
        assert controller.plan(1_000, 200, 0).injection_rate_bps == 7_500

    def test_invalid_floor(self) -> None:
        with pytest.raises(ValueError):
            RebalanceConfig(min_health_exclusive=Fraction(3, 2))

    def test_details_present(self) -> None:
        assert "rate=7500bps" in plan(1_000, 250, 0).details
