"""
Тесты для domain моделей (Vault, LiquidityPosition, PriceQuote)

Проверяет:
- Immutability (frozen=True)
- Валидацию полей (u64, потолок комиссии)
- evolve() с повторной валидацией
"""

import pytest
from pydantic import ValidationError

from fxvault.core.domain import MAX_VAULT_FEE_BPS, LiquidityPosition, PriceQuote, Vault
from fxvault.core.math.checked import U64_MAX


@pytest.fixture
def vault() -> Vault:
    return Vault(
        currency="EUR",
        tvl=1_000,
        accrued_lp_fees=70,
        accrued_treasury_fees=15,
        accrued_protocol_fees=15,
        unallocated_fee_dust=1,
        fee_basis_points=30,
        created_ts=100,
        token_account="vault:EUR",
        treasury_account="protocol:EUR",
        automated_treasury_account="auto:EUR",
    )


class TestVault:
    def test_defaults(self) -> None:
        vault = Vault(
            currency="USD",
            fee_basis_points=0,
            created_ts=0,
            token_account="vault:USD",
            treasury_account="protocol:USD",
            automated_treasury_account="auto:USD",
        )
        assert vault.tvl == 0
        assert vault.total_accrued_fees() == 0
        assert vault.last_oracle_price == 0

    def test_frozen(self, vault: Vault) -> None:
        with pytest.raises(ValidationError):
            vault.tvl = 5

    def test_fee_ceiling(self, vault: Vault) -> None:
        assert vault.evolve(fee_basis_points=MAX_VAULT_FEE_BPS).fee_basis_points == 500
        with pytest.raises(ValidationError):
            vault.evolve(fee_basis_points=MAX_VAULT_FEE_BPS + 1)

    def test_evolve_revalidates(self, vault: Vault) -> None:
        with pytest.raises(ValidationError):
            vault.evolve(tvl=-1)
        with pytest.raises(ValidationError):
            vault.evolve(accrued_lp_fees=U64_MAX + 1)

    def test_evolve_returns_new_instance(self, vault: Vault) -> None:
        evolved = vault.evolve(tvl=2_000)
        assert evolved.tvl == 2_000
        assert vault.tvl == 1_000
        assert evolved.currency == vault.currency

    def test_expected_token_balance(self, vault: Vault) -> None:
        assert vault.total_accrued_fees() == 100
        assert vault.expected_token_balance() == 1_101

    def test_empty_currency_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Vault(
                currency="",
                fee_basis_points=0,
                created_ts=0,
                token_account="a",
                treasury_account="b",
                automated_treasury_account="c",
            )


class TestLiquidityPosition:
    def test_new_position_is_empty(self) -> None:
        position = LiquidityPosition(currency="EUR", provider="alice")
        assert position.is_empty()
        assert position.key == ("EUR", "alice")

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LiquidityPosition(currency="EUR", provider="alice", amount=-1)

    def test_evolve(self) -> None:
        position = LiquidityPosition(currency="EUR", provider="alice").evolve(amount=10)
        assert not position.is_empty()


class TestPriceQuote:
    def test_staleness_is_strict(self) -> None:
        quote = PriceQuote(
            base_currency="EUR",
            quote_currency="USD",
            price=1_100_000_000,
            publish_ts=0,
            age_seconds=60,
        )
        assert not quote.is_stale(60)
        assert quote.is_stale(59)

    def test_zero_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PriceQuote(
                base_currency="EUR",
                quote_currency="USD",
                price=0,
                publish_ts=0,
                age_seconds=0,
            )
