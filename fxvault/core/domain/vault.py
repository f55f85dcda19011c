"""
Vault — Модель пула одной валюты

Immutable Pydantic модель (frozen=True). Любая операция
(deposit/withdraw/swap/rebalance/distribution) создаёт новый экземпляр
через evolve(), повторно проходя валидацию полей.

Инварианты:
- TVL и бакеты комиссий неотрицательны и помещаются в u64
- fee_basis_points ≤ 500 (5%)
- Баланс token account vault == tvl + бакеты + нераспределённая пыль
"""

from typing import Any, Final

from pydantic import BaseModel, Field

from fxvault.core.math.checked import U64_MAX

# Потолок конфигурируемой комиссии vault (5%)
MAX_VAULT_FEE_BPS: Final[int] = 500


class Vault(BaseModel):
    """
    Пул одной валюты.

    Создаётся один раз при инициализации и никогда не удаляется.
    """

    # Идентификация
    currency: str = Field(..., min_length=1, description="Идентификатор валюты (например, 'EUR')")

    # Финансы
    tvl: int = Field(0, ge=0, le=U64_MAX, description="Total value locked (наименьшая единица)")
    accrued_lp_fees: int = Field(0, ge=0, le=U64_MAX, description="Накопленные комиссии LP")
    accrued_treasury_fees: int = Field(
        0, ge=0, le=U64_MAX, description="Накопленные комиссии automated treasury"
    )
    accrued_protocol_fees: int = Field(0, ge=0, le=U64_MAX, description="Накопленные комиссии протокола")
    unallocated_fee_dust: int = Field(
        0, ge=0, le=U64_MAX, description="Остаток от усечения долей комиссии"
    )
    fee_basis_points: int = Field(..., ge=0, le=MAX_VAULT_FEE_BPS, description="Ставка комиссии vault (bps)")

    # Oracle
    last_oracle_price: int = Field(0, ge=0, le=U64_MAX, description="Последняя котировка (× 10^9)")
    last_oracle_update_ts: int = Field(0, ge=0, description="Время последней котировки (unix, сек)")

    # Время
    created_ts: int = Field(..., ge=0, description="Время инициализации (unix, сек)")
    last_fee_update_ts: int = Field(0, ge=0, description="Время последнего начисления комиссий")

    # Счета (идентификаторы для transfer primitive)
    token_account: str = Field(..., min_length=1, description="Token account vault")
    treasury_account: str = Field(..., min_length=1, description="Счёт протокола")
    automated_treasury_account: str = Field(
        ..., min_length=1, description="Счёт automated treasury (финансирует rebalance)"
    )

    model_config = {"frozen": True}

    def evolve(self, **changes: Any) -> "Vault":
        """Новый экземпляр с изменёнными полями (с повторной валидацией)."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def total_accrued_fees(self) -> int:
        """Сумма всех бакетов комиссий"""
        return self.accrued_lp_fees + self.accrued_treasury_fees + self.accrued_protocol_fees

    def expected_token_balance(self) -> int:
        """
        Баланс token account, при котором соблюдается сохранение стоимости.

        Returns:
            tvl + все бакеты + нераспределённая пыль
        """
        return self.tvl + self.total_accrued_fees() + self.unallocated_fee_dust
