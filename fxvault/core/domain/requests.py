"""
Requests — Модели запросов операций

Соответствуют JSON Schema контрактам (fxvault/core/contracts/schema/*.json).
Авторизация и владение счетами проверяются вне ядра: здесь только форма данных.
"""

from pydantic import BaseModel, Field, model_validator

from fxvault.core.math.checked import BPS_DENOMINATOR, U64_MAX


class InitializeVaultRequest(BaseModel):
    """Создание vault для валюты"""

    currency: str = Field(..., min_length=1)
    fee_basis_points: int = Field(..., ge=0, le=BPS_DENOMINATOR)
    token_account: str = Field(..., min_length=1)
    treasury_account: str = Field(..., min_length=1)
    automated_treasury_account: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DepositRequest(BaseModel):
    """Депозит ликвидности"""

    currency: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    user_account: str = Field(..., min_length=1, description="Счёт провайдера в валюте vault")
    amount: int = Field(..., gt=0, le=U64_MAX)

    model_config = {"frozen": True}


class WithdrawRequest(BaseModel):
    """Вывод ликвидности (со штрафом за ранний вывод)"""

    currency: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    user_account: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, le=U64_MAX)

    model_config = {"frozen": True}


class SwapRequest(BaseModel):
    """
    Обмен между двумя vault.

    Направление конверсии не задаётся запросом: сервис выводит его из того,
    в какой ориентации фид котирует пару.
    """

    source_currency: str = Field(..., min_length=1)
    target_currency: str = Field(..., min_length=1)
    user_source_account: str = Field(..., min_length=1)
    user_target_account: str = Field(..., min_length=1)
    amount_in: int = Field(..., gt=0, le=U64_MAX)
    minimum_amount_out: int = Field(0, ge=0, le=U64_MAX)

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode="after")
    def check_distinct_vaults(self) -> "SwapRequest":
        if self.source_currency == self.target_currency:
            raise ValueError("source_currency and target_currency must differ")
        return self


class ClaimRewardsRequest(BaseModel):
    """Claim доли LP комиссий"""

    currency: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    user_account: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DistributeFeesRequest(BaseModel):
    """Выплата бакетов treasury/protocol на их счета"""

    currency: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class RebalanceRequest(BaseModel):
    """Тик автоматической ребалансировки пары vault"""

    source_currency: str = Field(..., min_length=1)
    target_currency: str = Field(..., min_length=1)
    available_amount: int = Field(..., ge=0, le=U64_MAX, description="Капитал treasury для инъекции")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_distinct_vaults(self) -> "RebalanceRequest":
        if self.source_currency == self.target_currency:
            raise ValueError("source_currency and target_currency must differ")
        return self
