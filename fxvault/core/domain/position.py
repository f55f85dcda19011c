"""
LiquidityPosition — Модель позиции провайдера ликвидности

Одна позиция на пару (vault, provider).
Immutable Pydantic модель: изменения создают новый экземпляр.

- amount меняют только deposit/withdraw
- rewards_claimed / last_claim_ts меняет только RewardDistributor
"""

from typing import Any

from pydantic import BaseModel, Field

from fxvault.core.math.checked import U64_MAX


class LiquidityPosition(BaseModel):
    """Позиция LP в одном vault."""

    # Идентификация
    currency: str = Field(..., min_length=1, description="Валюта vault")
    provider: str = Field(..., min_length=1, description="Идентификатор провайдера")

    # Позиция
    amount: int = Field(0, ge=0, le=U64_MAX, description="Внесённая сумма")
    last_deposit_ts: int = Field(0, ge=0, description="Время последнего депозита (unix, сек)")

    # Награды
    rewards_claimed: int = Field(0, ge=0, le=U64_MAX, description="Всего получено наград")
    last_claim_ts: int = Field(0, ge=0, description="Время последнего claim (unix, сек)")

    model_config = {"frozen": True}

    def evolve(self, **changes: Any) -> "LiquidityPosition":
        """Новый экземпляр с изменёнными полями (с повторной валидацией)."""
        return type(self).model_validate({**self.model_dump(), **changes})

    @property
    def key(self) -> tuple[str, str]:
        return self.currency, self.provider

    def is_empty(self) -> bool:
        return self.amount == 0
