"""
Domain models and value objects.

Contains fundamental domain entities: Vault, LiquidityPosition, PriceQuote,
operation requests.
"""

from fxvault.core.domain.position import LiquidityPosition
from fxvault.core.domain.quote import PriceQuote
from fxvault.core.domain.requests import (
    ClaimRewardsRequest,
    DepositRequest,
    DistributeFeesRequest,
    InitializeVaultRequest,
    RebalanceRequest,
    SwapRequest,
    WithdrawRequest,
)
from fxvault.core.domain.vault import MAX_VAULT_FEE_BPS, Vault

__all__ = [
    # Vault model
    "MAX_VAULT_FEE_BPS",
    "Vault",
    # Position model
    "LiquidityPosition",
    # Quote model
    "PriceQuote",
    # Requests
    "InitializeVaultRequest",
    "DepositRequest",
    "WithdrawRequest",
    "SwapRequest",
    "ClaimRewardsRequest",
    "DistributeFeesRequest",
    "RebalanceRequest",
]
