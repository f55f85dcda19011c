"""
Ledger — учёт LP позиций, наград и хранилище состояния.
"""

from fxvault.ledger.positions import (
    DEFAULT_PENALTY_TIERS,
    DepositOutcome,
    WithdrawalOutcome,
    WithdrawalPenaltyConfig,
    deposit,
    penalty_bps_for,
    withdraw,
)
from fxvault.ledger.rewards import ClaimOutcome, calculate_reward, claim
from fxvault.ledger.store import VaultStore

__all__ = [
    # Positions
    "DEFAULT_PENALTY_TIERS",
    "DepositOutcome",
    "WithdrawalOutcome",
    "WithdrawalPenaltyConfig",
    "deposit",
    "penalty_bps_for",
    "withdraw",
    # Rewards
    "ClaimOutcome",
    "calculate_reward",
    "claim",
    # Store
    "VaultStore",
]
