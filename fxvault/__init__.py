"""
fxvault — FX liquidity-vault exchange core

Мультивалютные vault с ценой из внешнего фида, health-зависимыми
spread/drift, распределением комиссий между LP, automated treasury и
протоколом, штрафами за ранний вывод и автоматической ребалансировкой.
"""

from fxvault.config import ExchangeConfig
from fxvault.exchange import (
    ClaimResult,
    DepositResult,
    DistributionResult,
    RebalanceResult,
    SwapResult,
    VaultExchange,
    WithdrawResult,
)
from fxvault.ledger.store import VaultStore
from fxvault.oracle.feed import StaticPriceFeed
from fxvault.transfers import InMemoryTokenLedger, TransferInstruction

__version__ = "0.1.0"

__all__ = [
    "ExchangeConfig",
    "VaultExchange",
    "VaultStore",
    "StaticPriceFeed",
    "InMemoryTokenLedger",
    "TransferInstruction",
    # Results
    "DepositResult",
    "WithdrawResult",
    "SwapResult",
    "ClaimResult",
    "DistributionResult",
    "RebalanceResult",
]
