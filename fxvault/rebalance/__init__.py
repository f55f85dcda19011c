"""
Rebalance — автоматическая ребалансировка пары vault.
"""

from fxvault.rebalance.controller import (
    DEFAULT_BANDS,
    MIN_HEALTH_EXCLUSIVE,
    RebalanceConfig,
    RebalanceController,
    RebalancePlan,
    plan,
)

__all__ = [
    "DEFAULT_BANDS",
    "MIN_HEALTH_EXCLUSIVE",
    "RebalanceConfig",
    "RebalanceController",
    "RebalancePlan",
    "plan",
]
