"""
Contract Validation Module

Модуль для валидации JSON контрактов запросов операций и конфигурации.
"""

from .validators import (
    OPERATIONS,
    ClaimRewardsRequestValidator,
    ContractValidator,
    DepositRequestValidator,
    DistributeFeesRequestValidator,
    ExchangeConfigValidator,
    InitializeVaultRequestValidator,
    RebalanceRequestValidator,
    SchemaLoader,
    SwapRequestValidator,
    WithdrawRequestValidator,
    parse_request,
    validate_deposit_request,
    validate_exchange_config,
    validate_rebalance_request,
    validate_swap_request,
    validate_withdraw_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "InitializeVaultRequestValidator",
    "DepositRequestValidator",
    "WithdrawRequestValidator",
    "SwapRequestValidator",
    "ClaimRewardsRequestValidator",
    "DistributeFeesRequestValidator",
    "RebalanceRequestValidator",
    "ExchangeConfigValidator",
    # Functions
    "OPERATIONS",
    "parse_request",
    "validate_swap_request",
    "validate_deposit_request",
    "validate_withdraw_request",
    "validate_rebalance_request",
    "validate_exchange_config",
]
