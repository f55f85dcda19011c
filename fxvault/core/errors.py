"""
Errors — единая таксономия ошибок FX vault exchange

Все компоненты (pricing, fee allocation, ledger, rewards, rebalance, oracle)
поднимают исключения только из этого модуля. Один и тот же отказ
(например, Overflow) имеет одинаковую семантику во всех операциях.

Каждая ошибка терминальна для операции: ядро никогда не делает retry,
состояние при ошибке не изменяется.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Код ошибки (значения совпадают с именами из контракта операций)"""

    OVERFLOW = "Overflow"
    INSUFFICIENT_LIQUIDITY = "InsufficientLiquidity"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INSUFFICIENT_VAULT_FUNDS = "InsufficientVaultFunds"
    SLIPPAGE_EXCEEDED = "SlippageExceeded"
    NO_FEES_TO_CLAIM = "NoFeesToClaim"
    NO_LIQUIDITY_PROVIDED = "NoLiquidityProvided"
    REWARD_TOO_SMALL = "RewardTooSmall"
    NO_REBALANCE_NEEDED = "NoRebalanceNeeded"
    INSUFFICIENT_INJECTION_AMOUNT = "InsufficientInjectionAmount"
    STALE_ORACLE_PRICE = "StaleOraclePrice"
    NEGATIVE_ORACLE_PRICE = "NegativeOraclePrice"
    INVALID_ORACLE_ACCOUNT = "InvalidOracleAccount"
    FEE_TOO_HIGH = "FeeTooHigh"
    INVALID_AMOUNT = "InvalidAmount"
    VAULT_NOT_FOUND = "VaultNotFound"
    VAULT_ALREADY_EXISTS = "VaultAlreadyExists"
    TRANSFER_FAILED = "TransferFailed"


class VaultExchangeError(Exception):
    """
    Базовое исключение ядра.

    Attributes:
        kind: ErrorKind: машиночитаемый код
        message: Человекочитаемое описание
    """

    kind: ErrorKind

    def __init__(self, message: str = ""):
        self.message = message or self.kind.value
        super().__init__(f"{self.kind.value}: {self.message}")


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


class MathOverflowError(VaultExchangeError):
    """Checked-арифметика вышла за пределы рабочей точности (u64/u128)"""

    kind = ErrorKind.OVERFLOW


class InvalidAmountError(VaultExchangeError):
    """Сумма операции не положительна или не помещается в u64"""

    kind = ErrorKind.INVALID_AMOUNT


# =============================================================================
# SWAP
# =============================================================================


class InsufficientLiquidityError(VaultExchangeError):
    """Target vault не покрывает рассчитанный выход"""

    kind = ErrorKind.INSUFFICIENT_LIQUIDITY

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"requested {requested} exceeds available liquidity {available}")


class SlippageExceededError(VaultExchangeError):
    """Выход ниже минимума, заданного вызывающей стороной"""

    kind = ErrorKind.SLIPPAGE_EXCEEDED

    def __init__(self, amount_out: int, minimum_amount_out: int):
        self.amount_out = amount_out
        self.minimum_amount_out = minimum_amount_out
        super().__init__(f"amount_out {amount_out} below minimum {minimum_amount_out}")


# =============================================================================
# WITHDRAW
# =============================================================================


class InsufficientFundsError(VaultExchangeError):
    """Вывод превышает LP позицию"""

    kind = ErrorKind.INSUFFICIENT_FUNDS


class InsufficientVaultFundsError(VaultExchangeError):
    """Вывод превышает TVL vault"""

    kind = ErrorKind.INSUFFICIENT_VAULT_FUNDS


# =============================================================================
# REWARDS
# =============================================================================


class NoFeesToClaimError(VaultExchangeError):
    """Бакет комиссий пуст"""

    kind = ErrorKind.NO_FEES_TO_CLAIM


class NoLiquidityProvidedError(VaultExchangeError):
    """У провайдера нет ликвидности в vault"""

    kind = ErrorKind.NO_LIQUIDITY_PROVIDED


class RewardTooSmallError(VaultExchangeError):
    """Награда усекается до нуля"""

    kind = ErrorKind.REWARD_TOO_SMALL


# =============================================================================
# REBALANCE
# =============================================================================


class NoRebalanceNeededError(VaultExchangeError):
    """Health вне диапазона автоматической ребалансировки [0.20, 0.50)"""

    kind = ErrorKind.NO_REBALANCE_NEEDED


class InsufficientInjectionAmountError(VaultExchangeError):
    """Доступного капитала меньше, чем требует план"""

    kind = ErrorKind.INSUFFICIENT_INJECTION_AMOUNT

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"injection {required} exceeds available {available}")


# =============================================================================
# ORACLE
# =============================================================================


class StaleOraclePriceError(VaultExchangeError):
    """Котировка старше max_age"""

    kind = ErrorKind.STALE_ORACLE_PRICE


class NegativeOraclePriceError(VaultExchangeError):
    """Фид вернул отрицательную цену"""

    kind = ErrorKind.NEGATIVE_ORACLE_PRICE


class InvalidOracleAccountError(VaultExchangeError):
    """Фид сигнализирует невалидное чтение (статус, нулевая цена)"""

    kind = ErrorKind.INVALID_ORACLE_ACCOUNT


# =============================================================================
# VAULT LIFECYCLE / STORE / TRANSFERS
# =============================================================================


class FeeTooHighError(VaultExchangeError):
    """fee_basis_points выше потолка 5% при инициализации"""

    kind = ErrorKind.FEE_TOO_HIGH


class VaultNotFoundError(VaultExchangeError):
    kind = ErrorKind.VAULT_NOT_FOUND


class VaultAlreadyExistsError(VaultExchangeError):
    kind = ErrorKind.VAULT_ALREADY_EXISTS


class TransferFailedError(VaultExchangeError):
    """Transfer primitive отклонил batch (ничего не применено)"""

    kind = ErrorKind.TRANSFER_FAILED


__all__ = [
    "ErrorKind",
    "VaultExchangeError",
    "MathOverflowError",
    "InvalidAmountError",
    "InsufficientLiquidityError",
    "SlippageExceededError",
    "InsufficientFundsError",
    "InsufficientVaultFundsError",
    "NoFeesToClaimError",
    "NoLiquidityProvidedError",
    "RewardTooSmallError",
    "NoRebalanceNeededError",
    "InsufficientInjectionAmountError",
    "StaleOraclePriceError",
    "NegativeOraclePriceError",
    "InvalidOracleAccountError",
    "FeeTooHighError",
    "VaultNotFoundError",
    "VaultAlreadyExistsError",
    "TransferFailedError",
]
