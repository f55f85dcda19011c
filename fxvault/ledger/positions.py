"""
LiquidityPositionLedger — депозиты и выводы LP

Deposit:
- TVL vault и позиция растут на amount (checked)
- last_deposit_ts = now: часы штрафа перезапускаются для ВСЕЙ позиции

Withdraw:
- amount ≤ позиции (InsufficientFunds) и ≤ TVL (InsufficientVaultFunds)
- штраф по прошедшему с последнего депозита времени:

      elapsed <  60h → 200 bps
      elapsed < 120h → 150 bps
      elapsed < 180h → 100 bps
      elapsed < 240h →  50 bps
      иначе          →   0 bps

- penalty = floor(amount × bps / 10000), net = amount − penalty
- позиция и TVL уменьшаются на полный amount; penalty остаётся в token
  account vault и зачисляется в бакет automated treasury

Функции чистые: принимают и возвращают новые экземпляры Vault/LiquidityPosition.
Переводы токенов выполняет exchange-сервис.
"""

from dataclasses import dataclass
from typing import Final, Optional, Tuple

from fxvault.core.domain.position import LiquidityPosition
from fxvault.core.domain.vault import Vault
from fxvault.core.errors import InsufficientFundsError, InsufficientVaultFundsError
from fxvault.core.math.checked import apply_bps, checked_add, checked_sub, validate_amount
from fxvault.core.math.tiers import TimeTier, select_time_tier, validate_time_tiers

HOUR_SECONDS: Final[int] = 3_600

DEFAULT_PENALTY_TIERS: Final[Tuple[TimeTier, ...]] = (
    TimeTier(elapsed_below_seconds=60 * HOUR_SECONDS, fee_bps=200),
    TimeTier(elapsed_below_seconds=120 * HOUR_SECONDS, fee_bps=150),
    TimeTier(elapsed_below_seconds=180 * HOUR_SECONDS, fee_bps=100),
    TimeTier(elapsed_below_seconds=240 * HOUR_SECONDS, fee_bps=50),
    TimeTier(elapsed_below_seconds=None, fee_bps=0),
)


@dataclass(frozen=True)
class WithdrawalPenaltyConfig:
    """Расписание штрафа за ранний вывод."""

    tiers: Tuple[TimeTier, ...] = DEFAULT_PENALTY_TIERS

    def __post_init__(self) -> None:
        validate_time_tiers(self.tiers)


@dataclass(frozen=True)
class DepositOutcome:
    vault: Vault
    position: LiquidityPosition
    amount: int


@dataclass(frozen=True)
class WithdrawalOutcome:
    """Результат вывода: новое состояние и разбивка суммы."""

    vault: Vault
    position: LiquidityPosition
    amount: int
    penalty_bps: int
    penalty: int
    net_amount: int
    elapsed_seconds: int


def penalty_bps_for(elapsed_seconds: int, config: Optional[WithdrawalPenaltyConfig] = None) -> int:
    """
    Ставка штрафа по прошедшему времени.

    Examples:
        >>> penalty_bps_for(0)
        200
        >>> penalty_bps_for(60 * 3600)
        150
        >>> penalty_bps_for(240 * 3600)
        0
    """
    cfg = config or WithdrawalPenaltyConfig()
    return select_time_tier(cfg.tiers, elapsed_seconds).fee_bps


def deposit(
    vault: Vault,
    position: LiquidityPosition,
    amount: int,
    now: int,
) -> DepositOutcome:
    """
    Учёт депозита.

    Raises:
        InvalidAmountError: amount вне (0, U64_MAX]
        MathOverflowError: TVL или позиция переполняют u64
    """
    validate_amount(amount, "amount")
    _check_position_vault(vault, position)

    new_vault = vault.evolve(tvl=checked_add(vault.tvl, amount))
    new_position = position.evolve(
        amount=checked_add(position.amount, amount),
        last_deposit_ts=now,
    )
    return DepositOutcome(vault=new_vault, position=new_position, amount=amount)


def withdraw(
    vault: Vault,
    position: LiquidityPosition,
    amount: int,
    now: int,
    config: Optional[WithdrawalPenaltyConfig] = None,
) -> WithdrawalOutcome:
    """
    Учёт вывода со штрафом.

    Raises:
        InvalidAmountError: amount вне (0, U64_MAX]
        InsufficientFundsError: amount > позиции
        InsufficientVaultFundsError: amount > TVL vault
        MathOverflowError: Переполнение бакета treasury
    """
    validate_amount(amount, "amount")
    _check_position_vault(vault, position)

    if position.amount < amount:
        raise InsufficientFundsError(
            f"withdraw {amount} exceeds position {position.amount} of {position.provider}"
        )
    if vault.tvl < amount:
        raise InsufficientVaultFundsError(f"withdraw {amount} exceeds vault TVL {vault.tvl}")

    elapsed = max(now - position.last_deposit_ts, 0)
    bps = penalty_bps_for(elapsed, config)
    penalty = apply_bps(amount, bps)
    net_amount = checked_sub(amount, penalty)

    new_vault = vault.evolve(
        tvl=checked_sub(vault.tvl, amount),
        accrued_treasury_fees=checked_add(vault.accrued_treasury_fees, penalty),
    )
    new_position = position.evolve(amount=checked_sub(position.amount, amount))

    return WithdrawalOutcome(
        vault=new_vault,
        position=new_position,
        amount=amount,
        penalty_bps=bps,
        penalty=penalty,
        net_amount=net_amount,
        elapsed_seconds=elapsed,
    )


def _check_position_vault(vault: Vault, position: LiquidityPosition) -> None:
    if position.currency != vault.currency:
        raise ValueError(
            f"position currency {position.currency} does not match vault {vault.currency}"
        )
