"""
VaultExchange — accounting-сервис FX vault exchange

Оркестрирует операции над keyed хранилищем vault/позиций:
    initialize_vault, deposit, withdraw, swap, claim_rewards,
    distribute_protocol_fees, rebalance
и read API: get_vault, get_position, vault_health, quote.

Порядок каждой операции:
1. lock vault (для двух vault: в глобальном порядке)
2. now читается из clock ровно один раз
3. все проверки и расчёты (чистые функции ledger/pricing/rebalance)
4. один атомарный batch переводов через TransferPrimitive
5. запись нового состояния только после успешного batch

Любая ошибка до шага 5 оставляет состояние без изменений.
Инвариант сохранения: баланс token account vault ==
tvl + бакеты комиссий + нераспределённая пыль.
"""

import logging
import time
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, List, Optional, Tuple

from fxvault.config import ExchangeConfig
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
from fxvault.core.errors import (
    FeeTooHighError,
    InsufficientLiquidityError,
    InvalidOracleAccountError,
    NoFeesToClaimError,
    SlippageExceededError,
)
from fxvault.core.math.checked import checked_add, checked_sub
from fxvault.core.math.fee_allocation import FeeSplit, allocate
from fxvault.core.math.health import health
from fxvault.core.math.pricing import SwapDirection, SwapQuote, quote_swap
from fxvault.ledger import positions as position_ledger
from fxvault.ledger import rewards as reward_distributor
from fxvault.ledger.store import VaultStore
from fxvault.oracle.feed import PriceFeed, validate_reading
from fxvault.rebalance.controller import RebalanceController, RebalancePlan
from fxvault.transfers import TransferInstruction, TransferPrimitive

logger = logging.getLogger(__name__)


def unix_now() -> int:
    return int(time.time())


# =============================================================================
# РЕЗУЛЬТАТЫ ОПЕРАЦИЙ
# =============================================================================


@dataclass(frozen=True)
class DepositResult:
    vault: Vault
    position: LiquidityPosition
    amount: int


@dataclass(frozen=True)
class WithdrawResult:
    vault: Vault
    position: LiquidityPosition
    amount: int
    penalty_bps: int
    penalty: int
    net_amount: int


@dataclass(frozen=True)
class SwapResult:
    source_vault: Vault
    target_vault: Vault
    price_quote: PriceQuote
    quote: SwapQuote
    fee_split: FeeSplit


@dataclass(frozen=True)
class ClaimResult:
    vault: Vault
    position: LiquidityPosition
    reward: int


@dataclass(frozen=True)
class DistributionResult:
    vault: Vault
    treasury_amount: int
    protocol_amount: int


@dataclass(frozen=True)
class RebalanceResult:
    plan: RebalancePlan
    source_vault: Vault
    target_vault: Vault
    price_quote: PriceQuote


# =============================================================================
# СЕРВИС
# =============================================================================


class VaultExchange:
    """
    Accounting-сервис над VaultStore.

    Args:
        store: Хранилище vault и позиций
        transfers: Атомарный примитив переводов токенов
        price_feed: Адаптер фида котировок
        config: Конфигурация компонентов (default: ExchangeConfig())
        clock: Источник текущего времени (unix, сек)
    """

    def __init__(
        self,
        store: VaultStore,
        transfers: TransferPrimitive,
        price_feed: PriceFeed,
        config: Optional[ExchangeConfig] = None,
        clock: Callable[[], int] = unix_now,
    ):
        self.store = store
        self.transfers = transfers
        self.price_feed = price_feed
        self.config = config or ExchangeConfig()
        self.clock = clock
        self._rebalancer = RebalanceController(self.config.rebalance)

    # -------------------------------------------------------------------------
    # Vault lifecycle
    # -------------------------------------------------------------------------

    def initialize_vault(self, request: InitializeVaultRequest) -> Vault:
        """
        Создание vault валюты.

        Raises:
            FeeTooHighError: fee_basis_points > 500
            VaultAlreadyExistsError: vault уже существует
        """
        if request.fee_basis_points > MAX_VAULT_FEE_BPS:
            raise FeeTooHighError(
                f"fee {request.fee_basis_points} bps exceeds {MAX_VAULT_FEE_BPS} bps"
            )
        now = self.clock()
        vault = Vault(
            currency=request.currency,
            fee_basis_points=request.fee_basis_points,
            created_ts=now,
            last_fee_update_ts=now,
            token_account=request.token_account,
            treasury_account=request.treasury_account,
            automated_treasury_account=request.automated_treasury_account,
        )
        self.store.add_vault(vault)
        logger.info("vault %s initialized: fee=%d bps", vault.currency, vault.fee_basis_points)
        return vault

    # -------------------------------------------------------------------------
    # Liquidity
    # -------------------------------------------------------------------------

    def deposit(self, request: DepositRequest) -> DepositResult:
        with self.store.lock_vaults(request.currency):
            now = self.clock()
            vault = self.store.get_vault(request.currency)
            position = self.store.get_position(request.currency, request.provider)

            outcome = position_ledger.deposit(vault, position, request.amount, now)

            self.transfers.execute(
                [TransferInstruction(request.user_account, vault.token_account, request.amount)]
            )
            self.store.put_vault(outcome.vault)
            self.store.put_position(outcome.position)

        logger.info(
            "deposit %s/%s: amount=%d tvl=%d",
            request.currency,
            request.provider,
            request.amount,
            outcome.vault.tvl,
        )
        return DepositResult(vault=outcome.vault, position=outcome.position, amount=outcome.amount)

    def withdraw(self, request: WithdrawRequest) -> WithdrawResult:
        with self.store.lock_vaults(request.currency):
            now = self.clock()
            vault = self.store.get_vault(request.currency)
            position = self.store.get_position(request.currency, request.provider)

            outcome = position_ledger.withdraw(
                vault, position, request.amount, now, self.config.withdrawal_penalty
            )

            if outcome.net_amount > 0:
                self.transfers.execute(
                    [
                        TransferInstruction(
                            vault.token_account, request.user_account, outcome.net_amount
                        )
                    ]
                )
            self.store.put_vault(outcome.vault)
            self.store.put_position(outcome.position)

        if outcome.penalty > 0:
            logger.info(
                "withdraw %s/%s: penalty %d (%d bps)",
                request.currency,
                request.provider,
                outcome.penalty,
                outcome.penalty_bps,
            )
        logger.info(
            "withdraw %s/%s: amount=%d net=%d",
            request.currency,
            request.provider,
            outcome.amount,
            outcome.net_amount,
        )
        return WithdrawResult(
            vault=outcome.vault,
            position=outcome.position,
            amount=outcome.amount,
            penalty_bps=outcome.penalty_bps,
            penalty=outcome.penalty,
            net_amount=outcome.net_amount,
        )

    # -------------------------------------------------------------------------
    # Swap
    # -------------------------------------------------------------------------

    def _read_quote(
        self, source_currency: str, target_currency: str, now: int
    ) -> Tuple[PriceQuote, SwapDirection]:
        """
        Проверенная котировка пары и направление конверсии.

        Фид котирует source/target → SOURCE_TO_TARGET (умножение на цену),
        иначе target/source → TARGET_TO_SOURCE (деление на цену).

        Raises:
            InvalidOracleAccountError: Фид не котирует пару ни в одной ориентации
        """
        if self.price_feed.has_pair(source_currency, target_currency):
            pair = (source_currency, target_currency)
            direction = SwapDirection.SOURCE_TO_TARGET
        elif self.price_feed.has_pair(target_currency, source_currency):
            pair = (target_currency, source_currency)
            direction = SwapDirection.TARGET_TO_SOURCE
        else:
            raise InvalidOracleAccountError(f"no feed for {source_currency}/{target_currency}")
        reading = self.price_feed.read(*pair)
        return validate_reading(reading, *pair, now, self.config.oracle), direction

    def quote(self, request: SwapRequest) -> SwapQuote:
        """
        Dry-run расчёт swap без изменения состояния и без проверок ликвидности.
        """
        with self.store.lock_vaults(request.source_currency, request.target_currency):
            now = self.clock()
            source = self.store.get_vault(request.source_currency)
            target = self.store.get_vault(request.target_currency)
            price_quote, direction = self._read_quote(source.currency, target.currency, now)
            return quote_swap(
                amount_in=request.amount_in,
                price=price_quote.price,
                source_balance=source.tvl,
                target_balance=target.tvl,
                direction=direction,
                config=self.config.pricing,
            )

    def swap(self, request: SwapRequest) -> SwapResult:
        """
        Обмен source → target по проверенной котировке.

        Raises:
            StaleOraclePriceError, NegativeOraclePriceError, InvalidOracleAccountError
            SlippageExceededError: amount_out < minimum_amount_out
            InsufficientLiquidityError: выход до комиссии больше TVL target (или нулевой)
            MathOverflowError: Переполнение checked-арифметики
            TransferFailedError: Batch переводов отклонён
        """
        with self.store.lock_vaults(request.source_currency, request.target_currency):
            now = self.clock()
            source = self.store.get_vault(request.source_currency)
            target = self.store.get_vault(request.target_currency)
            price_quote, direction = self._read_quote(source.currency, target.currency, now)

            swap_quote = quote_swap(
                amount_in=request.amount_in,
                price=price_quote.price,
                source_balance=source.tvl,
                target_balance=target.tvl,
                direction=direction,
                config=self.config.pricing,
            )

            if swap_quote.amount_out < request.minimum_amount_out:
                raise SlippageExceededError(swap_quote.amount_out, request.minimum_amount_out)
            if (
                swap_quote.amount_out_before_fee == 0
                or swap_quote.amount_out_before_fee > target.tvl
            ):
                raise InsufficientLiquidityError(
                    requested=swap_quote.amount_out_before_fee, available=target.tvl
                )

            split = allocate(swap_quote.fee_amount, swap_quote.health, self.config.fee_allocation)

            new_source = source.evolve(
                tvl=checked_add(source.tvl, request.amount_in),
                last_oracle_price=price_quote.price,
                last_oracle_update_ts=now,
            )
            new_target = target.evolve(
                tvl=checked_sub(target.tvl, swap_quote.amount_out_before_fee),
                accrued_lp_fees=checked_add(target.accrued_lp_fees, split.lp),
                accrued_treasury_fees=checked_add(target.accrued_treasury_fees, split.treasury),
                accrued_protocol_fees=checked_add(target.accrued_protocol_fees, split.protocol),
                unallocated_fee_dust=checked_add(target.unallocated_fee_dust, split.remainder),
                last_fee_update_ts=now,
            )

            self.transfers.execute(
                [
                    TransferInstruction(
                        request.user_source_account, source.token_account, request.amount_in
                    ),
                    TransferInstruction(
                        target.token_account, request.user_target_account, swap_quote.amount_out
                    ),
                ]
            )
            self.store.put_vault(new_source)
            self.store.put_vault(new_target)

        logger.info(
            "swap %s→%s: in=%d out=%d fee=%d (lp=%d treasury=%d protocol=%d)",
            source.currency,
            target.currency,
            request.amount_in,
            swap_quote.amount_out,
            swap_quote.fee_amount,
            split.lp,
            split.treasury,
            split.protocol,
        )
        return SwapResult(
            source_vault=new_source,
            target_vault=new_target,
            price_quote=price_quote,
            quote=swap_quote,
            fee_split=split,
        )

    # -------------------------------------------------------------------------
    # Fees
    # -------------------------------------------------------------------------

    def claim_rewards(self, request: ClaimRewardsRequest) -> ClaimResult:
        with self.store.lock_vaults(request.currency):
            now = self.clock()
            vault = self.store.get_vault(request.currency)
            position = self.store.get_position(request.currency, request.provider)

            outcome = reward_distributor.claim(vault, position, now)

            self.transfers.execute(
                [TransferInstruction(vault.token_account, request.user_account, outcome.reward)]
            )
            self.store.put_vault(outcome.vault)
            self.store.put_position(outcome.position)

        logger.info(
            "claim %s/%s: reward=%d", request.currency, request.provider, outcome.reward
        )
        return ClaimResult(vault=outcome.vault, position=outcome.position, reward=outcome.reward)

    def distribute_protocol_fees(self, request: DistributeFeesRequest) -> DistributionResult:
        """
        Выплата бакетов treasury и protocol на их счета одним batch.

        Raises:
            NoFeesToClaimError: Оба бакета пусты
        """
        with self.store.lock_vaults(request.currency):
            now = self.clock()
            vault = self.store.get_vault(request.currency)
            treasury_amount = vault.accrued_treasury_fees
            protocol_amount = vault.accrued_protocol_fees

            if treasury_amount == 0 and protocol_amount == 0:
                raise NoFeesToClaimError(f"vault {vault.currency} has no protocol fees")

            instructions: List[TransferInstruction] = []
            if protocol_amount > 0:
                instructions.append(
                    TransferInstruction(vault.token_account, vault.treasury_account, protocol_amount)
                )
            if treasury_amount > 0:
                instructions.append(
                    TransferInstruction(
                        vault.token_account, vault.automated_treasury_account, treasury_amount
                    )
                )

            new_vault = vault.evolve(
                accrued_treasury_fees=0,
                accrued_protocol_fees=0,
                last_fee_update_ts=now,
            )

            self.transfers.execute(instructions)
            self.store.put_vault(new_vault)

        logger.info(
            "distributed %s fees: protocol=%d treasury=%d",
            request.currency,
            protocol_amount,
            treasury_amount,
        )
        return DistributionResult(
            vault=new_vault, treasury_amount=treasury_amount, protocol_amount=protocol_amount
        )

    # -------------------------------------------------------------------------
    # Rebalance
    # -------------------------------------------------------------------------

    def rebalance(self, request: RebalanceRequest) -> RebalanceResult:
        """
        Тик ребалансировки: капитал automated treasury меньшего vault
        переводится в его token account, TVL меньшего vault растёт.

        Raises:
            StaleOraclePriceError, NegativeOraclePriceError, InvalidOracleAccountError
            NoRebalanceNeededError: health вне полос
            InsufficientInjectionAmountError: available_amount < injection
            TransferFailedError: Счёт treasury не покрывает инъекцию
        """
        with self.store.lock_vaults(request.source_currency, request.target_currency):
            now = self.clock()
            source = self.store.get_vault(request.source_currency)
            target = self.store.get_vault(request.target_currency)
            price_quote, _ = self._read_quote(source.currency, target.currency, now)

            rebalance_plan = self._rebalancer.plan(
                source.tvl,
                target.tvl,
                request.available_amount,
                source_currency=source.currency,
                target_currency=target.currency,
            )

            vaults = {source.currency: source, target.currency: target}
            receiver = vaults[rebalance_plan.target_currency]
            injection = rebalance_plan.injection_amount
            vaults[receiver.currency] = receiver.evolve(tvl=checked_add(receiver.tvl, injection))
            vaults[source.currency] = vaults[source.currency].evolve(
                last_oracle_price=price_quote.price,
                last_oracle_update_ts=now,
            )

            if rebalance_plan.requires_transfer:
                self.transfers.execute(
                    [
                        TransferInstruction(
                            receiver.automated_treasury_account,
                            receiver.token_account,
                            injection,
                        )
                    ]
                )
            for vault in vaults.values():
                self.store.put_vault(vault)

        logger.info(
            "rebalance %s→%s: injected %d, health %.4f → %.4f",
            rebalance_plan.source_currency,
            rebalance_plan.target_currency,
            injection,
            float(rebalance_plan.health_before),
            float(rebalance_plan.health_after),
        )
        return RebalanceResult(
            plan=rebalance_plan,
            source_vault=vaults[source.currency],
            target_vault=vaults[target.currency],
            price_quote=price_quote,
        )

    # -------------------------------------------------------------------------
    # Read API
    # -------------------------------------------------------------------------

    def get_vault(self, currency: str) -> Vault:
        return self.store.get_vault(currency)

    def get_position(self, currency: str, provider: str) -> LiquidityPosition:
        return self.store.get_position(currency, provider)

    def vault_health(self, currency_a: str, currency_b: str) -> Fraction:
        return health(self.store.get_vault(currency_a).tvl, self.store.get_vault(currency_b).tvl)
