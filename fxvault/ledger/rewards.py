"""
RewardDistributor — claim доли LP комиссий

reward = min(floor(position.amount × accrued_lp_fees / tvl), accrued_lp_fees)

Swap из vault снижает TVL, но не позиции: доля может превысить бакет,
тогда выплачивается весь бакет.

Отказы:
- бакет LP пуст                  → NoFeesToClaimError
- позиция пуста                  → NoLiquidityProvidedError
- награда усекается до 0 (и TVL 0) → RewardTooSmallError

Бакет уменьшается ровно на reward (checked), rewards_claimed растёт на reward.
"""

import logging
from dataclasses import dataclass

from fxvault.core.domain.position import LiquidityPosition
from fxvault.core.domain.vault import Vault
from fxvault.core.errors import NoFeesToClaimError, NoLiquidityProvidedError, RewardTooSmallError
from fxvault.core.math.checked import checked_add, checked_sub, mul_div_floor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimOutcome:
    vault: Vault
    position: LiquidityPosition
    reward: int


def calculate_reward(vault: Vault, position: LiquidityPosition) -> int:
    """
    Пропорциональная доля бакета LP.

    Examples:
        bucket 1000, TVL 10000, позиция 2500 → 250
        bucket 231, TVL 3900000, позиция 5000000 → 231 (ограничено бакетом)

    Raises:
        NoFeesToClaimError, NoLiquidityProvidedError, RewardTooSmallError
    """
    if vault.accrued_lp_fees == 0:
        raise NoFeesToClaimError(f"vault {vault.currency} has no LP fees")
    if position.amount == 0:
        raise NoLiquidityProvidedError(f"{position.provider} has no liquidity in {vault.currency}")
    if vault.tvl == 0:
        raise RewardTooSmallError(f"vault {vault.currency} has zero TVL")

    if position.amount >= vault.tvl:
        reward = vault.accrued_lp_fees
    else:
        reward = mul_div_floor(position.amount, vault.accrued_lp_fees, vault.tvl)
    if reward == 0:
        raise RewardTooSmallError(
            f"reward for {position.provider} truncates to zero "
            f"(position={position.amount}, bucket={vault.accrued_lp_fees}, tvl={vault.tvl})"
        )
    return reward


def claim(vault: Vault, position: LiquidityPosition, now: int) -> ClaimOutcome:
    """
    Учёт claim-а награды.

    Raises:
        NoFeesToClaimError, NoLiquidityProvidedError, RewardTooSmallError
        MathOverflowError: rewards_claimed переполнен
    """
    if position.currency != vault.currency:
        raise ValueError(
            f"position currency {position.currency} does not match vault {vault.currency}"
        )

    reward = calculate_reward(vault, position)

    new_vault = vault.evolve(
        accrued_lp_fees=checked_sub(vault.accrued_lp_fees, reward),
        last_fee_update_ts=now,
    )
    new_position = position.evolve(
        rewards_claimed=checked_add(position.rewards_claimed, reward),
        last_claim_ts=now,
    )
    logger.debug("claim %s/%s: reward=%d", vault.currency, position.provider, reward)
    return ClaimOutcome(vault=new_vault, position=new_position, reward=reward)
