"""
VaultHealth — метрика дисбаланса пары vault

health = min(a, b) / max(a, b)
- 1 → идеально сбалансированная пара
- 0 → одна сторона пуста (защита от деления на ноль)

Значение: точная дробь (Fraction): симметрично и масштабно-инвариантно
без ошибок округления float, границы тиров сравниваются точно.
"""

from fractions import Fraction
from typing import Final

from fxvault.core.math.checked import validate_balance

HEALTH_ZERO: Final[Fraction] = Fraction(0)
HEALTH_BALANCED: Final[Fraction] = Fraction(1)


def health(balance_a: int, balance_b: int) -> Fraction:
    """
    Health пары vault.

    Args:
        balance_a: Баланс первого vault (u64)
        balance_b: Баланс второго vault (u64)

    Returns:
        min/max в [0, 1]; 0 если любой баланс равен нулю

    Examples:
        >>> health(10, 20) == health(100, 200) == Fraction(1, 2)
        True
        >>> health(0, 100)
        Fraction(0, 1)
    """
    validate_balance(balance_a, "balance_a")
    validate_balance(balance_b, "balance_b")

    if balance_a == 0 or balance_b == 0:
        return HEALTH_ZERO

    return Fraction(min(balance_a, balance_b), max(balance_a, balance_b))
