"""
Checked Arithmetic — целочисленные примитивы с контролем переполнения

Модуль обеспечивает детерминированную арифметику для всех денежных расчётов:
- Суммы хранятся как u64 (наименьшая единица токена)
- Промежуточные произведения считаются в u128 до финального сужения
- Деление всегда усекает вниз (toward zero, домен неотрицательный)
- Любой выход за границы → MathOverflowError

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна сумма не становится отрицательной (checked_sub)
2. Ни одна сумма не превышает U64_MAX после сужения
3. Деление на ноль → MathOverflowError (как checked_div → None)
4. Float не используется ни в одном денежном расчёте
"""

from fractions import Fraction
from typing import Final

from fxvault.core.errors import InvalidAmountError, MathOverflowError

# =============================================================================
# ГРАНИЦЫ РАБОЧЕЙ ТОЧНОСТИ
# =============================================================================

# Хранимые суммы (TVL, позиции, бакеты комиссий)
U64_MAX: Final[int] = 2**64 - 1

# Промежуточные произведения (amount × price, amount × bps)
U128_MAX: Final[int] = 2**128 - 1

# 10000 bps = 100%
BPS_DENOMINATOR: Final[int] = 10_000


# =============================================================================
# CHECKED OPERATIONS
# =============================================================================


def _check_bounds(value: int, limit: int, op: str) -> int:
    if value < 0 or value > limit:
        raise MathOverflowError(f"{op} result {value} outside [0, {limit}]")
    return value


def checked_add(a: int, b: int, limit: int = U64_MAX) -> int:
    """
    Сложение с проверкой переполнения.

    Args:
        a, b: Неотрицательные слагаемые
        limit: Верхняя граница результата (default: U64_MAX)

    Returns:
        a + b

    Raises:
        MathOverflowError: Если результат > limit
    """
    return _check_bounds(a + b, limit, "add")


def checked_sub(a: int, b: int) -> int:
    """
    Вычитание с проверкой underflow.

    Raises:
        MathOverflowError: Если b > a (результат был бы отрицательным)
    """
    return _check_bounds(a - b, U64_MAX, "sub")


def checked_mul(a: int, b: int, limit: int = U128_MAX) -> int:
    """
    Умножение в расширенной точности (по умолчанию u128).

    Raises:
        MathOverflowError: Если произведение > limit
    """
    return _check_bounds(a * b, limit, "mul")


def checked_div(a: int, b: int) -> int:
    """
    Целочисленное деление с усечением вниз.

    Raises:
        MathOverflowError: При делении на ноль или отрицательных операндах
    """
    if b <= 0 or a < 0:
        raise MathOverflowError(f"div {a} / {b} undefined in unsigned domain")
    return a // b


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a × b / denominator) с u128 промежуточным произведением и u64 результатом.

    Основной строительный блок для amount × price / SCALE и amount × bps / 10000.

    Examples:
        >>> mul_div_floor(1_000_000, 1_100_000_000, 1_000_000_000)
        1100000
        >>> mul_div_floor(1_100_000, 3, 10_000)
        330
    """
    product = checked_mul(a, b)
    return narrow_u64(checked_div(product, denominator))


def narrow_u64(value: int) -> int:
    """
    Сужение u128 → u64.

    Raises:
        MathOverflowError: Если значение не помещается в u64
    """
    return _check_bounds(value, U64_MAX, "narrow")


def apply_bps(amount: int, bps: int) -> int:
    """
    Доля amount в basis points, усечённая вниз.

    Args:
        amount: Сумма (u64)
        bps: Доля в basis points (0..10000)

    Returns:
        floor(amount × bps / 10000)
    """
    if bps < 0:
        raise MathOverflowError(f"negative bps {bps}")
    return mul_div_floor(amount, bps, BPS_DENOMINATOR)


def floor_fraction(value: Fraction) -> int:
    """
    Усечение неотрицательной рациональной величины до целого.

    Raises:
        MathOverflowError: Если value < 0
    """
    if value < 0:
        raise MathOverflowError(f"cannot floor negative value {value}")
    return value.numerator // value.denominator


def bps_to_fraction(bps: int) -> Fraction:
    """
    Конверсия basis points в точную дробь.

    Examples:
        >>> bps_to_fraction(30)
        Fraction(3, 1000)
    """
    return Fraction(bps, BPS_DENOMINATOR)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(value: int, name: str) -> int:
    """
    Валидация суммы операции: целое, > 0, ≤ U64_MAX.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        InvalidAmountError: Если сумма вне (0, U64_MAX]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidAmountError(f"{name} must be positive, got {value}")
    if value > U64_MAX:
        raise InvalidAmountError(f"{name} exceeds u64, got {value}")
    return value


def validate_balance(value: int, name: str) -> int:
    """
    Валидация баланса: целое в [0, U64_MAX].

    Raises:
        ValueError: Если баланс отрицательный или не помещается в u64
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be in [0, {U64_MAX}], got {value}")
    return value
