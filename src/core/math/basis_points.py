"""
Basis Points — целочисленная арифметика с фиксированной точкой

Все ratio представлены в basis points (1 bps = 1/10000).
Все деления — floor division (округление вниз), чтобы результаты
были воспроизводимы и никогда не превышали точного значения.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ratio всегда в диапазоне [0, BPS_DENOMINATOR]
2. Деление на ноль никогда не происходит (InvalidInput)
3. Суммы — неотрицательные целые (int), float запрещены
4. apply_bps(x, r) <= x для любого допустимого r
"""

from typing import Final

from src.core.errors import InvalidAmount, InvalidInput, InvalidRatio

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# 100% в basis points
BPS_DENOMINATOR: Final[int] = 10_000

BPS_MIN: Final[int] = 0
BPS_MAX: Final[int] = BPS_DENOMINATOR


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_bps(value: int, name: str = "ratio_bps") -> int:
    """
    Проверка, что ratio — целое в диапазоне [0, 10000].

    Args:
        value: Ratio в basis points
        name: Имя параметра для сообщения об ошибке

    Returns:
        value без изменений

    Raises:
        InvalidRatio: Если value не int или вне диапазона
    """
    # bool — подкласс int, но ratio=True почти наверняка ошибка ввода
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidRatio(f"{name} must be int, got {type(value).__name__}")
    if value < BPS_MIN or value > BPS_MAX:
        raise InvalidRatio(f"{name} {value} out of range [{BPS_MIN}, {BPS_MAX}]")
    return value


def validate_amount(value: int, name: str = "amount", allow_zero: bool = False) -> int:
    """
    Проверка целочисленной суммы.

    Args:
        value: Сумма (минимальные единицы токена)
        name: Имя параметра
        allow_zero: Разрешить 0

    Raises:
        InvalidAmount: Если value не int, отрицательная или ноль (при allow_zero=False)
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f"{name} must be int, got {type(value).__name__}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise InvalidAmount(f"{name} must be {bound}, got {value}")
    return value


def validate_account(value: str, name: str = "account") -> str:
    """Аккаунт — непустая строка (ключ в реестрах и в порту)."""
    if not isinstance(value, str) or not value:
        raise InvalidInput(f"{name} must be a non-empty str, got {value!r}")
    return value


# =============================================================================
# АРИФМЕТИКА
# =============================================================================


def mul_div_floor(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator) без промежуточного float.

    Python int не переполняется, поэтому произведение считается точно.

    Raises:
        InvalidInput: Если denominator <= 0 или операнды отрицательные
    """
    if denominator <= 0:
        raise InvalidInput(f"denominator must be positive, got {denominator}")
    if a < 0 or b < 0:
        raise InvalidInput(f"operands must be non-negative, got a={a}, b={b}")
    return (a * b) // denominator


def apply_bps(amount: int, ratio_bps: int) -> int:
    """
    floor(amount * ratio_bps / 10000).

    Examples:
        >>> apply_bps(100, 5000)
        50
        >>> apply_bps(100, 3000)
        30
        >>> apply_bps(7, 5000)
        3
    """
    validate_bps(ratio_bps)
    return mul_div_floor(amount, ratio_bps, BPS_DENOMINATOR)


def complement_bps(amount: int, ratio_bps: int) -> int:
    """amount - apply_bps(amount, ratio_bps): часть, не покрытая ratio."""
    return amount - apply_bps(amount, ratio_bps)
