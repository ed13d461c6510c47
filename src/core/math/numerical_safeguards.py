"""
Numerical Safeguards — Decimal Precision Primitives

Модуль обеспечивает численную устойчивость всех вычислений вероятности:
- Границы точности (significant digits) для decimal-арифметики
- Изолированный decimal.Context на каждый расчёт (глобальный контекст не меняется)
- Валидация целых входов (положительность, диапазон)
- Clamp вероятности в [0, 1]

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Native float никогда не используется в decimal-пути
2. Precision всегда в [DECIMAL_PRECISION_MIN, DECIMAL_PRECISION_MAX]
3. Overflow/InvalidOperation/DivisionByZero — trap (exception), не молчаливый NaN/Inf
4. Все операции детерминированы и воспроизводимы
"""

from decimal import (
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Final

# =============================================================================
# ПАРАМЕТРЫ ТОЧНОСТИ
# =============================================================================

# Минимальная точность decimal (significant digits)
DECIMAL_PRECISION_MIN: Final[int] = 1

# Максимальная точность decimal (significant digits)
DECIMAL_PRECISION_MAX: Final[int] = 9999

# Точность по умолчанию
DECIMAL_PRECISION_DEFAULT: Final[int] = 100

# Граница exact/approximate пути по умолчанию (количество хешей)
EXACT_CUTOFF_DEFAULT: Final[int] = 10_000

# Границы экспоненты decimal-контекста
DECIMAL_EMAX: Final[int] = 999_999
DECIMAL_EMIN: Final[int] = -999_999

PROBABILITY_ZERO: Final[Decimal] = Decimal(0)
PROBABILITY_ONE: Final[Decimal] = Decimal(1)


# =============================================================================
# DECIMAL CONTEXT
# =============================================================================


def decimal_context(precision: int = DECIMAL_PRECISION_DEFAULT) -> Context:
    """
    Создание изолированного decimal-контекста для одного расчёта.

    Используется через `decimal.localcontext(decimal_context(p))`, поэтому
    глобальный контекст потока не изменяется.

    Underflow не trap: exp(-x) для огромного x округляется к 0.

    Args:
        precision: Количество значащих цифр

    Returns:
        Новый decimal.Context

    Raises:
        ValueError: Если precision вне [DECIMAL_PRECISION_MIN, DECIMAL_PRECISION_MAX]

    Examples:
        >>> decimal_context(50).prec
        50
    """
    validate_int_in_range(
        precision,
        "decimal_precision",
        min_value=DECIMAL_PRECISION_MIN,
        max_value=DECIMAL_PRECISION_MAX,
    )
    return Context(
        prec=precision,
        rounding=ROUND_HALF_EVEN,
        Emax=DECIMAL_EMAX,
        Emin=DECIMAL_EMIN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )


# =============================================================================
# ВАЛИДАЦИЯ ЦЕЛЫХ
# =============================================================================


def is_strict_int(value: object) -> bool:
    """
    Проверка, что значение — int (bool не считается целым).

    Examples:
        >>> is_strict_int(5)
        True
        >>> is_strict_int(True)
        False
        >>> is_strict_int(5.0)
        False
    """
    return isinstance(value, int) and not isinstance(value, bool)


def validate_positive_int(value: int, name: str) -> None:
    """
    Валидация, что значение — положительное целое (>= 1).

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value не int или value < 1
    """
    if not is_strict_int(value):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if value < 1:
        raise ValueError(f"{name} must be positive (>= 1), got {value}")


def validate_int_in_range(
    value: int,
    name: str,
    min_value: int | None = None,
    max_value: int | None = None,
) -> None:
    """
    Валидация, что целое значение в заданном диапазоне (включительно).

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Raises:
        ValueError: Если value не int или вне диапазона
    """
    if not is_strict_int(value):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")


# =============================================================================
# ВЕРОЯТНОСТИ
# =============================================================================


def is_valid_decimal(value: Decimal) -> bool:
    """
    Проверка, что Decimal конечный (не NaN, не Infinity).
    """
    return value.is_finite()


def clamp_probability(value: Decimal) -> Decimal:
    """
    Ограничение вероятности диапазоном [0, 1].

    Округление в 1 - p может дать -0 или значение чуть за границей при
    низкой точности.

    Raises:
        ValueError: Если value NaN/Infinity

    Examples:
        >>> clamp_probability(Decimal("-0"))
        Decimal('0')
        >>> clamp_probability(Decimal("1.0000001"))
        Decimal('1')
        >>> clamp_probability(Decimal("0.25"))
        Decimal('0.25')
    """
    if not is_valid_decimal(value):
        raise ValueError(f"Probability must be finite, got {value}")

    if value <= PROBABILITY_ZERO:
        return PROBABILITY_ZERO

    if value >= PROBABILITY_ONE:
        return PROBABILITY_ONE

    return value


def relative_difference(a: Decimal, b: Decimal) -> Decimal:
    """
    Относительная разница |a - b| / max(|a|, |b|).

    Для a == b == 0 возвращает 0.

    Examples:
        >>> relative_difference(Decimal(1), Decimal(1))
        Decimal('0')
        >>> relative_difference(Decimal(100), Decimal(99))
        Decimal('0.01')
    """
    scale = max(abs(a), abs(b))
    if scale == 0:
        return PROBABILITY_ZERO
    return abs(a - b) / scale
