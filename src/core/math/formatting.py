"""
Formatting — Lossless Probability Rendering

Правила отображения P(collision):
- 1 → "100%"
- 0 → "0%"
- value < 1e-6 → экспоненциальная запись, 6 цифр после точки ("2.710503e-8")
- иначе → value × 100, fixed 10 знаков после точки, суффикс "%"

Маркер точности ("= " для exact, "≈ " для approximate) хранится отдельным
полем и не смешивается с числовым значением.
"""

from decimal import ROUND_HALF_UP, Context, Decimal, localcontext
from typing import Final, NamedTuple

from src.core.math.numerical_safeguards import (
    DECIMAL_PRECISION_MAX,
    PROBABILITY_ONE,
    PROBABILITY_ZERO,
)

# =============================================================================
# ПАРАМЕТРЫ ФОРМАТИРОВАНИЯ
# =============================================================================

# Порог переключения на экспоненциальную запись
EXPONENTIAL_THRESHOLD: Final[Decimal] = Decimal("1e-6")

# Цифр после точки в экспоненциальной записи
EXPONENTIAL_FRACTION_DIGITS: Final[int] = 6

# Цифр после точки в процентной записи
PERCENT_FRACTION_DIGITS: Final[int] = 10

EXACT_MARKER: Final[str] = "= "
APPROXIMATE_MARKER: Final[str] = "≈ "

# scaleb(2) должен быть точным для любой точности расчёта
_FORMAT_CONTEXT_PRECISION: Final[int] = DECIMAL_PRECISION_MAX + 3


class ProbabilityDisplay(NamedTuple):
    """Отформатированная вероятность с маркером точности."""

    marker: str  # "= " или "≈ "
    text: str  # "50.7297234324%", "2.710503e-8", "100%"

    @property
    def rendered(self) -> str:
        return f"{self.marker}{self.text}"


def _format_context() -> Context:
    # Fixed-point рендер округляет half-up
    return Context(prec=_FORMAT_CONTEXT_PRECISION, rounding=ROUND_HALF_UP)


def format_probability_text(value: Decimal) -> str:
    """
    Отформатировать вероятность без маркера.

    Args:
        value: P(collision) в [0, 1]

    Returns:
        Строка для отображения

    Raises:
        ValueError: если value вне [0, 1] или NaN/Infinity

    Examples:
        >>> format_probability_text(Decimal(1))
        '100%'
        >>> format_probability_text(Decimal(0))
        '0%'
        >>> format_probability_text(Decimal("0.5"))
        '50.0000000000%'
        >>> format_probability_text(Decimal("1.23456e-8"))
        '1.234560e-8'
    """
    if not value.is_finite() or value < PROBABILITY_ZERO or value > PROBABILITY_ONE:
        raise ValueError(f"Probability must be in [0, 1], got {value}")

    if value == PROBABILITY_ONE:
        return "100%"

    if value == PROBABILITY_ZERO:
        return "0%"

    with localcontext(_format_context()):
        if value < EXPONENTIAL_THRESHOLD:
            return format(value, f".{EXPONENTIAL_FRACTION_DIGITS}e")

        percent = value.scaleb(2).quantize(
            Decimal(1).scaleb(-PERCENT_FRACTION_DIGITS), rounding=ROUND_HALF_UP
        )
        return f"{percent:f}%"


def precision_marker(exact: bool) -> str:
    """
    Маркер точности результата.

    Examples:
        >>> precision_marker(True)
        '= '
        >>> precision_marker(False)
        '≈ '
    """
    return EXACT_MARKER if exact else APPROXIMATE_MARKER


def format_probability(value: Decimal, exact: bool) -> ProbabilityDisplay:
    """
    Отформатировать вероятность для отображения.

    Args:
        value: P(collision) в [0, 1]
        exact: True для exact/pigeonhole пути

    Returns:
        ProbabilityDisplay(marker, text)

    Examples:
        >>> format_probability(Decimal(1), True).rendered
        '= 100%'
        >>> format_probability(Decimal("0.25"), False).rendered
        '≈ 25.0000000000%'
    """
    return ProbabilityDisplay(marker=precision_marker(exact), text=format_probability_text(value))
