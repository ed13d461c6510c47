"""
Inputs — Нормализация и резолв входных значений

Единственный допустимый способ превратить сырой текст поля ввода в
количество buckets / хешей:
- sanitize: только цифры, без ведущих нулей ("007" → "7", "000" → "0")
- parse: непустое положительное целое, ограниченное MAX_INPUT_DIGITS
- resolve: bits → 2**value, count → value

ЗАПРЕЩЕНО молча обрезать/clamp значения: переполнение → CollisionInputOverflow.
"""

import re
from enum import Enum
from typing import Final

from src.core.math.collision import CollisionInputOverflow, InvalidCollisionInput

# =============================================================================
# ЛИМИТЫ
# =============================================================================

# Максимальная длина строки цифр (лимит int/str конверсии интерпретатора)
MAX_INPUT_DIGITS: Final[int] = 4300

# Максимальная битность для режима bits (2**65536 ~ 19729 десятичных цифр)
MAX_BIT_LENGTH: Final[int] = 65_536

_NON_DIGITS = re.compile(r"\D")
_LEADING_ZEROS = re.compile(r"^0+(?!$)")
_ASCII_DIGITS = re.compile(r"[0-9]+")


# =============================================================================
# ENUMS
# =============================================================================


class SpecMode(str, Enum):
    """Режим интерпретации значения поля"""

    BITS = "bits"
    COUNT = "count"

    def toggled(self) -> "SpecMode":
        """Переключение bits ↔ count"""
        return SpecMode.COUNT if self == SpecMode.BITS else SpecMode.BITS


# =============================================================================
# SANITIZE / PARSE
# =============================================================================


def sanitize_numeric_input(raw_text: str) -> str:
    """
    Очистка сырого текста поля: удаление всех не-цифр и ведущих нулей.

    Один "0" сохраняется, чтобы поле не становилось пустым при вводе нуля.

    Examples:
        >>> sanitize_numeric_input("1,000,000")
        '1000000'
        >>> sanitize_numeric_input("007")
        '7'
        >>> sanitize_numeric_input("000")
        '0'
        >>> sanitize_numeric_input("abc")
        ''
    """
    digits = _NON_DIGITS.sub("", raw_text)
    # \D в unicode-режиме пропускает не-ASCII цифры
    digits = "".join(ch for ch in digits if "0" <= ch <= "9")
    return _LEADING_ZEROS.sub("", digits)


def parse_positive_int(
    text: str,
    name: str,
    max_digits: int = MAX_INPUT_DIGITS,
) -> int:
    """
    Парсинг очищенного текста в положительное целое.

    Args:
        text: Текст из цифр (после sanitize_numeric_input)
        name: Имя поля (для сообщения об ошибке)
        max_digits: Максимальная длина строки цифр

    Returns:
        Целое >= 1

    Raises:
        InvalidCollisionInput: пустой текст, не-цифры или значение 0
        CollisionInputOverflow: строка длиннее max_digits

    Examples:
        >>> parse_positive_int("64", "bits")
        64
    """
    if not text:
        raise InvalidCollisionInput(f"{name} is empty")

    if _ASCII_DIGITS.fullmatch(text) is None:
        raise InvalidCollisionInput(f"{name} must contain digits only, got {text!r}")

    significant = text.lstrip("0")
    if len(significant) > max_digits:
        raise CollisionInputOverflow(
            f"{name} has {len(significant)} digits, limit is {max_digits}"
        )

    value = int(significant) if significant else 0
    if value < 1:
        raise InvalidCollisionInput(f"{name} must be positive (>= 1), got {value}")

    return value


# =============================================================================
# RESOLVE
# =============================================================================


def resolve_count(
    mode: SpecMode,
    value: int,
    max_bit_length: int = MAX_BIT_LENGTH,
) -> int:
    """
    Резолв значения поля в количество.

    Args:
        mode: BITS → 2**value, COUNT → value
        value: Положительное целое
        max_bit_length: Максимальная битность для BITS

    Returns:
        Количество >= 1

    Raises:
        InvalidCollisionInput: value < 1
        CollisionInputOverflow: value > max_bit_length в режиме BITS

    Examples:
        >>> resolve_count(SpecMode.BITS, 8)
        256
        >>> resolve_count(SpecMode.COUNT, 365)
        365
    """
    if value < 1:
        raise InvalidCollisionInput(f"value must be positive (>= 1), got {value}")

    if mode == SpecMode.BITS:
        if value > max_bit_length:
            raise CollisionInputOverflow(
                f"bit length {value} exceeds limit {max_bit_length}"
            )
        return 2**value

    return value
