"""
Collision — Birthday-Bound Collision Probability

Модуль вычисляет вероятность хотя бы одной коллизии при n хешах в k buckets:
- Pigeonhole: n > k → коллизия гарантирована (P = 1, exact)
- Exact путь: произведение Π (k - i)/k для n ≤ exact_cutoff
- Approximate путь: exp(-n(n-1) / 2k) для n > exact_cutoff
- Вся арифметика в decimal с заданной точностью (significant digits)
- Degraded режим: native float (ArithmeticMode.FLOAT), не по умолчанию

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат всегда в [0, 1]
2. n > k (строго) → 1, exact; n == k идёт через реальную формулу
3. n ≤ exact_cutoff (включительно) → exact путь
4. Каждый множитель (k - i)/k — отдельное decimal-деление до умножения
5. Нарушение domain → CollisionDomainViolation, никогда не NaN/Inf

ФОРМУЛЫ:
    P(collision) = 1 - Π_{i=0}^{n-1} (k - i) / k
    P(collision) ≈ 1 - exp(-n(n-1) / (2k))
"""

import math
from decimal import Decimal, DecimalException, localcontext
from enum import Enum
from typing import Final, NamedTuple

from src.core.math.numerical_safeguards import (
    DECIMAL_PRECISION_DEFAULT,
    DECIMAL_PRECISION_MAX,
    DECIMAL_PRECISION_MIN,
    EXACT_CUTOFF_DEFAULT,
    PROBABILITY_ONE,
    clamp_probability,
    decimal_context,
    validate_int_in_range,
    validate_positive_int,
)

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Вероятность при гарантированной коллизии (pigeonhole)
PIGEONHOLE_PROBABILITY: Final[Decimal] = PROBABILITY_ONE


# =============================================================================
# EXCEPTIONS
# =============================================================================


class CollisionDomainViolation(Exception):
    """
    Нарушение domain для расчёта вероятности коллизии.

    Базовый класс; граница estimator переводит его в типизированный результат.
    """
    pass


class InvalidCollisionInput(CollisionDomainViolation):
    """
    Невалидный вход: не целое, <= 0, пустое значение или precision вне
    [DECIMAL_PRECISION_MIN, DECIMAL_PRECISION_MAX].
    """
    pass


class CollisionInputOverflow(CollisionDomainViolation):
    """
    Вход не представим на стадии парсинга/резолва (слишком длинная строка
    цифр, слишком большая битность) или переполнение в float режиме.
    """
    pass


# =============================================================================
# ENUMS
# =============================================================================


class ArithmeticMode(str, Enum):
    """Режим арифметики"""

    DECIMAL = "decimal"
    FLOAT = "float"


class EstimationPath(str, Enum):
    """Путь вычисления вероятности"""

    PIGEONHOLE = "pigeonhole"
    EXACT = "exact"
    APPROXIMATE = "approximate"


class CollisionEstimate(NamedTuple):
    """
    Результат расчёта вероятности коллизии.
    """
    value: Decimal  # P(collision) в [0, 1]
    exact: bool  # False только для approximate пути
    path: EstimationPath  # Выбранный путь вычисления


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_collision_inputs(
    bucket_count: int,
    hash_count: int,
    exact_cutoff: int = EXACT_CUTOFF_DEFAULT,
    precision: int = DECIMAL_PRECISION_DEFAULT,
) -> None:
    """
    Проверка preconditions расчёта.

    Raises:
        InvalidCollisionInput: если любое значение вне domain
    """
    try:
        validate_positive_int(bucket_count, "bucket_count")
        validate_positive_int(hash_count, "hash_count")
        validate_positive_int(exact_cutoff, "exact_cutoff")
        validate_int_in_range(
            precision,
            "decimal_precision",
            min_value=DECIMAL_PRECISION_MIN,
            max_value=DECIMAL_PRECISION_MAX,
        )
    except ValueError as e:
        raise InvalidCollisionInput(str(e)) from e


def is_pigeonhole_collision(bucket_count: int, hash_count: int) -> bool:
    """
    Коллизия гарантирована только если хешей строго больше, чем buckets.

    Examples:
        >>> is_pigeonhole_collision(10, 11)
        True
        >>> is_pigeonhole_collision(10, 10)
        False
    """
    return hash_count > bucket_count


def select_path(bucket_count: int, hash_count: int, exact_cutoff: int) -> EstimationPath:
    """
    Выбор пути вычисления.

    Examples:
        >>> select_path(10, 11, 10_000)
        <EstimationPath.PIGEONHOLE: 'pigeonhole'>
        >>> select_path(365, 23, 23)
        <EstimationPath.EXACT: 'exact'>
        >>> select_path(2**64, 10_001, 10_000)
        <EstimationPath.APPROXIMATE: 'approximate'>
    """
    if is_pigeonhole_collision(bucket_count, hash_count):
        return EstimationPath.PIGEONHOLE

    if hash_count <= exact_cutoff:
        return EstimationPath.EXACT

    return EstimationPath.APPROXIMATE


# =============================================================================
# DECIMAL ПУТИ
# =============================================================================


def exact_no_collision_probability(
    bucket_count: int,
    hash_count: int,
    precision: int = DECIMAL_PRECISION_DEFAULT,
) -> Decimal:
    """
    Точная вероятность отсутствия коллизий: Π_{i=0}^{n-1} (k - i) / k.

    Каждый множитель вычисляется как decimal-деление с точностью precision
    и только затем умножается в накопленное произведение.

    Args:
        bucket_count: k, количество buckets (>= 1)
        hash_count: n, количество хешей (1 <= n <= k)
        precision: значащие цифры decimal

    Returns:
        P(no collision) в [0, 1]

    Examples:
        >>> exact_no_collision_probability(365, 1)
        Decimal('1')
        >>> exact_no_collision_probability(2, 2, precision=10)
        Decimal('0.5')
    """
    with localcontext(decimal_context(precision)):
        k = Decimal(bucket_count)
        product = PROBABILITY_ONE
        for i in range(hash_count):
            term = Decimal(bucket_count - i) / k
            product *= term
        return product


def approx_no_collision_probability(
    bucket_count: int,
    hash_count: int,
    precision: int = DECIMAL_PRECISION_DEFAULT,
) -> Decimal:
    """
    Приближённая вероятность отсутствия коллизий: exp(-n(n-1) / 2k).

    Умножение, деление и exp выполняются с точностью precision.
    Для огромного показателя exp underflow даёт 0.

    Args:
        bucket_count: k, количество buckets (>= 1)
        hash_count: n, количество хешей (>= 1)
        precision: значащие цифры decimal

    Returns:
        P(no collision) в [0, 1]
    """
    with localcontext(decimal_context(precision)):
        n = Decimal(hash_count)
        k = Decimal(bucket_count)
        exponent = -(n * (n - 1)) / (2 * k)
        return exponent.exp()


# =============================================================================
# FLOAT ПУТИ (degraded режим)
# =============================================================================


def exact_no_collision_probability_float(bucket_count: int, hash_count: int) -> float:
    """
    Exact путь в native float. Потеря точности при больших k и n.

    Raises:
        CollisionInputOverflow: если k не представим как float
    """
    try:
        k = float(bucket_count)
        product = 1.0
        for i in range(hash_count):
            product *= float(bucket_count - i) / k
    except OverflowError as e:
        raise CollisionInputOverflow(
            f"bucket_count does not fit native float range: {e}"
        ) from e
    return product


def approx_no_collision_probability_float(bucket_count: int, hash_count: int) -> float:
    """
    Approximate путь в native float.

    Raises:
        CollisionInputOverflow: если k или n(n-1) не представимы как float
    """
    try:
        k = float(bucket_count)
        n = float(hash_count)
        return math.exp(-n * (n - 1.0) / (2.0 * k))
    except OverflowError as e:
        raise CollisionInputOverflow(
            f"Collision inputs do not fit native float range: {e}"
        ) from e


# =============================================================================
# COLLISION PROBABILITY
# =============================================================================


def collision_probability(
    bucket_count: int,
    hash_count: int,
    exact_cutoff: int = EXACT_CUTOFF_DEFAULT,
    precision: int = DECIMAL_PRECISION_DEFAULT,
    arithmetic: ArithmeticMode = ArithmeticMode.DECIMAL,
) -> CollisionEstimate:
    """
    Вероятность хотя бы одной коллизии при hash_count хешах в bucket_count buckets.

    Порядок:
    1. hash_count > bucket_count → 1 (exact)
    2. hash_count <= exact_cutoff → 1 - Π (k - i)/k (exact)
    3. иначе → 1 - exp(-n(n-1)/2k) (approximate)

    Args:
        bucket_count: k, количество возможных значений хеша
        hash_count: n, количество хешей
        exact_cutoff: максимальное n для exact пути (включительно)
        precision: значащие цифры decimal
        arithmetic: DECIMAL (по умолчанию) или FLOAT (degraded)

    Returns:
        CollisionEstimate(value, exact, path)

    Raises:
        InvalidCollisionInput: нарушены preconditions
        CollisionInputOverflow: переполнение (float режим)

    Examples:
        >>> collision_probability(10, 11)
        CollisionEstimate(value=Decimal('1'), exact=True, path=<EstimationPath.PIGEONHOLE: 'pigeonhole'>)
        >>> collision_probability(365, 1).value
        Decimal('0')
    """
    validate_collision_inputs(bucket_count, hash_count, exact_cutoff, precision)

    path = select_path(bucket_count, hash_count, exact_cutoff)

    if path == EstimationPath.PIGEONHOLE:
        return CollisionEstimate(value=PIGEONHOLE_PROBABILITY, exact=True, path=path)

    if arithmetic == ArithmeticMode.FLOAT:
        if path == EstimationPath.EXACT:
            p_no_collision = exact_no_collision_probability_float(bucket_count, hash_count)
        else:
            p_no_collision = approx_no_collision_probability_float(bucket_count, hash_count)
        # Decimal(float) хранит точное двоичное значение без округления
        value = clamp_probability(Decimal(1.0 - p_no_collision))
        return CollisionEstimate(value=value, exact=path == EstimationPath.EXACT, path=path)

    try:
        if path == EstimationPath.EXACT:
            p_no_collision = exact_no_collision_probability(bucket_count, hash_count, precision)
        else:
            p_no_collision = approx_no_collision_probability(bucket_count, hash_count, precision)

        with localcontext(decimal_context(precision)):
            value = PROBABILITY_ONE - p_no_collision
    except DecimalException as e:
        raise CollisionInputOverflow(
            f"Decimal arithmetic failed for bucket_count bit_length="
            f"{bucket_count.bit_length()}, hash_count bit_length={hash_count.bit_length()}: "
            f"{type(e).__name__}"
        ) from e

    return CollisionEstimate(
        value=clamp_probability(value),
        exact=path == EstimationPath.EXACT,
        path=path,
    )
