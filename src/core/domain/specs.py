"""
Specs — Модели входов и результата расчёта коллизий

Immutable Pydantic модели:
- BucketSpec / HashSpec: {mode, value} → количество buckets / хешей
- NumericPolicy: exact_cutoff, decimal_precision, arithmetic
- ProbabilityResult: {value, exact, path} — создаётся заново на каждый расчёт
"""

from decimal import Decimal
from typing import Final

from pydantic import BaseModel, Field

from src.core.domain.inputs import (
    MAX_BIT_LENGTH,
    MAX_INPUT_DIGITS,
    SpecMode,
    parse_positive_int,
    resolve_count,
)
from src.core.math.collision import ArithmeticMode, EstimationPath
from src.core.math.formatting import ProbabilityDisplay, format_probability
from src.core.math.numerical_safeguards import (
    DECIMAL_PRECISION_DEFAULT,
    DECIMAL_PRECISION_MAX,
    DECIMAL_PRECISION_MIN,
    EXACT_CUTOFF_DEFAULT,
)

# Версия probability_result контракта
PROBABILITY_RESULT_SCHEMA_VERSION: Final[str] = "1"


# =============================================================================
# INPUT SPECS
# =============================================================================


class CountSpec(BaseModel):
    """
    Значение поля ввода с режимом интерпретации.

    BITS: количество = 2**value
    COUNT: количество = value
    """

    mode: SpecMode = Field(..., description="Режим интерпретации (bits/count)")
    value: int = Field(..., ge=1, description="Положительное целое из поля ввода")

    model_config = {"frozen": True}

    @classmethod
    def from_text(
        cls,
        mode: SpecMode,
        text: str,
        max_digits: int = MAX_INPUT_DIGITS,
    ):
        """
        Построение spec из очищенного текста поля.

        Raises:
            InvalidCollisionInput: пустой текст или 0
            CollisionInputOverflow: слишком длинная строка цифр
        """
        name = f"{cls.__name__}.value"
        return cls(mode=mode, value=parse_positive_int(text, name, max_digits=max_digits))

    def resolve(self, max_bit_length: int = MAX_BIT_LENGTH) -> int:
        """
        Резолв в количество (>= 1).

        Raises:
            CollisionInputOverflow: битность выше max_bit_length
        """
        return resolve_count(self.mode, self.value, max_bit_length=max_bit_length)


class BucketSpec(CountSpec):
    """Количество возможных значений хеша (buckets)."""


class HashSpec(CountSpec):
    """Количество вычисленных хешей."""


# =============================================================================
# NUMERIC POLICY
# =============================================================================


class NumericPolicy(BaseModel):
    """
    Параметры численной стратегии одного расчёта.

    exact_cutoff: максимальное количество хешей для exact пути (включительно)
    decimal_precision: значащие цифры decimal-арифметики
    arithmetic: DECIMAL (по умолчанию) или FLOAT (degraded)
    """

    exact_cutoff: int = Field(
        EXACT_CUTOFF_DEFAULT, ge=1, description="Граница exact/approximate пути"
    )
    decimal_precision: int = Field(
        DECIMAL_PRECISION_DEFAULT,
        ge=DECIMAL_PRECISION_MIN,
        le=DECIMAL_PRECISION_MAX,
        description="Значащие цифры decimal",
    )
    arithmetic: ArithmeticMode = Field(
        ArithmeticMode.DECIMAL, description="Режим арифметики"
    )

    model_config = {"frozen": True}


# =============================================================================
# RESULT
# =============================================================================


class ProbabilityResult(BaseModel):
    """
    Результат расчёта вероятности коллизии.

    Значение хранится без маркера точности; маркер выводится из exact.
    """

    value: Decimal = Field(..., ge=0, le=1, description="P(collision) в [0, 1]")
    exact: bool = Field(..., description="False только для approximate пути")
    path: EstimationPath = Field(..., description="Путь вычисления")

    model_config = {"frozen": True}

    def display(self) -> ProbabilityDisplay:
        """Отформатированное значение с маркером "= " / "≈ "."""
        return format_probability(self.value, self.exact)

    def to_contract(self) -> dict:
        """
        Payload для probability_result контракта.

        Returns:
            dict, совместимый с contracts/schema/probability_result.json
        """
        display = self.display()
        return {
            "schema_version": PROBABILITY_RESULT_SCHEMA_VERSION,
            "value": str(self.value),
            "exact": self.exact,
            "path": self.path.value,
            "marker": display.marker,
            "text": display.text,
            "display": display.rendered,
        }
