"""Collision Estimator — граница расчёта с типизированным результатом

Принимает количество buckets и хешей (или сырые поля ввода / JSON payload)
и NumericPolicy, возвращает EstimationOutcome:
- ok=True: ProbabilityResult {value, exact, path}
- ok=False: DomainErrorKind (InvalidInput / Overflow) + причина

Исключения core math (CollisionDomainViolation) и ошибки валидации
(pydantic / jsonschema) не выходят за пределы этого модуля: UI получает
"нет результата", а не exception.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from pydantic import ValidationError

from src.core.contracts import CalculationRequestValidator
from src.core.domain.inputs import MAX_BIT_LENGTH, MAX_INPUT_DIGITS, SpecMode
from src.core.domain.specs import BucketSpec, HashSpec, NumericPolicy, ProbabilityResult
from src.core.math.collision import (
    CollisionInputOverflow,
    InvalidCollisionInput,
    collision_probability,
)
from src.core.math.formatting import ProbabilityDisplay

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


class DomainErrorKind(str, Enum):
    """Тип ошибки domain"""

    INVALID_INPUT = "InvalidInput"
    OVERFLOW = "Overflow"


@dataclass(frozen=True)
class EstimationOutcome:
    """Результат оценки вероятности коллизии."""

    ok: bool
    result: ProbabilityResult | None
    error: DomainErrorKind | None
    error_reason: str

    # Детали
    details: str

    @property
    def display(self) -> ProbabilityDisplay | None:
        """Отформатированный результат или None ("нет результата")."""
        if self.result is None:
            return None
        return self.result.display()


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class EstimatorConfig:
    """Конфигурация estimator.

    Лимиты стадии парсинга/резолва входов.
    """

    max_input_digits: int = MAX_INPUT_DIGITS
    max_bit_length: int = MAX_BIT_LENGTH


# =============================================================================
# ESTIMATOR
# =============================================================================


class CollisionEstimator:
    """Оценка вероятности коллизии хешей.

    Порядок:
    1. Парсинг и резолв входов (если даны сырые поля)
    2. Проверка preconditions
    3. Выбор пути: pigeonhole → exact (n <= cutoff) → approximate
    4. Упаковка результата или ошибки в EstimationOutcome

    Estimator без состояния: каждый вызов независим и детерминирован.
    """

    def __init__(self, config: EstimatorConfig | None = None):
        """
        Args:
            config: конфигурация estimator (опционально, используется default)
        """
        self.config = config or EstimatorConfig()

    def estimate(
        self,
        bucket_count: int,
        hash_count: int,
        policy: NumericPolicy | None = None,
    ) -> EstimationOutcome:
        """Оценка по уже резолвленным количествам.

        Args:
            bucket_count: количество buckets (>= 1)
            hash_count: количество хешей (>= 1)
            policy: численная стратегия (опционально, используется default)

        Returns:
            EstimationOutcome
        """
        policy = policy or NumericPolicy()

        try:
            estimate = collision_probability(
                bucket_count,
                hash_count,
                exact_cutoff=policy.exact_cutoff,
                precision=policy.decimal_precision,
                arithmetic=policy.arithmetic,
            )
        except InvalidCollisionInput as e:
            return self._failed(DomainErrorKind.INVALID_INPUT, str(e))
        except CollisionInputOverflow as e:
            return self._failed(DomainErrorKind.OVERFLOW, str(e))

        # Количества могут быть длиннее лимита int → str, логируем только битность
        logger.debug(
            "Collision estimate: path=%s, bucket_bits=%d, hash_bits=%d, precision=%d, arithmetic=%s",
            estimate.path.value,
            bucket_count.bit_length(),
            hash_count.bit_length(),
            policy.decimal_precision,
            policy.arithmetic.value,
        )

        result = ProbabilityResult(value=estimate.value, exact=estimate.exact, path=estimate.path)
        return EstimationOutcome(
            ok=True,
            result=result,
            error=None,
            error_reason="",
            details=(
                f"path={estimate.path.value}, exact={estimate.exact}, "
                f"exact_cutoff={policy.exact_cutoff}, precision={policy.decimal_precision}"
            ),
        )

    def estimate_specs(
        self,
        bucket: BucketSpec,
        hashes: HashSpec,
        policy: NumericPolicy | None = None,
    ) -> EstimationOutcome:
        """Оценка по BucketSpec / HashSpec.

        Returns:
            EstimationOutcome (Overflow если битность выше лимита)
        """
        try:
            bucket_count = bucket.resolve(max_bit_length=self.config.max_bit_length)
            hash_count = hashes.resolve(max_bit_length=self.config.max_bit_length)
        except InvalidCollisionInput as e:
            return self._failed(DomainErrorKind.INVALID_INPUT, str(e))
        except CollisionInputOverflow as e:
            return self._failed(DomainErrorKind.OVERFLOW, str(e))

        return self.estimate(bucket_count, hash_count, policy)

    def estimate_text(
        self,
        bucket_mode: SpecMode,
        bucket_text: str,
        hashes_mode: SpecMode,
        hashes_text: str,
        policy: NumericPolicy | None = None,
    ) -> EstimationOutcome:
        """Оценка по очищенному тексту полей ввода.

        Args:
            bucket_mode: режим поля buckets (bits/count)
            bucket_text: текст поля buckets (только цифры)
            hashes_mode: режим поля хешей (bits/count)
            hashes_text: текст поля хешей (только цифры)
            policy: численная стратегия

        Returns:
            EstimationOutcome (InvalidInput для пустого/нулевого поля)
        """
        try:
            bucket = BucketSpec.from_text(
                bucket_mode, bucket_text, max_digits=self.config.max_input_digits
            )
            hashes = HashSpec.from_text(
                hashes_mode, hashes_text, max_digits=self.config.max_input_digits
            )
        except InvalidCollisionInput as e:
            return self._failed(DomainErrorKind.INVALID_INPUT, str(e))
        except CollisionInputOverflow as e:
            return self._failed(DomainErrorKind.OVERFLOW, str(e))
        except ValidationError as e:
            return self._failed(DomainErrorKind.INVALID_INPUT, f"input validation failed: {e}")

        return self.estimate_specs(bucket, hashes, policy)

    def estimate_request(self, request: Dict[str, Any]) -> EstimationOutcome:
        """Оценка по calculation_request payload.

        Payload проверяется против JSON Schema контракта до расчёта.

        Returns:
            EstimationOutcome (InvalidInput если payload не соответствует контракту)
        """
        violations = CalculationRequestValidator().error_messages(request)
        if violations:
            return self._failed(
                DomainErrorKind.INVALID_INPUT,
                f"calculation_request contract: {'; '.join(violations)}",
            )

        try:
            policy = NumericPolicy(**request["policy"])
        except ValidationError as e:
            return self._failed(DomainErrorKind.INVALID_INPUT, f"policy validation failed: {e}")

        return self.estimate_text(
            SpecMode(request["bucket"]["mode"]),
            request["bucket"]["raw_text"],
            SpecMode(request["hashes"]["mode"]),
            request["hashes"]["raw_text"],
            policy,
        )

    def _failed(self, kind: DomainErrorKind, reason: str) -> EstimationOutcome:
        """Создание результата с ошибкой."""
        logger.info(f"Collision estimate unavailable: {kind.value}: {reason}")
        return EstimationOutcome(
            ok=False,
            result=None,
            error=kind,
            error_reason=reason,
            details=f"error={kind.value}",
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


_DEFAULT_ESTIMATOR = CollisionEstimator()


def estimate(
    bucket_count: int,
    hash_count: int,
    policy: NumericPolicy | None = None,
) -> EstimationOutcome:
    """
    Оценка вероятности коллизии с конфигурацией по умолчанию.

    Args:
        bucket_count: количество buckets (>= 1)
        hash_count: количество хешей (>= 1)
        policy: численная стратегия (опционально)

    Returns:
        EstimationOutcome
    """
    return _DEFAULT_ESTIMATOR.estimate(bucket_count, hash_count, policy)


def estimate_from_specs(
    bucket: BucketSpec,
    hashes: HashSpec,
    policy: NumericPolicy | None = None,
) -> EstimationOutcome:
    """
    Оценка по BucketSpec / HashSpec с конфигурацией по умолчанию.
    """
    return _DEFAULT_ESTIMATOR.estimate_specs(bucket, hashes, policy)
