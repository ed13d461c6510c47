"""Calculator Session — headless состояние формы калькулятора коллизий.

Держит текущее состояние полей (buckets, хеши), режимы bits/count,
панель настроек (precision, exact cutoff) и последний отображаемый результат.
Любое изменение поля → очистка ввода → новый расчёт через CollisionEstimator.

Упорядочивание результатов:
- Каждый расчёт получает монотонно растущий sequence
- accept() применяет snapshot только если он новее отображаемого
  (last-write-wins, устаревшие расчёты отбрасываются)

Clipboard не трогается: copy_text() возвращает строку для копирования.
"""

import itertools
import logging
from dataclasses import dataclass, replace
from enum import Enum

from pydantic import ValidationError

from src.core.domain.inputs import SpecMode, parse_positive_int, sanitize_numeric_input
from src.core.domain.specs import NumericPolicy
from src.core.math.collision import (
    ArithmeticMode,
    CollisionInputOverflow,
    InvalidCollisionInput,
)
from src.core.math.formatting import ProbabilityDisplay
from src.estimator.collision_estimator import (
    CollisionEstimator,
    DomainErrorKind,
    EstimationOutcome,
)

logger = logging.getLogger(__name__)


class CopyTarget(str, Enum):
    """Что копировать в clipboard"""

    BUCKET = "bucket"
    HASHES = "hashes"
    OUTPUT = "output"


@dataclass(frozen=True)
class FieldState:
    """Состояние поля ввода: режим и очищенный текст."""

    mode: SpecMode
    raw_text: str


@dataclass(frozen=True)
class CalculatorDefaults:
    """Начальное состояние формы."""

    bucket_mode: SpecMode = SpecMode.BITS
    bucket_text: str = "64"
    hashes_mode: SpecMode = SpecMode.COUNT
    hashes_text: str = "1000000"
    precision_text: str = "100"
    cutoff_text: str = "10000"
    arithmetic: ArithmeticMode = ArithmeticMode.DECIMAL


@dataclass(frozen=True)
class CalculationSnapshot:
    """Результат одного расчёта, привязанный к входам и sequence."""

    sequence: int
    bucket: FieldState
    hashes: FieldState
    policy: NumericPolicy | None
    outcome: EstimationOutcome

    @property
    def display(self) -> ProbabilityDisplay | None:
        return self.outcome.display


class CollisionCalculator:
    """Headless калькулятор вероятности коллизий.

    Поля:
    - bucket: количество buckets (bits → 2**value, count → value)
    - hashes: количество хешей
    - precision_text / cutoff_text: панель настроек

    Ошибки ввода не выбрасываются: отображаемый результат становится None.
    """

    def __init__(
        self,
        estimator: CollisionEstimator | None = None,
        defaults: CalculatorDefaults | None = None,
    ):
        """
        Args:
            estimator: estimator (опционально, используется default)
            defaults: начальное состояние формы (опционально)
        """
        self.estimator = estimator or CollisionEstimator()
        defaults = defaults or CalculatorDefaults()

        self._bucket = FieldState(defaults.bucket_mode, sanitize_numeric_input(defaults.bucket_text))
        self._hashes = FieldState(defaults.hashes_mode, sanitize_numeric_input(defaults.hashes_text))
        self._precision_text = sanitize_numeric_input(defaults.precision_text)
        self._cutoff_text = sanitize_numeric_input(defaults.cutoff_text)
        self._arithmetic = defaults.arithmetic
        self._settings_open = False

        self._sequence = itertools.count(1)
        self._current: CalculationSnapshot | None = None

        self.recalculate()

    # -------------------------------------------------------------------------
    # Состояние
    # -------------------------------------------------------------------------

    @property
    def bucket(self) -> FieldState:
        return self._bucket

    @property
    def hashes(self) -> FieldState:
        return self._hashes

    @property
    def precision_text(self) -> str:
        return self._precision_text

    @property
    def cutoff_text(self) -> str:
        return self._cutoff_text

    @property
    def settings_open(self) -> bool:
        return self._settings_open

    @property
    def current(self) -> CalculationSnapshot | None:
        """Последний применённый snapshot."""
        return self._current

    @property
    def display(self) -> ProbabilityDisplay | None:
        """Отображаемый результат или None ("нет результата")."""
        if self._current is None:
            return None
        return self._current.display

    # -------------------------------------------------------------------------
    # Изменения полей
    # -------------------------------------------------------------------------

    def set_bucket_text(self, raw_text: str) -> CalculationSnapshot:
        self._bucket = replace(self._bucket, raw_text=sanitize_numeric_input(raw_text))
        return self.recalculate()

    def set_hashes_text(self, raw_text: str) -> CalculationSnapshot:
        self._hashes = replace(self._hashes, raw_text=sanitize_numeric_input(raw_text))
        return self.recalculate()

    def toggle_bucket_mode(self) -> CalculationSnapshot:
        self._bucket = replace(self._bucket, mode=self._bucket.mode.toggled())
        return self.recalculate()

    def toggle_hashes_mode(self) -> CalculationSnapshot:
        self._hashes = replace(self._hashes, mode=self._hashes.mode.toggled())
        return self.recalculate()

    def set_precision_text(self, raw_text: str) -> CalculationSnapshot:
        self._precision_text = sanitize_numeric_input(raw_text)
        return self.recalculate()

    def set_cutoff_text(self, raw_text: str) -> CalculationSnapshot:
        self._cutoff_text = sanitize_numeric_input(raw_text)
        return self.recalculate()

    def set_arithmetic(self, arithmetic: ArithmeticMode) -> CalculationSnapshot:
        self._arithmetic = arithmetic
        return self.recalculate()

    def toggle_settings(self) -> bool:
        """Открыть/закрыть панель настроек. Расчёт не запускается."""
        self._settings_open = not self._settings_open
        return self._settings_open

    # -------------------------------------------------------------------------
    # Расчёт
    # -------------------------------------------------------------------------

    def compute(self) -> CalculationSnapshot:
        """Расчёт по текущему состоянию без применения.

        Snapshot можно вычислить вне UI-потока и затем передать в accept().
        """
        sequence = next(self._sequence)
        bucket = self._bucket
        hashes = self._hashes

        try:
            policy = self._build_policy()
        except InvalidCollisionInput as e:
            return self._unavailable(sequence, bucket, hashes, DomainErrorKind.INVALID_INPUT, str(e))
        except CollisionInputOverflow as e:
            return self._unavailable(sequence, bucket, hashes, DomainErrorKind.OVERFLOW, str(e))
        except ValidationError as e:
            return self._unavailable(
                sequence, bucket, hashes, DomainErrorKind.INVALID_INPUT, f"policy validation failed: {e}"
            )

        outcome = self.estimator.estimate_text(
            bucket.mode, bucket.raw_text, hashes.mode, hashes.raw_text, policy
        )
        return CalculationSnapshot(
            sequence=sequence, bucket=bucket, hashes=hashes, policy=policy, outcome=outcome
        )

    def accept(self, snapshot: CalculationSnapshot) -> bool:
        """Применить snapshot, если он новее отображаемого.

        Returns:
            True если snapshot применён, False если устарел
        """
        if self._current is not None and snapshot.sequence <= self._current.sequence:
            logger.debug(
                "Stale snapshot dropped: sequence=%d, current=%d",
                snapshot.sequence,
                self._current.sequence,
            )
            return False

        self._current = snapshot
        return True

    def recalculate(self) -> CalculationSnapshot:
        """Расчёт и немедленное применение."""
        snapshot = self.compute()
        self.accept(snapshot)
        return snapshot

    # -------------------------------------------------------------------------
    # Clipboard
    # -------------------------------------------------------------------------

    def copy_text(self, target: CopyTarget) -> str:
        """Строка для копирования в clipboard.

        OUTPUT без результата → пустая строка.
        """
        if target == CopyTarget.BUCKET:
            return self._bucket.raw_text
        if target == CopyTarget.HASHES:
            return self._hashes.raw_text

        display = self.display
        return display.text if display is not None else ""

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _build_policy(self) -> NumericPolicy:
        precision = parse_positive_int(self._precision_text, "decimal_precision")
        cutoff = parse_positive_int(self._cutoff_text, "exact_cutoff")
        return NumericPolicy(
            exact_cutoff=cutoff,
            decimal_precision=precision,
            arithmetic=self._arithmetic,
        )

    def _unavailable(
        self,
        sequence: int,
        bucket: FieldState,
        hashes: FieldState,
        kind: DomainErrorKind,
        reason: str,
    ) -> CalculationSnapshot:
        logger.info(f"Settings rejected: {kind.value}: {reason}")
        outcome = EstimationOutcome(
            ok=False,
            result=None,
            error=kind,
            error_reason=reason,
            details=f"error={kind.value}",
        )
        return CalculationSnapshot(
            sequence=sequence, bucket=bucket, hashes=hashes, policy=None, outcome=outcome
        )
