"""Тесты для CollisionCalculator — headless состояние формы.

Проверяет:
- Начальное состояние и результат по умолчанию
- Очистку ввода и переключение режимов bits/count
- Панель настроек (precision, exact cutoff)
- "Нет результата" вместо exception
- Упорядочивание snapshot (last-write-wins)
- Строки для копирования в clipboard
"""

import pytest

from src.calculator import (
    CalculatorDefaults,
    CollisionCalculator,
    CopyTarget,
    FieldState,
)
from src.core.domain import SpecMode
from src.core.math.collision import ArithmeticMode
from src.estimator import DomainErrorKind


@pytest.fixture
def calculator():
    return CollisionCalculator()


@pytest.fixture
def birthday_calculator():
    """365 buckets (count), 23 хеша."""
    return CollisionCalculator(
        defaults=CalculatorDefaults(
            bucket_mode=SpecMode.COUNT,
            bucket_text="365",
            hashes_mode=SpecMode.COUNT,
            hashes_text="23",
        )
    )


# =============================================================================
# ТЕСТЫ: Начальное состояние
# =============================================================================


class TestInitialState:
    """Тесты состояния по умолчанию."""

    def test_defaults(self, calculator):
        assert calculator.bucket == FieldState(SpecMode.BITS, "64")
        assert calculator.hashes == FieldState(SpecMode.COUNT, "1000000")
        assert calculator.precision_text == "100"
        assert calculator.cutoff_text == "10000"
        assert calculator.settings_open is False

    def test_default_result(self, calculator):
        """64 бита, 10^6 хешей → approximate, экспоненциальная запись."""
        assert calculator.current.sequence == 1
        assert calculator.display.marker == "≈ "
        assert calculator.display.text == "2.710503e-8"

    def test_birthday_defaults(self, birthday_calculator):
        assert birthday_calculator.display.rendered == "= 50.7297234324%"


# =============================================================================
# ТЕСТЫ: Поля ввода
# =============================================================================


class TestFieldInput:
    """Тесты изменения полей."""

    def test_text_sanitized(self, calculator):
        calculator.set_bucket_text("00a12")
        assert calculator.bucket.raw_text == "12"

        calculator.set_hashes_text("1,000")
        assert calculator.hashes.raw_text == "1000"

    def test_empty_field_no_result(self, calculator):
        snapshot = calculator.set_bucket_text("")
        assert calculator.display is None
        assert snapshot.outcome.error == DomainErrorKind.INVALID_INPUT

    def test_zero_field_no_result(self, calculator):
        calculator.set_hashes_text("000")
        assert calculator.hashes.raw_text == "0"
        assert calculator.display is None

    def test_recovers_after_invalid_input(self, calculator):
        calculator.set_bucket_text("")
        calculator.set_bucket_text("64")
        assert calculator.display.text == "2.710503e-8"

    def test_toggle_bucket_mode(self, calculator):
        """64 в режиме count → 64 buckets, 10^6 хешей → pigeonhole."""
        calculator.toggle_bucket_mode()
        assert calculator.bucket.mode == SpecMode.COUNT
        assert calculator.display.rendered == "= 100%"

        calculator.toggle_bucket_mode()
        assert calculator.bucket.mode == SpecMode.BITS
        assert calculator.display.text == "2.710503e-8"

    def test_toggle_hashes_mode(self, birthday_calculator):
        """23 бита хешей в 365 buckets → pigeonhole."""
        birthday_calculator.toggle_hashes_mode()
        assert birthday_calculator.hashes.mode == SpecMode.BITS
        assert birthday_calculator.display.text == "100%"

    def test_huge_hashes_in_bits_mode(self, calculator):
        """2^20000 хешей в 2^65536 buckets: результат, а не exception."""
        calculator.toggle_hashes_mode()
        calculator.set_bucket_text("65536")
        snapshot = calculator.set_hashes_text("20000")

        assert snapshot.outcome.ok is True
        assert calculator.display.rendered == "≈ 0%"

        calculator.set_hashes_text("65536")
        assert calculator.display.rendered == "≈ 100%"

    def test_bits_overflow_no_result(self, calculator):
        snapshot = calculator.set_bucket_text("70000")
        assert calculator.display is None
        assert snapshot.outcome.error == DomainErrorKind.OVERFLOW


# =============================================================================
# ТЕСТЫ: Настройки
# =============================================================================


class TestSettings:
    """Тесты панели настроек."""

    def test_toggle_settings_does_not_recalculate(self, calculator):
        sequence = calculator.current.sequence
        assert calculator.toggle_settings() is True
        assert calculator.settings_open is True
        assert calculator.toggle_settings() is False
        assert calculator.current.sequence == sequence

    def test_cutoff_switches_path(self, birthday_calculator):
        birthday_calculator.set_cutoff_text("22")
        assert birthday_calculator.display.marker == "≈ "
        assert birthday_calculator.current.policy.exact_cutoff == 22

        birthday_calculator.set_cutoff_text("23")
        assert birthday_calculator.display.marker == "= "

    @pytest.mark.parametrize("precision_text", ["", "0", "10000"])
    def test_invalid_precision_no_result(self, birthday_calculator, precision_text):
        snapshot = birthday_calculator.set_precision_text(precision_text)
        assert birthday_calculator.display is None
        assert snapshot.policy is None
        assert snapshot.outcome.error == DomainErrorKind.INVALID_INPUT

    def test_precision_applied(self, birthday_calculator):
        birthday_calculator.set_precision_text("3")
        assert birthday_calculator.current.policy.decimal_precision == 3
        assert birthday_calculator.display.marker == "= "
        assert birthday_calculator.display.text != "50.7297234324%"

    def test_empty_cutoff_no_result(self, birthday_calculator):
        birthday_calculator.set_cutoff_text("")
        assert birthday_calculator.display is None

    def test_float_arithmetic(self, birthday_calculator):
        birthday_calculator.set_arithmetic(ArithmeticMode.FLOAT)
        assert birthday_calculator.current.policy.arithmetic == ArithmeticMode.FLOAT
        assert birthday_calculator.display.text.startswith("50.72972343")


# =============================================================================
# ТЕСТЫ: Упорядочивание результатов
# =============================================================================


class TestSnapshotOrdering:
    """Last-write-wins по sequence."""

    def test_sequence_monotonic(self, calculator):
        first = calculator.compute()
        second = calculator.compute()
        assert second.sequence > first.sequence > 1

    def test_stale_snapshot_dropped(self, calculator):
        calculator.set_hashes_text("1")
        stale = calculator.compute()

        calculator.set_hashes_text("2")
        fresh = calculator.compute()

        assert calculator.accept(fresh) is True
        assert calculator.accept(stale) is False
        assert calculator.current is fresh
        assert calculator.current.hashes.raw_text == "2"

    def test_out_of_order_completion(self, birthday_calculator):
        """Более поздний расчёт, завершившийся первым, не перезаписывается старым."""
        older = birthday_calculator.compute()
        newer = birthday_calculator.compute()

        assert birthday_calculator.accept(newer) is True
        assert birthday_calculator.accept(older) is False

    def test_same_snapshot_not_reapplied(self, calculator):
        snapshot = calculator.compute()
        assert calculator.accept(snapshot) is True
        assert calculator.accept(snapshot) is False


# =============================================================================
# ТЕСТЫ: Clipboard
# =============================================================================


class TestCopyText:
    """Строки для копирования."""

    def test_copy_inputs(self, calculator):
        assert calculator.copy_text(CopyTarget.BUCKET) == "64"
        assert calculator.copy_text(CopyTarget.HASHES) == "1000000"

    def test_copy_output(self, birthday_calculator):
        assert birthday_calculator.copy_text(CopyTarget.OUTPUT) == "50.7297234324%"

    def test_copy_output_without_result(self, calculator):
        calculator.set_bucket_text("")
        assert calculator.copy_text(CopyTarget.OUTPUT) == ""
