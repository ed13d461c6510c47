"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов и constraints (min/max/enum/pattern)
- Интеграция с Pydantic моделями
"""

import copy
import json
from decimal import Decimal

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    CalculationRequestValidator,
    ProbabilityResultValidator,
    SchemaLoader,
    default_schema_loader,
    validate_calculation_request,
    validate_probability_result,
)
from src.core.domain import ProbabilityResult
from src.core.math.collision import EstimationPath, collision_probability


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_request():
    """Валидный calculation_request для тестирования."""
    return {
        "schema_version": "1",
        "bucket": {"mode": "bits", "raw_text": "64"},
        "hashes": {"mode": "count", "raw_text": "1000000"},
        "policy": {"exact_cutoff": 10000, "decimal_precision": 100, "arithmetic": "decimal"},
    }


# =============================================================================
# TESTS - SCHEMA LOADING
# =============================================================================


def test_schema_loader_loads_all_schemas():
    """Проверка загрузки всех схем."""
    loader = SchemaLoader()

    request_schema = loader.load_schema("calculation_request")
    result_schema = loader.load_schema("probability_result")

    assert request_schema["properties"]["schema_version"]["const"] == "1"
    assert result_schema["properties"]["schema_version"]["const"] == "1"


def test_schema_loader_caches_schemas():
    """Проверка кэширования схем."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("calculation_request")
    schema2 = loader.load_schema("calculation_request")

    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Проверка ошибки при отсутствующей схеме."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_raises_on_missing_directory(tmp_path):
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(tmp_path / "missing")


def test_schema_loader_custom_directory(tmp_path):
    """Схемы можно загружать из другого каталога."""
    (tmp_path / "calculation_request.json").write_text(
        json.dumps({"type": "object", "required": ["bucket"]}), encoding="utf-8"
    )
    loader = SchemaLoader(tmp_path)

    validator = CalculationRequestValidator(loader)
    assert loader.schema_dir == tmp_path
    assert validator.error_messages({"bucket": {}}) == []
    assert validator.error_messages({}) == ["$: 'bucket' is a required property"]


def test_schema_loader_rejects_invalid_schema(tmp_path):
    (tmp_path / "broken.json").write_text(json.dumps({"type": 42}), encoding="utf-8")

    with pytest.raises(ValueError, match="broken.json"):
        SchemaLoader(tmp_path).load_schema("broken")


def test_default_schema_loader_is_shared():
    assert default_schema_loader() is default_schema_loader()


# =============================================================================
# TESTS - CALCULATION REQUEST VALIDATION
# =============================================================================


def test_request_validator_accepts_valid_data(valid_request):
    validator = CalculationRequestValidator()
    validator.validate(valid_request)
    assert validator.error_messages(valid_request) == []


def test_request_validate_function(valid_request):
    validate_calculation_request(valid_request)


def test_request_arithmetic_optional(valid_request):
    data = copy.deepcopy(valid_request)
    del data["policy"]["arithmetic"]
    validate_calculation_request(data)


def test_request_accepts_empty_raw_text(valid_request):
    """Пустое поле — валидный payload; ошибка domain определяется estimator."""
    data = copy.deepcopy(valid_request)
    data["hashes"]["raw_text"] = ""
    validate_calculation_request(data)


def test_request_rejects_missing_required_field(valid_request):
    data = copy.deepcopy(valid_request)
    del data["bucket"]

    with pytest.raises(ValidationError) as exc_info:
        validate_calculation_request(data)
    assert "'bucket' is a required property" in str(exc_info.value)


def test_request_rejects_unknown_mode(valid_request):
    data = copy.deepcopy(valid_request)
    data["bucket"]["mode"] = "bytes"

    with pytest.raises(ValidationError):
        validate_calculation_request(data)


def test_request_rejects_unsanitized_text(valid_request):
    """raw_text должен быть очищен до цифр."""
    data = copy.deepcopy(valid_request)
    data["hashes"]["raw_text"] = "1,000"

    with pytest.raises(ValidationError):
        validate_calculation_request(data)


@pytest.mark.parametrize("precision", [0, 10000, "100"])
def test_request_rejects_bad_precision(valid_request, precision):
    data = copy.deepcopy(valid_request)
    data["policy"]["decimal_precision"] = precision

    with pytest.raises(ValidationError):
        validate_calculation_request(data)


def test_request_rejects_zero_cutoff(valid_request):
    data = copy.deepcopy(valid_request)
    data["policy"]["exact_cutoff"] = 0

    with pytest.raises(ValidationError):
        validate_calculation_request(data)


def test_request_error_messages_report_all_with_path(valid_request):
    data = copy.deepcopy(valid_request)
    data["bucket"]["mode"] = "bytes"
    data["policy"]["exact_cutoff"] = 0

    messages = CalculationRequestValidator().error_messages(data)
    assert len(messages) == 2
    assert messages[0].startswith("$.bucket.mode: ")
    assert messages[1].startswith("$.policy.exact_cutoff: ")


# =============================================================================
# TESTS - PROBABILITY RESULT / PYDANTIC INTEGRATION
# =============================================================================


@pytest.mark.parametrize(
    "bucket_count, hash_count",
    [
        (10, 11),
        (365, 23),
        (2**64, 1_000_000),
        (2**128, 1),
        (10, 10),
    ],
)
def test_probability_result_contract_from_model(bucket_count, hash_count):
    """to_contract() всех путей проходит схему."""
    estimate = collision_probability(bucket_count, hash_count)
    result = ProbabilityResult(value=estimate.value, exact=estimate.exact, path=estimate.path)

    payload = result.to_contract()
    validate_probability_result(payload)
    assert ProbabilityResultValidator().error_messages(payload) == []


def test_probability_result_rejects_marker_in_value():
    """Маркер не может быть частью числового значения."""
    result = ProbabilityResult(value=Decimal("0.5"), exact=False, path=EstimationPath.APPROXIMATE)
    payload = result.to_contract()
    payload["value"] = "≈ 0.5"

    with pytest.raises(ValidationError):
        validate_probability_result(payload)


def test_probability_result_rejects_unknown_path():
    result = ProbabilityResult(value=Decimal("0.5"), exact=True, path=EstimationPath.EXACT)
    payload = result.to_contract()
    payload["path"] = "guess"

    with pytest.raises(ValidationError):
        validate_probability_result(payload)
