"""
JSON Schema Contract Validators

Payloads на границе калькулятора с UI проверяются против JSON Schema
контрактов из contracts/schema/ (Draft 2020-12, библиотека jsonschema).

Схемы:
- calculation_request.json: два поля ввода + numeric policy
- probability_result.json: значение, exact, путь, маркер и отображение

validate() выбрасывает наиболее релевантную ошибку (jsonschema best_match),
error_messages() возвращает все нарушения с JSON path для отчёта.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

# contracts/schema/ в корне проекта: src/core/contracts/validators.py → parents[3]
DEFAULT_SCHEMA_DIR: Path = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик и кэш JSON Schema файлов.

    Каждая схема проходит meta-validation при первой загрузке.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка схемы по имени без расширения.

        Raises:
            FileNotFoundError: файл схемы не найден
            ValueError: схема не проходит meta-validation
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


@lru_cache(maxsize=1)
def default_schema_loader() -> SchemaLoader:
    """Общий загрузчик для contracts/schema/ проекта."""
    return SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта."""

    schema_name: str = ""

    def __init__(self, loader: SchemaLoader | None = None):
        loader = loader or default_schema_loader()
        self.schema = loader.load_schema(self.schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: наиболее релевантное нарушение контракта
        """
        error = best_match(self.validator.iter_errors(data))
        if error is not None:
            raise error

    def error_messages(self, data: Dict[str, Any]) -> List[str]:
        """
        Все нарушения контракта в виде "<json path>: <message>".

        Пустой список → payload валиден.
        """
        errors = sorted(self.validator.iter_errors(data), key=lambda e: e.json_path)
        return [f"{e.json_path}: {e.message}" for e in errors]


class CalculationRequestValidator(ContractValidator):
    schema_name = "calculation_request"


class ProbabilityResultValidator(ContractValidator):
    schema_name = "probability_result"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_calculation_request(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: payload не соответствует calculation_request
    """
    CalculationRequestValidator().validate(data)


def validate_probability_result(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: payload не соответствует probability_result
    """
    ProbabilityResultValidator().validate(data)
