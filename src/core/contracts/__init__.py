"""
Contract Validation Module

Модуль для валидации JSON контрактов на границе калькулятора с UI.
"""

from .validators import (
    CalculationRequestValidator,
    ContractValidator,
    ProbabilityResultValidator,
    SchemaLoader,
    default_schema_loader,
    validate_calculation_request,
    validate_probability_result,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CalculationRequestValidator",
    "ProbabilityResultValidator",
    # Functions
    "default_schema_loader",
    "validate_calculation_request",
    "validate_probability_result",
]
