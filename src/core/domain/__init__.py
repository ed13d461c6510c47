"""
Domain models and value objects.

Contains the calculation inputs (BucketSpec, HashSpec, NumericPolicy),
the ProbabilityResult value object and the input-normalization contract.
"""

from src.core.domain.inputs import (
    MAX_BIT_LENGTH,
    MAX_INPUT_DIGITS,
    SpecMode,
    parse_positive_int,
    resolve_count,
    sanitize_numeric_input,
)
from src.core.domain.specs import (
    BucketSpec,
    CountSpec,
    HashSpec,
    NumericPolicy,
    ProbabilityResult,
)

__all__ = [
    # Inputs module
    "MAX_BIT_LENGTH",
    "MAX_INPUT_DIGITS",
    "SpecMode",
    "parse_positive_int",
    "resolve_count",
    "sanitize_numeric_input",
    # Specs
    "CountSpec",
    "BucketSpec",
    "HashSpec",
    "NumericPolicy",
    "ProbabilityResult",
]
