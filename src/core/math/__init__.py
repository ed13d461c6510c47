"""
Core math modules для расчёта вероятности коллизий

Математические примитивы и численные алгоритмы с гарантией стабильности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Precision constants
    DECIMAL_PRECISION_DEFAULT,
    DECIMAL_PRECISION_MAX,
    DECIMAL_PRECISION_MIN,
    EXACT_CUTOFF_DEFAULT,
    PROBABILITY_ONE,
    PROBABILITY_ZERO,
    # Decimal context
    decimal_context,
    # Validation
    is_strict_int,
    validate_int_in_range,
    validate_positive_int,
    # Probabilities
    clamp_probability,
    is_valid_decimal,
    relative_difference,
)

# Collision probability
from src.core.math.collision import (
    PIGEONHOLE_PROBABILITY,
    ArithmeticMode,
    CollisionDomainViolation,
    CollisionEstimate,
    CollisionInputOverflow,
    EstimationPath,
    InvalidCollisionInput,
    approx_no_collision_probability,
    approx_no_collision_probability_float,
    collision_probability,
    exact_no_collision_probability,
    exact_no_collision_probability_float,
    is_pigeonhole_collision,
    select_path,
    validate_collision_inputs,
)

# Formatting
from src.core.math.formatting import (
    APPROXIMATE_MARKER,
    EXACT_MARKER,
    EXPONENTIAL_THRESHOLD,
    ProbabilityDisplay,
    format_probability,
    format_probability_text,
    precision_marker,
)

__all__ = [
    # Numerical Safeguards — Precision constants
    "DECIMAL_PRECISION_DEFAULT",
    "DECIMAL_PRECISION_MAX",
    "DECIMAL_PRECISION_MIN",
    "EXACT_CUTOFF_DEFAULT",
    "PROBABILITY_ONE",
    "PROBABILITY_ZERO",
    # Numerical Safeguards — Decimal context
    "decimal_context",
    # Numerical Safeguards — Validation
    "is_strict_int",
    "validate_int_in_range",
    "validate_positive_int",
    # Numerical Safeguards — Probabilities
    "clamp_probability",
    "is_valid_decimal",
    "relative_difference",
    # Collision
    "PIGEONHOLE_PROBABILITY",
    "ArithmeticMode",
    "CollisionDomainViolation",
    "CollisionEstimate",
    "CollisionInputOverflow",
    "EstimationPath",
    "InvalidCollisionInput",
    "approx_no_collision_probability",
    "approx_no_collision_probability_float",
    "collision_probability",
    "exact_no_collision_probability",
    "exact_no_collision_probability_float",
    "is_pigeonhole_collision",
    "select_path",
    "validate_collision_inputs",
    # Formatting
    "APPROXIMATE_MARKER",
    "EXACT_MARKER",
    "EXPONENTIAL_THRESHOLD",
    "ProbabilityDisplay",
    "format_probability",
    "format_probability_text",
    "precision_marker",
]
