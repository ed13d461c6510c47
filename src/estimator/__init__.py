"""Estimator — типизированная граница расчёта вероятности коллизий.

Переводит исключения core math в EstimationOutcome:
- InvalidInput: невалидные, пустые или нулевые входы, precision вне [1, 9999]
- Overflow: вход не представим стадией парсинга/резолва
"""

from .collision_estimator import (
    CollisionEstimator,
    DomainErrorKind,
    EstimationOutcome,
    EstimatorConfig,
    estimate,
    estimate_from_specs,
)

__all__ = [
    "CollisionEstimator",
    "DomainErrorKind",
    "EstimationOutcome",
    "EstimatorConfig",
    "estimate",
    "estimate_from_specs",
]
