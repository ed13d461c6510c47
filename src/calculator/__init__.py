"""Calculator — headless адаптер формы калькулятора коллизий.

Держит состояние полей ввода и панели настроек, вызывает CollisionEstimator
на каждое изменение и упорядочивает результаты по sequence (last-write-wins).
"""

from .session import (
    CalculationSnapshot,
    CalculatorDefaults,
    CollisionCalculator,
    CopyTarget,
    FieldState,
)

__all__ = [
    "CalculationSnapshot",
    "CalculatorDefaults",
    "CollisionCalculator",
    "CopyTarget",
    "FieldState",
]
