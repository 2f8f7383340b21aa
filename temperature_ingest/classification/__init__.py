"""Módulo de clasificación de lecturas de temperatura.

Estructura:
- models.py: Constantes de tolerancia, ReadingStatus, Direction, Evaluation
- evaluator.py: Función pura `evaluate`
"""

from .models import (
    BREACH_TOLERANCE,
    FALLBACK_RANGE,
    WARNING_TOLERANCE,
    Direction,
    Evaluation,
    ReadingStatus,
)
from .evaluator import evaluate

__all__ = [
    "evaluate",
    "Evaluation",
    "ReadingStatus",
    "Direction",
    "WARNING_TOLERANCE",
    "BREACH_TOLERANCE",
    "FALLBACK_RANGE",
]
