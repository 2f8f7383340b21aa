"""Modelos de datos para la evaluación de lecturas de temperatura."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


WARNING_TOLERANCE = 1.0  # °C fuera del rango de trabajo antes de WARNING
BREACH_TOLERANCE = 2.0  # °C fuera del rango de trabajo antes de BREACH
FALLBACK_RANGE = (-2.0, 8.0)  # Límites seguros cuando el asset no tiene rango


class ReadingStatus(str, Enum):
    """Clasificación de una lectura contra los límites del asset."""

    OK = "ok"
    WARNING = "warning"
    BREACH = "breach"


class Direction(str, Enum):
    HIGH = "high"
    LOW = "low"
    WITHIN = "within"


@dataclass(frozen=True)
class Evaluation:
    """Resultado de evaluar una lectura.

    `min`/`max` son los límites configurados que se recibieron (pueden ser
    None aunque se haya usado el rango de respaldo para comparar).
    """

    status: ReadingStatus
    direction: Direction
    reason: str
    min: Optional[float]
    max: Optional[float]
    warning_tolerance: float = WARNING_TOLERANCE
    breach_tolerance: float = BREACH_TOLERANCE

    @property
    def is_breach(self) -> bool:
        return self.status is ReadingStatus.BREACH

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "direction": self.direction.value,
            "reason": self.reason,
            "min": self.min,
            "max": self.max,
            "warningTolerance": self.warning_tolerance,
            "breachTolerance": self.breach_tolerance,
        }
