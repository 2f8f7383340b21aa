"""Evaluador de umbrales de temperatura.

Clasifica una lectura contra el rango de trabajo del asset con dos
tolerancias (histéresis):
1. > max + BREACH_TOLERANCE  → BREACH / high
2. < min - BREACH_TOLERANCE  → BREACH / low
3. > max + WARNING_TOLERANCE → WARNING / high
4. < min - WARNING_TOLERANCE → WARNING / low
5. Resto                     → OK / within

Si el asset no tiene límites (ambos None) se compara contra FALLBACK_RANGE
y el texto de `reason` habla de "safe limit". Los consumidores del campo
`reason` hacen match sobre el texto: no cambiar las plantillas.
"""

from __future__ import annotations

from typing import Optional

from .models import (
    BREACH_TOLERANCE,
    FALLBACK_RANGE,
    WARNING_TOLERANCE,
    Direction,
    Evaluation,
    ReadingStatus,
)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _fallback_reason(reading: float, direction: Direction, tolerance: float, lo: float, hi: float) -> str:
    if direction is Direction.HIGH:
        return f"Reading {_fmt(reading)}°C exceeds safe limit {_fmt(hi)}°C (+{_fmt(tolerance)}°C tolerance)"
    if direction is Direction.LOW:
        return f"Reading {_fmt(reading)}°C is below safe limit {_fmt(lo)}°C (-{_fmt(tolerance)}°C tolerance)"
    return f"Reading {_fmt(reading)}°C within safe limits ({_fmt(lo)}°C to {_fmt(hi)}°C)"


def _asset_reason(
    reading: float,
    status: ReadingStatus,
    direction: Direction,
    tolerance: float,
    lo: Optional[float],
    hi: Optional[float],
) -> str:
    kind = "breach" if status is ReadingStatus.BREACH else "warning"
    if direction is Direction.HIGH:
        return f"Reading {_fmt(reading)}°C above asset max {_fmt(hi)}°C beyond {kind} tolerance of {_fmt(tolerance)}°C"
    if direction is Direction.LOW:
        return f"Reading {_fmt(reading)}°C below asset min {_fmt(lo)}°C beyond {kind} tolerance of {_fmt(tolerance)}°C"
    return f"Reading {_fmt(reading)}°C within asset working range"


def evaluate(
    reading: float,
    working_min: Optional[float],
    working_max: Optional[float],
) -> Evaluation:
    """Evalúa una lectura contra los límites de trabajo del asset.

    Args:
        reading: Valor leído (finito; validado antes de llegar aquí)
        working_min: Límite inferior configurado del asset (None si no hay)
        working_max: Límite superior configurado del asset (None si no hay)

    Returns:
        Evaluation con status, dirección y motivo legible
    """
    used_fallback = working_min is None and working_max is None
    if used_fallback:
        lo, hi = FALLBACK_RANGE
    else:
        # Con un solo límite configurado, el lado sin límite no se evalúa
        lo, hi = working_min, working_max

    status = ReadingStatus.OK
    direction = Direction.WITHIN
    tolerance = 0.0

    if hi is not None and reading > hi + BREACH_TOLERANCE:
        status, direction, tolerance = ReadingStatus.BREACH, Direction.HIGH, BREACH_TOLERANCE
    elif lo is not None and reading < lo - BREACH_TOLERANCE:
        status, direction, tolerance = ReadingStatus.BREACH, Direction.LOW, BREACH_TOLERANCE
    elif hi is not None and reading > hi + WARNING_TOLERANCE:
        status, direction, tolerance = ReadingStatus.WARNING, Direction.HIGH, WARNING_TOLERANCE
    elif lo is not None and reading < lo - WARNING_TOLERANCE:
        status, direction, tolerance = ReadingStatus.WARNING, Direction.LOW, WARNING_TOLERANCE

    if used_fallback:
        reason = _fallback_reason(reading, direction, tolerance, lo, hi)
    else:
        reason = _asset_reason(reading, status, direction, tolerance, lo, hi)

    return Evaluation(
        status=status,
        direction=direction,
        reason=reason,
        min=working_min,
        max=working_max,
    )
