"""Filas que la ingesta lee y escribe en los stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class IngestKey:
    """Secreto compartido de un tenant para firmar payloads."""

    company_id: str
    secret: str
    status: str = "active"
    created_at: Optional[datetime] = None
    id: Optional[str] = None

    def __repr__(self) -> str:
        # No exponer el secreto en logs/tracebacks
        return f"IngestKey(id={self.id!r}, company_id={self.company_id!r}, status={self.status!r})"


@dataclass(frozen=True)
class AssetBounds:
    """Rango de trabajo del asset en el momento de la evaluación."""

    id: str
    name: Optional[str] = None
    working_temp_min: Optional[float] = None
    working_temp_max: Optional[float] = None

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "working_temp_min": self.working_temp_min,
            "working_temp_max": self.working_temp_max,
        }


@dataclass
class TemperatureReadingRow:
    company_id: Optional[str]
    site_id: str
    reading: float
    status: str
    recorded_at: str
    asset_id: Optional[str] = None
    unit: str = "celsius"
    source: str = "ingest"
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PersistedReading:
    id: Optional[str]
    status: str


class BreachActionType(str, Enum):
    MONITOR = "monitor"
    CALLOUT = "callout"


@dataclass
class BreachActionRow:
    company_id: Optional[str]
    site_id: str
    reading_id: str
    action_type: BreachActionType
    due_at: str
    status: str = "pending"
    metadata: dict[str, Any] = field(default_factory=dict)
