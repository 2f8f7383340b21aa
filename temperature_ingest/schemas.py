from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .escalation.scheduler import ACTION_DELAYS
from .timeutils import ensure_utc

# la última acción programada tiene que caer dentro del rango de datetime
_LATEST_RECORDED_AT = datetime.max.replace(tzinfo=timezone.utc) - max(ACTION_DELAYS.values())


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return any(_has_non_finite(v) for v in value)
    return False


class TemperatureReadingIn(BaseModel):
    """Payload firmado que envía el dispositivo.

    Formato esperado:
    {
        "tenant_id": "c0ffee...",
        "site_id": "site-1",
        "asset_id": "fridge-3",
        "reading": 4.2,
        "unit": "celsius",
        "recorded_at": "2026-01-31T08:00:00.000Z",
        "source": "ingest",
        "meta": {"probe": "A"}
    }
    """

    model_config = ConfigDict(extra="ignore")

    tenant_id: Optional[str] = None
    site_id: str = Field(..., min_length=1)
    asset_id: Optional[str] = None
    # strict: rechaza strings y booleanos; allow_inf_nan: el parser JSON acepta NaN/Infinity
    reading: float = Field(..., strict=True, allow_inf_nan=False)
    unit: str = "celsius"
    recorded_at: Optional[datetime] = None
    source: str = "ingest"
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("tenant_id", "asset_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("unit", "source", mode="before")
    @classmethod
    def default_when_empty(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("meta", mode="before")
    @classmethod
    def meta_default(cls, v):
        return {} if v is None else v

    @field_validator("meta")
    @classmethod
    def meta_must_be_finite(cls, v):
        if _has_non_finite(v):
            raise ValueError("meta must not contain NaN or Infinity")
        return v

    @field_validator("recorded_at")
    @classmethod
    def recorded_at_in_range(cls, v):
        if v is None:
            return v
        try:
            v = ensure_utc(v)
        except OverflowError:
            raise ValueError("recorded_at out of range") from None
        if v > _LATEST_RECORDED_AT:
            raise ValueError("recorded_at out of range")
        return v


class EvaluationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    direction: str
    reason: str
    min: Optional[float] = None
    max: Optional[float] = None
    warning_tolerance: float = Field(..., alias="warningTolerance")
    breach_tolerance: float = Field(..., alias="breachTolerance")


class IngestResponse(BaseModel):
    id: Optional[str] = None
    status: str
    evaluation: EvaluationOut
