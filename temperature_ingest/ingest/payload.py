"""Parseo y validación del body crudo de ingesta.

Convierte el body en TemperatureReadingIn o lanza PayloadError con el
mensaje estático que ve el cliente.
"""

from __future__ import annotations

import json

from pydantic import ValidationError

from ..errors import PayloadError
from ..schemas import TemperatureReadingIn

EMPTY_PAYLOAD = "Empty payload"
INVALID_JSON = "Invalid JSON"
MISSING_REQUIRED = "Missing site_id or reading"
NON_FINITE_READING = "Reading must be a finite number"
INVALID_PAYLOAD = "Invalid payload"

_REQUIRED_FIELDS = ("site_id", "reading")


def _message_for(exc: ValidationError) -> str:
    errors = exc.errors()
    for err in errors:
        loc = err.get("loc") or ()
        if loc and loc[0] == "reading" and err.get("type") == "finite_number":
            return NON_FINITE_READING
    for err in errors:
        loc = err.get("loc") or ()
        if loc and loc[0] in _REQUIRED_FIELDS:
            return MISSING_REQUIRED
    return INVALID_PAYLOAD


def parse_ingest_payload(raw_body: bytes) -> TemperatureReadingIn:
    if not raw_body:
        raise PayloadError(EMPTY_PAYLOAD)

    try:
        data = json.loads(raw_body)
    except (ValueError, RecursionError):
        raise PayloadError(INVALID_JSON) from None

    if not isinstance(data, dict):
        raise PayloadError(INVALID_JSON)

    try:
        return TemperatureReadingIn.model_validate(data)
    except ValidationError as e:
        raise PayloadError(_message_for(e)) from None
