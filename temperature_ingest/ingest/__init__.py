"""Ingesta de lecturas de temperatura firmadas."""

from .payload import parse_ingest_payload
from .service import IngestOutcome, TemperatureIngestService

__all__ = [
    "IngestOutcome",
    "TemperatureIngestService",
    "parse_ingest_payload",
]
