"""Módulo de endpoints HTTP."""

from .health import router as health_router
from .temperature_ingest import router as temperature_ingest_router

__all__ = [
    "health_router",
    "temperature_ingest_router",
]
