"""Persistencia de la ingesta de temperatura."""

from .contracts import (
    AssetStore,
    BreachActionStore,
    IngestKeyStore,
    IngestStores,
    ReadingStore,
)
from .factory import get_ingest_stores
from .models import (
    AssetBounds,
    BreachActionRow,
    BreachActionType,
    IngestKey,
    PersistedReading,
    TemperatureReadingRow,
)
from .schema import ensure_schema
from .sql_stores import build_sql_stores

__all__ = [
    "AssetStore",
    "BreachActionStore",
    "IngestKeyStore",
    "IngestStores",
    "ReadingStore",
    "AssetBounds",
    "BreachActionRow",
    "BreachActionType",
    "IngestKey",
    "PersistedReading",
    "TemperatureReadingRow",
    "build_sql_stores",
    "ensure_schema",
    "get_ingest_stores",
]
