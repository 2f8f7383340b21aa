"""Abstract interfaces for the stores used by temperature ingestion.

This decouples the ingest flow from the database client. The SQL
implementations live in sql_stores.py; tests may swap any of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import (
    AssetBounds,
    BreachActionRow,
    IngestKey,
    PersistedReading,
    TemperatureReadingRow,
)


class IngestKeyStore(ABC):
    @abstractmethod
    def find_active_key(self, tenant_id: str) -> Optional[IngestKey]:
        """Return the most recently created active key of the tenant, or None."""


class AssetStore(ABC):
    @abstractmethod
    def find_asset(self, asset_id: str) -> Optional[AssetBounds]:
        """Return the asset's name and working bounds, or None if not found."""


class ReadingStore(ABC):
    @abstractmethod
    def insert_reading(self, row: TemperatureReadingRow) -> PersistedReading:
        """Insert a reading and return its generated id.

        Raises on database failure.
        """


class BreachActionStore(ABC):
    @abstractmethod
    def upsert_actions(self, rows: Sequence[BreachActionRow]) -> None:
        """Insert or update actions keyed by (reading_id, action_type).

        Must be a single atomic store operation, never a read-then-write.
        """


@dataclass(frozen=True)
class IngestStores:
    """Bundle of stores passed explicitly into the ingest service."""

    keys: IngestKeyStore
    assets: AssetStore
    readings: ReadingStore
    actions: BreachActionStore
