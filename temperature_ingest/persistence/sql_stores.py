"""Stores SQL para la ingesta de temperatura.

Cada operación abre su propia transacción (`engine.begin()`): la lectura
queda confirmada antes de programar acciones de escalado, y un fallo al
programar no revierte la lectura.

Las sentencias son SQL portable (PostgreSQL en producción, SQLite en tests);
solo el cast de las columnas JSON depende del dialecto.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

from .contracts import (
    AssetStore,
    BreachActionStore,
    IngestKeyStore,
    IngestStores,
    ReadingStore,
)
from .models import (
    AssetBounds,
    BreachActionRow,
    IngestKey,
    PersistedReading,
    TemperatureReadingRow,
)

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def _dump_json(value: Any) -> str:
    # JSON estándar: jsonb y los lectores estrictos rechazan NaN/Infinity
    return json.dumps(value, default=str, allow_nan=False)


def _json_param(engine: Engine, name: str) -> str:
    if engine.dialect.name == "postgresql":
        return f"CAST(:{name} AS JSONB)"
    return f":{name}"


class SqlIngestKeyStore(IngestKeyStore):
    def __init__(self, engine: Engine):
        self._engine = engine

    def find_active_key(self, tenant_id: str) -> Optional[IngestKey]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("""
                    SELECT id, company_id, secret, status, created_at
                    FROM temperature_ingest_keys
                    WHERE company_id = :tenant_id
                      AND status = 'active'
                    ORDER BY created_at DESC
                    LIMIT 1
                """),
                {"tenant_id": tenant_id},
            ).fetchone()

        if not row:
            return None

        return IngestKey(
            id=str(row.id),
            company_id=str(row.company_id),
            secret=str(row.secret),
            status=str(row.status),
        )


class SqlAssetStore(AssetStore):
    def __init__(self, engine: Engine):
        self._engine = engine

    def find_asset(self, asset_id: str) -> Optional[AssetBounds]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("""
                    SELECT id, name, working_temp_min, working_temp_max
                    FROM assets
                    WHERE id = :asset_id
                """),
                {"asset_id": asset_id},
            ).fetchone()

        if not row:
            return None

        return AssetBounds(
            id=str(row.id),
            name=row.name,
            working_temp_min=_optional_float(row.working_temp_min),
            working_temp_max=_optional_float(row.working_temp_max),
        )


class SqlReadingStore(ReadingStore):
    def __init__(self, engine: Engine):
        self._engine = engine

    def insert_reading(self, row: TemperatureReadingRow) -> PersistedReading:
        reading_id = str(uuid.uuid4())

        with self._engine.begin() as conn:
            conn.execute(
                text(f"""
                    INSERT INTO temperature_logs (
                        id, company_id, site_id, asset_id, reading,
                        unit, recorded_at, source, status, meta
                    ) VALUES (
                        :id, :company_id, :site_id, :asset_id, :reading,
                        :unit, :recorded_at, :source, :status, {_json_param(self._engine, "meta")}
                    )
                """),
                {
                    "id": reading_id,
                    "company_id": row.company_id,
                    "site_id": row.site_id,
                    "asset_id": row.asset_id,
                    "reading": float(row.reading),
                    "unit": row.unit,
                    "recorded_at": row.recorded_at,
                    "source": row.source,
                    "status": row.status,
                    "meta": _dump_json(row.meta),
                },
            )

        return PersistedReading(id=reading_id, status=row.status)


class SqlBreachActionStore(BreachActionStore):
    def __init__(self, engine: Engine):
        self._engine = engine

    def upsert_actions(self, rows: Sequence[BreachActionRow]) -> None:
        if not rows:
            return

        params = [
            {
                "id": str(uuid.uuid4()),
                "company_id": r.company_id,
                "site_id": r.site_id,
                "reading_id": r.reading_id,
                "action_type": r.action_type.value,
                "status": r.status,
                "due_at": r.due_at,
                "metadata": _dump_json(r.metadata),
            }
            for r in rows
        ]

        # Un solo statement atómico: re-entregas del mismo breach no duplican
        # acciones. El status existente no se toca (puede estar ya acknowledged).
        with self._engine.begin() as conn:
            conn.execute(
                text(f"""
                    INSERT INTO temperature_breach_actions (
                        id, company_id, site_id, reading_id, action_type,
                        status, due_at, metadata
                    ) VALUES (
                        :id, :company_id, :site_id, :reading_id, :action_type,
                        :status, :due_at, {_json_param(self._engine, "metadata")}
                    )
                    ON CONFLICT (reading_id, action_type) DO UPDATE
                    SET due_at = excluded.due_at,
                        metadata = excluded.metadata
                """),
                params,
            )


def build_sql_stores(engine: Engine) -> IngestStores:
    return IngestStores(
        keys=SqlIngestKeyStore(engine),
        assets=SqlAssetStore(engine),
        readings=SqlReadingStore(engine),
        actions=SqlBreachActionStore(engine),
    )
