"""Fixtures compartidos para los tests de ingesta de temperatura."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from temperature_ingest.auth import SIGNATURE_HEADER, compute_signature
from temperature_ingest.main import app
from temperature_ingest.persistence import build_sql_stores, ensure_schema, get_ingest_stores

TENANT_ID = "company-1"
SECRET = "s3cr3t-ingest-key"
SITE_ID = "site-1"
ASSET_ID = "fridge-1"


@pytest.fixture
def engine():
    """SQLite en memoria compartido entre conexiones."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    ensure_schema(eng)
    with eng.begin() as conn:
        conn.execute(
            text("""
                INSERT INTO temperature_ingest_keys (id, company_id, secret, status, created_at)
                VALUES (:id, :company_id, :secret, 'active', :created_at)
            """),
            {
                "id": "key-1",
                "company_id": TENANT_ID,
                "secret": SECRET,
                "created_at": "2026-01-01T00:00:00.000Z",
            },
        )
        conn.execute(
            text("""
                INSERT INTO assets (id, company_id, name, working_temp_min, working_temp_max)
                VALUES (:id, :company_id, :name, :min, :max)
            """),
            {"id": ASSET_ID, "company_id": TENANT_ID, "name": "Walk-in fridge", "min": -2.0, "max": 8.0},
        )
    yield eng
    eng.dispose()


@pytest.fixture
def stores(engine):
    return build_sql_stores(engine)


@pytest.fixture
def client(stores):
    app.dependency_overrides[get_ingest_stores] = lambda: stores
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def recorded_at() -> datetime:
    return datetime(2026, 1, 31, 8, 0, 0, tzinfo=timezone.utc)


def make_payload(
    reading: Any = 5.0,
    *,
    tenant_id: Optional[str] = TENANT_ID,
    site_id: Optional[str] = SITE_ID,
    asset_id: Optional[str] = ASSET_ID,
    **extra: Any,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"reading": reading}
    if tenant_id is not None:
        payload["tenant_id"] = tenant_id
    if site_id is not None:
        payload["site_id"] = site_id
    if asset_id is not None:
        payload["asset_id"] = asset_id
    payload.update(extra)
    return payload


def signed_request(payload: Dict[str, Any], secret: str = SECRET):
    """Devuelve (body, headers) firmados como lo haría el dispositivo."""
    body = json.dumps(payload).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        SIGNATURE_HEADER: compute_signature(secret, body),
    }
    return body, headers


def count_rows(engine, table: str) -> int:
    with engine.connect() as conn:
        return int(conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar_one())
