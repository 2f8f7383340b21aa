"""Bootstrap del esquema de la ingesta de temperatura.

Crea las tablas si no existen. Es seguro llamarlo varias veces.
"""

from __future__ import annotations

import logging
import pathlib

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = pathlib.Path(__file__).parent / "migrations"


def ensure_schema(engine: Engine, sql_file: str = "001_temperature_ingest.sql") -> None:
    """Ejecuta el archivo de migración sobre `engine`.

    Args:
        engine: Engine destino (PostgreSQL o SQLite)
        sql_file: Nombre del archivo dentro de migrations/
    """
    path = MIGRATIONS_DIR / sql_file
    logger.info("[DB] Ensuring schema exists file=%s", path.name)

    sql_content = path.read_text(encoding="utf-8")
    statements = [s.strip() for s in sql_content.split(";") if s.strip()]

    try:
        with engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))
        logger.info("[DB] Schema creation completed statements=%d", len(statements))
    except Exception as e:
        logger.exception("[DB] Schema creation failed: %s", e)
        raise
