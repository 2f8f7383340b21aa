from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

from .config import Settings, get_settings


logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None


def build_engine(settings: Settings) -> Engine:
    url = make_url(settings.database_url)

    # Log básico de parámetros de conexión (sin contraseña)
    logger.info(
        "[DB] Crear engine driver=%s host=%s port=%s db=%s user=%s",
        url.drivername,
        url.host,
        url.port,
        url.database,
        url.username,
    )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle_seconds,
        future=True,
    )


def get_engine() -> Engine:
    """Engine compartido del proceso (se crea en el primer uso)."""
    global _engine

    if _engine is None:
        _engine = build_engine(get_settings())
    return _engine


def check_connection(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("[DB] Test de conexión FALLÓ")
        return False
