"""Factory de stores para los endpoints de ingesta."""

from __future__ import annotations

from common.db import get_engine

from .contracts import IngestStores
from .sql_stores import build_sql_stores


def get_ingest_stores() -> IngestStores:
    """Dependency de FastAPI: stores SQL sobre el engine del proceso.

    Los stores no cachean datos; cada request vuelve a consultar la BD.
    """
    return build_sql_stores(get_engine())
