"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Engine

from common.db import check_connection, get_engine

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness check: always returns ok if process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(engine: Engine = Depends(get_engine)):
    """Readiness check: checks DB connectivity."""
    if not check_connection(engine):
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}
