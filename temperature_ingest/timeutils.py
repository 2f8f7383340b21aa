from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    # Timestamps sin zona horaria se asumen UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Formato canónico: 2026-01-31T08:00:00.123Z"""
    return ensure_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")
