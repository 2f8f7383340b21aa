"""Flujo de ingesta de una lectura de temperatura.

Orden estricto por request (requisito de seguridad y correctitud):
1. Parsear y validar el payload
2. Buscar la key activa del tenant (antes de verificar la firma)
3. Verificar la firma HMAC del body crudo
4. Resolver recorded_at y los límites del asset (fallo no fatal)
5. Evaluar contra los límites
6. Persistir la lectura (fallo fatal → 500)
7. Si es BREACH, programar acciones de escalado (fallo no fatal)

No hay cache de keys ni de límites: cada request vuelve a consultar los
stores. Reenviar el mismo body crea otra lectura; solo las acciones de
escalado se deduplican por (reading_id, action_type).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple

from sqlalchemy.exc import DBAPIError

from ..auth import verify_signature
from ..classification import Evaluation, ReadingStatus, evaluate
from ..errors import AuthenticationError, AuthenticationUnavailable, PersistenceError
from ..escalation import EscalationScheduler
from ..persistence.contracts import IngestStores
from ..persistence.models import (
    AssetBounds,
    BreachActionRow,
    IngestKey,
    TemperatureReadingRow,
)
from ..timeutils import ensure_utc, format_timestamp, utc_now
from .payload import parse_ingest_payload

logger = logging.getLogger(__name__)

NO_ACTIVE_KEY = "No active ingest key for tenant"
INVALID_SIGNATURE = "Invalid signature"
AUTH_UNAVAILABLE = "Authentication service unavailable"


@dataclass(frozen=True)
class IngestOutcome:
    reading_id: Optional[str]
    status: ReadingStatus
    evaluation: Evaluation
    scheduled_actions: Tuple[BreachActionRow, ...] = ()


def _error_message(exc: Exception) -> str:
    # Mensaje del driver, sin el SQL que agrega SQLAlchemy
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc) or type(exc).__name__


class TemperatureIngestService:
    """Orquesta la ingesta de una lectura firmada.

    Los stores se inyectan explícitamente; `clock` permite fijar la hora de
    recepción en tests.
    """

    def __init__(
        self,
        stores: IngestStores,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._stores = stores
        self._clock = clock
        self._scheduler = EscalationScheduler(stores.actions)

    def ingest(self, raw_body: bytes, signature: Optional[str]) -> IngestOutcome:
        payload = parse_ingest_payload(raw_body)

        key = self._find_active_key(payload.tenant_id)
        if key is None:
            logger.warning("[Auth] No active ingest key tenant_id=%s", payload.tenant_id)
            raise AuthenticationError(NO_ACTIVE_KEY)

        if not verify_signature(key.secret, raw_body, signature).valid:
            logger.warning("[Auth] Invalid signature tenant_id=%s", payload.tenant_id)
            raise AuthenticationError(INVALID_SIGNATURE)

        if payload.recorded_at is not None:
            recorded_at = ensure_utc(payload.recorded_at)
        else:
            recorded_at = self._clock()

        asset = self._lookup_asset(payload.asset_id)
        evaluation = evaluate(
            payload.reading,
            asset.working_temp_min if asset else None,
            asset.working_temp_max if asset else None,
        )

        meta = dict(payload.meta)
        meta["evaluation"] = evaluation.to_dict()
        meta["asset"] = asset.snapshot() if asset else None

        row = TemperatureReadingRow(
            company_id=payload.tenant_id,
            site_id=payload.site_id,
            asset_id=payload.asset_id,
            reading=payload.reading,
            unit=payload.unit,
            recorded_at=format_timestamp(recorded_at),
            source=payload.source,
            status=evaluation.status.value,
            meta=meta,
        )

        try:
            persisted = self._stores.readings.insert_reading(row)
        except Exception as e:
            logger.exception(
                "[Ingest] Reading insert failed site_id=%s err=%s",
                payload.site_id,
                type(e).__name__,
            )
            raise PersistenceError(_error_message(e)) from e

        scheduled: Tuple[BreachActionRow, ...] = ()
        if evaluation.is_breach and persisted.id:
            scheduled = self._schedule_escalation(
                reading_id=persisted.id,
                row=row,
                recorded_at=recorded_at,
                evaluation=evaluation,
            )

        logger.info(
            "[Ingest] Reading stored id=%s site_id=%s asset_id=%s reading=%s status=%s direction=%s",
            persisted.id,
            payload.site_id,
            payload.asset_id,
            payload.reading,
            evaluation.status.value,
            evaluation.direction.value,
        )

        return IngestOutcome(
            reading_id=persisted.id,
            status=evaluation.status,
            evaluation=evaluation,
            scheduled_actions=scheduled,
        )

    def _find_active_key(self, tenant_id: Optional[str]) -> Optional[IngestKey]:
        if not tenant_id:
            return None
        try:
            return self._stores.keys.find_active_key(tenant_id)
        except Exception as e:
            logger.exception("[Auth] Ingest key lookup failed err=%s", type(e).__name__)
            raise AuthenticationUnavailable(AUTH_UNAVAILABLE) from e

    def _lookup_asset(self, asset_id: Optional[str]) -> Optional[AssetBounds]:
        """Límites del asset; un fallo aquí nunca bloquea la ingesta."""
        if not asset_id:
            return None
        try:
            asset = self._stores.assets.find_asset(asset_id)
        except Exception as e:
            logger.warning(
                "[Ingest] Asset lookup failed asset_id=%s err=%s: %s",
                asset_id,
                type(e).__name__,
                e,
            )
            return None

        if asset is None:
            logger.warning("[Ingest] Asset not found asset_id=%s - using fallback bounds", asset_id)
        return asset

    def _schedule_escalation(
        self,
        *,
        reading_id: str,
        row: TemperatureReadingRow,
        recorded_at: datetime,
        evaluation: Evaluation,
    ) -> Tuple[BreachActionRow, ...]:
        # La lectura ya está persistida: un fallo aquí se loguea y no
        # cambia la respuesta.
        try:
            rows = self._scheduler.schedule(
                reading_id=reading_id,
                company_id=row.company_id,
                site_id=row.site_id,
                asset_id=row.asset_id,
                reading=row.reading,
                recorded_at=recorded_at,
                evaluation=evaluation,
            )
            return tuple(rows)
        except Exception:
            logger.exception("[Escalation] Failed to schedule breach actions reading_id=%s", reading_id)
            return ()
