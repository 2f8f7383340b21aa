"""Programación de acciones de escalado para lecturas en BREACH.

Por cada lectura en breach se programan exactamente dos acciones:
- monitor: re-chequear la temperatura a los 30 min de recorded_at
- callout: llamar al técnico a los 15 min de recorded_at

La clave (reading_id, action_type) hace el upsert idempotente.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ..classification import Evaluation
from ..persistence.contracts import BreachActionStore
from ..persistence.models import BreachActionRow, BreachActionType
from ..timeutils import format_timestamp

logger = logging.getLogger(__name__)

ACTION_DELAYS = {
    BreachActionType.MONITOR: timedelta(minutes=30),
    BreachActionType.CALLOUT: timedelta(minutes=15),
}

_FOLLOW_UP = {
    BreachActionType.MONITOR: "recheck_temperature",
    BreachActionType.CALLOUT: "contractor_callout",
}


def compute_due_times(recorded_at: datetime) -> dict[BreachActionType, datetime]:
    return {action_type: recorded_at + delay for action_type, delay in ACTION_DELAYS.items()}


def build_breach_actions(
    *,
    reading_id: str,
    company_id: Optional[str],
    site_id: str,
    asset_id: Optional[str],
    reading: float,
    recorded_at: datetime,
    evaluation: Evaluation,
) -> List[BreachActionRow]:
    due_times = compute_due_times(recorded_at)
    rows: List[BreachActionRow] = []

    for action_type, due_at in due_times.items():
        rows.append(
            BreachActionRow(
                company_id=company_id,
                site_id=site_id,
                reading_id=reading_id,
                action_type=action_type,
                due_at=format_timestamp(due_at),
                metadata={
                    "evaluation": evaluation.to_dict(),
                    "reading": reading,
                    "asset_id": asset_id,
                    "recorded_at": format_timestamp(recorded_at),
                    "follow_up": _FOLLOW_UP[action_type],
                    "delay_minutes": int(ACTION_DELAYS[action_type].total_seconds() // 60),
                },
            )
        )

    return rows


class EscalationScheduler:
    """Programa las acciones de un breach en el store de acciones."""

    def __init__(self, store: BreachActionStore) -> None:
        self._store = store

    def schedule(
        self,
        *,
        reading_id: str,
        company_id: Optional[str],
        site_id: str,
        asset_id: Optional[str],
        reading: float,
        recorded_at: datetime,
        evaluation: Evaluation,
    ) -> List[BreachActionRow]:
        rows = build_breach_actions(
            reading_id=reading_id,
            company_id=company_id,
            site_id=site_id,
            asset_id=asset_id,
            reading=reading,
            recorded_at=recorded_at,
            evaluation=evaluation,
        )
        self._store.upsert_actions(rows)

        logger.info(
            "[Escalation] Breach actions scheduled reading_id=%s actions=%s",
            reading_id,
            ",".join(f"{r.action_type.value}@{r.due_at}" for r in rows),
        )
        return rows
