"""Endpoint de ingesta de lecturas de temperatura firmadas."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Request

from ..auth import SIGNATURE_HEADER
from ..ingest import TemperatureIngestService
from ..persistence import IngestStores, get_ingest_stores
from ..schemas import EvaluationOut, IngestResponse

router = APIRouter(tags=["ingest"])
logger = logging.getLogger(__name__)


async def read_raw_body(request: Request) -> bytes:
    # La firma se calcula sobre los bytes exactos recibidos
    return await request.body()


def get_ingest_service(
    stores: IngestStores = Depends(get_ingest_stores),
) -> TemperatureIngestService:
    return TemperatureIngestService(stores)


@router.post(
    "/ingest/temperature",
    response_model=IngestResponse,
    status_code=201,
)
def ingest_temperature(
    raw_body: bytes = Depends(read_raw_body),
    x_temp_signature: str | None = Header(default=None, alias=SIGNATURE_HEADER),
    service: TemperatureIngestService = Depends(get_ingest_service),
):
    """Ingesta de una lectura firmada por el dispositivo.

    Errores (400/401/500/503) se lanzan como IngestError y main.py los
    renderiza como {"error": ...}.
    """
    outcome = service.ingest(raw_body, x_temp_signature)

    return IngestResponse(
        id=outcome.reading_id,
        status=outcome.status.value,
        evaluation=EvaluationOut(**outcome.evaluation.to_dict()),
    )
