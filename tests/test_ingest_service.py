"""Tests del servicio de ingesta sin la capa HTTP."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from temperature_ingest.classification import ReadingStatus
from temperature_ingest.errors import AuthenticationError, PayloadError
from temperature_ingest.ingest import TemperatureIngestService, parse_ingest_payload
from temperature_ingest.persistence import BreachActionType, IngestStores, PersistedReading

from conftest import SECRET, make_payload, signed_request

RECEIVED_AT = datetime(2026, 1, 31, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(stores):
    return TemperatureIngestService(stores, clock=lambda: RECEIVED_AT)


class TestParsePayload:
    def test_defaults(self):
        payload = parse_ingest_payload(b'{"site_id": "s", "reading": 3}')

        assert payload.tenant_id is None
        assert payload.asset_id is None
        assert payload.unit == "celsius"
        assert payload.source == "ingest"
        assert payload.meta == {}
        assert payload.recorded_at is None
        assert payload.reading == 3.0

    def test_null_optionals_take_defaults(self):
        payload = parse_ingest_payload(
            b'{"site_id": "s", "reading": 3, "unit": null, "source": "", "meta": null, "asset_id": ""}'
        )

        assert payload.unit == "celsius"
        assert payload.source == "ingest"
        assert payload.meta == {}
        assert payload.asset_id is None

    @pytest.mark.parametrize(
        "body, message",
        [
            (b"", "Empty payload"),
            (b"nope", "Invalid JSON"),
            (b'"text"', "Invalid JSON"),
            (b'{"reading": 3}', "Missing site_id or reading"),
            (b'{"site_id": "", "reading": 3}', "Missing site_id or reading"),
            (b'{"site_id": "s"}', "Missing site_id or reading"),
            (b'{"site_id": "s", "reading": Infinity}', "Reading must be a finite number"),
            (b'{"site_id": "s", "reading": 3, "recorded_at": "yesterday"}', "Invalid payload"),
            (b'{"site_id": "s", "reading": 3, "recorded_at": "0001-01-01T00:30:00+01:00"}', "Invalid payload"),
            (b'{"site_id": "s", "reading": 3, "recorded_at": "9999-12-31T23:59:00Z"}', "Invalid payload"),
            (b'{"site_id": "s", "reading": 3, "meta": {"x": NaN}}', "Invalid payload"),
            (b'{"site_id": "s", "reading": 3, "meta": {"a": [1, {"b": -Infinity}]}}', "Invalid payload"),
        ],
    )
    def test_rejections(self, body, message):
        with pytest.raises(PayloadError) as exc_info:
            parse_ingest_payload(body)

        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400

    def test_deeply_nested_json(self):
        with pytest.raises(PayloadError) as exc_info:
            parse_ingest_payload(b"[" * 100000 + b"]" * 100000)

        assert exc_info.value.message == "Invalid JSON"

    def test_recorded_at_normalized_to_utc(self):
        payload = parse_ingest_payload(
            b'{"site_id": "s", "reading": 3, "recorded_at": "2026-01-31T09:00:00+01:00"}'
        )

        assert payload.recorded_at == datetime(2026, 1, 31, 8, 0, 0, tzinfo=timezone.utc)
        assert payload.recorded_at.utcoffset() == timedelta(0)

    def test_latest_accepted_recorded_at(self):
        payload = parse_ingest_payload(
            b'{"site_id": "s", "reading": 3, "recorded_at": "9999-12-31T23:29:00Z"}'
        )

        assert payload.recorded_at.year == 9999


class TestIngestService:
    def test_recorded_at_defaults_to_receipt_time(self, service):
        body, headers = signed_request(make_payload(12))

        outcome = service.ingest(body, headers["x-temp-signature"])

        assert outcome.status is ReadingStatus.BREACH
        due = {a.action_type: a.due_at for a in outcome.scheduled_actions}
        assert due[BreachActionType.CALLOUT] == "2026-01-31T12:15:00.000Z"
        assert due[BreachActionType.MONITOR] == "2026-01-31T12:30:00.000Z"

    def test_no_actions_for_warning(self, service):
        body, headers = signed_request(make_payload(9.5))

        outcome = service.ingest(body, headers["x-temp-signature"])

        assert outcome.status is ReadingStatus.WARNING
        assert outcome.scheduled_actions == ()

    def test_missing_tenant_has_no_key(self, service):
        body, headers = signed_request(make_payload(5, tenant_id=None))

        with pytest.raises(AuthenticationError) as exc_info:
            service.ingest(body, headers["x-temp-signature"])

        assert exc_info.value.message == "No active ingest key for tenant"

    def test_key_lookup_happens_before_signature_check(self):
        keys = MagicMock()
        keys.find_active_key.return_value = None
        stores = IngestStores(keys=keys, assets=MagicMock(), readings=MagicMock(), actions=MagicMock())
        service = TemperatureIngestService(stores)

        with pytest.raises(AuthenticationError):
            service.ingest(json.dumps(make_payload(5)).encode(), None)

        keys.find_active_key.assert_called_once()
        stores.readings.insert_reading.assert_not_called()

    def test_breach_without_id_is_not_scheduled(self, stores):
        readings = MagicMock()
        readings.insert_reading.return_value = PersistedReading(id=None, status="breach")
        actions = MagicMock()
        service = TemperatureIngestService(
            IngestStores(keys=stores.keys, assets=stores.assets, readings=readings, actions=actions)
        )
        body, headers = signed_request(make_payload(12))

        outcome = service.ingest(body, headers["x-temp-signature"])

        assert outcome.reading_id is None
        actions.upsert_actions.assert_not_called()

    def test_status_matches_evaluation(self, service):
        for value, expected in ((5, "ok"), (9.5, "warning"), (-10, "breach")):
            body, headers = signed_request(make_payload(value), SECRET)

            outcome = service.ingest(body, headers["x-temp-signature"])

            assert outcome.status.value == expected
            assert outcome.evaluation.status is outcome.status
