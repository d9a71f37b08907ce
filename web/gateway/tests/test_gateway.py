"""Request id propagation, body size guard and the error envelope."""

import logging
from uuid import UUID

import pytest

from apps.payments.http_adapters import _request_headers
from gateway import middleware
from gateway.logging_filters import RequestIdFilter
from gateway.middleware import REQUEST_ID_CTX

SETTINGS_URL = "/api/settings/"


@pytest.mark.django_db
def test_request_id_is_echoed(client):
    r = client.get(SETTINGS_URL, HTTP_X_REQUEST_ID="req-123")
    assert r["X-Request-ID"] == "req-123"


@pytest.mark.django_db
def test_request_id_is_generated(client):
    r = client.get(SETTINGS_URL)
    UUID(r["X-Request-ID"])


def test_oversized_api_body_is_rejected(client, monkeypatch):
    monkeypatch.setattr(middleware, "MAX_API_BYTES", 10)
    r = client.post(SETTINGS_URL, data={"key": "store_name", "value": "x" * 50}, content_type="application/json")
    assert r.status_code == 413
    assert r.json() == {"success": False, "error": "Payload too large"}


@pytest.mark.django_db
def test_malformed_json_uses_envelope(client):
    r = client.post(SETTINGS_URL, data="{not json", content_type="application/json")
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert "JSON parse error" in body["error"]


@pytest.mark.django_db
def test_method_not_allowed_uses_envelope(client):
    r = client.delete(SETTINGS_URL)
    assert r.status_code == 405
    assert r.json()["success"] is False


def test_log_records_and_outbound_calls_carry_request_id():
    token = REQUEST_ID_CTX.set("rid-42")
    try:
        record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "hello", None, None)
        RequestIdFilter().filter(record)
        assert record.request_id == "rid-42"
        assert _request_headers({"A": "b"}) == {"X-Request-ID": "rid-42", "A": "b"}
    finally:
        REQUEST_ID_CTX.reset(token)


def test_outside_a_request_the_id_is_a_dash():
    record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "hello", None, None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"
    assert _request_headers() == {}
