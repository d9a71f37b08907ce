"""Unit tests for the payment provider HTTP client.

``httpx.Client.post`` is monkeypatched so the client's retry, circuit
breaker and error mapping can be checked without a network.
"""

from decimal import Decimal

import httpx
import pytest

from apps.common.errors import UpstreamUnavailable
from apps.payments.domain import LinkRequest
from apps.payments.http_adapters import HttpPaymentLinkClient, _provider_cb, to_minor_units

REQ = LinkRequest(order_id=7, order_number="ORD-20240501-0000ABCD", amount=Decimal("29.50"), currency="inr")


class DummyResp:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data or {}

    def json(self):
        return self._json


@pytest.fixture(autouse=True)
def closed_circuit(settings):
    settings.HTTP_RETRY_BACKOFF_BASE = 0.0
    _provider_cb.on_success()
    yield
    _provider_cb.on_success()


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda *a, **k: None, raising=True)


def provider_ok(calls):
    bodies = {
        "/v1/products": {"id": "prod_1"},
        "/v1/prices": {"id": "price_1"},
        "/v1/payment_links": {"id": "plink_1", "url": "https://buy.example/plink_1"},
    }

    def fake_post(self, url, data=None, headers=None, **kw):
        calls.append((url, data, headers))
        return DummyResp(200, next(v for k, v in bodies.items() if url.endswith(k)))

    return fake_post


def test_create_payment_link_happy_path(monkeypatch):
    calls = []
    monkeypatch.setattr(httpx.Client, "post", provider_ok(calls), raising=True)
    client = HttpPaymentLinkClient(base_url="http://provider/", api_key="sk_test")

    refs = client.create_payment_link(REQ, idempotency_key="payment-link-ORD-1")

    assert (refs.product_id, refs.price_id, refs.payment_link_id) == ("prod_1", "price_1", "plink_1")
    assert refs.url == "https://buy.example/plink_1"
    assert [c[0] for c in calls] == [
        "http://provider/v1/products",
        "http://provider/v1/prices",
        "http://provider/v1/payment_links",
    ]
    assert calls[1][1]["unit_amount"] == "2950"
    assert calls[1][1]["product"] == "prod_1"
    assert calls[2][1]["line_items[0][price]"] == "price_1"
    assert calls[0][2]["Authorization"] == "Bearer sk_test"
    assert [c[2]["Idempotency-Key"] for c in calls] == [
        "payment-link-ORD-1-product",
        "payment-link-ORD-1-price",
        "payment-link-ORD-1-link",
    ]


def test_single_attempt_by_default(monkeypatch, no_sleep):
    calls = {"n": 0}

    def fake_post(self, url, data=None, headers=None, **kw):
        calls["n"] += 1
        return DummyResp(503)

    monkeypatch.setattr(httpx.Client, "post", fake_post, raising=True)
    with pytest.raises(UpstreamUnavailable) as e:
        HttpPaymentLinkClient(base_url="http://x").create_payment_link(REQ)
    assert e.value.status_code == 503
    assert calls["n"] == 1


def test_retries_on_5xx_when_configured(monkeypatch, settings, no_sleep):
    settings.HTTP_RETRY_MAX = 3
    calls = []
    ok = provider_ok([])

    def flaky(self, url, data=None, headers=None, **kw):
        calls.append(headers["X-Retry-Count"])
        if len(calls) == 1:
            return DummyResp(500)
        return ok(self, url, data=data, headers=headers)

    monkeypatch.setattr(httpx.Client, "post", flaky, raising=True)
    refs = HttpPaymentLinkClient(base_url="http://x").create_payment_link(REQ, idempotency_key="k")
    assert refs.payment_link_id == "plink_1"
    assert calls[:2] == ["0", "1"]


def test_no_retry_on_4xx(monkeypatch, settings, no_sleep):
    settings.HTTP_RETRY_MAX = 3
    calls = {"n": 0}

    def fake_post(self, url, data=None, headers=None, **kw):
        calls["n"] += 1
        return DummyResp(402)

    monkeypatch.setattr(httpx.Client, "post", fake_post, raising=True)
    with pytest.raises(UpstreamUnavailable) as e:
        HttpPaymentLinkClient(base_url="http://x").create_payment_link(REQ)
    assert e.value.status_code == 502
    assert calls["n"] == 1
    assert _provider_cb.state == "CLOSED"


def test_network_error_maps_to_upstream_unavailable(monkeypatch, no_sleep):
    def fake_post(self, url, data=None, headers=None, **kw):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(httpx.Client, "post", fake_post, raising=True)
    with pytest.raises(UpstreamUnavailable):
        HttpPaymentLinkClient(base_url="http://x").create_payment_link(REQ)


def test_circuit_opens_after_threshold(monkeypatch, no_sleep):
    monkeypatch.setattr(_provider_cb, "fail_threshold", 2)
    calls = {"n": 0}

    def fake_post(self, url, data=None, headers=None, **kw):
        calls["n"] += 1
        raise httpx.ConnectError("down")

    monkeypatch.setattr(httpx.Client, "post", fake_post, raising=True)
    client = HttpPaymentLinkClient(base_url="http://x")
    for _ in range(2):
        with pytest.raises(UpstreamUnavailable):
            client.create_payment_link(REQ)
    assert _provider_cb.state == "OPEN"

    with pytest.raises(UpstreamUnavailable) as e:
        client.create_payment_link(REQ)
    assert "circuit open" in e.value.message
    assert calls["n"] == 2


def test_to_minor_units():
    assert to_minor_units(Decimal("29.50")) == 2950
    assert to_minor_units(Decimal("0.005")) == 1


@pytest.mark.django_db
def test_create_payment_endpoint_with_http_adapter(client, settings, make_order, monkeypatch):
    settings.USE_HTTP_ADAPTERS = True
    calls = []
    monkeypatch.setattr(httpx.Client, "post", provider_ok(calls), raising=True)
    o = make_order()

    r = client.post("/api/stripe/create-payment/", data={"orderId": o.id}, content_type="application/json")
    assert r.status_code == 201
    assert r.json()["data"]["paymentUrl"] == "https://buy.example/plink_1"
    assert calls[0][2]["Idempotency-Key"] == f"payment-link-{o.order_number}-product"

    o.refresh_from_db()
    assert o.stripe_price_id == "price_1"


@pytest.mark.django_db
def test_create_payment_endpoint_provider_down_is_503(client, settings, make_order, monkeypatch):
    settings.USE_HTTP_ADAPTERS = True

    def fake_post(self, url, data=None, headers=None, **kw):
        raise httpx.ConnectError("down")

    monkeypatch.setattr(httpx.Client, "post", fake_post, raising=True)
    o = make_order()
    r = client.post("/api/stripe/create-payment/", data={"orderId": o.id}, content_type="application/json")
    assert r.status_code == 503
    assert r.json() == {"success": False, "error": "Payment provider unavailable"}
    o.refresh_from_db()
    assert o.stripe_payment_link_url == ""
