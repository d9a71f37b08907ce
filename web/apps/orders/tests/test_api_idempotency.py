from datetime import timedelta

import pytest
from django.utils import timezone

from apps.orders.idempotency import get_or_create_idempotent
from apps.orders.models import IdempotencyKey, Order

CREATE_URL = "/api/orders/"


def post(client, payload, key):
    return client.post(CREATE_URL, data=payload, content_type="application/json", HTTP_IDEMPOTENCY_KEY=key)


@pytest.mark.django_db
def test_idempotent_same_payload_returns_same_order_and_status_on_retry(client, store_settings, make_product):
    p = make_product(stock=5)
    payload = {"items": [{"product_id": p.id, "quantity": 2}]}

    r1 = post(client, payload, "idem-same-1")
    assert r1.status_code == 201

    r2 = post(client, payload, "idem-same-1")
    assert r2.status_code == 201
    assert r2.json() == r1.json()
    assert r2.headers.get("Idempotent-Replay") == "true"

    p.refresh_from_db()
    assert p.stock_quantity == 3
    assert Order.objects.count() == 1
    assert IdempotencyKey.objects.get(key="idem-same-1").order_id == r1.json()["data"]["id"]


@pytest.mark.django_db
def test_idempotent_conflict_on_different_payload_with_same_key(client, store_settings, make_product):
    p = make_product(stock=5)

    r1 = post(client, {"items": [{"product_id": p.id, "quantity": 2}]}, "idem-conflict-1")
    assert r1.status_code == 201

    r2 = post(client, {"items": [{"product_id": p.id, "quantity": 3}]}, "idem-conflict-1")
    assert r2.status_code == 409
    assert r2.json()["success"] is False


@pytest.mark.django_db
def test_idempotent_replay_preserves_409_status(client, store_settings, make_product):
    p = make_product(stock=1)
    payload = {"items": [{"product_id": p.id, "quantity": 5}]}

    r1 = post(client, payload, "idem-409")
    assert r1.status_code == 409

    # stock arriving later does not change the recorded outcome
    p.stock_quantity = 10
    p.save()

    r2 = post(client, payload, "idem-409")
    assert r2.status_code == 409
    assert r2.json() == r1.json()
    assert r2.headers.get("Idempotent-Replay") == "true"


@pytest.mark.django_db
def test_server_errors_are_not_recorded(client, store_settings, make_product, monkeypatch):
    from apps.common.errors import StorageError
    from apps.orders import providers

    p = make_product(stock=5)
    payload = {"items": [{"product_id": p.id, "quantity": 1}]}

    class Broken:
        def place_order(self, cmd):
            raise StorageError("Failed to save order")

    monkeypatch.setattr(providers, "get_order_service", lambda: Broken())
    r1 = post(client, payload, "idem-500")
    assert r1.status_code == 500
    assert not IdempotencyKey.objects.filter(key="idem-500").exists()

    monkeypatch.undo()
    r2 = post(client, payload, "idem-500")
    assert r2.status_code == 201
    assert "Idempotent-Replay" not in r2.headers


@pytest.mark.django_db
def test_in_flight_key_is_409_until_it_goes_stale(client, settings, store_settings, make_product):
    settings.IDEMPOTENCY_PENDING_TTL_SECS = 60
    p = make_product(stock=5)
    payload = {"items": [{"product_id": p.id, "quantity": 1}]}

    # a request that created its record and then died before storing a response
    existing, _ = get_or_create_idempotent("idem-orphan", payload)
    assert existing is False

    r = post(client, payload, "idem-orphan")
    assert r.status_code == 409
    assert Order.objects.count() == 0

    IdempotencyKey.objects.filter(key="idem-orphan").update(created_at=timezone.now() - timedelta(seconds=61))

    r = post(client, payload, "idem-orphan")
    assert r.status_code == 201
    rec = IdempotencyKey.objects.get(key="idem-orphan")
    assert rec.response_status == 201
    assert rec.order_id == r.json()["data"]["id"]

    replay = post(client, payload, "idem-orphan")
    assert replay.headers.get("Idempotent-Replay") == "true"
    assert Order.objects.count() == 1
