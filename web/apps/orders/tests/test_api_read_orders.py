import pytest

from apps.orders.models import Order

LIST_URL = "/api/orders/"
DETAIL_URL = "/api/orders/{oid}/"


@pytest.fixture
def placed(client, store_settings, make_product):
    p = make_product(stock=50)

    def _place(email, qty=1):
        r = client.post(
            LIST_URL,
            data={"customer_email": email, "items": [{"product_id": p.id, "quantity": qty}]},
            content_type="application/json",
        )
        assert r.status_code == 201
        return r.json()["data"]

    return _place


@pytest.mark.django_db
def test_get_order_by_id_returns_order_with_items(client, placed):
    o = placed("a@example.com", qty=3)
    r = client.get(DETAIL_URL.format(oid=o["id"]))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["order_number"] == o["order_number"]
    assert len(data["items"]) == 1
    assert data["items"][0]["quantity"] == 3


@pytest.mark.django_db
def test_get_order_not_found_returns_404(client):
    r = client.get(DETAIL_URL.format(oid=424242))
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Order not found"}


@pytest.mark.django_db
def test_list_orders_newest_first_with_filters(client, placed):
    first = placed("a@example.com")
    second = placed("b@example.com")
    third = placed("a@example.com")
    Order.objects.filter(pk=second["id"]).update(status="processing")

    ids = [o["id"] for o in client.get(LIST_URL).json()["data"]]
    assert ids == [third["id"], second["id"], first["id"]]

    by_email = client.get(LIST_URL, {"customer_email": "a@example.com"}).json()["data"]
    assert [o["id"] for o in by_email] == [third["id"], first["id"]]
    assert all(len(o["items"]) == 1 for o in by_email)

    by_status = client.get(LIST_URL, {"status": "processing"}).json()["data"]
    assert [o["id"] for o in by_status] == [second["id"]]

    limited = client.get(LIST_URL, {"limit": 1}).json()["data"]
    assert [o["id"] for o in limited] == [third["id"]]

    assert client.get(LIST_URL, {"limit": "zero"}).status_code == 400
