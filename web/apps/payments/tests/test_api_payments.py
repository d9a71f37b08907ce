import pytest

from apps.orders.models import Order
from apps.revenue.models import RevenueTransaction

CHECK_URL = "/api/stripe/check-payment/"
SAVE_URL = "/api/stripe/save-payment-link/"
CREATE_URL = "/api/stripe/create-payment/"
CONFIRM_URL = "/api/stripe/confirm-payment/"


def post(client, url, payload):
    return client.post(url, data=payload, content_type="application/json")


@pytest.mark.django_db
def test_check_payment_requires_order_id(client):
    r = client.get(CHECK_URL)
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Order ID is required"}
    assert client.get(CHECK_URL, {"orderId": "abc"}).status_code == 400


@pytest.mark.django_db
def test_check_payment_unknown_order(client):
    r = client.get(CHECK_URL, {"orderId": 424242})
    assert r.status_code == 404
    assert r.json()["error"] == "Order not found"


@pytest.mark.django_db
def test_check_payment_status(client, make_order):
    o = make_order(total="29.50")
    data = client.get(CHECK_URL, {"orderId": o.id}).json()["data"]
    assert data == {
        "orderId": o.id,
        "orderNumber": o.order_number,
        "paymentStatus": "pending",
        "paymentMethod": "stripe",
        "total": 29.5,
        "isPaid": False,
    }

    for status, paid in (("paid", True), ("completed", True), ("failed", False)):
        Order.objects.filter(pk=o.pk).update(payment_status=status)
        assert client.get(CHECK_URL, {"orderId": o.id}).json()["data"]["isPaid"] is paid


@pytest.mark.django_db
def test_save_payment_link_overwrites(client, make_order):
    o = make_order()
    payload = {
        "orderId": o.id,
        "stripeProductId": "prod_1",
        "stripePriceId": "price_1",
        "stripePaymentLinkId": "plink_1",
        "stripePaymentLinkUrl": "https://buy.example/1",
    }
    r = post(client, SAVE_URL, payload)
    assert r.status_code == 200
    assert r.json()["data"]["paymentUrl"] == "https://buy.example/1"
    assert r.json()["message"] == "Stripe payment link saved successfully"

    # same call again is harmless; a new link replaces the old one
    assert post(client, SAVE_URL, payload).status_code == 200
    post(client, SAVE_URL, {"orderId": o.id, "stripePaymentLinkUrl": "https://buy.example/2"})
    o.refresh_from_db()
    assert o.stripe_payment_link_url == "https://buy.example/2"
    assert o.stripe_product_id == ""


@pytest.mark.django_db
def test_save_payment_link_validation_and_missing_order(client):
    assert post(client, SAVE_URL, {"orderId": 1}).status_code == 400
    r = post(client, SAVE_URL, {"orderId": 424242, "stripePaymentLinkUrl": "https://x"})
    assert r.status_code == 404


@pytest.mark.django_db
def test_create_payment_uses_stub_and_is_repeatable(client, make_order):
    o = make_order()
    r1 = post(client, CREATE_URL, {"orderId": o.id})
    assert r1.status_code == 201
    url = r1.json()["data"]["paymentUrl"]
    assert url.endswith(r1.json()["data"]["paymentLinkId"])

    r2 = post(client, CREATE_URL, {"orderId": o.id})
    assert r2.status_code == 200
    assert r2.json()["data"]["paymentUrl"] == url


@pytest.mark.django_db
def test_create_payment_refused_for_cancelled_order(client, make_order):
    o = make_order(status="cancelled")
    assert post(client, CREATE_URL, {"orderId": o.id}).status_code == 409


@pytest.mark.django_db
def test_confirm_paid_moves_to_processing_and_records_revenue_once(client, make_order):
    o = make_order(total="118.00")
    for _ in range(2):
        r = post(client, CONFIRM_URL, {"orderId": o.id, "paymentStatus": "paid"})
        assert r.status_code == 200
        assert r.json()["data"]["isPaid"] is True

    o.refresh_from_db()
    assert (o.status, o.payment_status) == ("processing", "paid")
    txns = RevenueTransaction.objects.filter(order=o)
    assert txns.count() == 1
    assert str(txns.get().total) == "118.00"


@pytest.mark.django_db
def test_confirm_failed_keeps_order_pending(client, make_order):
    o = make_order()
    r = post(client, CONFIRM_URL, {"orderId": o.id, "paymentStatus": "failed"})
    assert r.status_code == 200
    o.refresh_from_db()
    assert (o.status, o.payment_status) == ("pending", "failed")
    assert not RevenueTransaction.objects.exists()

    # a later successful payment still goes through
    post(client, CONFIRM_URL, {"orderId": o.id, "paymentStatus": "completed"})
    o.refresh_from_db()
    assert (o.status, o.payment_status) == ("processing", "completed")


@pytest.mark.django_db
def test_confirm_conflicts(client, make_order):
    paid = make_order(payment_status="paid", status="processing")
    assert post(client, CONFIRM_URL, {"orderId": paid.id, "paymentStatus": "failed"}).status_code == 409

    cancelled = make_order(status="cancelled")
    assert post(client, CONFIRM_URL, {"orderId": cancelled.id, "paymentStatus": "paid"}).status_code == 409

    assert post(client, CONFIRM_URL, {"orderId": paid.id, "paymentStatus": "refunded"}).status_code == 400
