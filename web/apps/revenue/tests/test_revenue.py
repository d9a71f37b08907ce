from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

import pytest

from apps.orders.models import Order
from apps.revenue.domain import analytics, overview, period_label, record_order_revenue
from apps.revenue.models import RevenueTransaction

OVERVIEW_URL = "/api/admin/revenue/overview/"
ANALYTICS_URL = "/api/admin/revenue/analytics/"

TODAY = date(2024, 5, 15)


def at(y, m, d, h=12):
    return datetime(y, m, d, h, tzinfo=dt_timezone.utc)


def txn(total, when, method="stripe", ref=None):
    n = RevenueTransaction.objects.count() + 1
    return RevenueTransaction.objects.create(
        reference_number=ref or f"ORD-TEST-{n}",
        subtotal=Decimal(total),
        total=Decimal(total),
        payment_method=method,
        transaction_date=when,
    )


@pytest.mark.django_db
def test_record_order_revenue_once_per_order():
    order = Order.objects.create(
        order_number="ORD-20240515-AAAA0001",
        customer_name="Asha",
        subtotal=Decimal("25.00"),
        tax=Decimal("4.50"),
        total=Decimal("29.50"),
    )
    first = record_order_revenue(order)
    second = record_order_revenue(order)
    assert first.pk == second.pk
    assert RevenueTransaction.objects.count() == 1
    assert first.reference_number == order.order_number
    assert first.total == Decimal("29.50")
    assert first.tax == Decimal("4.50")


@pytest.mark.django_db
def test_overview_totals_and_growth():
    txn("100.00", at(2024, 5, 15))
    txn("50.00", at(2024, 5, 15), method="upi")
    txn("100.00", at(2024, 5, 14))
    txn("300.00", at(2024, 4, 10))
    txn("10.00", at(2023, 12, 31))

    data = overview(today=TODAY)
    assert data["total"]["revenue"] == Decimal("560.00")
    assert data["total"]["transactions"] == 5
    assert data["total"]["averageValue"] == Decimal("112.00")
    assert data["today"] == {"revenue": Decimal("150.00"), "transactions": 2, "growth": 50.0}
    assert data["month"]["revenue"] == Decimal("250.00")
    assert data["month"]["growth"] == round((250 - 300) / 300 * 100, 2)
    assert data["year"] == {"revenue": Decimal("550.00"), "transactions": 4}
    assert data["bySource"] == {"order": {"total": Decimal("560.00"), "count": 5}}
    assert [m["payment_method"] for m in data["paymentMethods"]] == ["stripe", "upi"]
    assert len(data["recentTransactions"]) == 5
    assert data["recentTransactions"][0]["transaction_date"] >= data["recentTransactions"][-1]["transaction_date"]


@pytest.mark.django_db
def test_overview_on_empty_ledger():
    data = overview(today=TODAY)
    assert data["total"]["revenue"] == Decimal("0")
    assert data["total"]["averageValue"] == Decimal("0")
    assert data["today"]["growth"] == 0.0
    assert data["recentTransactions"] == []


@pytest.mark.django_db
def test_analytics_by_month_in_default_window():
    txn("100.00", at(2024, 5, 1))
    txn("20.00", at(2024, 5, 2))
    txn("70.00", at(2024, 3, 9))
    txn("999.00", at(2022, 1, 1))  # outside the 12-month window

    data = analytics(period="month", today=TODAY)
    assert [(r["period"], r["revenue"], r["transactions"]) for r in data["revenueOverTime"]] == [
        ("2024-03", Decimal("70.00"), 1),
        ("2024-05", Decimal("120.00"), 2),
    ]
    assert data["topDays"][0]["revenue"] == Decimal("100.00")
    assert data["averages"]["dailyRevenue"] == Decimal("63.33")
    assert data["averages"]["dailyTransactions"] == 1.0


@pytest.mark.django_db
def test_analytics_explicit_range_and_type_filter():
    txn("10.00", at(2024, 1, 1))
    txn("20.00", at(2024, 1, 2))
    txn("30.00", at(2024, 1, 3))

    data = analytics(period="day", start_date=date(2024, 1, 2), end_date=date(2024, 1, 3), today=TODAY)
    assert [r["period"] for r in data["revenueOverTime"]] == ["2024-01-02", "2024-01-03"]

    data = analytics(period="day", start_date=date(2024, 1, 1), end_date=date(2024, 1, 3), transaction_type="refund")
    assert data["revenueOverTime"] == []
    assert data["averages"] == {"dailyRevenue": Decimal("0.00"), "dailyTransactions": 0}


def test_period_labels():
    d = datetime(2024, 1, 1)
    assert period_label("day", d) == "2024-01-01"
    assert period_label("week", d) == "2024-W01"
    assert period_label("month", d) == "2024-01"
    assert period_label("year", d) == "2024"


@pytest.mark.django_db
def test_revenue_endpoints(client):
    txn("42.00", at(2024, 5, 1))
    r = client.get(OVERVIEW_URL)
    assert r.status_code == 200
    assert r.json()["data"]["total"]["revenue"] == 42

    r = client.get(ANALYTICS_URL, {"period": "year", "startDate": "2024-01-01", "endDate": "2024-12-31"})
    assert r.status_code == 200
    assert r.json()["data"]["revenueOverTime"][0]["period"] == "2024"

    assert client.get(ANALYTICS_URL, {"period": "fortnight"}).status_code == 400
    assert client.get(ANALYTICS_URL, {"startDate": "not-a-date"}).status_code == 400
