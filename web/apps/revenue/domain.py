"""Revenue ledger: one transaction per paid order, plus reporting.

``record_order_revenue`` is called when a payment is confirmed. The
overview and analytics functions aggregate the ledger in the database and
shape the results for the admin dashboard.
"""

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from django.db.models import Count, Sum
from django.db.models.functions import TruncDate, TruncDay, TruncMonth, TruncWeek, TruncYear
from django.utils import timezone

from .models import RevenueTransaction

logger = logging.getLogger("storefront.revenue")

ZERO = Decimal("0.00")

TRUNC = {
    "day": TruncDay,
    "week": TruncWeek,
    "month": TruncMonth,
    "year": TruncYear,
}


def record_order_revenue(order) -> RevenueTransaction:
    """Write the ledger row for a paid order; a second call is a no-op.

    Args:
        order: ``orders.Order`` instance whose payment was confirmed.
    """
    txn, created = RevenueTransaction.objects.get_or_create(
        order=order,
        defaults={
            "transaction_type": RevenueTransaction.Type.ORDER,
            "reference_number": order.order_number,
            "customer_name": order.customer_name,
            "subtotal": order.subtotal,
            "tax": order.tax,
            "discount": order.discount,
            "total": order.total,
            "payment_method": order.payment_method,
        },
    )
    if created:
        logger.info("revenue recorded", extra={"order_id": order.pk, "total": str(order.total)})
    return txn


def _totals(qs) -> dict:
    agg = qs.aggregate(total=Sum("total"), count=Count("id"))
    return {"revenue": agg["total"] or ZERO, "transactions": agg["count"]}


def _growth(current: Decimal, previous: Decimal) -> float:
    if previous <= 0:
        return 0.0
    return round(float((current - previous) / previous * 100), 2)


def _months_ago(d: date, n: int) -> date:
    y, m = divmod(d.year * 12 + d.month - 1 - n, 12)
    return d.replace(year=y, month=m + 1, day=min(d.day, calendar.monthrange(y, m + 1)[1]))


def overview(today: Optional[date] = None) -> dict:
    """All-time, today, month and year revenue with growth figures.

    Growth compares today with yesterday and this month with last month,
    in percent; it is 0 when the earlier figure is 0.
    """
    today = today or timezone.localdate()
    qs = RevenueTransaction.objects.all()

    agg = qs.aggregate(
        total=Sum("total"), subtotal=Sum("subtotal"), tax=Sum("tax"), discount=Sum("discount"), count=Count("id")
    )
    total = agg["total"] or ZERO
    count = agg["count"]

    today_totals = _totals(qs.filter(transaction_date__date=today))
    yesterday = _totals(qs.filter(transaction_date__date=today - timedelta(days=1)))
    month_totals = _totals(qs.filter(transaction_date__year=today.year, transaction_date__month=today.month))
    last_month = _months_ago(today, 1)
    prev_month = _totals(qs.filter(transaction_date__year=last_month.year, transaction_date__month=last_month.month))
    year_totals = _totals(qs.filter(transaction_date__year=today.year))

    by_source = {
        row["transaction_type"]: {"total": row["total"], "count": row["count"]}
        for row in qs.order_by().values("transaction_type").annotate(total=Sum("total"), count=Count("id"))
    }
    payment_methods = list(
        qs.order_by()
        .values("payment_method")
        .annotate(total=Sum("total"), count=Count("id"))
        .order_by("-total", "payment_method")
    )
    recent = list(
        qs.order_by("-transaction_date", "-id").values(
            "id", "transaction_type", "reference_number", "customer_name", "total", "payment_method", "transaction_date"
        )[:10]
    )

    return {
        "total": {
            "revenue": total,
            "subtotal": agg["subtotal"] or ZERO,
            "tax": agg["tax"] or ZERO,
            "discount": agg["discount"] or ZERO,
            "transactions": count,
            "averageValue": (total / count).quantize(Decimal("0.01")) if count else ZERO,
        },
        "today": {**today_totals, "growth": _growth(today_totals["revenue"], yesterday["revenue"])},
        "month": {**month_totals, "growth": _growth(month_totals["revenue"], prev_month["revenue"])},
        "year": year_totals,
        "bySource": by_source,
        "paymentMethods": payment_methods,
        "recentTransactions": recent,
    }


def period_label(period: str, value) -> str:
    if period == "day":
        return value.strftime("%Y-%m-%d")
    if period == "week":
        iso = value.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}"
    if period == "year":
        return value.strftime("%Y")
    return value.strftime("%Y-%m")


def default_start(period: str, today: date) -> date:
    if period == "day":
        return today - timedelta(days=30)
    if period == "week":
        return today - timedelta(weeks=12)
    if period == "year":
        return _months_ago(today, 60)
    return _months_ago(today, 12)


def analytics(
    period: str = "month",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    transaction_type: Optional[str] = None,
    today: Optional[date] = None,
) -> dict:
    """Revenue over time for the admin charts.

    Args:
        period: Bucket size: ``day``, ``week``, ``month`` or ``year``.
        start_date: Inclusive start; used only together with ``end_date``.
        end_date: Inclusive end.
        transaction_type: Restrict to one transaction type; ``all`` or
            None keeps every type.
        today: Reference date for the default window.

    Returns:
        dict: ``period``, ``revenueOverTime``, ``revenueBySource``,
        ``topDays``, ``paymentMethodTrends`` and daily ``averages``.
    """
    today = today or timezone.localdate()
    qs = RevenueTransaction.objects.order_by()
    if start_date and end_date:
        qs = qs.filter(transaction_date__date__range=(start_date, end_date))
    else:
        qs = qs.filter(transaction_date__date__gte=default_start(period, today))
    if transaction_type and transaction_type != "all":
        qs = qs.filter(transaction_type=transaction_type)

    bucketed = qs.annotate(bucket=TRUNC[period]("transaction_date"))

    over_time = [
        {
            "period": period_label(period, row["bucket"]),
            "revenue": row["revenue"],
            "subtotal": row["subtotal"],
            "tax": row["tax"],
            "discount": row["discount"],
            "transactions": row["transactions"],
        }
        for row in bucketed.values("bucket")
        .annotate(
            revenue=Sum("total"),
            subtotal=Sum("subtotal"),
            tax=Sum("tax"),
            discount=Sum("discount"),
            transactions=Count("id"),
        )
        .order_by("bucket")
    ]

    by_source = [
        {
            "period": period_label(period, row["bucket"]),
            "transaction_type": row["transaction_type"],
            "revenue": row["revenue"],
            "transactions": row["transactions"],
        }
        for row in bucketed.values("bucket", "transaction_type")
        .annotate(revenue=Sum("total"), transactions=Count("id"))
        .order_by("bucket", "transaction_type")
    ]

    daily = list(
        qs.annotate(day=TruncDate("transaction_date"))
        .values("day")
        .annotate(revenue=Sum("total"), transactions=Count("id"))
        .order_by("-revenue", "day")
    )
    top_days = [{"date": row["day"], "revenue": row["revenue"], "transactions": row["transactions"]} for row in daily[:10]]

    payment_trends = list(
        qs.values("payment_method").annotate(revenue=Sum("total"), transactions=Count("id")).order_by("-revenue")
    )

    if daily:
        avg_revenue = (sum(row["revenue"] for row in daily) / len(daily)).quantize(Decimal("0.01"))
        avg_transactions = round(sum(row["transactions"] for row in daily) / len(daily), 2)
    else:
        avg_revenue, avg_transactions = ZERO, 0

    return {
        "period": period,
        "revenueOverTime": over_time,
        "revenueBySource": by_source,
        "topDays": top_days,
        "paymentMethodTrends": payment_trends,
        "averages": {"dailyRevenue": avg_revenue, "dailyTransactions": avg_transactions},
    }
