"""Payment Link Association.

Records the payment provider's references (product, price, payment link)
against an order, reports an order's payment status, asks the provider for
a new payment link, and applies the provider's payment verdict.

Creating the link is the only outbound call. It goes through a
``PaymentProviderPort`` so tests and local runs use an in-process stub.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from django.db import transaction

from apps.common.errors import Conflict, NotFound, ValidationError
from apps.orders.domain import PAID_PAYMENT_STATUSES, OrderStatus, PaymentStatus
from apps.orders.models import Order
from apps.revenue.domain import record_order_revenue

logger = logging.getLogger("storefront.payments")

PAID_STATUSES = PAID_PAYMENT_STATUSES


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class PaymentLinkRefs:
    """Provider-side identifiers of a payment link."""

    url: str
    product_id: str = ""
    price_id: str = ""
    payment_link_id: str = ""


@dataclass(frozen=True)
class LinkRequest:
    order_id: int
    order_number: str
    amount: Decimal
    currency: str
    customer_email: str = ""


# ---- Ports ----
class PaymentProviderPort(Protocol):
    def create_payment_link(self, req: LinkRequest, idempotency_key: Optional[str] = None) -> PaymentLinkRefs:
        """Create a single-use payment link charging ``req.amount``.

        Raises:
            UpstreamUnavailable: If the provider cannot be reached or
                rejects the request.
        """
        raise NotImplementedError()


def is_paid(payment_status: str) -> bool:
    return payment_status in PAID_STATUSES


def _get_order(order_id: int, lock: bool = False) -> Order:
    qs = Order.objects.select_for_update() if lock else Order.objects
    try:
        return qs.get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound("Order not found")


def payment_status_view(order: Order) -> dict:
    return {
        "orderId": order.id,
        "orderNumber": order.order_number,
        "paymentStatus": order.payment_status,
        "paymentMethod": order.payment_method,
        "total": order.total,
        "isPaid": is_paid(order.payment_status),
    }


def payment_link_view(order: Order) -> dict:
    return {
        "orderId": order.id,
        "orderNumber": order.order_number,
        "paymentUrl": order.stripe_payment_link_url or None,
        "paymentLinkId": order.stripe_payment_link_id or None,
    }


# ---- Service ----
class PaymentService:
    def __init__(self, provider: Optional[PaymentProviderPort] = None, currency: str = "inr"):
        self.provider = provider
        self.currency = currency

    def attach_payment_link(self, order_id: int, refs: PaymentLinkRefs) -> Order:
        """Store provider references on an order, overwriting earlier ones.

        Raises:
            NotFound: If the order does not exist.
        """
        with transaction.atomic():
            order = _get_order(order_id, lock=True)
            order.stripe_product_id = refs.product_id or ""
            order.stripe_price_id = refs.price_id or ""
            order.stripe_payment_link_id = refs.payment_link_id or ""
            order.stripe_payment_link_url = refs.url
            order.save(
                update_fields=[
                    "stripe_product_id",
                    "stripe_price_id",
                    "stripe_payment_link_id",
                    "stripe_payment_link_url",
                    "updated_at",
                ]
            )
        logger.info("payment link attached", extra={"order_id": order_id, "payment_link_id": refs.payment_link_id})
        return order

    def get_payment_status(self, order_id: int) -> dict:
        return payment_status_view(_get_order(order_id))

    def create_payment_link(self, order_id: int) -> tuple[dict, bool]:
        """Ask the provider for a payment link and attach it.

        An order that already has a link gets it back unchanged, so the
        call is safe to repeat.

        Returns:
            tuple[dict, bool]: The link view and whether a new link was
            created.

        Raises:
            NotFound: Unknown order.
            Conflict: Order is cancelled or already paid.
            UpstreamUnavailable: Provider unreachable or circuit open.
        """
        order = _get_order(order_id)
        if order.stripe_payment_link_url:
            return payment_link_view(order), False
        if order.status == OrderStatus.CANCELLED.value:
            raise Conflict("Cannot create a payment link for a cancelled order")
        if is_paid(order.payment_status):
            raise Conflict("Order is already paid")

        req = LinkRequest(
            order_id=order.id,
            order_number=order.order_number,
            amount=order.total,
            currency=self.currency,
            customer_email=order.customer_email,
        )
        # Stable per order so provider-side retries never create two links
        refs = self.provider.create_payment_link(req, idempotency_key=f"payment-link-{order.order_number}")
        order = self.attach_payment_link(order.id, refs)
        return payment_link_view(order), True

    def confirm_payment(self, order_id: int, payment_status: str) -> dict:
        """Apply the provider's verdict to an order.

        ``paid``/``completed`` moves a pending order to processing and writes
        one revenue transaction; repeating it changes nothing. ``failed``
        only records the payment status.

        Raises:
            ValidationError: Unknown payment status.
            NotFound: Unknown order.
            Conflict: Cancelled order, or a failure reported after payment.
        """
        allowed = PAID_STATUSES | {PaymentStatus.FAILED.value}
        if payment_status not in allowed:
            raise ValidationError(f"paymentStatus must be one of {', '.join(sorted(allowed))}")

        with transaction.atomic():
            order = _get_order(order_id, lock=True)
            if order.status == OrderStatus.CANCELLED.value:
                raise Conflict("Order is cancelled")

            if is_paid(payment_status):
                if not is_paid(order.payment_status):
                    order.payment_status = payment_status
                    if order.status == OrderStatus.PENDING.value:
                        order.status = OrderStatus.PROCESSING.value
                    order.save(update_fields=["payment_status", "status", "updated_at"])
                    logger.info("payment confirmed", extra={"order_id": order.id, "total": str(order.total)})
                record_order_revenue(order)
            else:
                if is_paid(order.payment_status):
                    raise Conflict("Payment was already confirmed")
                order.payment_status = payment_status
                order.save(update_fields=["payment_status", "updated_at"])
                logger.warning("payment failed", extra={"order_id": order.id})

        return payment_status_view(order)
