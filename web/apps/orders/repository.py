"""Repository layer for persisting orders.

``OrderRepository`` implements the order store port on the Django ORM and
also serves the read side of the API (listing and detail with nested
items). ``DjangoUnitOfWork`` wraps a domain operation in one database
transaction and reports database failures as ``StorageError``.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from django.db import DatabaseError, transaction
from django.db.models import Prefetch

from apps.common.errors import NotFound, StorageError

from .domain import LineRequest, LockedOrder, NewOrder, OrderStorePort, PricedLine, UnitOfWork
from .models import Order, OrderItem
from .schemas import OrderRead

logger = logging.getLogger("storefront.orders")


class DjangoUnitOfWork(UnitOfWork):
    @contextmanager
    def atomic(self):
        try:
            with transaction.atomic():
                yield
        except DatabaseError as e:
            logger.exception("order transaction failed")
            raise StorageError("Failed to save order") from e


class OrderRepository(OrderStorePort):
    """Persist and read orders with the Django ORM."""

    def insert_order(self, order: NewOrder) -> int:
        """Insert the order header in ``pending``/``pending`` state.

        Returns:
            The new order's primary key.
        """
        c = order.customer
        t = order.totals
        obj = Order.objects.create(
            order_number=order.order_number,
            customer_name=c.name or "",
            customer_email=c.email or "",
            customer_phone=c.phone or "",
            shipping_address=c.shipping_address,
            billing_address=c.billing_address,
            subtotal=t.subtotal,
            tax=t.tax,
            shipping_cost=t.shipping,
            discount=t.discount,
            total=t.total,
            status=Order.Status.PENDING,
            payment_method=order.payment_method,
            payment_status=Order.PaymentStatus.PENDING,
            notes=order.notes,
        )
        return obj.id

    def insert_item(self, order_id: int, line: PricedLine) -> None:
        OrderItem.objects.create(
            order_id=order_id,
            product_id=line.product_id,
            product_name=line.product_name,
            product_sku=line.product_sku,
            product_image=line.product_image,
            quantity=line.quantity,
            unit_price=line.unit_price,
            subtotal=line.subtotal,
        )

    def lock_for_update(self, order_id: int) -> LockedOrder:
        try:
            order = Order.objects.select_for_update().get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound("Order not found")
        items = [
            LineRequest(product_id=pid, quantity=qty)
            for pid, qty in order.items.values_list("product_id", "quantity")
            if pid is not None
        ]
        return LockedOrder(status=order.status, payment_status=order.payment_status, items=items)

    def set_status(self, order_id: int, status: str) -> None:
        order = Order.objects.get(pk=order_id)
        order.status = status
        order.save(update_fields=["status", "updated_at"])

    # ---- read side ----
    def _with_items(self):
        return Order.objects.prefetch_related(Prefetch("items", queryset=OrderItem.objects.order_by("id")))

    def get_order(self, order_id: int) -> dict:
        try:
            order = self._with_items().get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound("Order not found")
        return OrderRead.model_validate(order).model_dump()

    def list_orders(self, status: Optional[str] = None, customer_email: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        """Orders newest first, each with its items.

        Args:
            status: Exact status match.
            customer_email: Exact email match.
            limit: Maximum number of orders returned.
        """
        qs = self._with_items().order_by("-created_at", "-id")
        if status:
            qs = qs.filter(status=status)
        if customer_email:
            qs = qs.filter(customer_email=customer_email)
        if limit:
            qs = qs[:limit]
        return [OrderRead.model_validate(o).model_dump() for o in qs]
