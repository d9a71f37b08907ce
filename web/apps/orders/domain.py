"""Domain models, ports and service for orders.

This module contains the dataclasses describing an order request and its
priced lines, the protocols (ports) for the collaborators the workflow
needs (catalog lookup, inventory, order store, settings, unit of work),
and the ``OrderService`` that places orders and moves them through their
status lifecycle.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ContextManager, Iterable, List, Optional, Protocol

from apps.common.errors import Conflict, InsufficientStock, ValidationError

from .pricing import PricingSettings, Totals, compute_totals, to_money

logger = logging.getLogger("storefront.orders")


# ---- Enums ----
class OrderStatus(str, Enum):
    """Order lifecycle.

    ``pending -> processing -> completed``; ``pending`` and ``processing``
    orders may also be ``cancelled``. Completed and cancelled are final.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "completed"
    FAILED = "failed"


PAID_PAYMENT_STATUSES = {PaymentStatus.PAID.value, PaymentStatus.COMPLETED.value}


ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class LineRequest:
    """A cart line as submitted: which product and how many."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class Customer:
    name: str = ""
    email: str = ""
    phone: str = ""
    shipping_address: Any = None
    billing_address: Any = None


@dataclass
class PlaceOrder:
    """Command to place an order.

    Attributes:
        customer: Contact and address details.
        items: Requested lines; must not be empty.
        payment_method: Provider name recorded on the order.
        notes: Free text from the customer.
    """

    customer: Customer
    items: List[LineRequest]
    payment_method: str = "stripe"
    notes: str = ""


@dataclass(frozen=True)
class CatalogEntry:
    """Authoritative product data used to price a line."""

    product_id: int
    name: str
    sku: str
    price: Decimal
    image: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class PricedLine:
    """A line priced from the catalog; snapshotted into the order item."""

    product_id: int
    product_name: str
    product_sku: str
    product_image: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass
class NewOrder:
    order_number: str
    customer: Customer
    totals: Totals
    payment_method: str = "stripe"
    notes: str = ""
    lines: List[PricedLine] = field(default_factory=list)


@dataclass(frozen=True)
class LockedOrder:
    """Current state of an order held under a row lock."""

    status: str
    payment_status: str
    items: List[LineRequest] = field(default_factory=list)


@dataclass(frozen=True)
class LowStock:
    product_id: int
    name: str
    stock_quantity: int
    threshold: int


# ---- Ports (DIP) ----
class CatalogPort(Protocol):
    def lookup(self, product_ids: Iterable[int]) -> dict[int, CatalogEntry]:
        """Return catalog entries keyed by product id; unknown ids are absent."""
        raise NotImplementedError()


class InventoryPort(Protocol):
    def reserve(self, product_id: int, quantity: int) -> bool:
        """Take ``quantity`` units out of stock if that many are available.

        Returns:
            True if the stock was decremented, False on shortfall. Never
            leaves stock negative.
        """
        raise NotImplementedError()

    def release(self, product_id: int, quantity: int) -> None:
        """Put ``quantity`` units back into stock."""
        raise NotImplementedError()

    def low_stock(self, product_ids: Iterable[int]) -> List[LowStock]:
        raise NotImplementedError()


class OrderStorePort(Protocol):
    def insert_order(self, order: NewOrder) -> int:
        """Persist the order header and return its id."""
        raise NotImplementedError()

    def insert_item(self, order_id: int, line: PricedLine) -> None:
        raise NotImplementedError()

    def lock_for_update(self, order_id: int) -> LockedOrder:
        """Lock an order row for the rest of the transaction.

        Returns:
            The order's status, payment status and lines.

        Raises:
            NotFound: If the order does not exist.
        """
        raise NotImplementedError()

    def set_status(self, order_id: int, status: str) -> None:
        raise NotImplementedError()


class SettingsPort(Protocol):
    def pricing(self) -> PricingSettings:
        raise NotImplementedError()


class UnitOfWork(Protocol):
    def atomic(self) -> ContextManager[None]:
        """All-or-nothing scope for the writes of one operation."""
        raise NotImplementedError()


def generate_order_number(now: datetime) -> str:
    """``ORD-YYYYMMDD-XXXXXXXX`` with 32 random bits per day."""
    return f"ORD-{now:%Y%m%d}-{secrets.token_hex(4).upper()}"


# ---- Domain service ----
class OrderService:
    """Places orders and applies status transitions.

    Pricing is server-authoritative: unit prices come from the catalog,
    never from the request. The order header, its items and every stock
    decrement are written inside one unit of work, so a shortfall on any
    line leaves no order behind and no stock touched.
    """

    def __init__(
        self,
        catalog: CatalogPort,
        inventory: InventoryPort,
        orders: OrderStorePort,
        settings: SettingsPort,
        uow: UnitOfWork,
        clock=None,
    ):
        self.catalog = catalog
        self.inventory = inventory
        self.orders = orders
        self.settings = settings
        self.uow = uow
        self.clock = clock or datetime.now

    def price_lines(self, items: List[LineRequest]) -> List[PricedLine]:
        """Price each line from the catalog.

        Raises:
            InsufficientStock: If a product is unknown or inactive.
        """
        entries = self.catalog.lookup({i.product_id for i in items})
        lines = []
        for item in items:
            entry = entries.get(item.product_id)
            if entry is None or not entry.is_active:
                raise InsufficientStock(item.product_id, entry.name if entry else None)
            unit_price = to_money(entry.price)
            lines.append(
                PricedLine(
                    product_id=entry.product_id,
                    product_name=entry.name,
                    product_sku=entry.sku,
                    product_image=entry.image,
                    quantity=item.quantity,
                    unit_price=unit_price,
                    subtotal=to_money(unit_price * item.quantity),
                )
            )
        return lines

    def place_order(self, cmd: PlaceOrder) -> int:
        """Validate, price, persist and reserve stock for an order.

        Args:
            cmd: The order request.

        Returns:
            int: Id of the persisted order.

        Raises:
            ValidationError: If the order has no items or a non-positive
                quantity.
            InsufficientStock: If any product is missing, inactive or short
                on stock. Nothing is persisted.
            StorageError: If the database fails. Nothing is persisted.
        """
        if not cmd.items:
            raise ValidationError("Order must have at least one item")
        if any(i.quantity <= 0 for i in cmd.items):
            raise ValidationError("Item quantity must be positive")

        lines = self.price_lines(cmd.items)
        subtotal = sum((line.subtotal for line in lines), Decimal("0"))
        totals = compute_totals(subtotal, self.settings.pricing())

        order = NewOrder(
            order_number=generate_order_number(self.clock()),
            customer=cmd.customer,
            totals=totals,
            payment_method=cmd.payment_method or "stripe",
            notes=cmd.notes or "",
            lines=lines,
        )

        with self.uow.atomic():
            order_id = self.orders.insert_order(order)
            for line in lines:
                if not self.inventory.reserve(line.product_id, line.quantity):
                    logger.warning(
                        "stock shortfall",
                        extra={"product_id": line.product_id, "quantity": line.quantity},
                    )
                    raise InsufficientStock(line.product_id, line.product_name)
                self.orders.insert_item(order_id, line)

        logger.info(
            "order placed",
            extra={"order_id": order_id, "order_number": order.order_number, "total": str(totals.total)},
        )
        self._report_low_stock([line.product_id for line in lines])
        return order_id

    def change_status(self, order_id: int, new_status: str) -> str:
        """Move an order to ``new_status``.

        Cancelling puts every item's quantity back into stock within the
        same unit of work. Paid orders cannot be cancelled here; the
        refund happens at the payment provider first.

        Returns:
            str: The new status.

        Raises:
            ValidationError: Unknown status value.
            NotFound: Unknown order.
            Conflict: Transition not allowed from the current status, or a
                cancel of a paid order.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(f"Unknown order status {new_status!r}")

        with self.uow.atomic():
            locked = self.orders.lock_for_update(order_id)
            current = OrderStatus(locked.status)
            if target not in ALLOWED_TRANSITIONS[current]:
                raise Conflict(f"Cannot change order status from {current.value} to {target.value}")
            if target is OrderStatus.CANCELLED:
                if locked.payment_status in PAID_PAYMENT_STATUSES:
                    raise Conflict("Cannot cancel a paid order")
                for item in locked.items:
                    self.inventory.release(item.product_id, item.quantity)
            self.orders.set_status(order_id, target.value)

        logger.info(
            "order status changed",
            extra={"order_id": order_id, "from": current.value, "to": target.value},
        )
        return target.value

    def _report_low_stock(self, product_ids: List[int]) -> None:
        for p in self.inventory.low_stock(product_ids):
            logger.warning(
                "low stock",
                extra={"product_id": p.product_id, "stock_quantity": p.stock_quantity, "threshold": p.threshold},
            )
