"""Service provider helpers for wiring OrderService with ports.

``get_order_service`` returns an ``OrderService`` wired to the Django ORM
adapters. Views call it per request; tests monkeypatch it to inject
controlled ports.
"""

from .adapters import CatalogAdapter, InventoryAdapter, StoreSettingsAdapter
from .domain import OrderService
from .repository import DjangoUnitOfWork, OrderRepository


def get_order_service() -> OrderService:
    """Return a configured OrderService instance.

    Returns:
        OrderService: A service backed by the ORM adapters and one
        database transaction per operation.
    """
    return OrderService(
        catalog=CatalogAdapter(),
        inventory=InventoryAdapter(),
        orders=OrderRepository(),
        settings=StoreSettingsAdapter(),
        uow=DjangoUnitOfWork(),
    )
