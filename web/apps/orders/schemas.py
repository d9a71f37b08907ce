"""Pydantic schemas for orders.

This module exposes the request schemas used by the orders API and the
read schemas that shape orders (with their items) into responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderItemIn(BaseModel):
    """Input schema for a single order line item.

    Attributes:
        product_id: Catalog product to buy.
        quantity: Positive number of units.
        unit_price: Price the client saw. Accepted for compatibility; the
            catalog price is what gets charged.
        product_name: Display name the client saw; ignored likewise.
    """

    product_id: int
    quantity: int = Field(gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0)
    product_name: Optional[str] = None
    product_sku: Optional[str] = None
    product_image: Optional[str] = None


class PlaceOrderDTO(BaseModel):
    """Schema for creating an order.

    ``tax``, ``shipping_cost`` and ``discount`` may be sent by older
    clients; they are validated but the server computes its own.
    """

    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=50)
    shipping_address: Any = None
    billing_address: Any = None
    items: list[OrderItemIn] = []
    tax: Optional[Decimal] = Field(None, ge=0)
    shipping_cost: Optional[Decimal] = Field(None, ge=0)
    discount: Optional[Decimal] = Field(None, ge=0)
    payment_method: str = Field("stripe", min_length=1, max_length=32)
    notes: Optional[str] = None


class OrderStatusDTO(BaseModel):
    status: str = Field(min_length=1, max_length=16)


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: str
    product_sku: str
    product_image: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: Any = None
    billing_address: Any = None
    subtotal: Decimal
    tax: Decimal
    shipping_cost: Decimal
    discount: Decimal
    total: Decimal
    status: str
    payment_method: str
    payment_status: str
    stripe_product_id: str
    stripe_price_id: str
    stripe_payment_link_id: str
    stripe_payment_link_url: str
    notes: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemRead] = []

    @field_validator("items", mode="before")
    @classmethod
    def _related_items(cls, v):
        # Related managers are not iterable; read the (prefetched) rows
        if hasattr(v, "all"):
            return list(v.all())
        return v
