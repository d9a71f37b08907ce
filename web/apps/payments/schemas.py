"""Request schemas for the payment endpoints (camelCase, as clients send them)."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class SavePaymentLinkDTO(BaseModel):
    orderId: int
    stripePaymentLinkUrl: str = Field(min_length=1, max_length=500)
    stripeProductId: Optional[str] = Field(None, max_length=255)
    stripePriceId: Optional[str] = Field(None, max_length=255)
    stripePaymentLinkId: Optional[str] = Field(None, max_length=255)


class CreatePaymentDTO(BaseModel):
    orderId: int


class ConfirmPaymentDTO(BaseModel):
    orderId: int
    paymentStatus: Literal["paid", "completed", "failed"]
