"""Pydantic schemas for the catalog.

Input schemas validate query strings and request bodies; read schemas are
built from model instances (``from_attributes``) and dumped into the
response envelope.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductFilter(BaseModel):
    """Filters, ordering and paging for the product listing.

    Attributes:
        category_id: Exact category match.
        min_price: Inclusive lower price bound.
        max_price: Inclusive upper price bound.
        is_featured: True/False to filter, None to ignore the flag.
        is_active: Only active products unless explicitly False.
        search: Case-insensitive substring over name, description and sku.
        sort_by: Column to order by.
        sort_order: ``asc`` or ``desc``.
        page: 1-based page number.
        limit: Page size.
    """

    category_id: Optional[int] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    is_featured: Optional[bool] = None
    is_active: bool = True
    search: Optional[str] = Field(None, max_length=200)
    sort_by: Literal["created_at", "name", "price", "stock"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"
    page: int = Field(1, ge=1)
    limit: int = Field(12, ge=1, le=100)


class ProductImageIn(BaseModel):
    image_url: str = Field(min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, max_length=255)
    display_order: Optional[int] = None


class ProductCreateDTO(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category_id: int
    slug: Optional[str] = Field(None, max_length=255)
    sku: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    long_description: Optional[str] = None
    compare_at_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    cost_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(0, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    is_featured: bool = False
    is_active: bool = True
    images: list[ProductImageIn] = []


class CategoryCreateDTO(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)
    display_order: int = 0
    is_active: bool = True


class ProductImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    image_url: str
    alt_text: str
    display_order: int
    is_primary: bool


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    sku: str
    description: str
    long_description: str
    category_id: int
    price: Decimal
    compare_at_price: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    stock_quantity: int
    low_stock_threshold: int
    is_featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    parent_id: Optional[int] = None
    description: str
    image_url: str
    display_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
