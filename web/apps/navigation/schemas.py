"""Request and read schemas for navigation items and social links."""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class NavItemDTO(BaseModel):
    """Body of ``POST /api/nav/`` and ``PUT /api/nav/<id>/``.

    A PUT replaces the whole item, so omitted fields go back to their
    defaults.
    """

    label: str = Field(min_length=1, max_length=100)
    href: str = Field(min_length=1, max_length=500)
    parent_id: Optional[int] = None
    type: str = Field("link", min_length=1, max_length=32)
    target: Literal["_self", "_blank"] = "_self"
    icon: Optional[str] = Field(None, max_length=64)
    display_order: int = 0
    is_active: bool = True
    location: str = Field("header", min_length=1, max_length=32)
    meta: Optional[dict[str, Any]] = None


class SocialLinkDTO(BaseModel):
    platform: str = Field(min_length=1, max_length=64)
    url: str = Field(min_length=1, max_length=500)
    icon: str = Field(min_length=1, max_length=64)
    display_order: int = 0
    is_active: bool = True


class NavItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    label: str
    href: str
    parent_id: Optional[int] = None
    type: str
    target: str
    icon: str
    display_order: int
    is_active: bool
    location: str
    meta: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class SocialLinkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    platform: str
    url: str
    icon: str
    display_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
