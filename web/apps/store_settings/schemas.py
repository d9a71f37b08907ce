"""Request schemas for the settings endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class SettingUpdateDTO(BaseModel):
    key: str = Field(min_length=1, max_length=100)
    value: Any = None


class SettingCreateDTO(BaseModel):
    key: str = Field(min_length=1, max_length=100)
    value: Any = None
    type: Literal["string", "number", "boolean", "json"] = "string"
    description: str = ""
