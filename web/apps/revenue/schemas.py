from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field


class AnalyticsQuery(BaseModel):
    period: Literal["day", "week", "month", "year"] = "month"
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    type: Optional[str] = Field(None, max_length=32)
