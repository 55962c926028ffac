# backend/farmdesk/schemas/income.py

import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from farmdesk.schemas.common import RecordModel, blank_to_none, date_only


class IncomeCategory(str, Enum):
    SALES = "sales"
    MARKET = "market"
    CONTRACT = "contract"
    DIRECT = "direct"
    WHOLESALE = "wholesale"
    OTHER = "other"


class Income(RecordModel):
    farm_id: Optional[int] = None
    crop_id: Optional[int] = None
    source: str
    description: str = ""
    amount: float = Field(gt=0)
    category: IncomeCategory
    date: datetime.date

    @field_validator("farm_id", "crop_id", mode="before")
    @classmethod
    def _blank_fk(cls, v):
        return blank_to_none(v)

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return date_only(v)
