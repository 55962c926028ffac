# backend/farmdesk/schemas/expense.py

import datetime
from enum import Enum

from pydantic import Field, field_validator

from farmdesk.schemas.common import RecordModel, date_only


class ExpenseCategory(str, Enum):
    SEEDS = "seeds"
    FERTILIZER = "fertilizer"
    EQUIPMENT = "equipment"
    LABOR = "labor"
    FUEL = "fuel"
    SUPPLIES = "supplies"
    MAINTENANCE = "maintenance"
    INSURANCE = "insurance"
    UTILITIES = "utilities"
    OTHER = "other"


class Expense(RecordModel):
    farm_id: int
    amount: float = Field(gt=0)
    category: ExpenseCategory
    description: str = ""
    date: datetime.date

    @field_validator("date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return date_only(v)


class ExpenseView(Expense):
    farm_name: str
