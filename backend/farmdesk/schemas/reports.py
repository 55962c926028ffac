# backend/farmdesk/schemas/reports.py

from datetime import date
from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TrendPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ReportPeriod(str, Enum):
    MONTH = "month"
    YEAR = "year"


class ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CategoryTotal(ReportModel):
    category: str
    total: float
    count: int


class TrendBucket(ReportModel):
    period: str
    total: float
    categories: Dict[str, float] = Field(default_factory=dict)


class FarmTotal(ReportModel):
    farm_id: int
    total: float
    categories: Dict[str, float] = Field(default_factory=dict)


class MonthSummary(ReportModel):
    month: int
    label: str
    income: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0


class MonthlyTotal(ReportModel):
    total: float
    count: int
    items: list = Field(default_factory=list)


class ReportSummary(ReportModel):
    period: ReportPeriod
    start_date: date
    end_date: date
    total_income: float
    total_expenses: float
    profit_loss: float
    profit_margin: float
    monthly_data: List[MonthSummary] = Field(default_factory=list)
    income_breakdown: List[CategoryTotal] = Field(default_factory=list)
    expense_breakdown: List[CategoryTotal] = Field(default_factory=list)

    @property
    def is_profitable(self) -> bool:
        return self.profit_loss >= 0
