# backend/farmdesk/services/income_service.py

from datetime import date
from typing import List

from farmdesk.core.exceptions import ValidationError
from farmdesk.schemas.income import Income
from farmdesk.schemas.reports import MonthlyTotal
from farmdesk.services import aggregation_service as agg
from farmdesk.services.entity_service import EntityService


class IncomeService(EntityService[Income]):
    model = Income
    entity = "Income"

    async def get_by_date_range(self, start: date, end: date) -> List[Income]:
        return agg.filter_by_date_range(await self.get_all(), start, end)

    async def get_by_category(self, category: str) -> List[Income]:
        return [i for i in await self.get_all() if agg.category_of(i) == category]

    async def get_monthly_total(self, month: int, year: int) -> MonthlyTotal:
        """`month` is 1-12."""
        if not 1 <= int(month) <= 12:
            raise ValidationError({"month": "Month must be between 1 and 12"})
        return agg.month_total(await self.get_all(), month, year)
