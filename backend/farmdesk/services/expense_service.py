# backend/farmdesk/services/expense_service.py

from datetime import date
from typing import Any, Dict, List, Optional

from farmdesk.schemas.expense import Expense
from farmdesk.schemas.reports import FarmTotal, TrendBucket, TrendPeriod
from farmdesk.services import aggregation_service as agg
from farmdesk.services.entity_service import EntityService, parse_id


class ExpenseService(EntityService[Expense]):
    model = Expense
    entity = "Expense"

    async def get_by_farm_id(self, farm_id: Any) -> List[Expense]:
        fid = parse_id(farm_id)
        with self._reporting("get_by_farm_id"):
            return [self._build(r) for r in await self.backend.fetch_where(farmId=fid)]

    async def get_by_date_range(self, start: date, end: date) -> List[Expense]:
        return agg.filter_by_date_range(await self.get_all(), start, end)

    async def get_summary_by_category(self, farm_id: Optional[Any] = None) -> Dict[str, float]:
        if farm_id:
            expenses = await self.get_by_farm_id(farm_id)
        else:
            expenses = await self.get_all()
        return agg.category_totals(expenses)

    async def get_trend_data(
        self,
        period: TrendPeriod = TrendPeriod.MONTHLY,
        farm_id: Optional[Any] = None,
    ) -> List[TrendBucket]:
        fid = parse_id(farm_id) if farm_id else None
        return agg.trend_series(await self.get_all(), TrendPeriod(period), fid)

    async def get_farm_comparison(self) -> Dict[int, FarmTotal]:
        return agg.farm_comparison(await self.get_all())
