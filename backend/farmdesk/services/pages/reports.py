# backend/farmdesk/services/pages/reports.py

from datetime import date
from typing import Optional

from farmdesk.schemas.reports import ReportPeriod, ReportSummary
from farmdesk.services import aggregation_service as agg
from farmdesk.services.pages.base import PageController, gather_all


class ReportsPage(PageController):
    page = "reports"
    load_error_message = "Failed to load report data"

    def __init__(self, registry, notifier=None, period: ReportPeriod = ReportPeriod.MONTH, anchor: Optional[date] = None):
        super().__init__(registry, notifier)
        self.period = ReportPeriod(period)
        self.anchor = anchor or date.today()
        self.report: Optional[ReportSummary] = None

    async def load(self) -> bool:
        period, anchor = self.period, self.anchor
        start, end = agg.period_bounds(period, anchor)

        async def fetch():
            return await gather_all(
                self.registry.income.get_by_date_range(start, end),
                self.registry.expenses.get_by_date_range(start, end),
            )

        def apply(result):
            incomes, expenses = result
            self.report = agg.build_report(incomes, expenses, period, anchor)

        return await self._run_load(fetch, apply)

    async def set_period(self, period: ReportPeriod) -> bool:
        self.period = ReportPeriod(period)
        return await self.load()

    async def step(self, direction: int) -> bool:
        """-1 for the previous period, 1 for the next."""
        self.anchor = agg.shift_period(self.period, self.anchor, direction)
        return await self.load()
