# backend/farmdesk/services/pages/expenses.py

from typing import Any, Dict, List, Mapping

from farmdesk.schemas.expense import Expense, ExpenseView
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.filters import FilterState, SortKey, SortOrder
from farmdesk.schemas.reports import FarmTotal, TrendBucket, TrendPeriod
from farmdesk.services import aggregation_service as agg
from farmdesk.services.composer_service import compose_expenses
from farmdesk.services.filter_service import apply_filters, sort_records
from farmdesk.services.pages.base import PageController, gather_all
from farmdesk.services.validation_service import validate_expense


class ExpensesPage(PageController):
    page = "expenses"
    load_error_message = "Failed to load expenses"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.expenses: List[Expense] = []
        self.farms: List[Farm] = []
        self.filters = FilterState()

    async def load(self) -> bool:
        async def fetch():
            return await gather_all(self.registry.expenses.get_all(), self.registry.farms.get_all())

        def apply(result):
            self.expenses, self.farms = result

        return await self._run_load(fetch, apply)

    def visible(self) -> List[ExpenseView]:
        filtered = apply_filters(compose_expenses(self.expenses, self.farms), self.filters)
        return sort_records(filtered, SortKey.DATE, SortOrder.DESC)

    def total(self) -> float:
        return agg.total_amount(self.visible())

    def transaction_count(self) -> int:
        return len(self.visible())

    def category_totals(self) -> Dict[str, float]:
        """Per-category totals for the selected farm (all farms when none)."""
        farm_id = self.filters.farm_id
        scoped = [e for e in self.expenses if farm_id is None or e.farm_id == farm_id]
        return agg.category_totals(scoped)

    def chart_data(self, period: TrendPeriod = TrendPeriod.MONTHLY) -> Dict[str, Any]:
        trend: List[TrendBucket] = agg.trend_series(self.expenses, TrendPeriod(period), self.filters.farm_id)
        comparison: Dict[int, FarmTotal] = agg.farm_comparison(self.expenses)
        return {"trend": trend, "comparison": comparison}

    async def save(self, form: Mapping[str, Any]) -> Expense:
        payload = validate_expense(form)
        if self.editing_id is None:
            expense = await self._mutate(
                self.registry.expenses.create(payload),
                "Expense added successfully",
                "Failed to save expense",
                apply=self._appending("expenses", close_form=True),
            )
        else:
            expense = await self._mutate(
                self.registry.expenses.update(self.editing_id, payload),
                "Expense updated successfully",
                "Failed to save expense",
                apply=self._replacing("expenses", close_form=True),
            )
        return expense

    async def delete(self, expense_id: int) -> None:
        await self._mutate(
            self.registry.expenses.delete(expense_id),
            "Expense deleted successfully",
            "Failed to delete expense",
            apply=self._removing("expenses", expense_id),
        )
