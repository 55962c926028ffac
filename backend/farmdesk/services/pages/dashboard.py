# backend/farmdesk/services/pages/dashboard.py

from datetime import date
from typing import Dict, List, Optional

from farmdesk.schemas.crop import ACTIVE_STATUSES, Crop
from farmdesk.schemas.expense import Expense
from farmdesk.schemas.income import Income
from farmdesk.schemas.task import Task
from farmdesk.schemas.weather import WeatherDay
from farmdesk.services import aggregation_service as agg
from farmdesk.services.pages.base import PageController, gather_all

ACTIVE_CROP_LIMIT = 4


class DashboardPage(PageController):
    page = "dashboard"
    load_error_message = "Failed to load dashboard data"

    def __init__(self, registry, notifier=None, today: Optional[date] = None):
        super().__init__(registry, notifier)
        self.today = today or date.today()
        self.tasks: List[Task] = []
        self.crops: List[Crop] = []
        self.weather: Optional[WeatherDay] = None
        self.expenses: List[Expense] = []
        self.income: List[Income] = []

    async def load(self) -> bool:
        async def fetch():
            return await gather_all(
                self.registry.tasks.get_todays_tasks(self.today),
                self.registry.crops.get_all(),
                self.registry.weather.get_todays_weather(self.today),
                self.registry.expenses.get_all(),
                self.registry.income.get_all(),
            )

        def apply(result):
            self.tasks, self.crops, self.weather, self.expenses, self.income = result

        return await self._run_load(fetch, apply)

    def active_crops(self) -> List[Crop]:
        return [c for c in self.crops if c.status in ACTIVE_STATUSES][:ACTIVE_CROP_LIMIT]

    def month_expenses(self) -> float:
        return agg.current_month_total(self.expenses, self.today)

    def month_income(self) -> float:
        return agg.current_month_total(self.income, self.today)

    def task_counts(self) -> Dict[str, int]:
        completed = sum(1 for t in self.tasks if t.completed)
        return {"completed": completed, "pending": len(self.tasks) - completed}

    async def toggle_task(self, task_id: int) -> Task:
        task = await self._mutate(
            self.registry.tasks.toggle_complete(task_id),
            "Task updated",
            "Failed to update task",
            apply=self._replacing("tasks"),
        )
        return task
