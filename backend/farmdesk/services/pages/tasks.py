# backend/farmdesk/services/pages/tasks.py

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from farmdesk.core.utils_time import is_today, now_local
from farmdesk.schemas.crop import Crop
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.filters import FilterState, TaskStatusFilter
from farmdesk.schemas.task import Task, TaskView
from farmdesk.services.composer_service import compose_tasks
from farmdesk.services.filter_service import apply_filters, is_overdue, sort_tasks
from farmdesk.services.notification_service import NotifyLevel
from farmdesk.services.pages.base import PageController, gather_all
from farmdesk.services.validation_service import validate_task


class TasksPage(PageController):
    page = "tasks"
    load_error_message = "Failed to load tasks"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.tasks: List[Task] = []
        self.farms: List[Farm] = []
        self.crops: List[Crop] = []
        self.filters = FilterState(task_status=TaskStatusFilter.PENDING)

    async def load(self) -> bool:
        async def fetch():
            return await gather_all(
                self.registry.tasks.get_all(),
                self.registry.farms.get_all(),
                self.registry.crops.get_all(),
            )

        def apply(result):
            self.tasks, self.farms, self.crops = result

        return await self._run_load(fetch, apply)

    def visible(self, now: Optional[datetime] = None) -> List[TaskView]:
        composed = compose_tasks(self.tasks, self.farms, self.crops)
        return sort_tasks(apply_filters(composed, self.filters, now), now)

    def counts(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Open tasks due today and open tasks past due, across all filters."""
        now = now or now_local()
        open_tasks = [t for t in self.tasks if not t.completed]
        return {
            "today": sum(1 for t in open_tasks if is_today(t.due_date, now.date())),
            "overdue": sum(1 for t in open_tasks if is_overdue(t, now)),
        }

    def crops_for_farm(self, farm_id: Optional[int]) -> List[Crop]:
        """Crop choices offered by the task form once a farm is picked."""
        if farm_id is None:
            return []
        return [c for c in self.crops if c.farm_id == farm_id]

    async def save(self, form: Mapping[str, Any]) -> Task:
        payload = validate_task(form)
        if self.editing_id is None:
            task = await self._mutate(
                self.registry.tasks.create(payload),
                "Task created successfully",
                "Failed to save task",
                apply=self._appending("tasks", close_form=True),
            )
        else:
            task = await self._mutate(
                self.registry.tasks.update(self.editing_id, payload),
                "Task updated successfully",
                "Failed to save task",
                apply=self._replacing("tasks", close_form=True),
            )
        return task

    async def toggle_complete(self, task_id: int) -> Task:
        task = await self._mutate(
            self.registry.tasks.toggle_complete(task_id),
            None,
            "Failed to update task",
            apply=self._replacing("tasks"),
        )
        self.notifier.notify(
            "Task marked as completed" if task.completed else "Task marked as pending",
            NotifyLevel.SUCCESS,
        )
        return task

    async def delete(self, task_id: int) -> None:
        await self._mutate(
            self.registry.tasks.delete(task_id),
            "Task deleted successfully",
            "Failed to delete task",
            apply=self._removing("tasks", task_id),
        )
