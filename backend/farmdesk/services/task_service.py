# backend/farmdesk/services/task_service.py

from datetime import date
from typing import Any, Dict, List, Optional

from farmdesk.core.utils_time import is_today
from farmdesk.schemas.task import Task
from farmdesk.services.entity_service import EntityService, parse_id


class TaskService(EntityService[Task]):
    model = Task
    entity = "Task"

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        # new tasks always start open
        return {**fields, "completed": False}

    async def get_by_farm_id(self, farm_id: Any) -> List[Task]:
        fid = parse_id(farm_id)
        with self._reporting("get_by_farm_id"):
            return [self._build(r) for r in await self.backend.fetch_where(farmId=fid)]

    async def get_todays_tasks(self, today: Optional[date] = None) -> List[Task]:
        """Tasks whose due date falls on today's local calendar date."""
        tasks = await self.get_all()
        return [t for t in tasks if is_today(t.due_date, today)]

    async def toggle_complete(self, task_id: Any) -> Task:
        task = await self.get_by_id(task_id)
        return await self.update(task.id, {"completed": not task.completed})
