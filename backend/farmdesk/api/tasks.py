# backend/farmdesk/api/tasks.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.api.records import add_record_routes
from farmdesk.schemas.filters import TaskStatusFilter
from farmdesk.services.pages import TasksPage
from farmdesk.services.registry import ServiceRegistry
from farmdesk.services.validation_service import validate_task

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("/today")
async def api_todays_tasks(registry: ServiceRegistry = Depends(get_registry)):
    return [t.to_wire() for t in await registry.tasks.get_todays_tasks()]


@router.get("/view")
async def api_tasks_view(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    priority: Optional[str] = Query(None),
    task_status: TaskStatusFilter = Query(TaskStatusFilter.PENDING, alias="taskStatus"),
    registry: ServiceRegistry = Depends(get_registry),
):
    """Composed tasks, filtered, overdue first then due today then by due date."""
    page = await loaded(TasksPage(registry))
    page.set_filters(farm_id=farm_id, priority=priority, task_status=task_status)
    return page.visible()


@router.get("/by-farm/{farm_id}")
async def api_tasks_by_farm(farm_id: str, registry: ServiceRegistry = Depends(get_registry)):
    return [t.to_wire() for t in await registry.tasks.get_by_farm_id(farm_id)]


@router.post("/{task_id}/toggle")
async def api_toggle_task(task_id: str, registry: ServiceRegistry = Depends(get_registry)):
    return (await registry.tasks.toggle_complete(task_id)).to_wire()


add_record_routes(router, "tasks", validate_task)
