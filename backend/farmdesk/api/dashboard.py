# backend/farmdesk/api/dashboard.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.services.pages import DashboardPage
from farmdesk.services.registry import ServiceRegistry

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def api_dashboard(
    today: Optional[date] = Query(None),
    registry: ServiceRegistry = Depends(get_registry),
):
    page = await loaded(DashboardPage(registry, today=today))
    return {
        "todaysTasks": [t.to_wire() for t in page.tasks],
        "taskCounts": page.task_counts(),
        "activeCrops": [c.to_wire() for c in page.active_crops()],
        "weather": page.weather,
        "monthExpenses": page.month_expenses(),
        "monthIncome": page.month_income(),
    }
