# backend/farmdesk/api/expenses.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.api.records import add_record_routes
from farmdesk.schemas.reports import TrendPeriod
from farmdesk.services.pages import ExpensesPage
from farmdesk.services.registry import ServiceRegistry
from farmdesk.services.validation_service import validate_expense

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("/summary")
async def api_expense_summary(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    registry: ServiceRegistry = Depends(get_registry),
):
    return await registry.expenses.get_summary_by_category(farm_id)


@router.get("/trends")
async def api_expense_trends(
    period: TrendPeriod = Query(TrendPeriod.MONTHLY),
    farm_id: Optional[str] = Query(None, alias="farmId"),
    registry: ServiceRegistry = Depends(get_registry),
):
    return await registry.expenses.get_trend_data(period, farm_id)


@router.get("/comparison")
async def api_expense_comparison(registry: ServiceRegistry = Depends(get_registry)):
    return list((await registry.expenses.get_farm_comparison()).values())


@router.get("/view")
async def api_expenses_view(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    category: Optional[str] = Query(None),
    registry: ServiceRegistry = Depends(get_registry),
):
    page = await loaded(ExpensesPage(registry))
    page.set_filters(farm_id=farm_id, category=category)
    return {
        "items": page.visible(),
        "total": page.total(),
        "count": page.transaction_count(),
        "categoryTotals": page.category_totals(),
    }


@router.get("/by-farm/{farm_id}")
async def api_expenses_by_farm(farm_id: str, registry: ServiceRegistry = Depends(get_registry)):
    return [e.to_wire() for e in await registry.expenses.get_by_farm_id(farm_id)]


add_record_routes(router, "expenses", validate_expense)
