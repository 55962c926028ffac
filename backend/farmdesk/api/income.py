# backend/farmdesk/api/income.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.api.records import add_record_routes
from farmdesk.schemas.filters import MATCH_ALL, SortKey, SortOrder, SortState
from farmdesk.services.pages import IncomePage
from farmdesk.services.registry import ServiceRegistry
from farmdesk.services.validation_service import validate_income

router = APIRouter(prefix="/income", tags=["income"])


@router.get("/view")
async def api_income_view(
    category: str = Query(MATCH_ALL),
    search: Optional[str] = Query(None),
    sort_by: SortKey = Query(SortKey.DATE, alias="sortBy"),
    order: SortOrder = Query(SortOrder.DESC),
    registry: ServiceRegistry = Depends(get_registry),
):
    page = await loaded(IncomePage(registry))
    page.set_filters(category=category, search_term=search)
    page.sort = SortState(sort_by=sort_by, order=order)
    items = page.visible()
    return {
        "items": [
            {**r.to_wire(), "farmName": page.farm_label(r), "cropName": page.crop_label(r)}
            for r in items
        ],
        "total": page.total(),
    }


@router.get("/category/{category}")
async def api_income_by_category(category: str, registry: ServiceRegistry = Depends(get_registry)):
    return [r.to_wire() for r in await registry.income.get_by_category(category)]


@router.get("/monthly/{year}/{month}")
async def api_income_monthly(year: int, month: int, registry: ServiceRegistry = Depends(get_registry)):
    return await registry.income.get_monthly_total(month, year)


add_record_routes(router, "income", validate_income)
