# backend/farmdesk/api/reports.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.schemas.reports import ReportPeriod
from farmdesk.services import aggregation_service as agg
from farmdesk.services.pages import ReportsPage
from farmdesk.services.registry import ServiceRegistry

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("")
async def api_report(
    period: ReportPeriod = Query(ReportPeriod.MONTH),
    anchor: Optional[date] = Query(None),
    step: int = Query(0, ge=-1, le=1),
    registry: ServiceRegistry = Depends(get_registry),
):
    """Income vs. expenses for the month or year containing `anchor`."""
    page = ReportsPage(registry, period=period, anchor=anchor)
    if step:
        page.anchor = agg.shift_period(page.period, page.anchor, step)
    await loaded(page)
    report = page.report
    return {**report.model_dump(mode="json", by_alias=True), "isProfitable": report.is_profitable}
