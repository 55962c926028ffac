# backend/farmdesk/api/crops.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from farmdesk.api.deps import get_registry, loaded
from farmdesk.api.records import add_record_routes
from farmdesk.services.pages import CropsPage
from farmdesk.services.registry import ServiceRegistry
from farmdesk.services.validation_service import validate_crop

router = APIRouter(prefix="/crops", tags=["crops"])


@router.get("/view")
async def api_crops_view(
    farm_id: Optional[str] = Query(None, alias="farmId"),
    status: Optional[str] = Query(None),
    registry: ServiceRegistry = Depends(get_registry),
):
    page = await loaded(CropsPage(registry))
    page.set_filters(farm_id=farm_id, status=status)
    return {"items": page.visible(), "statusCounts": page.status_counts()}


@router.get("/by-farm/{farm_id}")
async def api_crops_by_farm(farm_id: str, registry: ServiceRegistry = Depends(get_registry)):
    return [c.to_wire() for c in await registry.crops.get_by_farm_id(farm_id)]


add_record_routes(router, "crops", validate_crop)
