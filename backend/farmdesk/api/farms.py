# backend/farmdesk/api/farms.py

from fastapi import APIRouter

from farmdesk.api.records import add_record_routes
from farmdesk.services.validation_service import validate_farm

router = APIRouter(prefix="/farms", tags=["farms"])

add_record_routes(router, "farms", validate_farm)
