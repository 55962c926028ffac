# backend/farmdesk/services/farm_service.py

from typing import Any, Dict

from farmdesk.core.utils_time import now_utc
from farmdesk.schemas.farm import Farm
from farmdesk.services.entity_service import EntityService


class FarmService(EntityService[Farm]):
    """
    Farms are referenced by crops, tasks, expenses and income, but deleting
    a farm does not cascade: dependents keep their (now stale) farmId.
    """

    model = Farm
    entity = "Farm"

    def _prepare_create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return {**fields, "created_at": now_utc()}
