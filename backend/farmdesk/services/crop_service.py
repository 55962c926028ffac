# backend/farmdesk/services/crop_service.py

from typing import Any, List

from farmdesk.schemas.crop import Crop
from farmdesk.services.entity_service import EntityService, parse_id


class CropService(EntityService[Crop]):
    model = Crop
    entity = "Crop"

    async def get_by_farm_id(self, farm_id: Any) -> List[Crop]:
        fid = parse_id(farm_id)
        with self._reporting("get_by_farm_id"):
            return [self._build(r) for r in await self.backend.fetch_where(farmId=fid)]
