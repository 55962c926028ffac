# backend/farmdesk/services/pages/crops.py

from typing import Any, Dict, List, Mapping

from farmdesk.schemas.crop import Crop, CropStatus, CropView
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.filters import FilterState
from farmdesk.services.composer_service import compose_crops
from farmdesk.services.filter_service import apply_filters
from farmdesk.services.pages.base import PageController, gather_all
from farmdesk.services.validation_service import validate_crop


class CropsPage(PageController):
    page = "crops"
    load_error_message = "Failed to load crops"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.crops: List[Crop] = []
        self.farms: List[Farm] = []
        self.filters = FilterState()

    async def load(self) -> bool:
        async def fetch():
            return await gather_all(self.registry.crops.get_all(), self.registry.farms.get_all())

        def apply(result):
            self.crops, self.farms = result

        return await self._run_load(fetch, apply)

    def visible(self) -> List[CropView]:
        return apply_filters(compose_crops(self.crops, self.farms), self.filters)

    def status_counts(self) -> Dict[str, int]:
        counts = {s.value: 0 for s in CropStatus}
        for crop in self.crops:
            counts[CropStatus(crop.status).value] += 1
        return counts

    async def save(self, form: Mapping[str, Any]) -> Crop:
        payload = validate_crop(form)
        if self.editing_id is None:
            crop = await self._mutate(
                self.registry.crops.create(payload),
                "Crop added successfully",
                "Failed to save crop",
                apply=self._appending("crops", close_form=True),
            )
        else:
            crop = await self._mutate(
                self.registry.crops.update(self.editing_id, payload),
                "Crop updated successfully",
                "Failed to save crop",
                apply=self._replacing("crops", close_form=True),
            )
        return crop

    async def delete(self, crop_id: int) -> None:
        await self._mutate(
            self.registry.crops.delete(crop_id),
            "Crop deleted successfully",
            "Failed to delete crop",
            apply=self._removing("crops", crop_id),
        )
