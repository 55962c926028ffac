# backend/farmdesk/services/pages/farms.py

from typing import Any, List, Mapping

from farmdesk.schemas.farm import Farm
from farmdesk.services.pages.base import PageController
from farmdesk.services.validation_service import validate_farm


class FarmsPage(PageController):
    page = "farms"
    load_error_message = "Failed to load farms"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.farms: List[Farm] = []

    async def load(self) -> bool:
        def apply(farms):
            self.farms = farms

        return await self._run_load(self.registry.farms.get_all, apply)

    async def save(self, form: Mapping[str, Any]) -> Farm:
        """Create or update depending on the editing target."""
        payload = validate_farm(form)
        if self.editing_id is None:
            farm = await self._mutate(
                self.registry.farms.create(payload),
                "Farm created successfully",
                "Failed to create farm",
                apply=self._appending("farms", close_form=True),
            )
        else:
            farm = await self._mutate(
                self.registry.farms.update(self.editing_id, payload),
                "Farm updated successfully",
                "Failed to update farm",
                apply=self._replacing("farms", close_form=True),
            )
        return farm

    async def delete(self, farm_id: int) -> None:
        await self._mutate(
            self.registry.farms.delete(farm_id),
            "Farm deleted successfully",
            "Failed to delete farm",
            apply=self._removing("farms", farm_id),
        )
