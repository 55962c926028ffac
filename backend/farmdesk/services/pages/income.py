# backend/farmdesk/services/pages/income.py

from typing import Any, List, Mapping, Optional

from farmdesk.schemas.crop import Crop
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.filters import MATCH_ALL, FilterState, SortKey, SortState
from farmdesk.schemas.income import Income
from farmdesk.services import aggregation_service as agg
from farmdesk.services.composer_service import income_crop_name, income_farm_name
from farmdesk.services.filter_service import apply_filters, sort_records
from farmdesk.services.pages.base import PageController, gather_all
from farmdesk.services.validation_service import validate_income


class IncomePage(PageController):
    page = "income"
    load_error_message = "Failed to load income data"

    def __init__(self, registry, notifier=None):
        super().__init__(registry, notifier)
        self.income: List[Income] = []
        self.farms: List[Farm] = []
        self.crops: List[Crop] = []
        self.filters = FilterState(category=MATCH_ALL)
        self.sort = SortState()

    async def load(self) -> bool:
        async def fetch():
            return await gather_all(
                self.registry.income.get_all(),
                self.registry.farms.get_all(),
                self.registry.crops.get_all(),
            )

        def apply(result):
            self.income, self.farms, self.crops = result

        return await self._run_load(fetch, apply)

    def sort_by(self, key: SortKey) -> None:
        """Sort column and order are picked independently."""
        self.sort = SortState(sort_by=SortKey(key), order=self.sort.order)

    def toggle_order(self) -> None:
        self.sort = self.sort.toggled()

    def visible(self) -> List[Income]:
        return sort_records(apply_filters(self.income, self.filters), self.sort.sort_by, self.sort.order)

    def total(self) -> float:
        """All recorded income, whatever the filters hide."""
        return agg.total_amount(self.income)

    def farm_label(self, record: Income) -> str:
        return income_farm_name(record, self.farms)

    def crop_label(self, record: Income) -> Optional[str]:
        return income_crop_name(record, self.crops)

    async def save(self, form: Mapping[str, Any]) -> Income:
        payload = validate_income(form)
        if self.editing_id is None:
            record = await self._mutate(
                self.registry.income.create(payload),
                "Income record created successfully",
                "Failed to save income record",
                apply=self._appending("income", first=True, close_form=True),
            )
        else:
            record = await self._mutate(
                self.registry.income.update(self.editing_id, payload),
                "Income record updated successfully",
                "Failed to save income record",
                apply=self._replacing("income", close_form=True),
            )
        return record

    async def delete(self, income_id: int) -> None:
        await self._mutate(
            self.registry.income.delete(income_id),
            "Income record deleted successfully",
            "Failed to delete income record",
            apply=self._removing("income", income_id),
        )
