# backend/farmdesk/schemas/filters.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from farmdesk.schemas.common import blank_to_none


class FilterKey(str, Enum):
    FARM_ID = "farmId"
    STATUS = "status"
    PRIORITY = "priority"
    TASK_STATUS = "taskStatus"
    CATEGORY = "category"
    SEARCH_TERM = "searchTerm"


class TaskStatusFilter(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    TODAY = "today"
    ALL = "all"


class SortKey(str, Enum):
    DATE = "date"
    AMOUNT = "amount"
    SOURCE = "source"
    CATEGORY = "category"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# sentinel the category selects use for "no filter"
MATCH_ALL = "all"


class FilterState(BaseModel):
    """
    Active filters of a list page. Every key left as None matches everything.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    farm_id: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    task_status: Optional[TaskStatusFilter] = None
    category: Optional[str] = None
    search_term: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank(cls, v):
        return blank_to_none(v)

    def active_keys(self):
        return [
            key for key in FilterKey
            if getattr(self, _ATTRS[key]) is not None
        ]

    def value_of(self, key: FilterKey):
        return getattr(self, _ATTRS[key])

    def cleared(self) -> "FilterState":
        return FilterState()


_ATTRS = {
    FilterKey.FARM_ID: "farm_id",
    FilterKey.STATUS: "status",
    FilterKey.PRIORITY: "priority",
    FilterKey.TASK_STATUS: "task_status",
    FilterKey.CATEGORY: "category",
    FilterKey.SEARCH_TERM: "search_term",
}


class SortState(BaseModel):
    sort_by: SortKey = SortKey.DATE
    order: SortOrder = SortOrder.DESC

    def toggled(self) -> "SortState":
        flipped = SortOrder.ASC if self.order == SortOrder.DESC else SortOrder.DESC
        return SortState(sort_by=self.sort_by, order=flipped)
