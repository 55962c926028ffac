# backend/farmdesk/schemas/crop.py

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import field_validator

from farmdesk.schemas.common import RecordModel, date_only


class CropStatus(str, Enum):
    PLANTED = "planted"
    GROWING = "growing"
    MATURE = "mature"
    READY = "ready"
    HARVESTED = "harvested"


# statuses shown as "active" on the dashboard
ACTIVE_STATUSES = (CropStatus.GROWING, CropStatus.MATURE, CropStatus.READY)


class Crop(RecordModel):
    farm_id: int
    name: str
    variety: str = ""
    field_location: str = ""
    planting_date: date
    expected_harvest_date: date
    status: CropStatus = CropStatus.PLANTED
    notes: Optional[str] = None

    @field_validator("planting_date", "expected_harvest_date", mode="before")
    @classmethod
    def _strip_time(cls, v):
        return date_only(v)


class CropView(Crop):
    farm_name: str
