# backend/farmdesk/schemas/farm.py

from datetime import datetime
from enum import Enum
from typing import Optional

from farmdesk.schemas.common import RecordModel


class SizeUnit(str, Enum):
    ACRES = "acres"
    HECTARES = "hectares"
    SQ_FT = "sq-ft"
    SQ_M = "sq-m"


class Farm(RecordModel):
    name: str
    location: str
    size: float
    size_unit: SizeUnit = SizeUnit.ACRES
    created_at: Optional[datetime] = None
