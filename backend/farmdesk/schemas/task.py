# backend/farmdesk/schemas/task.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import field_validator

from farmdesk.schemas.common import RecordModel, blank_to_none


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(RecordModel):
    farm_id: int
    crop_id: Optional[int] = None
    title: str
    description: str = ""
    due_date: datetime
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False

    @field_validator("crop_id", mode="before")
    @classmethod
    def _blank_crop(cls, v):
        return blank_to_none(v)


class TaskView(Task):
    farm_name: str
    crop_name: Optional[str] = None
