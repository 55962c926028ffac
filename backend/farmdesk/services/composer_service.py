# backend/farmdesk/services/composer_service.py

"""
Joins already-fetched collections into display records.

Nothing here fetches or mutates: callers load farms/crops/tasks/... first
(typically concurrently) and compose again whenever any of them changes.
A foreign key whose target is gone never raises; it degrades to a label.
"""

from typing import Dict, Iterable, List, Optional

from farmdesk.schemas.crop import Crop, CropView
from farmdesk.schemas.expense import Expense, ExpenseView
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.income import Income
from farmdesk.schemas.task import Task, TaskView

UNKNOWN_FARM = "Unknown Farm"
UNKNOWN_CROP = "Unknown Crop"


def index_by_id(records: Iterable) -> Dict[int, object]:
    return {r.id: r for r in records}


def farm_name(farms: Dict[int, Farm], farm_id: Optional[int]) -> str:
    farm = farms.get(farm_id) if farm_id is not None else None
    return farm.name if farm else UNKNOWN_FARM


def task_crop_name(crops: Dict[int, Crop], crop_id: Optional[int]) -> Optional[str]:
    if crop_id is None:
        return None
    crop = crops.get(crop_id)
    return f"{crop.name} - {crop.variety}" if crop else UNKNOWN_CROP


def compose_tasks(tasks: Iterable[Task], farms: Iterable[Farm], crops: Iterable[Crop]) -> List[TaskView]:
    farms_by_id = index_by_id(farms)
    crops_by_id = index_by_id(crops)
    return [
        TaskView(
            **t.model_dump(),
            farm_name=farm_name(farms_by_id, t.farm_id),
            crop_name=task_crop_name(crops_by_id, t.crop_id),
        )
        for t in tasks
    ]


def compose_task(task: Task, farms: Iterable[Farm], crops: Iterable[Crop]) -> TaskView:
    return compose_tasks([task], farms, crops)[0]


def compose_crops(crops: Iterable[Crop], farms: Iterable[Farm]) -> List[CropView]:
    farms_by_id = index_by_id(farms)
    return [
        CropView(**c.model_dump(), farm_name=farm_name(farms_by_id, c.farm_id))
        for c in crops
    ]


def compose_expenses(expenses: Iterable[Expense], farms: Iterable[Farm]) -> List[ExpenseView]:
    farms_by_id = index_by_id(farms)
    return [
        ExpenseView(**e.model_dump(), farm_name=farm_name(farms_by_id, e.farm_id))
        for e in expenses
    ]


# Income rows resolve their labels at render time.

def income_farm_name(income: Income, farms: Iterable[Farm]) -> str:
    return farm_name(index_by_id(farms), income.farm_id)


def income_crop_name(income: Income, crops: Iterable[Crop]) -> Optional[str]:
    if income.crop_id is None:
        return None
    crop = index_by_id(crops).get(income.crop_id)
    return f"{crop.name} ({crop.variety})" if crop else UNKNOWN_CROP
