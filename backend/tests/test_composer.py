# backend/tests/test_composer.py

from farmdesk.schemas.crop import Crop
from farmdesk.schemas.expense import Expense
from farmdesk.schemas.farm import Farm
from farmdesk.schemas.income import Income
from farmdesk.schemas.task import Task
from farmdesk.services.composer_service import (
    UNKNOWN_CROP,
    UNKNOWN_FARM,
    compose_crops,
    compose_expenses,
    compose_task,
    compose_tasks,
    income_crop_name,
    income_farm_name,
)
from farmdesk.services.registry import load_fixture


def _load(model, name):
    return [model.model_validate(r) for r in load_fixture(name)]


def test_tasks_get_farm_and_crop_labels():
    views = compose_tasks(_load(Task, "tasks"), _load(Farm, "farms"), _load(Crop, "crops"))
    first = views[0]
    assert first.farm_name == "Green Valley Farm"
    assert first.crop_name == "Tomatoes - Roma"
    assert first.to_wire()["farmName"] == "Green Valley Farm"


def test_task_without_crop_has_no_crop_label():
    views = compose_tasks(_load(Task, "tasks"), _load(Farm, "farms"), _load(Crop, "crops"))
    assert views[3].crop_id is None
    assert views[3].crop_name is None


def test_dangling_references_degrade_to_sentinels():
    task = Task(id=9, farm_id=99, crop_id=42, title="Orphan", due_date="2024-06-01T08:00:00")
    view = compose_task(task, _load(Farm, "farms"), _load(Crop, "crops"))
    assert view.farm_name == UNKNOWN_FARM
    assert view.crop_name == UNKNOWN_CROP


def test_compose_keeps_source_records_untouched():
    crops = _load(Crop, "crops")
    compose_crops(crops, [])
    assert not hasattr(crops[0], "farm_name")


def test_crops_and_expenses_get_farm_names():
    farms = _load(Farm, "farms")
    crops = compose_crops(_load(Crop, "crops"), farms)
    expenses = compose_expenses(_load(Expense, "expenses"), farms)
    assert crops[2].farm_name == "Sunrise Orchards"
    assert expenses[-1].farm_name == "Riverbend Gardens"


def test_income_labels():
    farms, crops = _load(Farm, "farms"), _load(Crop, "crops")
    income = _load(Income, "income")
    assert income_farm_name(income[0], farms) == "Green Valley Farm"
    assert income_crop_name(income[0], crops) == "Tomatoes (Roma)"
    # unowned rental income
    assert income_farm_name(income[4], farms) == UNKNOWN_FARM
    assert income_crop_name(income[4], crops) is None
