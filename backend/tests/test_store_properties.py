# backend/tests/test_store_properties.py

from datetime import date, datetime, timedelta

import pytest

from farmdesk.core.exceptions import NotFoundError, ValidationError
from farmdesk.schemas.expense import Expense
from farmdesk.schemas.filters import FilterState
from farmdesk.schemas.income import Income
from farmdesk.schemas.task import Task
from farmdesk.services import aggregation_service as agg
from farmdesk.services.composer_service import UNKNOWN_FARM, compose_crops
from farmdesk.services.filter_service import apply_filters, sort_tasks
from farmdesk.services.registry import build_registry
from farmdesk.services.validation_service import validate_crop

NEW_RECORDS = {
    "farms": {"name": "North Farm", "location": "Sector 4", "size": 50, "sizeUnit": "acres"},
    "crops": {"farmId": 1, "name": "Beans", "variety": "Pole", "fieldLocation": "C",
              "plantingDate": "2024-03-01", "expectedHarvestDate": "2024-05-01"},
    "tasks": {"farmId": 1, "title": "Stake beans", "dueDate": "2024-03-10T08:00:00", "priority": "low"},
    "expenses": {"farmId": 1, "amount": 20, "category": "supplies", "description": "Stakes", "date": "2024-03-09"},
    "income": {"source": "Stand", "amount": 35, "category": "direct", "date": "2024-03-12"},
}


@pytest.fixture
def empty_registry(settings, notifier):
    return build_registry(settings, seed={name: [] for name in NEW_RECORDS}, notifier=notifier)


@pytest.mark.parametrize("store_name", sorted(NEW_RECORDS))
async def test_create_then_get_round_trips(registry, store_name):
    store = getattr(registry, store_name)
    created = await store.create(NEW_RECORDS[store_name])
    assert await store.get_by_id(created.id) == created


@pytest.mark.parametrize("store_name", sorted(NEW_RECORDS))
async def test_update_never_changes_id(registry, store_name):
    store = getattr(registry, store_name)
    updated = await store.update(1, {"Id": 500})
    assert updated.id == 1


@pytest.mark.parametrize("store_name", sorted(NEW_RECORDS))
async def test_delete_then_get_fails(registry, store_name):
    store = getattr(registry, store_name)
    await store.delete(1)
    with pytest.raises(NotFoundError):
        await store.get_by_id(1)


@pytest.mark.parametrize("store_name", sorted(NEW_RECORDS))
async def test_get_all_is_idempotent(registry, store_name):
    store = getattr(registry, store_name)
    assert await store.get_all() == await store.get_all()


async def test_category_totals_conserve_amounts(registry):
    expenses = await registry.expenses.get_all()
    assert sum(agg.category_totals(expenses).values()) == pytest.approx(agg.total_amount(expenses))


async def test_task_sort_is_idempotent(registry):
    tasks = await registry.tasks.get_all()
    now = datetime(2024, 6, 3, 9, 0)
    once = sort_tasks(tasks, now)
    assert sort_tasks(once, now) == once


async def test_unset_filters_are_identity(registry):
    tasks = await registry.tasks.get_all()
    assert apply_filters(tasks, FilterState()) == tasks


# ---------------------------------------------------
# Scenarios
# ---------------------------------------------------

async def test_first_farm_gets_id_one(empty_registry):
    farm = await empty_registry.farms.create(NEW_RECORDS["farms"])
    assert farm.id == 1
    assert [f.id for f in await empty_registry.farms.get_all()] == [1]


def test_harvest_on_planting_day_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_crop({
            "farmId": 1, "name": "Tomatoes", "variety": "Roma", "fieldLocation": "A",
            "plantingDate": "2024-03-01", "expectedHarvestDate": "2024-03-01",
        })
    assert "expectedHarvestDate" in exc.value.errors


async def test_two_expenses_category_totals(empty_registry):
    await empty_registry.expenses.create(
        {"farmId": 1, "amount": 100.00, "category": "seeds", "description": "Seed", "date": "2024-03-01"}
    )
    await empty_registry.expenses.create(
        {"farmId": 1, "amount": 250.50, "category": "fuel", "description": "Diesel", "date": "2024-03-02"}
    )
    expenses = await empty_registry.expenses.get_all()
    assert agg.category_totals(expenses) == {"seeds": 100.0, "fuel": 250.5}
    assert agg.total_amount(expenses) == 350.5


def test_task_due_yesterday_is_overdue_and_sorts_before_today():
    now = datetime(2024, 6, 3, 12, 0)
    yesterday = Task(id=1, farm_id=1, title="Late", due_date=now - timedelta(days=1))
    today = Task(id=2, farm_id=1, title="Now", due_date=now.replace(hour=18))
    assert apply_filters([yesterday, today], FilterState(task_status="overdue"), now)[0].id == 1
    assert [t.id for t in sort_tasks([today, yesterday], now)] == [1, 2]


async def test_deleted_farm_leaves_crop_with_unknown_farm(registry):
    await registry.farms.delete(1)
    crop = await registry.crops.get_by_id(1)
    assert crop.farm_id == 1
    view = compose_crops([crop], await registry.farms.get_all())[0]
    assert view.farm_name == UNKNOWN_FARM


def test_year_with_only_march_data_is_zero_filled():
    income = [Income(id=1, source="Stand", amount=80, category="direct", date=date(2024, 3, 4))]
    expenses = [Expense(id=1, farm_id=1, amount=30, category="seeds", date=date(2024, 3, 2))]
    months = agg.monthly_breakdown(income, expenses, 2024)
    assert len(months) == 12
    for m in months:
        if m.month == 3:
            assert (m.income, m.expenses, m.profit) == (80, 30, 50)
        else:
            assert (m.income, m.expenses, m.profit) == (0, 0, 0)
