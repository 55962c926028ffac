# backend/tests/test_entity_stores.py

import asyncio
from datetime import date

import pytest

from farmdesk.core.exceptions import NotFoundError, PartialBatchFailure, ValidationError
from farmdesk.schemas.crop import CropStatus
from farmdesk.schemas.farm import SizeUnit


async def test_get_all_returns_seeded_records(registry):
    farms = await registry.farms.get_all()
    assert [f.id for f in farms] == [1, 2, 3]
    assert farms[1].size_unit == SizeUnit.HECTARES


async def test_returned_records_are_copies(registry):
    farm = await registry.farms.get_by_id(1)
    farm.name = "Changed locally"
    assert (await registry.farms.get_by_id(1)).name == "Green Valley Farm"


async def test_get_by_id_accepts_string_ids(registry):
    crop = await registry.crops.get_by_id("3")
    assert crop.name == "Apples"
    assert crop.status == CropStatus.MATURE


async def test_get_by_id_missing_raises_not_found(registry):
    with pytest.raises(NotFoundError) as exc:
        await registry.crops.get_by_id(999)
    assert exc.value.message == "Crop not found"


@pytest.mark.parametrize("bad_id", ["abc", None, "", True])
async def test_invalid_id_is_rejected(registry, bad_id):
    with pytest.raises(ValidationError) as exc:
        await registry.farms.get_by_id(bad_id)
    assert exc.value.message == "Invalid ID format"


async def test_create_assigns_next_id_and_coerces_numbers(registry):
    farm = await registry.farms.create(
        {"Id": 42, "name": "Hilltop", "location": "West", "size": "12.5", "sizeUnit": "acres"}
    )
    assert farm.id == 4
    assert farm.size == 12.5
    assert farm.created_at is not None
    assert (await registry.farms.get_by_id(4)).name == "Hilltop"


async def test_create_coerces_foreign_keys(registry):
    expense = await registry.expenses.create(
        {"farmId": "2", "amount": "99.90", "category": "fuel", "description": "Diesel", "date": "2024-06-02T00:00:00Z"}
    )
    assert expense.farm_id == 2
    assert expense.amount == pytest.approx(99.9)
    assert expense.date == date(2024, 6, 2)


async def test_create_task_always_starts_open(registry):
    task = await registry.tasks.create(
        {"farmId": 1, "title": "Mulch beds", "dueDate": "2024-06-07T08:00:00", "completed": True}
    )
    assert task.completed is False


async def test_create_rejects_non_positive_amount(registry):
    before = len(await registry.expenses.get_all())
    with pytest.raises(ValidationError) as exc:
        await registry.expenses.create(
            {"farmId": 1, "amount": 0, "category": "fuel", "description": "x", "date": "2024-06-01"}
        )
    assert "amount" in exc.value.errors
    assert len(await registry.expenses.get_all()) == before


async def test_update_never_changes_id(registry):
    updated = await registry.crops.update(2, {"Id": 77, "status": "growing"})
    assert updated.id == 2
    assert updated.status == CropStatus.GROWING
    with pytest.raises(NotFoundError):
        await registry.crops.get_by_id(77)


async def test_partial_update_keeps_other_fields(registry):
    updated = await registry.farms.update("1", {"location": "Upper Valley"})
    assert updated.location == "Upper Valley"
    assert updated.name == "Green Valley Farm"
    assert updated.size == 120


async def test_update_missing_raises_not_found(registry):
    with pytest.raises(NotFoundError):
        await registry.tasks.update(999, {"title": "Nope"})


async def test_delete_then_get_raises_not_found(registry):
    assert await registry.income.delete(2) is True
    with pytest.raises(NotFoundError):
        await registry.income.get_by_id(2)
    with pytest.raises(NotFoundError):
        await registry.income.delete(2)


async def test_farm_delete_does_not_cascade(registry):
    await registry.farms.delete(1)
    crops = await registry.crops.get_by_farm_id(1)
    assert [c.id for c in crops] == [1, 2]


async def test_ids_keep_growing_after_delete(registry):
    await registry.farms.delete(2)
    farm = await registry.farms.create({"name": "New", "location": "Here", "size": 3})
    assert farm.id == 4


async def test_unsequenced_updates_resolve_last_write_wins(registry):
    await asyncio.gather(
        registry.farms.update(3, {"name": "First"}),
        registry.farms.update(3, {"name": "Second"}),
    )
    assert (await registry.farms.get_by_id(3)).name in ("First", "Second")


async def test_create_many_returns_every_record(registry):
    created = await registry.farms.create_many([
        {"name": "A", "location": "X", "size": 1},
        {"name": "B", "location": "Y", "size": 2},
    ])
    assert [f.id for f in created] == [4, 5]


async def test_delete_many_reports_partial_failure(registry):
    with pytest.raises(PartialBatchFailure) as exc:
        await registry.tasks.delete_many([1, 999])
    assert exc.value.succeeded == [1]
    assert [f.record_id for f in exc.value.failed] == [999]
    assert len(await registry.tasks.get_all()) == 4


async def test_update_many_applies_each_patch(registry):
    updated = await registry.tasks.update_many({1: {"completed": True}, "2": {"priority": "low"}})
    assert [t.id for t in updated] == [1, 2]
    assert (await registry.tasks.get_by_id(1)).completed is True


async def test_update_many_writes_existing_records_and_reports_missing_ones(registry):
    with pytest.raises(PartialBatchFailure) as exc:
        await registry.farms.update_many({1: {"location": "Upper Valley"}, 999: {"location": "Nowhere"}})
    assert [f.id for f in exc.value.succeeded] == [1]
    assert [f.record_id for f in exc.value.failed] == [999]
    assert (await registry.farms.get_by_id(1)).location == "Upper Valley"


# ---------------------------------------------------
# Entity-specific queries
# ---------------------------------------------------

async def test_tasks_by_farm(registry):
    tasks = await registry.tasks.get_by_farm_id("3")
    assert [t.id for t in tasks] == [4, 5]


async def test_todays_tasks(registry):
    tasks = await registry.tasks.get_todays_tasks(date(2024, 6, 1))
    assert [t.id for t in tasks] == [1]


async def test_toggle_complete_flips_and_persists(registry):
    task = await registry.tasks.toggle_complete(3)
    assert task.completed is False
    task = await registry.tasks.toggle_complete(3)
    assert task.completed is True
    assert (await registry.tasks.get_by_id(3)).completed is True


async def test_expenses_by_date_range_is_inclusive(registry):
    expenses = await registry.expenses.get_by_date_range(date(2024, 4, 12), date(2024, 4, 20))
    assert sorted(e.id for e in expenses) == [2, 4]


async def test_expense_summary_by_category_for_farm(registry):
    summary = await registry.expenses.get_summary_by_category(1)
    assert summary == {"seeds": 450.0, "fertilizer": 1200.0, "fuel": 320.75}


async def test_expense_trend_only_lists_observed_months(registry):
    trend = await registry.expenses.get_trend_data("monthly", farm_id=2)
    assert [(b.period, b.total) for b in trend] == [("2024-02", 860.0), ("2024-04", 2500.0)]


async def test_expense_farm_comparison(registry):
    comparison = await registry.expenses.get_farm_comparison()
    assert comparison[3].total == pytest.approx(275.5)
    assert comparison[3].categories == {"supplies": 95.5, "maintenance": 180.0}


async def test_income_monthly_total(registry):
    june = await registry.income.get_monthly_total(6, 2024)
    assert june.total == 2160.0
    assert june.count == 2
    assert sorted(i.id for i in june.items) == [1, 4]


async def test_income_monthly_total_rejects_bad_month(registry):
    with pytest.raises(ValidationError):
        await registry.income.get_monthly_total(13, 2024)


async def test_income_by_category(registry):
    records = await registry.income.get_by_category("market")
    assert [r.id for r in records] == [2]
