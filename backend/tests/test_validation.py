# backend/tests/test_validation.py

from types import SimpleNamespace

import pytest

from farmdesk.core.exceptions import ValidationError
from farmdesk.services.validation_service import (
    FormState,
    normalize_change,
    validate_crop,
    validate_expense,
    validate_farm,
    validate_income,
    validate_task,
)


def test_normalize_change_accepts_every_shape():
    event = SimpleNamespace(target=SimpleNamespace(name="size", value="12"))
    assert normalize_change(event) == ("size", "12")
    assert normalize_change({"target": {"name": "size", "value": "12"}}) == ("size", "12")
    assert normalize_change({"name": "size", "value": "12"}) == ("size", "12")
    assert normalize_change("size", "12") == ("size", "12")


def test_farm_requires_name_location_and_positive_size():
    with pytest.raises(ValidationError) as exc:
        validate_farm({"name": " ", "size": "0"})
    assert exc.value.errors == {
        "name": "Farm name is required",
        "location": "Location is required",
        "size": "Size must be greater than 0",
    }


def test_farm_payload_is_trimmed_and_numeric():
    payload = validate_farm({"name": " North ", "location": "Hill", "size": "2.5"})
    assert payload == {"name": "North", "location": "Hill", "size": 2.5, "sizeUnit": "acres"}


def test_crop_harvest_must_follow_planting():
    form = {
        "farmId": "1", "name": "Beans", "variety": "Pole", "fieldLocation": "C",
        "plantingDate": "2024-05-01", "expectedHarvestDate": "2024-05-01",
    }
    with pytest.raises(ValidationError) as exc:
        validate_crop(form)
    assert exc.value.errors == {"expectedHarvestDate": "Harvest date must be after planting date"}


def test_crop_payload_coerces_farm_id():
    payload = validate_crop({
        "farmId": "2", "name": "Beans", "variety": "Pole", "fieldLocation": "C",
        "plantingDate": "2024-05-01", "expectedHarvestDate": "2024-07-01T00:00:00Z",
        "status": "growing",
    })
    assert payload["farmId"] == 2
    assert payload["expectedHarvestDate"] == "2024-07-01"


def test_task_blank_crop_becomes_none():
    payload = validate_task({"farmId": 1, "cropId": "", "title": "Weed", "dueDate": "2024-06-02T09:00"})
    assert payload["cropId"] is None
    assert payload["priority"] == "medium"


def test_task_requires_title_and_due_date():
    with pytest.raises(ValidationError) as exc:
        validate_task({"farmId": "1", "title": ""})
    assert set(exc.value.errors) == {"title", "dueDate"}


def test_expense_errors():
    with pytest.raises(ValidationError) as exc:
        validate_expense({"farmId": "", "amount": "-3", "category": "", "description": "", "date": ""})
    assert exc.value.errors["amount"] == "Amount must be greater than 0"
    assert set(exc.value.errors) == {"farmId", "amount", "category", "description", "date"}


def test_income_allows_missing_farm_and_crop():
    payload = validate_income({"source": "Stand", "amount": "40", "category": "direct", "date": "2024-06-01"})
    assert payload["farmId"] is None
    assert payload["cropId"] is None
    assert payload["amount"] == 40.0


def test_income_error_messages():
    with pytest.raises(ValidationError) as exc:
        validate_income({"amount": "abc"})
    assert exc.value.errors["amount"] == "Please enter a valid amount greater than 0"
    assert exc.value.errors["category"] == "Please select a category"


def test_form_state_clears_field_error_on_edit():
    form = FormState({"name": "", "location": "Hill", "size": "3"})
    assert form.submit(validate_farm) is None
    assert form.errors["name"] == "Farm name is required"

    form.apply_change({"name": "name", "value": "Meadow"})
    assert form.errors["name"] == ""

    payload = form.submit(validate_farm)
    assert payload["name"] == "Meadow"
    assert form.errors == {}
