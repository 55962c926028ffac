# backend/farmdesk/services/validation_service.py

"""
Form-boundary validation.

Runs before any store call. A failing payload raises ValidationError whose
`errors` maps the form field name to the message shown next to it; no
store is touched, so a rejected form never leaves partial state.

Form widgets report changes either as an event-like object / mapping
carrying {name, value} or as an explicit (name, value) pair.
normalize_change() folds both into one (name, value) tuple at the edge.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from farmdesk.core.exceptions import ValidationError
from farmdesk.schemas.common import date_only
from farmdesk.schemas.crop import CropStatus
from farmdesk.schemas.expense import ExpenseCategory
from farmdesk.schemas.farm import SizeUnit
from farmdesk.schemas.income import IncomeCategory
from farmdesk.schemas.task import TaskPriority


# -------------------------------------------------------------------
# Change events
# -------------------------------------------------------------------

def normalize_change(event_or_name: Any, value: Any = None) -> Tuple[str, Any]:
    if isinstance(event_or_name, str):
        return event_or_name, value

    source = getattr(event_or_name, "target", event_or_name)
    if isinstance(source, Mapping):
        source = source.get("target", source)
    if isinstance(source, Mapping):
        return source["name"], source.get("value")
    return source.name, getattr(source, "value", None)


class FormState:
    """Values and per-field errors of one open form."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self.values: Dict[str, Any] = dict(values or {})
        self.errors: Dict[str, str] = {}

    def apply_change(self, event_or_name: Any, value: Any = None) -> None:
        name, new_value = normalize_change(event_or_name, value)
        self.values[name] = new_value
        # editing a field clears its error
        if self.errors.get(name):
            self.errors[name] = ""

    def submit(self, validator: Callable[[Mapping[str, Any]], Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Validated payload, or None with `errors` filled in."""
        try:
            payload = validator(self.values)
        except ValidationError as exc:
            self.errors = exc.errors
            return None
        self.errors = {}
        return payload


# -------------------------------------------------------------------
# Field helpers
# -------------------------------------------------------------------

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or _blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or _blank(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if _blank(value):
        return None
    try:
        return date.fromisoformat(str(date_only(value)))
    except ValueError:
        return None


def _datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if _blank(value):
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _choice(value: Any, enum_cls) -> Optional[str]:
    try:
        return enum_cls(value).value
    except ValueError:
        return None


def _raise_if(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


# -------------------------------------------------------------------
# Per-entity validators
# -------------------------------------------------------------------

def validate_farm(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    if _blank(data.get("name")):
        errors["name"] = "Farm name is required"
    if _blank(data.get("location")):
        errors["location"] = "Location is required"
    size = _number(data.get("size"))
    if size is None or size <= 0:
        errors["size"] = "Size must be greater than 0"
    unit = _choice(data.get("sizeUnit", SizeUnit.ACRES.value), SizeUnit)
    if unit is None:
        errors["sizeUnit"] = "Unknown size unit"
    _raise_if(errors)
    return {
        "name": str(data["name"]).strip(),
        "location": str(data["location"]).strip(),
        "size": size,
        "sizeUnit": unit,
    }


def validate_crop(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    farm_id = _int(data.get("farmId"))
    if farm_id is None:
        errors["farmId"] = "Farm is required"
    if _blank(data.get("name")):
        errors["name"] = "Crop name is required"
    if _blank(data.get("variety")):
        errors["variety"] = "Variety is required"
    if _blank(data.get("fieldLocation")):
        errors["fieldLocation"] = "Field location is required"
    planted = _date(data.get("plantingDate"))
    if planted is None:
        errors["plantingDate"] = "Planting date is required"
    harvest = _date(data.get("expectedHarvestDate"))
    if harvest is None:
        errors["expectedHarvestDate"] = "Expected harvest date is required"
    elif planted is not None and harvest <= planted:
        errors["expectedHarvestDate"] = "Harvest date must be after planting date"
    status = _choice(data.get("status", CropStatus.PLANTED.value), CropStatus)
    if status is None:
        errors["status"] = "Unknown crop status"
    _raise_if(errors)

    payload = {
        "farmId": farm_id,
        "name": str(data["name"]).strip(),
        "variety": str(data["variety"]).strip(),
        "fieldLocation": str(data["fieldLocation"]).strip(),
        "plantingDate": planted.isoformat(),
        "expectedHarvestDate": harvest.isoformat(),
        "status": status,
    }
    if not _blank(data.get("notes")):
        payload["notes"] = data["notes"]
    return payload


def validate_task(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    farm_id = _int(data.get("farmId"))
    if farm_id is None:
        errors["farmId"] = "Farm is required"
    if _blank(data.get("title")):
        errors["title"] = "Task title is required"
    due = _datetime(data.get("dueDate"))
    if due is None:
        errors["dueDate"] = "Due date is required"
    priority = _choice(data.get("priority", TaskPriority.MEDIUM.value), TaskPriority)
    if priority is None:
        errors["priority"] = "Unknown priority"
    _raise_if(errors)
    return {
        "farmId": farm_id,
        "cropId": _int(data.get("cropId")),
        "title": str(data["title"]).strip(),
        "description": data.get("description") or "",
        "dueDate": due.isoformat(),
        "priority": priority,
    }


def validate_expense(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    farm_id = _int(data.get("farmId"))
    if farm_id is None:
        errors["farmId"] = "Farm is required"
    amount = _number(data.get("amount"))
    if amount is None or amount <= 0:
        errors["amount"] = "Amount must be greater than 0"
    category = _choice(data.get("category"), ExpenseCategory) if not _blank(data.get("category")) else None
    if category is None:
        errors["category"] = "Category is required"
    if _blank(data.get("description")):
        errors["description"] = "Description is required"
    day = _date(data.get("date"))
    if day is None:
        errors["date"] = "Date is required"
    _raise_if(errors)
    return {
        "farmId": farm_id,
        "amount": amount,
        "category": category,
        "description": str(data["description"]).strip(),
        "date": day.isoformat(),
    }


def validate_income(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: Dict[str, str] = {}
    amount = _number(data.get("amount"))
    if amount is None or amount <= 0:
        errors["amount"] = "Please enter a valid amount greater than 0"
    if _blank(data.get("source")):
        errors["source"] = "Please enter an income source"
    category = _choice(data.get("category"), IncomeCategory) if not _blank(data.get("category")) else None
    if category is None:
        errors["category"] = "Please select a category"
    day = _date(data.get("date"))
    if day is None:
        errors["date"] = "Please select a date"
    _raise_if(errors)
    return {
        "farmId": _int(data.get("farmId")),
        "cropId": _int(data.get("cropId")),
        "source": str(data["source"]).strip(),
        "description": data.get("description") or "",
        "amount": amount,
        "category": category,
        "date": day.isoformat(),
    }


VALIDATORS: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
    "farm": validate_farm,
    "crop": validate_crop,
    "task": validate_task,
    "expense": validate_expense,
    "income": validate_income,
}
