# backend/farmdesk/schemas/common.py

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """
    Base for every stored entity.

    Attributes are snake_case in Python; the wire/fixture names are camelCase
    ("farmId", "dueDate", ...) with the identifier spelled "Id".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(alias="Id")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def blank_to_none(value: Any) -> Any:
    # select boxes submit "" for "no selection"
    if isinstance(value, str) and not value.strip():
        return None
    return value


def date_only(value: Any) -> Any:
    # "2024-03-01T00:00:00.000Z" -> "2024-03-01"
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if hasattr(value, "date") and callable(value.date):
        return value.date()
    return value


def field_names(model_cls) -> Dict[str, str]:
    """Map every accepted key (field name and alias) to the field name."""
    names: Dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        names[name] = name
        names[to_camel(name)] = name
        if info.alias:
            names[info.alias] = name
    return names
