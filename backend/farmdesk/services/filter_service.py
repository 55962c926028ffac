# backend/farmdesk/services/filter_service.py

"""
Client-side filtering and sorting of (composed) collections.

Filtering is keyed by FilterKey; a key that is unset, or set to "all",
matches everything, so an empty FilterState returns its input unchanged.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from farmdesk.core.utils_time import as_datetime, is_past, is_today, now_local
from farmdesk.schemas.filters import (
    MATCH_ALL,
    FilterKey,
    FilterState,
    SortKey,
    SortOrder,
    TaskStatusFilter,
)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def is_overdue(task: Any, now: Optional[datetime] = None) -> bool:
    return not task.completed and is_past(task.due_date, now)


def task_status_of(task: Any, now: Optional[datetime] = None) -> List[TaskStatusFilter]:
    """Every status bucket a task falls into."""
    now = now or now_local()
    statuses = [TaskStatusFilter.ALL]
    statuses.append(TaskStatusFilter.COMPLETED if task.completed else TaskStatusFilter.PENDING)
    if is_overdue(task, now):
        statuses.append(TaskStatusFilter.OVERDUE)
    if is_today(task.due_date, now.date()):
        statuses.append(TaskStatusFilter.TODAY)
    return statuses


# -------------------------------------------------------------------
# Predicates, one per recognised key
# -------------------------------------------------------------------

def _match_farm(record, value, now) -> bool:
    return getattr(record, "farm_id", None) == int(value)


def _match_exact(attr: str) -> Callable:
    def match(record, value, now) -> bool:
        return _plain(getattr(record, attr, None)) == _plain(value)
    return match


def _match_task_status(record, value, now) -> bool:
    return TaskStatusFilter(value) in task_status_of(record, now)


def _match_search(record, value, now) -> bool:
    term = str(value).lower()
    source = (getattr(record, "source", "") or "").lower()
    description = (getattr(record, "description", "") or "").lower()
    return term in source or term in description


_PREDICATES: Dict[FilterKey, Callable] = {
    FilterKey.FARM_ID: _match_farm,
    FilterKey.STATUS: _match_exact("status"),
    FilterKey.PRIORITY: _match_exact("priority"),
    FilterKey.TASK_STATUS: _match_task_status,
    FilterKey.CATEGORY: _match_exact("category"),
    FilterKey.SEARCH_TERM: _match_search,
}


def apply_filters(records: Iterable[Any], state: FilterState, now: Optional[datetime] = None) -> List[Any]:
    now = now or now_local()
    active = [
        (key, state.value_of(key)) for key in state.active_keys()
        if _plain(state.value_of(key)) != MATCH_ALL
    ]
    return [
        r for r in records
        if all(_PREDICATES[key](r, value, now) for key, value in active)
    ]


# -------------------------------------------------------------------
# Sorting
# -------------------------------------------------------------------

def sort_tasks(tasks: Iterable[Any], now: Optional[datetime] = None) -> List[Any]:
    """
    Overdue (incomplete) tasks first, then tasks due today, then the rest;
    ascending due date within each group. Stable.
    """
    now = now or now_local()
    today = now.date()
    return sorted(
        tasks,
        key=lambda t: (
            not is_overdue(t, now),
            not is_today(t.due_date, today),
            as_datetime(t.due_date),
        ),
    )


def _sort_value(record: Any, sort_by: SortKey):
    value = getattr(record, sort_by.value, None)
    if sort_by == SortKey.DATE:
        return as_datetime(value).timestamp() if isinstance(value, (date, datetime)) else 0.0
    if sort_by == SortKey.AMOUNT:
        return float(value)
    return str(_plain(value) or "")


def sort_records(
    records: Iterable[Any],
    sort_by: SortKey = SortKey.DATE,
    order: SortOrder = SortOrder.DESC,
) -> List[Any]:
    """Expense / Income ordering; defaults to most recent first."""
    sort_by = SortKey(sort_by)
    return sorted(
        records,
        key=lambda r: _sort_value(r, sort_by),
        reverse=SortOrder(order) == SortOrder.DESC,
    )
