# backend/farmdesk/core/utils_time.py

from datetime import date, datetime, timezone
from typing import Optional, Union


def now_local() -> datetime:
    """Naive local wall-clock time, the reference for "today" and "overdue"."""
    return datetime.now()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_local(value: datetime) -> datetime:
    """Aware datetimes are shifted into local time; naive ones are taken as local."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return to_local(value)
    return datetime(value.year, value.month, value.day)


def local_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def is_today(value: Union[date, datetime], today: Optional[date] = None) -> bool:
    return local_date(value) == (today or now_local().date())


def is_past(value: Union[date, datetime], now: Optional[datetime] = None) -> bool:
    return as_datetime(value) < (now or now_local())
