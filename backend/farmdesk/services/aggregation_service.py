# backend/farmdesk/services/aggregation_service.py

"""
Financial aggregations over Expense / Income records.

 - category totals and ranked category breakdown
 - date-range totals, profit/loss and margin
 - trend series bucketed by "YYYY-MM" or "YYYY" (observed periods only)
 - per-farm comparison
 - 12-month breakdown of a year (every month present, zero-filled)

All functions are pure: callers fetch the records first.
"""

import calendar
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from farmdesk.core.utils_time import local_date
from farmdesk.schemas.reports import (
    CategoryTotal,
    FarmTotal,
    MonthSummary,
    MonthlyTotal,
    ReportPeriod,
    ReportSummary,
    TrendBucket,
    TrendPeriod,
)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

def category_of(record: Any) -> str:
    value = getattr(record, "category", None)
    if isinstance(value, Enum):
        return value.value
    return value or "other"


def total_amount(records: Iterable[Any]) -> float:
    return sum(float(r.amount) for r in records)


def period_key(day: date, period: TrendPeriod = TrendPeriod.MONTHLY) -> str:
    if period == TrendPeriod.YEARLY:
        return f"{day.year:04d}"
    return f"{day.year:04d}-{day.month:02d}"


# -------------------------------------------------------------------
# Category totals
# -------------------------------------------------------------------

def category_totals(records: Iterable[Any]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for r in records:
        cat = category_of(r)
        totals[cat] = totals.get(cat, 0.0) + float(r.amount)
    return totals


def category_breakdown(records: Iterable[Any]) -> List[CategoryTotal]:
    """Ranked by descending total."""
    grouped: Dict[str, Dict[str, float]] = {}
    for r in records:
        g = grouped.setdefault(category_of(r), {"total": 0.0, "count": 0})
        g["total"] += float(r.amount)
        g["count"] += 1
    out = [
        CategoryTotal(category=cat, total=g["total"], count=int(g["count"]))
        for cat, g in grouped.items()
    ]
    return sorted(out, key=lambda c: c.total, reverse=True)


# -------------------------------------------------------------------
# Date ranges / P&L
# -------------------------------------------------------------------

def filter_by_date_range(records: Iterable[Any], start: date, end: date) -> List[Any]:
    """Inclusive on both ends, compared by calendar date."""
    start, end = local_date(start), local_date(end)
    return [r for r in records if start <= local_date(r.date) <= end]


def date_range_total(records: Iterable[Any], start: date, end: date) -> float:
    return total_amount(filter_by_date_range(records, start, end))


def profit_loss(income_total: float, expense_total: float) -> float:
    return income_total - expense_total


def profit_margin(income_total: float, expense_total: float) -> float:
    """Profit as a percentage of income; 0 when there is no income."""
    if income_total <= 0:
        return 0.0
    return profit_loss(income_total, expense_total) / income_total * 100


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def period_bounds(period: ReportPeriod, anchor: date) -> Tuple[date, date]:
    if period == ReportPeriod.YEAR:
        return date(anchor.year, 1, 1), date(anchor.year, 12, 31)
    return month_bounds(anchor.year, anchor.month)


def shift_period(period: ReportPeriod, anchor: date, step: int) -> date:
    """Move the anchor one period back (step=-1) or forward (step=1)."""
    if period == ReportPeriod.YEAR:
        return date(anchor.year + step, 1, 1)
    month_index = anchor.year * 12 + (anchor.month - 1) + step
    return date(month_index // 12, month_index % 12 + 1, 1)


def month_total(records: Iterable[Any], month: int, year: int) -> MonthlyTotal:
    start, end = month_bounds(year, month)
    items = filter_by_date_range(records, start, end)
    return MonthlyTotal(total=total_amount(items), count=len(items), items=items)


# -------------------------------------------------------------------
# Trend series / farm comparison
# -------------------------------------------------------------------

def trend_series(
    records: Iterable[Any],
    period: TrendPeriod = TrendPeriod.MONTHLY,
    farm_id: Optional[int] = None,
) -> List[TrendBucket]:
    """
    Buckets sorted ascending by period key. Only periods that have records
    appear; gaps are not synthesized.
    """
    buckets: Dict[str, TrendBucket] = {}
    for r in records:
        if farm_id is not None and getattr(r, "farm_id", None) != farm_id:
            continue
        key = period_key(local_date(r.date), period)
        b = buckets.setdefault(key, TrendBucket(period=key, total=0.0))
        amt = float(r.amount)
        cat = category_of(r)
        b.total += amt
        b.categories[cat] = b.categories.get(cat, 0.0) + amt
    return [buckets[k] for k in sorted(buckets)]


def farm_comparison(records: Iterable[Any]) -> Dict[int, FarmTotal]:
    """Per-farm totals; farms without records (and unowned records) are absent."""
    out: Dict[int, FarmTotal] = {}
    for r in records:
        fid = getattr(r, "farm_id", None)
        if fid is None:
            continue
        ft = out.setdefault(fid, FarmTotal(farm_id=fid, total=0.0))
        amt = float(r.amount)
        cat = category_of(r)
        ft.total += amt
        ft.categories[cat] = ft.categories.get(cat, 0.0) + amt
    return out


# -------------------------------------------------------------------
# Year breakdown / report
# -------------------------------------------------------------------

def monthly_breakdown(incomes: Iterable[Any], expenses: Iterable[Any], year: int) -> List[MonthSummary]:
    """All 12 months of `year`, zero-filled where a month has no records."""
    incomes, expenses = list(incomes), list(expenses)
    months = []
    for m in range(1, 13):
        start, end = month_bounds(year, m)
        inc = date_range_total(incomes, start, end)
        exp = date_range_total(expenses, start, end)
        months.append(
            MonthSummary(
                month=m,
                label=calendar.month_abbr[m],
                income=inc,
                expenses=exp,
                profit=profit_loss(inc, exp),
            )
        )
    return months


def build_report(
    incomes: Iterable[Any],
    expenses: Iterable[Any],
    period: ReportPeriod,
    anchor: date,
) -> ReportSummary:
    start, end = period_bounds(period, anchor)
    incomes = filter_by_date_range(incomes, start, end)
    expenses = filter_by_date_range(expenses, start, end)

    total_income = total_amount(incomes)
    total_expenses = total_amount(expenses)

    return ReportSummary(
        period=period,
        start_date=start,
        end_date=end,
        total_income=total_income,
        total_expenses=total_expenses,
        profit_loss=profit_loss(total_income, total_expenses),
        profit_margin=profit_margin(total_income, total_expenses),
        monthly_data=monthly_breakdown(incomes, expenses, anchor.year) if period == ReportPeriod.YEAR else [],
        income_breakdown=category_breakdown(incomes),
        expense_breakdown=category_breakdown(expenses),
    )


def current_month_total(records: Iterable[Any], today: Optional[date] = None) -> float:
    today = today or date.today()
    start, end = month_bounds(today.year, today.month)
    return date_range_total(records, start, end)
