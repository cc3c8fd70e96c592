"""Revenue-only (ciro) aggregation.

Only the ``amount`` side matters here. A record counts as a revenue
transaction when its amount is positive; every record still counts towards the
total transaction figures.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, timedelta
from typing import Any, Iterable

from ..schemas import (
    CategoryRevenueItem,
    DailyRevenueItem,
    MonthlyRevenueItem,
    RevenueSummary,
    TransactionRecord,
    WeeklyRevenueItem,
)
from .amounts import as_records, percentage, revenue_of, round2
from .calculator import CATEGORY_SENTINEL
from .periods import business_date, day_index, day_name, month_name


logger = logging.getLogger(__name__)

RecordsIn = Iterable[TransactionRecord | Mapping[str, Any]]


def revenue_summary(records: RecordsIn) -> RevenueSummary:
    items = as_records(records)
    total_revenue = 0.0
    revenue_count = 0
    for record in items:
        revenue = revenue_of(record)
        if revenue > 0:
            total_revenue += revenue
            revenue_count += 1
    total_count = len(items)
    return RevenueSummary(
        total_revenue=total_revenue,
        revenue_transaction_count=revenue_count,
        average_revenue=round2(total_revenue / revenue_count) if revenue_count else 0.0,
        total_transaction_count=total_count,
        revenue_percentage=percentage(revenue_count, total_count),
    )


def category_revenue_breakdown(records: RecordsIn, total_revenue: float | None = None) -> list[CategoryRevenueItem]:
    """Revenue per category, largest first."""
    items = as_records(records)
    if total_revenue is None:
        total_revenue = revenue_summary(items).total_revenue
    buckets: dict[str, dict[str, float]] = {}
    for record in items:
        name = record.category_name or CATEGORY_SENTINEL
        bucket = buckets.setdefault(name, {"revenue": 0.0, "count": 0})
        bucket["count"] += 1
        revenue = revenue_of(record)
        if revenue > 0:
            bucket["revenue"] += revenue

    results = [
        CategoryRevenueItem(
            category=name,
            revenue=values["revenue"],
            transaction_count=int(values["count"]),
            percentage=percentage(values["revenue"], total_revenue),
        )
        for name, values in buckets.items()
    ]
    return sorted(results, key=lambda item: item.revenue, reverse=True)


def _dated(records: list[TransactionRecord], label: str) -> Iterable[tuple[date, TransactionRecord]]:
    for record in records:
        if record.transaction_date is None:
            logger.warning("Skipping transaction %s in %s revenue: no transaction_date", record.id, label)
            continue
        yield business_date(record.transaction_date), record


def _new_bucket() -> dict[str, float]:
    return {"revenue": 0.0, "revenue_count": 0, "count": 0}


def _add(bucket: dict[str, float], record: TransactionRecord) -> None:
    bucket["count"] += 1
    revenue = revenue_of(record)
    if revenue > 0:
        bucket["revenue"] += revenue
        bucket["revenue_count"] += 1


def daily_revenue_breakdown(records: RecordsIn) -> list[DailyRevenueItem]:
    buckets: dict[date, dict[str, float]] = {}
    for day, record in _dated(as_records(records), "daily"):
        _add(buckets.setdefault(day, _new_bucket()), record)
    return [
        DailyRevenueItem(
            date=day,
            day_name=day_name(day),
            revenue=values["revenue"],
            revenue_transaction_count=int(values["revenue_count"]),
            transaction_count=int(values["count"]),
        )
        for day, values in sorted(buckets.items())
    ]


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=day_index(day))


def weekly_revenue_breakdown(records: RecordsIn) -> list[WeeklyRevenueItem]:
    buckets: dict[date, dict[str, float]] = {}
    for day, record in _dated(as_records(records), "weekly"):
        _add(buckets.setdefault(week_start(day), _new_bucket()), record)
    return [
        WeeklyRevenueItem(
            week_start=start,
            revenue=values["revenue"],
            revenue_transaction_count=int(values["revenue_count"]),
            transaction_count=int(values["count"]),
        )
        for start, values in sorted(buckets.items())
    ]


def monthly_revenue_breakdown(records: RecordsIn) -> list[MonthlyRevenueItem]:
    buckets: dict[tuple[int, int], dict[str, float]] = {}
    for day, record in _dated(as_records(records), "monthly"):
        _add(buckets.setdefault((day.year, day.month), _new_bucket()), record)
    return [
        MonthlyRevenueItem(
            year=year,
            month=month,
            month_name=month_name(month),
            revenue=values["revenue"],
            revenue_transaction_count=int(values["revenue_count"]),
            transaction_count=int(values["count"]),
        )
        for (year, month), values in sorted(buckets.items())
    ]
