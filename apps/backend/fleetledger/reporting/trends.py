from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, timedelta
from typing import Any, Iterable

from ..schemas import DailyBreakdownItem, DailyTrendItem, MonthlyBreakdownItem, TransactionRecord
from .amounts import amounts_of, as_records, margin
from .errors import ComputationError
from .periods import business_date, business_month, day_index, day_name, month_name


logger = logging.getLogger(__name__)

RecordsIn = Iterable[TransactionRecord | Mapping[str, Any]]


def _record_day(record: TransactionRecord) -> date:
    if record.transaction_date is None:
        raise ComputationError("transaction has no transaction_date", record_id=record.id)
    return business_date(record.transaction_date)


def _record_month(record: TransactionRecord) -> int:
    if record.month:
        return record.month
    if record.transaction_date is None:
        raise ComputationError("transaction has no month or transaction_date", record_id=record.id)
    return business_month(record.transaction_date)


def daily_trend(records: RecordsIn) -> list[DailyTrendItem]:
    """One entry per business-local day that has records, oldest first."""
    buckets: dict[date, dict[str, float]] = {}
    for record in as_records(records):
        try:
            day = _record_day(record)
        except ComputationError as exc:
            logger.warning("Skipping transaction %s in daily trend: %s", exc.record_id, exc)
            continue
        bucket = buckets.setdefault(day, {"revenue": 0.0, "expense": 0.0, "count": 0})
        revenue, expense = amounts_of(record)
        bucket["revenue"] += revenue
        bucket["expense"] += expense
        bucket["count"] += 1

    return [
        DailyTrendItem(
            date=day,
            day_name=day_name(day),
            revenue=values["revenue"],
            expense=values["expense"],
            profit=values["revenue"] - values["expense"],
            transaction_count=int(values["count"]),
        )
        for day, values in sorted(buckets.items())
    ]


def daily_breakdown(records: RecordsIn, start: date, end: date) -> list[DailyBreakdownItem]:
    """Every calendar day from ``start`` to ``end``, zero-filled.

    Records are attributed by business-local date; those outside the range
    are ignored.
    """
    buckets: dict[date, dict[str, float]] = {}
    current = start
    while current <= end:
        buckets[current] = {"revenue": 0.0, "expense": 0.0, "count": 0}
        current += timedelta(days=1)

    for record in as_records(records):
        try:
            day = _record_day(record)
        except ComputationError as exc:
            logger.warning("Skipping transaction %s in daily breakdown: %s", exc.record_id, exc)
            continue
        bucket = buckets.get(day)
        if bucket is None:
            continue
        revenue, expense = amounts_of(record)
        bucket["revenue"] += revenue
        bucket["expense"] += expense
        bucket["count"] += 1

    results = []
    for day, values in buckets.items():
        profit = values["revenue"] - values["expense"]
        results.append(
            DailyBreakdownItem(
                date=day,
                day=day_index(day) + 1,
                day_name=day_name(day),
                revenue=values["revenue"],
                expense=values["expense"],
                profit=profit,
                profit_margin=margin(profit, values["revenue"]),
                transaction_count=int(values["count"]),
            )
        )
    return results


def monthly_breakdown(records: RecordsIn) -> list[MonthlyBreakdownItem]:
    """Always twelve entries, January to December."""
    buckets: dict[int, dict[str, float]] = {
        month: {"revenue": 0.0, "expense": 0.0, "count": 0} for month in range(1, 13)
    }
    for record in as_records(records):
        try:
            month = _record_month(record)
        except ComputationError as exc:
            logger.warning("Skipping transaction %s in monthly breakdown: %s", exc.record_id, exc)
            continue
        bucket = buckets.get(month)
        if bucket is None:
            logger.debug("Ignoring transaction %s with month %s", record.id, month)
            continue
        revenue, expense = amounts_of(record)
        bucket["revenue"] += revenue
        bucket["expense"] += expense
        bucket["count"] += 1

    results = []
    for month, values in buckets.items():
        profit = values["revenue"] - values["expense"]
        results.append(
            MonthlyBreakdownItem(
                month=month,
                month_name=month_name(month),
                revenue=values["revenue"],
                expense=values["expense"],
                profit=profit,
                profit_margin=margin(profit, values["revenue"]),
                transaction_count=int(values["count"]),
            )
        )
    return results
