"""Profit aggregation over a flat list of transaction records.

Every function is pure: it builds its own accumulators, never touches the
input records and never performs I/O. Two families of dimension breakdowns
exist side by side:

* *simple* breakdowns (``breakdown_by`` and the ``*_breakdown`` helpers) keep
  the order in which each key first appears and carry a revenue share;
* *analysis* breakdowns (``*_analysis``) are ranked by profit, highest first,
  and carry transaction counts, as used by the detailed monthly/yearly reports.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable, Literal

from ..schemas import (
    AggregationReport,
    BasicAnalysis,
    BreakdownItem,
    CategoryAnalysisItem,
    GeneralStats,
    PersonnelAnalysisItem,
    ProfitSummary,
    ReportBreakdowns,
    ReportTrend,
    TopTransactionItem,
    TransactionRecord,
    VehicleAnalysisItem,
)
from .amounts import amounts_of, as_records, label_or, margin, percentage, round2
from .periods import business_date, month_name
from .trends import daily_trend, monthly_breakdown


CATEGORY_SENTINEL = "Kategori Belirtilmemiş"
VEHICLE_SENTINEL = "Araç Belirtilmemiş"
PERSONNEL_SENTINEL = "Personel Belirtilmemiş"
UNKNOWN_VEHICLE_INFO = "Bilinmeyen Araç"
NOT_AVAILABLE = "N/A"

RecordsIn = Iterable[TransactionRecord | Mapping[str, Any]]
KeyFn = Callable[[TransactionRecord], str]


def category_key(record: TransactionRecord) -> str:
    return label_or(record.category_name, CATEGORY_SENTINEL)


def vehicle_key(record: TransactionRecord) -> str:
    return label_or(record.vehicle_plate, VEHICLE_SENTINEL)


def personnel_key(record: TransactionRecord) -> str:
    return label_or(record.personnel_name, PERSONNEL_SENTINEL)


def _totals(records: list[TransactionRecord]) -> tuple[float, float]:
    total_revenue = 0.0
    total_expense = 0.0
    for record in records:
        revenue, expense = amounts_of(record)
        total_revenue += revenue
        total_expense += expense
    return total_revenue, total_expense


def summarize(records: RecordsIn) -> ProfitSummary:
    items = as_records(records)
    total_revenue, total_expense = _totals(items)
    total_profit = total_revenue - total_expense
    count = len(items)
    average = total_revenue / count if count else 0.0
    return ProfitSummary(
        total_revenue=total_revenue,
        total_expense=total_expense,
        total_profit=total_profit,
        profit_margin=round2(margin(total_profit, total_revenue)),
        transaction_count=count,
        average_transaction=round2(average),
    )


def _group(records: list[TransactionRecord], key_fn: KeyFn) -> dict[str, dict[str, float]]:
    # dict keeps first-occurrence order
    groups: dict[str, dict[str, float]] = {}
    for record in records:
        key = key_fn(record)
        bucket = groups.get(key)
        if bucket is None:
            bucket = {"revenue": 0.0, "expense": 0.0, "count": 0, "activity": 0.0}
            groups[key] = bucket
        revenue, expense = amounts_of(record)
        bucket["revenue"] += revenue
        bucket["expense"] += expense
        bucket["count"] += 1
        bucket["activity"] += revenue or expense
    return groups


def breakdown_by(
    records: RecordsIn,
    key_fn: KeyFn,
    total_revenue: float | None = None,
) -> list[BreakdownItem]:
    """Group by ``key_fn`` keeping first-occurrence order.

    ``percentage`` is the group's share of ``total_revenue`` (defaults to the
    revenue of ``records``) as a two-decimal string.
    """
    items = as_records(records)
    if total_revenue is None:
        total_revenue = _totals(items)[0]
    results: list[BreakdownItem] = []
    for key, bucket in _group(items, key_fn).items():
        revenue = bucket["revenue"]
        profit = revenue - bucket["expense"]
        results.append(
            BreakdownItem(
                key=key,
                revenue=revenue,
                expense=bucket["expense"],
                profit=profit,
                profit_margin=margin(profit, revenue),
                percentage=percentage(revenue, total_revenue),
            )
        )
    return results


def category_breakdown(records: RecordsIn, total_revenue: float | None = None) -> list[BreakdownItem]:
    return breakdown_by(records, category_key, total_revenue)


def vehicle_breakdown(records: RecordsIn, total_revenue: float | None = None) -> list[BreakdownItem]:
    return breakdown_by(records, vehicle_key, total_revenue)


def personnel_breakdown(records: RecordsIn, total_revenue: float | None = None) -> list[BreakdownItem]:
    return breakdown_by(records, personnel_key, total_revenue)


def category_analysis(records: RecordsIn) -> list[CategoryAnalysisItem]:
    results = []
    for key, bucket in _group(as_records(records), category_key).items():
        profit = bucket["revenue"] - bucket["expense"]
        results.append(
            CategoryAnalysisItem(
                category=key,
                revenue=bucket["revenue"],
                expense=bucket["expense"],
                profit=profit,
                profit_margin=round2(margin(profit, bucket["revenue"])),
                transaction_count=int(bucket["count"]),
            )
        )
    return sorted(results, key=lambda item: item.profit, reverse=True)


def vehicle_analysis(records: RecordsIn) -> list[VehicleAnalysisItem]:
    results = []
    for key, bucket in _group(as_records(records), vehicle_key).items():
        profit = bucket["revenue"] - bucket["expense"]
        results.append(
            VehicleAnalysisItem(
                vehicle_plate=key,
                vehicle_info=UNKNOWN_VEHICLE_INFO if key == VEHICLE_SENTINEL else key,
                revenue=bucket["revenue"],
                expense=bucket["expense"],
                profit=profit,
                profit_margin=round2(margin(profit, bucket["revenue"])),
                transaction_count=int(bucket["count"]),
            )
        )
    return sorted(results, key=lambda item: item.profit, reverse=True)


def personnel_analysis(records: RecordsIn) -> list[PersonnelAnalysisItem]:
    results = []
    for key, bucket in _group(as_records(records), personnel_key).items():
        profit = bucket["revenue"] - bucket["expense"]
        count = int(bucket["count"])
        # A record with no revenue counts with its expense instead
        average = bucket["activity"] / count if count else 0.0
        results.append(
            PersonnelAnalysisItem(
                personnel=key,
                revenue=bucket["revenue"],
                expense=bucket["expense"],
                profit=profit,
                profit_margin=round2(margin(profit, bucket["revenue"])),
                transaction_count=count,
                average_transaction=round2(average),
            )
        )
    return sorted(results, key=lambda item: item.profit, reverse=True)


def general_stats(records: RecordsIn) -> GeneralStats:
    revenue_count = 0
    expense_count = 0
    max_revenue = 0.0
    max_expense = 0.0
    total_revenue = 0.0
    total_expense = 0.0
    vehicles: set[int] = set()
    personnel: set[int] = set()
    categories: set[int] = set()

    for record in as_records(records):
        revenue, expense = amounts_of(record)
        if revenue > 0:
            revenue_count += 1
            total_revenue += revenue
            max_revenue = max(max_revenue, revenue)
        if expense > 0:
            expense_count += 1
            total_expense += expense
            max_expense = max(max_expense, expense)
        if record.vehicle_id:
            vehicles.add(record.vehicle_id)
        if record.personnel_id:
            personnel.add(record.personnel_id)
        if record.category_id:
            categories.add(record.category_id)

    return GeneralStats(
        revenue_transaction_count=revenue_count,
        expense_transaction_count=expense_count,
        max_revenue=max_revenue,
        max_expense=max_expense,
        average_revenue=round2(total_revenue / revenue_count) if revenue_count else 0.0,
        average_expense=round2(total_expense / expense_count) if expense_count else 0.0,
        active_vehicle_count=len(vehicles),
        active_personnel_count=len(personnel),
        used_category_count=len(categories),
    )


def top_profitable_transactions(records: RecordsIn, limit: int = 20) -> list[TopTransactionItem]:
    results = []
    for record in as_records(records):
        revenue, expense = amounts_of(record)
        results.append(
            TopTransactionItem(
                id=record.id,
                date=business_date(record.transaction_date) if record.transaction_date else None,
                vehicle_plate=label_or(record.vehicle_plate, NOT_AVAILABLE),
                personnel=label_or(record.personnel_name, NOT_AVAILABLE),
                category=label_or(record.category_name, NOT_AVAILABLE),
                description=record.description,
                revenue=revenue,
                expense=expense,
                net_effect=revenue - expense,
                payment_method=label_or(record.payment_method, NOT_AVAILABLE),
                status=record.status,
            )
        )
    results.sort(key=lambda item: item.net_effect, reverse=True)
    return results[:limit]


def basic_analysis(records: RecordsIn, year: int, month: int) -> BasicAnalysis:
    """Headline figures of the detailed monthly report.

    Unlike ``summarize``, the average here spreads revenue *and* expense over
    the transaction count.
    """
    items = as_records(records)
    total_revenue, total_expense = _totals(items)
    net_profit = total_revenue - total_expense
    count = len(items)
    average = (total_revenue + total_expense) / count if count else 0.0
    return BasicAnalysis(
        period_label=f"{year} - {month_name(month)}",
        total_revenue=total_revenue,
        total_expense=total_expense,
        net_profit=net_profit,
        profit_margin=round2(margin(net_profit, total_revenue)),
        transaction_count=count,
        average_transaction=round2(average),
    )


def build_report(records: RecordsIn, trend: Literal["daily", "monthly"] = "daily") -> AggregationReport:
    """Summary, the three simple breakdowns and one trend series in one pass-through."""
    items = as_records(records)
    summary = summarize(items)
    breakdowns = ReportBreakdowns(
        by_category=category_breakdown(items, summary.total_revenue),
        by_vehicle=vehicle_breakdown(items, summary.total_revenue),
        by_personnel=personnel_breakdown(items, summary.total_revenue),
    )
    if trend == "monthly":
        series = ReportTrend(granularity="monthly", monthly=monthly_breakdown(items))
    else:
        series = ReportTrend(granularity="daily", daily=daily_trend(items))
    return AggregationReport(summary=summary, breakdowns=breakdowns, trend=series)
