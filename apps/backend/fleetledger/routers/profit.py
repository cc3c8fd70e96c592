"""Profit (kar) report endpoints.

Each handler resolves its period, fetches the flat records through
``ReportDataService`` and composes the aggregation functions its report type
needs. Period validation errors surface as HTTP 400 via the app-level handler.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from fleetledger.core.config import settings
from fleetledger.core.deps import get_category_ids, get_report_service
from fleetledger.reporting import calculator, trends
from fleetledger.reporting.amounts import amounts_of
from fleetledger.reporting.periods import (
    Period,
    resolve_custom,
    resolve_daily,
    resolve_monthly,
    resolve_weekly,
    resolve_yearly,
)
from fleetledger.schemas import (
    ProfitReportBreakdowns,
    ProfitReportData,
    ProfitReportOut,
    ReportTransaction,
    TransactionRecord,
)
from fleetledger.services import ReportDataService

from .common import period_out


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profit", tags=["profit"])


def _report_transactions(records: list[TransactionRecord]) -> list[ReportTransaction]:
    items = []
    for record in records:
        revenue, expense = amounts_of(record)
        items.append(
            ReportTransaction(
                id=record.id,
                amount=revenue,
                expense=expense,
                profit=revenue - expense,
                description=record.description,
                transaction_date=record.transaction_date,
                category_name=record.category_name,
                vehicle_plate=record.vehicle_plate,
                personnel_name=record.personnel_name,
                is_expense=bool(record.is_expense),
            )
        )
    return items


def _fetch(service: ReportDataService, period: Period, category_ids: list[int]) -> list[TransactionRecord]:
    records = service.fetch_records(period, category_ids)
    logger.info(
        "Profit report %s %s..%s: %d transactions",
        period.type, period.start, period.end, len(records),
    )
    return records


@router.get("/daily", response_model=ProfitReportOut)
def daily_profit(
    day: str | None = Query(None, alias="date"),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_daily(day)
    records = _fetch(service, period, category_ids)
    summary = calculator.summarize(records)
    return ProfitReportOut(
        data=ProfitReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=ProfitReportBreakdowns(
                categories=calculator.category_breakdown(records, summary.total_revenue),
                vehicles=calculator.vehicle_breakdown(records, summary.total_revenue),
                personnel=calculator.personnel_analysis(records),
            ),
            transactions=_report_transactions(records),
        )
    )


@router.get("/weekly", response_model=ProfitReportOut)
def weekly_profit(
    year: str | None = Query(None),
    week: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_weekly(year, week)
    records = _fetch(service, period, category_ids)
    summary = calculator.summarize(records)
    return ProfitReportOut(
        data=ProfitReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=ProfitReportBreakdowns(
                categories=calculator.category_breakdown(records, summary.total_revenue),
                vehicles=calculator.vehicle_analysis(records),
                personnel=calculator.personnel_analysis(records),
            ),
            daily_trend=trends.daily_trend(records),
            transactions=_report_transactions(records),
        )
    )


@router.get("/monthly", response_model=ProfitReportOut)
def monthly_profit(
    year: str | None = Query(None),
    month: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_monthly(year, month)
    records = _fetch(service, period, category_ids)
    summary = calculator.summarize(records)
    period_info = period_out(period)
    return ProfitReportOut(
        data=ProfitReportData(
            period=period_info,
            summary=summary,
            average_daily_profit=summary.total_profit / period_info.day_count,
            breakdowns=ProfitReportBreakdowns(
                categories=calculator.category_analysis(records),
                vehicles=calculator.vehicle_analysis(records),
                personnel=calculator.personnel_analysis(records),
            ),
            daily_trend=trends.daily_trend(records),
            general_stats=calculator.general_stats(records),
            basic_analysis=calculator.basic_analysis(records, period.year, period.month),
            top_transactions=calculator.top_profitable_transactions(records, settings.TOP_TRANSACTION_LIMIT),
            transactions=_report_transactions(records),
        )
    )


@router.get("/yearly", response_model=ProfitReportOut)
def yearly_profit(
    year: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_yearly(year)
    records = _fetch(service, period, category_ids)
    summary = calculator.summarize(records)
    return ProfitReportOut(
        data=ProfitReportData(
            period=period_out(period),
            summary=summary,
            average_monthly_profit=summary.total_profit / 12,
            breakdowns=ProfitReportBreakdowns(
                categories=calculator.category_analysis(records),
                vehicles=calculator.vehicle_analysis(records),
                personnel=calculator.personnel_analysis(records),
                monthly=trends.monthly_breakdown(records),
            ),
            transactions=_report_transactions(records),
        )
    )


@router.get("/custom", response_model=ProfitReportOut)
def custom_profit(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_custom(start_date, end_date)
    records = _fetch(service, period, category_ids)
    summary = calculator.summarize(records)
    return ProfitReportOut(
        data=ProfitReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=ProfitReportBreakdowns(
                categories=calculator.category_breakdown(records, summary.total_revenue),
                vehicles=calculator.vehicle_breakdown(records, summary.total_revenue),
                personnel=calculator.personnel_analysis(records),
            ),
            daily_breakdown=trends.daily_breakdown(records, period.start_date, period.end_date),
            transactions=_report_transactions(records),
        )
    )
