"""Revenue (ciro) report endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from fleetledger.core.deps import get_category_ids, get_report_service
from fleetledger.reporting import revenue
from fleetledger.reporting.amounts import revenue_of
from fleetledger.reporting.periods import Period, resolve_daily, resolve_monthly, resolve_weekly, resolve_yearly
from fleetledger.schemas import (
    RevenueReportBreakdowns,
    RevenueReportData,
    RevenueReportOut,
    RevenueTransaction,
    TransactionRecord,
)
from fleetledger.services import ReportDataService

from .common import period_out


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/revenue", tags=["revenue"])

YEARLY_CATEGORY_LIMIT = 15


def _revenue_transactions(records: list[TransactionRecord]) -> list[RevenueTransaction]:
    return [
        RevenueTransaction(
            id=record.id,
            amount=revenue_of(record),
            description=record.description,
            transaction_date=record.transaction_date,
            category_name=record.category_name,
            vehicle_plate=record.vehicle_plate,
            personnel_name=record.personnel_name,
        )
        for record in records
        if revenue_of(record) > 0
    ]


def _fetch(service: ReportDataService, period: Period, category_ids: list[int]) -> list[TransactionRecord]:
    records = service.fetch_records(period, category_ids)
    logger.info(
        "Revenue report %s %s..%s: %d transactions",
        period.type, period.start, period.end, len(records),
    )
    return records


@router.get("/daily", response_model=RevenueReportOut)
def daily_revenue(
    day: str | None = Query(None, alias="date"),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_daily(day)
    records = _fetch(service, period, category_ids)
    summary = revenue.revenue_summary(records)
    return RevenueReportOut(
        data=RevenueReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=RevenueReportBreakdowns(
                categories=revenue.category_revenue_breakdown(records, summary.total_revenue),
            ),
            transactions=_revenue_transactions(records),
        )
    )


@router.get("/weekly", response_model=RevenueReportOut)
def weekly_revenue(
    year: str | None = Query(None),
    week: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_weekly(year, week)
    records = _fetch(service, period, category_ids)
    summary = revenue.revenue_summary(records)
    return RevenueReportOut(
        data=RevenueReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=RevenueReportBreakdowns(
                categories=revenue.category_revenue_breakdown(records, summary.total_revenue),
                daily=revenue.daily_revenue_breakdown(records),
            ),
            transactions=_revenue_transactions(records),
        )
    )


@router.get("/monthly", response_model=RevenueReportOut)
def monthly_revenue(
    year: str | None = Query(None),
    month: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_monthly(year, month)
    records = _fetch(service, period, category_ids)
    summary = revenue.revenue_summary(records)
    return RevenueReportOut(
        data=RevenueReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=RevenueReportBreakdowns(
                categories=revenue.category_revenue_breakdown(records, summary.total_revenue),
                daily=revenue.daily_revenue_breakdown(records),
                weekly=revenue.weekly_revenue_breakdown(records),
            ),
            transactions=_revenue_transactions(records),
        )
    )


@router.get("/yearly", response_model=RevenueReportOut)
def yearly_revenue(
    year: str | None = Query(None),
    category_ids: list[int] = Depends(get_category_ids),
    service: ReportDataService = Depends(get_report_service),
):
    period = resolve_yearly(year)
    records = _fetch(service, period, category_ids)
    summary = revenue.revenue_summary(records)
    categories = revenue.category_revenue_breakdown(records, summary.total_revenue)
    return RevenueReportOut(
        data=RevenueReportData(
            period=period_out(period),
            summary=summary,
            breakdowns=RevenueReportBreakdowns(
                categories=categories[:YEARLY_CATEGORY_LIMIT],
                monthly=revenue.monthly_revenue_breakdown(records),
            ),
            transactions=_revenue_transactions(records),
        )
    )
