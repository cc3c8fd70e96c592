from __future__ import annotations

import calendar

from fleetledger.reporting.periods import Period, day_name, month_name
from fleetledger.schemas import PeriodOut


def period_out(period: Period) -> PeriodOut:
    return PeriodOut(
        type=period.type,
        start=period.start,
        end=period.end,
        date=period.day,
        day_name=day_name(period.day) if period.day else None,
        year=period.year,
        month=period.month,
        month_name=month_name(period.month) if period.month else None,
        week=period.week,
        day_count=calendar.monthrange(period.year, period.month)[1] if period.month else None,
    )
