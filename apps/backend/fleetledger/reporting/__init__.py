"""
Reporting package

Period resolution and the pure aggregation functions behind the profit and
revenue reports.
"""

from .errors import ComputationError, PeriodValidationError
from .periods import (
    Period,
    parse_category_ids,
    resolve_custom,
    resolve_daily,
    resolve_monthly,
    resolve_period,
    resolve_weekly,
    resolve_yearly,
)
from .calculator import (
    basic_analysis,
    breakdown_by,
    build_report,
    category_analysis,
    category_breakdown,
    general_stats,
    personnel_analysis,
    personnel_breakdown,
    summarize,
    top_profitable_transactions,
    vehicle_analysis,
    vehicle_breakdown,
)
from .trends import daily_breakdown, daily_trend, monthly_breakdown

__all__ = [
    "ComputationError",
    "PeriodValidationError",
    "Period",
    "parse_category_ids",
    "resolve_custom",
    "resolve_daily",
    "resolve_monthly",
    "resolve_period",
    "resolve_weekly",
    "resolve_yearly",
    "basic_analysis",
    "breakdown_by",
    "build_report",
    "category_analysis",
    "category_breakdown",
    "general_stats",
    "personnel_analysis",
    "personnel_breakdown",
    "summarize",
    "top_profitable_transactions",
    "vehicle_analysis",
    "vehicle_breakdown",
    "daily_breakdown",
    "daily_trend",
    "monthly_breakdown",
]
