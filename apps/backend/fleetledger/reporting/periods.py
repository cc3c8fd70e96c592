"""Report period resolution.

The business runs on Turkey time (fixed UTC+3, no DST) while transactions are
stored as naive UTC timestamps. A *business-local day* therefore starts at
21:00 UTC of the previous calendar day.

Each period type keeps its own window semantics:

* ``daily`` (and a single-day ``custom`` range) expands the local day to the
  matching UTC instants, second precision.
* ``monthly`` and ``yearly`` match records on their business-local date.
* ``weekly`` and a multi-day ``custom`` range compare the calendar dates
  literally against the UTC timestamp (no offset applied).
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Iterable

from .errors import PeriodValidationError


BUSINESS_UTC_OFFSET = timedelta(hours=3)

# Sunday-first, matches the day-of-week index used throughout the reports
DAY_NAMES = ("Pazar", "Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma", "Cumartesi")
MONTH_NAMES = (
    "Ocak", "Şubat", "Mart", "Nisan", "Mayıs", "Haziran",
    "Temmuz", "Ağustos", "Eylül", "Ekim", "Kasım", "Aralık",
)

MIN_YEAR = 2000
MAX_YEAR = 3000

WINDOW_UTC_RANGE = "utc_range"
WINDOW_LOCAL_DATES = "local_dates"
WINDOW_RAW_DATES = "raw_dates"

PERIOD_TYPES = ("daily", "weekly", "monthly", "yearly", "custom")


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def business_datetime(value: datetime) -> datetime:
    """UTC timestamp -> naive business-local (UTC+3) wall-clock time."""
    return to_utc_naive(value) + BUSINESS_UTC_OFFSET


def business_date(value: datetime) -> date:
    return business_datetime(value).date()


def business_month(value: datetime) -> int:
    return business_datetime(value).month


def day_index(value: date) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (value.weekday() + 1) % 7


def day_name(value: date) -> str:
    return DAY_NAMES[day_index(value)]


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


@dataclass(frozen=True)
class Period:
    type: str
    start: date | datetime
    end: date | datetime
    window: str
    year: int | None = None
    month: int | None = None
    week: int | None = None
    day: date | None = None

    @property
    def start_date(self) -> date:
        if self.window == WINDOW_UTC_RANGE:
            return self.day  # type: ignore[return-value]
        return self.start  # type: ignore[return-value]

    @property
    def end_date(self) -> date:
        if self.window == WINDOW_UTC_RANGE:
            return self.day  # type: ignore[return-value]
        return self.end  # type: ignore[return-value]

    def query_window(self) -> tuple[datetime, datetime, bool]:
        """Return ``(lower, upper, upper_inclusive)`` as naive UTC datetimes."""
        if self.window == WINDOW_UTC_RANGE:
            return self.start, self.end, True  # type: ignore[return-value]
        if self.window == WINDOW_LOCAL_DATES:
            lower = datetime.combine(self.start, time.min) - BUSINESS_UTC_OFFSET
            upper = datetime.combine(self.end + timedelta(days=1), time.min) - BUSINESS_UTC_OFFSET
            return lower, upper, False
        return datetime.combine(self.start, time.min), datetime.combine(self.end, time.min), True

    def contains(self, timestamp: datetime) -> bool:
        lower, upper, inclusive = self.query_window()
        ts = to_utc_naive(timestamp)
        if ts < lower:
            return False
        return ts <= upper if inclusive else ts < upper


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_int(value: Any, parameter: str) -> int | None:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise PeriodValidationError.invalid(parameter, "expected an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise PeriodValidationError.invalid(parameter, "expected an integer") from None


def _parse_date(value: Any, parameter: str) -> date | None:
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise PeriodValidationError.invalid(parameter, "expected YYYY-MM-DD") from None


def _expand_business_day(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min) - BUSINESS_UTC_OFFSET
    end = datetime.combine(day, time(23, 59, 59, 999000)) - BUSINESS_UTC_OFFSET
    # Bounds are compared with second precision
    return start, end.replace(microsecond=0)


def resolve_daily(date_str: Any) -> Period:
    day = _parse_date(date_str, "date")
    if day is None:
        raise PeriodValidationError.missing("date")
    start, end = _expand_business_day(day)
    return Period(type="daily", start=start, end=end, window=WINDOW_UTC_RANGE, day=day)


def default_week(year: int, now: datetime | None = None) -> int:
    """Week number of ``now`` counted in whole 7-day blocks from Jan 1 (rounded up).

    The count is not capped at the end of ``year``: asking for a past year
    without a week keeps counting up to ``now``, so the week can start in a
    later year.
    """
    now = now or datetime.now()
    elapsed = now - datetime(year, 1, 1)
    week = math.ceil(elapsed.total_seconds() / timedelta(days=7).total_seconds())
    return max(week, 1)


def resolve_weekly(year: Any = None, week: Any = None, *, now: datetime | None = None) -> Period:
    now = now or datetime.now()
    target_year = _parse_int(year, "year")
    if target_year is None:
        target_year = now.year
    try:
        jan1 = date(target_year, 1, 1)
    except ValueError:
        raise PeriodValidationError.invalid("year", f"{target_year} is not a valid year") from None

    target_week = _parse_int(week, "week")
    if target_week is None:
        target_week = default_week(target_year, now)
    elif not 1 <= target_week <= 53:
        raise PeriodValidationError.invalid("week", "must be between 1 and 53")

    start = jan1 + timedelta(days=(target_week - 1) * 7)
    end = start + timedelta(days=6)
    return Period(
        type="weekly",
        start=start,
        end=end,
        window=WINDOW_RAW_DATES,
        year=target_year,
        week=target_week,
    )


def resolve_monthly(year: Any, month: Any) -> Period:
    year_num = _parse_int(year, "year")
    month_num = _parse_int(month, "month")
    if year_num is None:
        raise PeriodValidationError.missing("year")
    if month_num is None:
        raise PeriodValidationError.missing("month")
    if not 1 <= month_num <= 12:
        raise PeriodValidationError.invalid("month", "must be between 1 and 12")
    try:
        start = date(year_num, month_num, 1)
    except ValueError:
        raise PeriodValidationError.invalid("year", f"{year_num} is not a valid year") from None
    end = start.replace(day=calendar.monthrange(year_num, month_num)[1])
    return Period(
        type="monthly",
        start=start,
        end=end,
        window=WINDOW_LOCAL_DATES,
        year=year_num,
        month=month_num,
    )


def resolve_yearly(year: Any) -> Period:
    year_num = _parse_int(year, "year")
    if year_num is None:
        raise PeriodValidationError.missing("year")
    if not MIN_YEAR <= year_num <= MAX_YEAR:
        raise PeriodValidationError.invalid("year", f"must be between {MIN_YEAR} and {MAX_YEAR}")
    return Period(
        type="yearly",
        start=date(year_num, 1, 1),
        end=date(year_num, 12, 31),
        window=WINDOW_LOCAL_DATES,
        year=year_num,
    )


def resolve_custom(start_date: Any, end_date: Any) -> Period:
    start = _parse_date(start_date, "startDate")
    end = _parse_date(end_date, "endDate")
    if start is None:
        raise PeriodValidationError.missing("startDate")
    if end is None:
        raise PeriodValidationError.missing("endDate")
    if start > end:
        raise PeriodValidationError.invalid("endDate", "must be on or after startDate")
    if start == end:
        utc_start, utc_end = _expand_business_day(start)
        return Period(type="custom", start=utc_start, end=utc_end, window=WINDOW_UTC_RANGE, day=start)
    return Period(type="custom", start=start, end=end, window=WINDOW_RAW_DATES)


def resolve_period(period_type: str, **params: Any) -> Period:
    """Dispatch on ``period_type`` using request-style parameter names."""
    if period_type == "daily":
        return resolve_daily(params.get("date"))
    if period_type == "weekly":
        return resolve_weekly(params.get("year"), params.get("week"), now=params.get("now"))
    if period_type == "monthly":
        return resolve_monthly(params.get("year"), params.get("month"))
    if period_type == "yearly":
        return resolve_yearly(params.get("year"))
    if period_type == "custom":
        return resolve_custom(params.get("startDate"), params.get("endDate"))
    raise PeriodValidationError.invalid("period", f"expected one of {', '.join(PERIOD_TYPES)}")


def parse_category_ids(value: str | Iterable[Any] | None) -> list[int]:
    """``"1, 2,x"`` -> ``[1, 2]``; entries that are not integers are dropped."""
    if value is None:
        return []
    tokens = value.split(",") if isinstance(value, str) else list(value)
    ids: list[int] = []
    for token in tokens:
        try:
            ids.append(int(str(token).strip()))
        except ValueError:
            continue
    return ids
