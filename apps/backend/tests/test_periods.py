"""
Report period resolution tests
"""

from datetime import date, datetime

import pytest

from fleetledger.reporting.errors import PeriodValidationError
from fleetledger.reporting.periods import (
    WINDOW_LOCAL_DATES,
    WINDOW_RAW_DATES,
    WINDOW_UTC_RANGE,
    business_date,
    day_name,
    default_week,
    month_name,
    parse_category_ids,
    resolve_custom,
    resolve_daily,
    resolve_monthly,
    resolve_period,
    resolve_weekly,
    resolve_yearly,
)


class TestDaily:
    def test_full_day_expansion(self):
        """Local day becomes 21:00 previous day .. 20:59:59 UTC"""
        period = resolve_daily("2024-07-20")
        assert period.start == datetime(2024, 7, 19, 21, 0, 0)
        assert period.end == datetime(2024, 7, 20, 20, 59, 59)
        assert period.window == WINDOW_UTC_RANGE
        assert period.day == date(2024, 7, 20)

    def test_missing_date(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_daily(None)
        assert exc.value.reason == PeriodValidationError.MISSING_PARAMETER
        assert exc.value.parameter == "date"

    def test_blank_date_counts_as_missing(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_daily("  ")
        assert exc.value.reason == PeriodValidationError.MISSING_PARAMETER

    def test_malformed_date(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_daily("20-07-2024")
        assert exc.value.reason == PeriodValidationError.INVALID_PERIOD_VALUE

    def test_contains_is_inclusive_to_the_second(self):
        period = resolve_daily("2024-07-20")
        assert period.contains(datetime(2024, 7, 19, 21, 0, 0))
        assert period.contains(datetime(2024, 7, 20, 20, 59, 59))
        assert not period.contains(datetime(2024, 7, 20, 21, 0, 0))
        assert not period.contains(datetime(2024, 7, 19, 20, 59, 59))


class TestWeekly:
    def test_explicit_week(self):
        period = resolve_weekly("2024", "2")
        assert period.start == date(2024, 1, 8)
        assert period.end == date(2024, 1, 14)
        assert period.window == WINDOW_RAW_DATES
        assert (period.year, period.week) == (2024, 2)

    def test_raw_window_ends_at_midnight_of_last_day(self):
        period = resolve_weekly(2024, 1)
        lower, upper, inclusive = period.query_window()
        assert lower == datetime(2024, 1, 1)
        assert upper == datetime(2024, 1, 7)
        assert inclusive
        assert period.contains(datetime(2024, 1, 7, 0, 0, 0))
        # Anything later on the last day falls outside
        assert not period.contains(datetime(2024, 1, 7, 0, 0, 1))

    def test_defaults_to_current_week(self):
        now = datetime(2024, 1, 15, 12, 0)
        period = resolve_weekly(now=now)
        assert period.year == 2024
        assert period.week == 3
        assert period.start == date(2024, 1, 15)

    def test_default_week_never_below_one(self):
        assert default_week(2024, datetime(2024, 1, 1)) == 1

    def test_default_week_for_past_year_keeps_counting(self):
        period = resolve_weekly(2020, now=datetime(2026, 10, 18))
        assert period.week == 355
        assert period.start == date(2026, 10, 14)
        assert period.end == date(2026, 10, 20)
        assert period.year == 2020

    @pytest.mark.parametrize("week", ["0", "54", "abc"])
    def test_invalid_week(self, week):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_weekly("2024", week)
        assert exc.value.reason == PeriodValidationError.INVALID_PERIOD_VALUE
        assert exc.value.parameter == "week"


class TestMonthly:
    def test_leap_february(self):
        period = resolve_monthly("2024", "2")
        assert period.start == date(2024, 2, 1)
        assert period.end == date(2024, 2, 29)
        assert period.window == WINDOW_LOCAL_DATES

    def test_local_window_shifts_by_offset(self):
        lower, upper, inclusive = resolve_monthly(2024, 2).query_window()
        assert lower == datetime(2024, 1, 31, 21, 0)
        assert upper == datetime(2024, 2, 29, 21, 0)
        assert not inclusive

    def test_missing_year_reported_first(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_monthly(None, None)
        assert exc.value.parameter == "year"
        assert exc.value.reason == PeriodValidationError.MISSING_PARAMETER

    def test_missing_month(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_monthly("2024", None)
        assert exc.value.parameter == "month"

    @pytest.mark.parametrize("month", ["0", "13"])
    def test_month_out_of_range(self, month):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_monthly("2024", month)
        assert exc.value.reason == PeriodValidationError.INVALID_PERIOD_VALUE
        assert exc.value.parameter == "month"


class TestYearly:
    def test_whole_year(self):
        period = resolve_yearly("2023")
        assert period.start == date(2023, 1, 1)
        assert period.end == date(2023, 12, 31)
        assert period.window == WINDOW_LOCAL_DATES

    @pytest.mark.parametrize("year", ["1999", "3001"])
    def test_year_out_of_range(self, year):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_yearly(year)
        assert exc.value.reason == PeriodValidationError.INVALID_PERIOD_VALUE

    def test_missing_year(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_yearly("")
        assert exc.value.reason == PeriodValidationError.MISSING_PARAMETER


class TestCustom:
    def test_single_day_matches_daily(self):
        custom = resolve_custom("2024-07-20", "2024-07-20")
        daily = resolve_daily("2024-07-20")
        assert custom.type == "custom"
        assert (custom.start, custom.end, custom.window) == (daily.start, daily.end, daily.window)
        assert custom.start_date == custom.end_date == date(2024, 7, 20)

    def test_multi_day_uses_raw_dates(self):
        period = resolve_custom("2024-07-01", "2024-07-10")
        assert period.window == WINDOW_RAW_DATES
        assert period.start_date == date(2024, 7, 1)
        assert period.end_date == date(2024, 7, 10)

    def test_reversed_range(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_custom("2024-07-10", "2024-07-01")
        assert exc.value.parameter == "endDate"

    def test_missing_bounds(self):
        with pytest.raises(PeriodValidationError) as exc:
            resolve_custom(None, "2024-07-01")
        assert exc.value.parameter == "startDate"
        with pytest.raises(PeriodValidationError) as exc:
            resolve_custom("2024-07-01", None)
        assert exc.value.parameter == "endDate"


def test_resolve_period_dispatch():
    assert resolve_period("daily", date="2024-07-20").type == "daily"
    assert resolve_period("monthly", year="2024", month="7").month == 7
    assert resolve_period("custom", startDate="2024-07-01", endDate="2024-07-02").type == "custom"
    with pytest.raises(PeriodValidationError) as exc:
        resolve_period("hourly")
    assert exc.value.parameter == "period"


def test_names_are_sunday_first():
    assert day_name(date(2024, 7, 21)) == "Pazar"
    assert day_name(date(2024, 7, 22)) == "Pazartesi"
    assert day_name(date(2024, 7, 27)) == "Cumartesi"
    assert month_name(1) == "Ocak"
    assert month_name(12) == "Aralık"


def test_business_date_crosses_midnight():
    assert business_date(datetime(2024, 7, 19, 21, 0)) == date(2024, 7, 20)
    assert business_date(datetime(2024, 7, 19, 20, 59)) == date(2024, 7, 19)


def test_parse_category_ids():
    assert parse_category_ids("1, 2,x,,3") == [1, 2, 3]
    assert parse_category_ids(None) == []
    assert parse_category_ids(["4", 5]) == [4, 5]
