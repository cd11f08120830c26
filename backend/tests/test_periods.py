"""
Calendar resolver tests
=======================
Business-local "today", Sunday-Saturday weeks, calendar months, previous
windows and the ±HH:MM offset, all resolved in America/Chicago.
"""

import pytest
import sys
import os
from datetime import date, datetime, timezone
from unittest.mock import patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ceo_metrics.periods import (
    business_today,
    days_in_month,
    resolve_period,
    sunday_index,
    utc_offset,
)

# Monday 2026-10-19, 10:00 in Chicago (CDT, UTC-5)
NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


class TestBusinessToday:

    def test_uses_business_date_not_utc_date(self):
        """03:00 UTC on the 20th is still the evening of the 19th in Chicago."""
        late = datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)
        assert business_today(late) == date(2026, 10, 19)

    def test_naive_datetime_treated_as_utc(self):
        assert business_today(datetime(2026, 10, 20, 3, 0)) == date(2026, 10, 19)


class TestUtcOffset:

    def test_daylight_time(self):
        assert utc_offset(NOW) == "-05:00"

    def test_standard_time(self):
        assert utc_offset(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)) == "-06:00"

    def test_unknown_zone_falls_back(self):
        with patch("ceo_metrics.periods.BUSINESS_TIMEZONE", "Not/AZone"):
            assert utc_offset(NOW) == "-06:00"

    def test_unknown_zone_still_resolves_today(self):
        with patch("ceo_metrics.periods.BUSINESS_TIMEZONE", "Not/AZone"):
            assert business_today(NOW) == date(2026, 10, 19)


class TestSundayIndex:

    @pytest.mark.parametrize("day,expected", [
        (date(2026, 10, 18), 0),   # Sunday
        (date(2026, 10, 19), 1),   # Monday
        (date(2026, 10, 24), 6),   # Saturday
        (date(2026, 3, 8), 0),     # DST starts (Sunday)
        (date(2026, 11, 1), 0),    # DST ends (Sunday)
    ])
    def test_index(self, day, expected):
        assert sunday_index(day) == expected


class TestResolvePeriod:

    def test_today(self):
        p = resolve_period("today", NOW)
        assert (p.start, p.end) == ("2026-10-19", "2026-10-19")
        assert (p.previous_start, p.previous_end) == ("2026-10-18", "2026-10-18")
        assert p.today == "2026-10-19"
        assert p.yesterday == "2026-10-18"

    def test_week_is_sunday_to_saturday(self):
        p = resolve_period("week", NOW)
        assert (p.start, p.end) == ("2026-10-18", "2026-10-24")

    def test_week_previous_is_seven_days_before_start(self):
        p = resolve_period("week", NOW)
        assert (p.previous_start, p.previous_end) == ("2026-10-11", "2026-10-17")

    def test_week_on_sunday_starts_today(self):
        sunday = datetime(2026, 10, 18, 17, 0, tzinfo=timezone.utc)
        p = resolve_period("week", sunday)
        assert (p.start, p.end) == ("2026-10-18", "2026-10-24")

    def test_month(self):
        p = resolve_period("month", NOW)
        assert (p.start, p.end) == ("2026-10-01", "2026-10-31")
        assert (p.previous_start, p.previous_end) == ("2026-09-01", "2026-09-30")
        assert p.elapsed_days == 19
        assert p.days_in_month == 31
        assert p.previous_days_in_month == 30

    def test_month_after_february(self):
        p = resolve_period("month", datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc))
        assert (p.previous_start, p.previous_end) == ("2026-02-01", "2026-02-28")
        assert p.previous_days_in_month == 28

    def test_month_in_january_wraps_year(self):
        p = resolve_period("month", datetime(2026, 1, 5, 18, 0, tzinfo=timezone.utc))
        assert (p.previous_start, p.previous_end) == ("2025-12-01", "2025-12-31")

    def test_unknown_filter_behaves_like_month(self):
        p = resolve_period("quarter", NOW)
        assert p.filter == "month"
        assert p.start == "2026-10-01"

    def test_offset_carried(self):
        assert resolve_period("today", NOW).utc_offset == "-05:00"


def test_days_in_month_leap_year():
    assert days_in_month(2028, 2) == 29
    assert days_in_month(2026, 2) == 28
