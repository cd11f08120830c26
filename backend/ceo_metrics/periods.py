"""
Calendar resolver.

Turns a logical filter ("today" | "week" | "month") into inclusive ISO date
windows in the business timezone, plus the immediately preceding window of
matching length used for period-over-period comparison.

"today" is always the business-local calendar date, never the UTC date.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ceo_metrics.config import BUSINESS_TIMEZONE, FALLBACK_UTC_OFFSET

logger = logging.getLogger(__name__)

FILTERS = ("today", "week", "month")
DEFAULT_FILTER = "month"


@dataclass(frozen=True)
class Period:
    """Resolved date windows for one metrics request. All dates are YYYY-MM-DD."""
    filter: str
    start: str
    end: str
    previous_start: str
    previous_end: str
    utc_offset: str
    today: str
    yesterday: str
    elapsed_days: int            # day-of-month of today
    days_in_month: int
    previous_days_in_month: int


def _parse_offset(value: str) -> timezone:
    sign = -1 if value.startswith("-") else 1
    hours, _, minutes = value.lstrip("+-").partition(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes or 0)))


def _business_zone():
    try:
        return ZoneInfo(BUSINESS_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning(f"Timezone {BUSINESS_TIMEZONE} unavailable ({e}), using {FALLBACK_UTC_OFFSET}")
        return _parse_offset(FALLBACK_UTC_OFFSET)


def _utc_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def business_today(now: Optional[datetime] = None) -> date:
    """Calendar date in the business timezone at `now` (default: current instant)."""
    return _utc_now(now).astimezone(_business_zone()).date()


def utc_offset(now: Optional[datetime] = None) -> str:
    """Signed ±HH:MM offset of the business timezone valid at `now`."""
    try:
        offset = _utc_now(now).astimezone(ZoneInfo(BUSINESS_TIMEZONE)).utcoffset()
    except (ZoneInfoNotFoundError, ValueError):
        return FALLBACK_UTC_OFFSET
    if offset is None:
        return FALLBACK_UTC_OFFSET
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def sunday_index(day: date) -> int:
    """0 for Sunday .. 6 for Saturday, read from a UTC-noon instant of `day`."""
    anchored = datetime(day.year, day.month, day.day, 12, 0, 0, tzinfo=timezone.utc)
    return (anchored.weekday() + 1) % 7


def _window(filter_name: str, today: date) -> tuple[date, date]:
    if filter_name == "today":
        return today, today
    if filter_name == "week":
        start = today - timedelta(days=sunday_index(today))
        return start, start + timedelta(days=6)
    start = today.replace(day=1)
    return start, today.replace(day=days_in_month(today.year, today.month))


def _previous_window(filter_name: str, start: date, end: date) -> tuple[date, date]:
    if filter_name == "month":
        previous_end = start - timedelta(days=1)
        return previous_end.replace(day=1), previous_end
    length = (end - start).days + 1
    return start - timedelta(days=length), start - timedelta(days=1)


def resolve_period(filter_name: str = DEFAULT_FILTER, now: Optional[datetime] = None) -> Period:
    """
    Resolve a logical filter into current and previous windows.

    Unknown filters behave like "month".
    """
    if filter_name not in FILTERS:
        filter_name = DEFAULT_FILTER

    today = business_today(now)
    start, end = _window(filter_name, today)
    previous_start, previous_end = _previous_window(filter_name, start, end)
    last_month = today.replace(day=1) - timedelta(days=1)

    return Period(
        filter=filter_name,
        start=start.isoformat(),
        end=end.isoformat(),
        previous_start=previous_start.isoformat(),
        previous_end=previous_end.isoformat(),
        utc_offset=utc_offset(now),
        today=today.isoformat(),
        yesterday=(today - timedelta(days=1)).isoformat(),
        elapsed_days=today.day,
        days_in_month=days_in_month(today.year, today.month),
        previous_days_in_month=days_in_month(last_month.year, last_month.month),
    )
