"""
Business-day calendar arithmetic.

A business day is any day that is neither a Saturday/Sunday nor a declared
holiday. Every function here is pure.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import AbstractSet, FrozenSet, Iterable, Optional

from pipeline_estimation.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CalendarOffset:
    """Landing date of an offset and how many non-business days were passed over."""
    date: date
    skipped_count: int


def _as_date(value) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def normalize_dates(dates: Optional[Iterable]) -> FrozenSet[date]:
    """Strip any time component so holiday lookups compare dates only."""
    if not dates:
        return frozenset()
    return frozenset(_as_date(d) for d in dates)


def is_business_day(day, excluded_dates: Optional[AbstractSet[date]] = None) -> bool:
    """
    Check whether a day counts as a working day.

    Args:
        day: date or datetime to check
        excluded_dates: Holidays (already normalized to dates)

    Returns:
        bool: False for Saturday, Sunday and excluded dates
    """
    day = _as_date(day)
    # Monday=0 ... Sunday=6
    if day.weekday() >= 5:
        return False
    return not excluded_dates or day not in excluded_dates


def offset(start_date, work_days: int, excluded_dates: Optional[Iterable] = None) -> CalendarOffset:
    """
    Calculate the date that is a specified number of business days after the start date.

    Walks forward one calendar day at a time. A day counts toward work_days
    only if it is a business day, so a holiday next to a weekend is skipped
    together with the weekend.

    Args:
        start_date: The start date (date or datetime object)
        work_days: Number of business days to add (>= 0)
        excluded_dates: Holiday dates or datetimes

    Returns:
        CalendarOffset: landing date and the count of skipped days

    Raises:
        ValueError: If work_days is negative
    """
    if work_days < 0:
        raise ValueError(f"work_days must be >= 0, got {work_days}")

    current_date = _as_date(start_date)
    excluded = normalize_dates(excluded_dates)

    days_forward = 0
    business_days_counted = 0
    skipped = 0

    while business_days_counted < work_days:
        days_forward += 1
        check_date = current_date + timedelta(days=days_forward)

        if is_business_day(check_date, excluded):
            business_days_counted += 1
        else:
            skipped += 1

    return CalendarOffset(current_date + timedelta(days=days_forward), skipped)


def add_business_days(start_date, work_days: int, excluded_dates: Optional[Iterable] = None) -> date:
    """Shortcut for offset(...).date."""
    return offset(start_date, work_days, excluded_dates).date


def roll_forward(day, excluded_dates: Optional[Iterable] = None) -> date:
    """
    Return the first business day on or after the given day.
    """
    current = _as_date(day)
    excluded = normalize_dates(excluded_dates)
    while not is_business_day(current, excluded):
        current += timedelta(days=1)
    return current


def business_days_between(start, end, excluded_dates: Optional[Iterable] = None) -> int:
    """
    Count business days in the half-open range (start, end].

    This is the inverse of offset(): for a business-day landing date,
    business_days_between(d, offset(d, n).date) == n. Returns 0 when end is
    not after start.
    """
    start = _as_date(start)
    end = _as_date(end)
    excluded = normalize_dates(excluded_dates)

    count = 0
    current = start
    while current < end:
        current += timedelta(days=1)
        if is_business_day(current, excluded):
            count += 1
    return count


def parse_holidays(value, years: Iterable[int]) -> FrozenSet[date]:
    """
    Parse the holiday list stored in the configuration table.

    The list is a comma-separated string. "MM/DD" entries recur every year
    and are expanded for each of the given years; "YYYY-MM-DD" entries are
    taken as-is. Malformed entries are logged and skipped.

    Args:
        value: Raw holiday string (e.g. "12/25, 01/01, 2026-11-27") or None
        years: Years to expand recurring entries into

    Returns:
        frozenset of holiday dates
    """
    if not value:
        return frozenset()

    years = list(years)
    holidays = set()

    for raw in str(value).split(','):
        entry = raw.strip()
        if not entry:
            continue
        try:
            if '-' in entry:
                holidays.add(date.fromisoformat(entry))
                continue
            month_str, day_str = entry.split('/')
            month, day_of_month = int(month_str), int(day_str)
        except (ValueError, TypeError) as e:
            logger.warning("Skipping malformed holiday entry", entry=entry, error=str(e))
            continue

        # 02/29 only exists in leap years
        for year in years:
            try:
                holidays.add(date(year, month, day_of_month))
            except ValueError as e:
                logger.warning("Skipping holiday entry for year", entry=entry, year=year, error=str(e))

    return frozenset(holidays)
