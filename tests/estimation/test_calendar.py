"""
Tests for business-day calendar arithmetic.
These are pure functions - no store or configuration needed.
"""
import pytest
from datetime import date, datetime, timedelta

from pipeline_estimation.estimation.calendar import (
    CalendarOffset,
    add_business_days,
    business_days_between,
    is_business_day,
    offset,
    parse_holidays,
    roll_forward,
)

# Week of 2026-10-16 (Friday) .. 2026-10-26 (Monday)
FRIDAY = date(2026, 10, 16)
SATURDAY = date(2026, 10, 17)
SUNDAY = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


# ==============================================================================
# OFFSET TESTS
# ==============================================================================

class TestOffset:
    """Tests for offset()."""

    def test_zero_days_returns_start_unchanged(self):
        """Test that a zero offset returns the start date with nothing skipped."""
        for start in (FRIDAY, SATURDAY, SUNDAY, MONDAY):
            result = offset(start, 0, {MONDAY})
            assert result == CalendarOffset(start, 0)

    def test_one_day_from_friday_skips_weekend(self):
        """Test that one business day after Friday is Monday."""
        result = offset(FRIDAY, 1)
        assert result.date == MONDAY
        assert result.skipped_count == 2

    def test_holiday_after_weekend_is_chained(self):
        """Test that a Monday holiday after a weekend pushes Friday + 1 to Tuesday."""
        result = offset(FRIDAY, 1, {MONDAY})
        assert result.date == TUESDAY
        assert result.skipped_count == 3

    def test_full_week(self):
        """Test that five business days from Monday is the next Monday."""
        result = offset(MONDAY, 5)
        assert result.date == date(2026, 10, 26)
        assert result.skipped_count == 2

    def test_multi_week_span_with_holidays(self):
        """Test a span covering Christmas and New Year."""
        holidays = {date(2026, 12, 25), date(2027, 1, 1)}
        # Wed 12/23 -> Thu 12/24 (1), Fri 12/25 holiday, weekend, Mon 12/28 (2)
        assert offset(date(2026, 12, 23), 2, holidays) == CalendarOffset(date(2026, 12, 28), 3)
        # ... Tue 12/29 (3), Wed 12/30 (4), Thu 12/31 (5), Fri 1/1 holiday, weekend, Mon 1/4 (6)
        assert offset(date(2026, 12, 23), 6, holidays) == CalendarOffset(date(2027, 1, 4), 6)

    def test_times_are_ignored(self):
        """Test that datetime inputs and holidays compare by date only."""
        result = offset(datetime(2026, 10, 16, 15, 30), 1, {datetime(2026, 10, 19, 9, 0)})
        assert result.date == TUESDAY
        assert isinstance(result.date, date)
        assert not isinstance(result.date, datetime)

    def test_negative_days_rejected(self):
        """Test that a negative offset fails fast."""
        with pytest.raises(ValueError):
            offset(MONDAY, -1)

    def test_never_lands_on_weekend_or_holiday(self):
        """Test landing dates across two weeks of starts and offsets."""
        holidays = {date(2026, 10, 19), date(2026, 10, 23), date(2026, 11, 2)}
        for start_shift in range(14):
            start = FRIDAY + timedelta(days=start_shift)
            for days in range(1, 20):
                landing = offset(start, days, holidays).date
                assert landing.weekday() < 5
                assert landing not in holidays

    def test_skipped_count_accounts_for_calendar_days(self):
        """Test that business days plus skipped days equals elapsed calendar days."""
        holidays = {date(2026, 10, 21)}
        for days in range(0, 15):
            result = offset(MONDAY, days, holidays)
            assert (result.date - MONDAY).days == days + result.skipped_count

    def test_add_business_days_shortcut(self):
        """Test that add_business_days returns only the date."""
        assert add_business_days(FRIDAY, 1, {MONDAY}) == TUESDAY


# ==============================================================================
# HELPER TESTS
# ==============================================================================

class TestCalendarHelpers:
    """Tests for is_business_day, roll_forward and business_days_between."""

    def test_is_business_day(self):
        """Test weekday, weekend and holiday classification."""
        assert is_business_day(FRIDAY) is True
        assert is_business_day(SATURDAY) is False
        assert is_business_day(SUNDAY) is False
        assert is_business_day(MONDAY, {MONDAY}) is False

    def test_roll_forward_from_weekend(self):
        """Test that a Saturday rolls to Monday, or Tuesday if Monday is a holiday."""
        assert roll_forward(SATURDAY) == MONDAY
        assert roll_forward(SATURDAY, {MONDAY}) == TUESDAY

    def test_roll_forward_keeps_business_day(self):
        """Test that a business day is returned unchanged."""
        assert roll_forward(FRIDAY) == FRIDAY

    def test_business_days_between_inverts_offset(self):
        """Test that counting back recovers the offset."""
        holidays = {MONDAY, date(2026, 10, 28)}
        for days in range(0, 12):
            landing = offset(FRIDAY, days, holidays).date
            assert business_days_between(FRIDAY, landing, holidays) == days

    def test_business_days_between_reversed_range(self):
        """Test that an end before start counts zero."""
        assert business_days_between(TUESDAY, FRIDAY) == 0


# ==============================================================================
# HOLIDAY PARSING TESTS
# ==============================================================================

class TestParseHolidays:
    """Tests for parse_holidays()."""

    def test_recurring_entries_expand_per_year(self):
        """Test that MM/DD entries are created for every year."""
        holidays = parse_holidays("12/25, 01/01", [2026, 2027])
        assert holidays == {
            date(2026, 12, 25), date(2027, 12, 25),
            date(2026, 1, 1), date(2027, 1, 1),
        }

    def test_iso_entries_taken_as_is(self):
        """Test that YYYY-MM-DD entries are not expanded."""
        holidays = parse_holidays("2026-11-27", [2026, 2027])
        assert holidays == {date(2026, 11, 27)}

    def test_malformed_entries_skipped(self):
        """Test that garbage entries are dropped and valid ones kept."""
        holidays = parse_holidays("13/45, christmas, 07/04, ", [2026])
        assert holidays == {date(2026, 7, 4)}

    def test_empty_value(self):
        """Test that None and empty strings give no holidays."""
        assert parse_holidays(None, [2026]) == frozenset()
        assert parse_holidays("", [2026]) == frozenset()

    def test_leap_day_kept_for_leap_years_only(self):
        """Test that 02/29 is added for leap years and skipped for the rest."""
        holidays = parse_holidays("02/29, 12/25", range(2026, 2029))
        assert date(2028, 2, 29) in holidays
        assert {date(2026, 12, 25), date(2027, 12, 25), date(2028, 12, 25)} <= holidays
        assert len(holidays) == 4
