"""
Unit Tests for holiday date normalization
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from erp_backend.utils.dates import IST, month_range, parse_date, year_of


class TestParseDate:
    """Test the IST date rule"""

    def test_date_only_is_ist_midnight(self):
        """YYYY-MM-DD lands on midnight +05:30"""
        parsed = parse_date("2025-01-26")

        assert parsed == datetime(2025, 1, 26, tzinfo=IST)
        assert parsed == datetime(2025, 1, 25, 18, 30, tzinfo=timezone.utc)

    def test_date_only_is_stable(self):
        """Normalizing the same input twice gives the same instant"""
        assert parse_date("2025-01-26") == parse_date("2025-01-26")
        assert parse_date("2025-01-26") == parse_date("2025-01-26T00:00:00+05:30")

    def test_explicit_offset_is_trusted(self):
        assert parse_date("2025-01-26T10:00:00+00:00") == datetime(2025, 1, 26, 10, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        assert parse_date("2025-01-25T18:30:00.000Z") == parse_date("2025-01-26")

    def test_invalid_calendar_day(self):
        assert parse_date("2025-02-30") is None
        assert parse_date("2025-13-01") is None

    def test_garbage_and_empty(self):
        assert parse_date("next friday") is None
        assert parse_date("") is None
        assert parse_date(None) is None
        assert parse_date(True) is None
        assert parse_date(["2025-01-26"]) is None

    def test_date_object_is_ist_midnight(self):
        assert parse_date(date(2025, 8, 15)) == datetime(2025, 8, 15, tzinfo=IST)

    def test_aware_datetime_kept(self):
        value = datetime(2025, 8, 15, 6, 0, tzinfo=timezone.utc)
        assert parse_date(value) is value

    def test_epoch_milliseconds(self):
        assert parse_date(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert parse_date(86_400_000) == datetime(1970, 1, 2, tzinfo=timezone.utc)

    def test_result_is_always_aware(self):
        for value in ("2025-01-26", "2025-01-26T10:00:00", "2025-01-26T10:00:00+02:00", datetime(2025, 1, 26)):
            assert parse_date(value).tzinfo is not None


class TestYearOf:

    def test_year_follows_ist(self):
        """18:30 UTC on Dec 31 is already New Year in India"""
        assert year_of(datetime(2024, 12, 31, 18, 30, tzinfo=timezone.utc)) == 2025
        assert year_of(datetime(2024, 12, 31, 18, 29, tzinfo=timezone.utc)) == 2024

    def test_year_of_date_only_input(self):
        assert year_of(parse_date("2025-01-01")) == 2025


class TestMonthRange:

    def test_february_bounds(self):
        start, end = month_range(2025, 2)

        assert start == parse_date("2025-02-01T00:00:00+05:30")
        assert end == parse_date("2025-03-01T00:00:00+05:30") - timedelta(microseconds=1)
        assert start <= parse_date("2025-02-28") <= end
        assert parse_date("2025-03-01") > end

    def test_december_rolls_into_next_year(self):
        start, end = month_range(2025, 12)

        assert start == datetime(2025, 12, 1, tzinfo=IST)
        assert end + timedelta(microseconds=1) == datetime(2026, 1, 1, tzinfo=IST)


class TestOutsideUtcCalendar:
    """Instants that UTC cannot hold are treated as unreadable"""

    def test_first_day_of_calendar_in_ist(self):
        # 0001-01-01 00:00 IST is still year 0 in UTC
        assert parse_date("0001-01-01") is None
        assert parse_date(date(1, 1, 1)) is None

    def test_second_day_is_fine(self):
        assert parse_date("0001-01-02") == datetime(1, 1, 2, tzinfo=IST)

    def test_end_of_calendar_with_negative_offset(self):
        assert parse_date("9999-12-31T23:00:00-05:00") is None

    def test_month_range_rejects_unstorable_month(self):
        with pytest.raises(ValueError):
            month_range(1, 1)
