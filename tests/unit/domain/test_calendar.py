"""
Unit tests for month-granularity calendar helpers.
"""

from datetime import date, datetime, timezone, timedelta

from backoffice.domain.calendar import (
    add_months,
    as_calendar_date,
    due_dates_reached,
    month_label,
    months_between,
    parse_month_label,
    previous_month_range,
    started_months,
)


class TestAddMonths:
    """Test cases for add_months."""

    def test_leap_year_clamp(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_non_leap_year_clamp(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_crosses_year_boundary(self):
        assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)

    def test_negative_months(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
        assert add_months(date(2024, 1, 10), -2) == date(2023, 11, 10)

    def test_zero_months_is_identity(self):
        assert add_months(date(2024, 5, 5), 0) == date(2024, 5, 5)


class TestMonthCounting:
    """Test cases for months_between, due_dates_reached and started_months."""

    def test_months_between_counts_reached_due_dates(self):
        assert months_between(date(2024, 1, 15), date(2024, 4, 20)) == 3
        assert months_between(date(2024, 1, 15), date(2024, 4, 14)) == 2
        assert months_between(date(2024, 1, 15), date(2024, 4, 15)) == 3

    def test_months_between_respects_month_end_clamp(self):
        # Jan 31 + 1 month is Feb 29, so the first month is complete on Feb 29
        assert months_between(date(2024, 1, 31), date(2024, 2, 29)) == 1

    def test_months_between_negative_when_reversed(self):
        assert months_between(date(2024, 4, 20), date(2024, 1, 15)) == -3

    def test_due_dates_reached(self):
        assert due_dates_reached(date(2024, 1, 15), date(2024, 4, 20)) == 4
        assert due_dates_reached(date(2024, 1, 15), date(2024, 1, 15)) == 1
        assert due_dates_reached(date(2024, 1, 15), date(2024, 1, 14)) == 0

    def test_started_months_counts_partial_month(self):
        assert started_months(date(2024, 1, 10), date(2024, 6, 10)) == 5
        assert started_months(date(2024, 1, 10), date(2024, 6, 11)) == 6
        assert started_months(date(2024, 1, 10), date(2024, 1, 10)) == 0


class TestMonthLabels:
    """Test cases for month label formatting and parsing."""

    def test_month_label_is_french(self):
        assert month_label(date(2024, 2, 1)) == "Février 2024"
        assert month_label(date(2023, 12, 31)) == "Décembre 2023"

    def test_parse_month_label_any_case(self):
        assert parse_month_label("Février 2024") == (2024, 2)
        assert parse_month_label("février 2024") == (2024, 2)
        assert parse_month_label("  AOÛT 2025 ") == (2025, 8)

    def test_parse_month_label_rejects_other_text(self):
        assert parse_month_label("Versement 1") is None
        assert parse_month_label("Mars") is None
        assert parse_month_label("Mars deux-mille") is None

    def test_label_round_trip_for_every_month(self):
        for month in range(1, 13):
            value = date(2024, month, 1)
            assert parse_month_label(month_label(value)) == (2024, month)


class TestDateNormalization:
    """Test cases for as_calendar_date and range helpers."""

    def test_datetime_is_converted_to_utc_day(self):
        late_evening = datetime(2024, 1, 31, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
        assert as_calendar_date(late_evening) == date(2024, 2, 1)

    def test_iso_strings(self):
        assert as_calendar_date("2024-03-05") == date(2024, 3, 5)
        assert as_calendar_date("2024-03-05T10:00:00Z") == date(2024, 3, 5)

    def test_previous_month_range(self):
        assert previous_month_range(date(2024, 3, 15)) == (date(2024, 2, 1), date(2024, 2, 29))
        assert previous_month_range(date(2024, 1, 2)) == (date(2023, 12, 1), date(2023, 12, 31))
