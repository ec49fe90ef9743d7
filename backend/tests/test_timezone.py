"""Tests for date and timezone helpers."""

from datetime import date, datetime

import pytz

from neoroutine.utils.timezone import (
    day_of_week_index,
    get_monday_iso,
    get_now,
    get_range_dates,
    get_timezone,
    is_valid_timezone,
    parse_iso_date,
)


class TestRangeDates:
    def test_thirty_contiguous_days_ending_today(self):
        window = get_range_dates(30, date(2024, 3, 15))

        assert len(window["dates"]) == 30
        assert window["start_iso"] == "2024-02-15"
        assert window["end_iso"] == "2024-03-15"
        assert window["dates"][0] == window["start_iso"]
        assert window["dates"][-1] == window["end_iso"]
        days = [parse_iso_date(d) for d in window["dates"]]
        assert all((b - a).days == 1 for a, b in zip(days, days[1:]))

    def test_single_day(self):
        window = get_range_dates(1, date(2024, 1, 1))
        assert window["dates"] == ["2024-01-01"]
        assert window["start_iso"] == window["end_iso"] == "2024-01-01"

    def test_crosses_year_boundary(self):
        window = get_range_dates(3, date(2024, 1, 1))
        assert window["dates"] == ["2023-12-30", "2023-12-31", "2024-01-01"]


class TestWeekHelpers:
    def test_monday_of_week(self):
        assert get_monday_iso("2024-03-17") == "2024-03-11"
        assert get_monday_iso("2024-03-11") == "2024-03-11"

    def test_day_of_week_starts_on_sunday(self):
        assert day_of_week_index("2024-03-17") == 0
        assert day_of_week_index("2024-03-11") == 1
        assert day_of_week_index("2024-03-16") == 6


class TestTimezones:
    def test_unknown_timezone_falls_back_to_utc(self):
        assert get_timezone("Not/AZone") is pytz.utc

    def test_valid_timezone(self):
        assert is_valid_timezone("America/New_York")
        assert not is_valid_timezone("Mars/Olympus")

    def test_now_is_timezone_aware(self):
        now = get_now("Europe/Berlin")
        assert now.tzinfo is not None
        assert isinstance(now, datetime)

    def test_parse_ignores_time_part(self):
        assert parse_iso_date("2024-03-17T10:00:00Z") == date(2024, 3, 17)
