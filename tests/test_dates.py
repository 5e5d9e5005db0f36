"""Tests for date normalization."""

from datetime import date, datetime, timedelta, timezone

import pytest

from ip_metrics_src.dates import (
    add_hours_to_iso_date,
    inclusive_day_count,
    iter_iso_dates,
    sanitize_iso_date,
    to_iso_date,
)


class TestToISODate:
    """Test conversion of heterogeneous date values."""

    @pytest.mark.parametrize("value,expected", [
        ("2026-02-16", "2026-02-16"),
        ("02/16/2026", "2026-02-16"),
        ("2/5/2026", "2026-02-05"),
        ("2026-02-16T08:30:00Z", "2026-02-16"),
        ("2026-02-16 23:59", "2026-02-16"),
        ("  2026-02-16  ", "2026-02-16"),
        ("February 16, 2026", "2026-02-16"),
    ])
    def test_strings(self, value, expected):
        assert to_iso_date(value) == expected

    @pytest.mark.parametrize("value", [
        "2026-01-32",
        "2026-02-30",
        "2025-02-29",
        "13/01/2026",
        "not-a-date",
        "bad-date",
    ])
    def test_invalid_strings_return_none(self, value):
        assert to_iso_date(value) is None

    @pytest.mark.parametrize("value", [None, "", "   ", True, float("nan"), float("inf"), [], {}])
    def test_empty_and_unsupported_values(self, value):
        assert to_iso_date(value) is None

    def test_leap_day(self):
        assert to_iso_date("2024-02-29") == "2024-02-29"

    def test_date_object(self):
        assert to_iso_date(date(2026, 2, 16)) == "2026-02-16"

    def test_naive_datetime_uses_its_calendar_date(self):
        assert to_iso_date(datetime(2026, 2, 16, 23, 59)) == "2026-02-16"

    def test_epoch_milliseconds(self):
        millis = datetime(2026, 2, 16, 12, 0).timestamp() * 1000
        assert to_iso_date(millis) == "2026-02-16"
        assert to_iso_date(int(millis)) == "2026-02-16"

    def test_idempotent_on_canonical(self):
        once = to_iso_date("2026-12-31")
        assert to_iso_date(once) == once

    @pytest.mark.parametrize("value", ["10:30", "March", "Monday", "3", "2026", "Feb 16"])
    def test_partial_dates_return_none(self, value):
        assert to_iso_date(value) is None

    @pytest.mark.parametrize("value", [
        datetime(1, 1, 1, tzinfo=timezone(timedelta(hours=14))),
        datetime(9999, 12, 31, 23, 59, tzinfo=timezone(timedelta(hours=-14))),
    ])
    def test_out_of_range_aware_datetime_returns_none(self, value):
        assert to_iso_date(value) is None


class TestDateHelpers:
    """Test date arithmetic helpers."""

    @pytest.mark.parametrize("hours,expected", [
        (0, "2026-02-13"),
        (23, "2026-02-13"),
        (24, "2026-02-14"),
        (71, "2026-02-15"),
        (72, "2026-02-16"),
    ])
    def test_add_hours_floors_to_day(self, hours, expected):
        assert add_hours_to_iso_date("2026-02-13", hours) == expected

    def test_add_hours_invalid_start(self):
        assert add_hours_to_iso_date("garbage", 72) is None

    def test_iter_crosses_month_boundary(self):
        assert list(iter_iso_dates("2026-02-27", "2026-03-02")) == [
            "2026-02-27", "2026-02-28", "2026-03-01", "2026-03-02",
        ]

    def test_iter_empty_when_reversed(self):
        assert list(iter_iso_dates("2026-02-16", "2026-02-15")) == []

    def test_inclusive_day_count(self):
        assert inclusive_day_count("2026-02-10", "2026-02-16") == 7
        assert inclusive_day_count("2026-02-16", "2026-02-10") == 0

    def test_sanitize_keeps_unparseable_text(self):
        assert sanitize_iso_date("02/16/2026") == "2026-02-16"
        assert sanitize_iso_date("bad-date") == "bad-date"
        assert sanitize_iso_date(None) == ""
