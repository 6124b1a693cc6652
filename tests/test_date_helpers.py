from datetime import date, datetime, time

import pytest

from utils.date_helpers import (
    DateRange,
    add_interval,
    month_bounds,
    parse_date,
    parse_optional_date,
    previous_month,
    truncate_day,
)
from utils.errors import ValidationError


@pytest.mark.parametrize("frequency,interval,expected", [
    ("daily", 1, date(2024, 1, 16)),
    ("daily", 10, date(2024, 1, 25)),
    ("weekly", 1, date(2024, 1, 22)),
    ("weekly", 2, date(2024, 1, 29)),
    ("monthly", 1, date(2024, 2, 15)),
    ("monthly", 3, date(2024, 4, 15)),
    ("yearly", 1, date(2025, 1, 15)),
])
def test_add_interval(frequency, interval, expected):
    assert add_interval(date(2024, 1, 15), frequency, interval) == expected


def test_month_step_clamps_to_last_day_of_month():
    assert add_interval(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
    assert add_interval(date(2023, 1, 31), "monthly") == date(2023, 2, 28)
    assert add_interval(date(2024, 3, 31), "monthly") == date(2024, 4, 30)


def test_year_step_from_leap_day_clamps():
    assert add_interval(date(2024, 2, 29), "yearly") == date(2025, 2, 28)


def test_unknown_frequency_raises():
    with pytest.raises(ValueError):
        add_interval(date(2024, 1, 1), "hourly")


def test_truncate_day():
    assert truncate_day(datetime(2024, 5, 6, 13, 45)) == date(2024, 5, 6)
    assert truncate_day(date(2024, 5, 6)) == date(2024, 5, 6)


def test_month_bounds_handles_leap_february_and_december():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))


def test_previous_month_wraps_year():
    assert previous_month(2024, 1) == (2023, 12)
    assert previous_month(2024, 7) == (2024, 6)


def test_parse_date_accepts_browser_timestamps():
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("2024-01-15T00:00:00.000Z") == date(2024, 1, 15)


@pytest.mark.parametrize("value", [
    "", "tomorrow", "2024-13-01", None, 20240101, "2024-01",
    "2024-01-15garbage", "2024-01-15 then some", "2024-01-15T99:99",
])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_date(value)


def test_parse_optional_date():
    assert parse_optional_date(None) is None
    assert parse_optional_date("") is None
    assert parse_optional_date("2024-02-01") == date(2024, 2, 1)


def test_date_range_end_covers_whole_day():
    window = DateRange(date(2024, 1, 1), date(2024, 1, 31))
    assert window.start_at() == datetime(2024, 1, 1, 0, 0)
    assert window.end_at() == datetime.combine(date(2024, 1, 31), time.max)
    assert window.contains(datetime(2024, 1, 31, 23, 59, 59))
    assert not window.contains(date(2024, 2, 1))
    assert not window.contains(date(2023, 12, 31))


def test_date_range_bounds_are_independent():
    assert DateRange(start=date(2024, 1, 1)).contains(date(2030, 1, 1))
    assert DateRange(end=date(2024, 1, 1)).contains(date(1999, 1, 1))
    assert DateRange().is_open()
    assert DateRange().end_at() is None


def test_date_range_from_strings_validates():
    assert DateRange.from_strings("2024-01-01", None) == DateRange(date(2024, 1, 1), None)
    with pytest.raises(ValidationError):
        DateRange.from_strings("nope", None)
