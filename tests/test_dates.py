from __future__ import annotations

from datetime import date, datetime

import pytest

from riskboard.core.dates import (
    add_years,
    days_until,
    end_of_day,
    normalize_calendar_date,
    parse_calendar_date,
    start_of_day,
)
from riskboard.core.errors import InvalidInput


def test_parse_calendar_date_variants():
    assert parse_calendar_date("2024-03-10") == date(2024, 3, 10)
    assert parse_calendar_date("2024-03-10T08:00:00") == date(2024, 3, 10)
    assert parse_calendar_date(datetime(2024, 3, 10, 8)) == date(2024, 3, 10)
    assert parse_calendar_date("") is None
    assert parse_calendar_date(None) is None


def test_parse_calendar_date_rejects_garbage():
    with pytest.raises(InvalidInput) as exc:
        parse_calendar_date("next tuesday", field="due_date")
    assert exc.value.field == "due_date"
    with pytest.raises(InvalidInput):
        parse_calendar_date(12345)


@pytest.mark.parametrize("raw", ["2024-01-01garbage", "2024-01-01 8 o'clock", "2024-01-0112"])
def test_parse_calendar_date_rejects_trailing_text(raw):
    with pytest.raises(InvalidInput):
        parse_calendar_date(raw)


def test_add_years_keeps_month_and_day():
    assert add_years(date(2023, 6, 1), 5) == date(2028, 6, 1)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)
    assert add_years(date(2024, 2, 29), 1) == date(2025, 3, 1)


def test_days_until_rounds_up():
    target = start_of_day(date(2024, 1, 10))
    assert days_until(target, datetime(2024, 1, 9, 0, 0)) == 1
    assert days_until(target, datetime(2024, 1, 9, 23, 0)) == 1
    assert days_until(target, datetime(2024, 1, 10, 6, 0)) == 0
    assert days_until(target, date(2024, 1, 12)) == -2


def test_end_of_day_is_last_millisecond():
    assert end_of_day(date(2024, 1, 1)) == datetime(2024, 1, 1, 23, 59, 59, 999000)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-01", date(2024, 1, 1)),
        ("15.03.2024", date(2024, 3, 15)),
        (45292, date(2024, 1, 1)),
        (45292.75, date(2024, 1, 1)),
        ("", None),
        (None, None),
    ],
)
def test_normalize_calendar_date(raw, expected):
    assert normalize_calendar_date(raw) == expected


def test_normalize_calendar_date_rejects_impossible_day():
    with pytest.raises(InvalidInput):
        normalize_calendar_date("31.02.2024")


@pytest.mark.parametrize("serial", [float("nan"), float("inf"), float("-inf"), 1e12])
def test_normalize_calendar_date_rejects_unusable_serials(serial):
    with pytest.raises(InvalidInput):
        normalize_calendar_date(serial)
