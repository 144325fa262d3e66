"""Unit tests for date utilities"""

import pytest
from datetime import date, datetime
from finance_gateway.utils.date_utils import (
    add_months,
    clamp_day,
    generate_date_range,
    month_bounds,
    parse_date,
    shift_month,
)


def test_generate_date_range_is_inclusive():
    days = generate_date_range(date(2024, 2, 27), date(2024, 3, 1))
    assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_generate_date_range_empty_when_reversed():
    assert generate_date_range(date(2024, 3, 2), date(2024, 3, 1)) == []


@pytest.mark.parametrize(
    "start,months,expected",
    [
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 11, 15), 3, date(2025, 2, 15)),
        (date(2024, 3, 31), -1, date(2024, 2, 29)),
    ],
)
def test_add_months_clamps_day(start, months, expected):
    assert add_months(start, months) == expected


def test_clamp_day():
    assert clamp_day(2024, 4, 31) == date(2024, 4, 30)
    assert clamp_day(2023, 2, 30) == date(2023, 2, 28)
    assert clamp_day(2024, 5, 10) == date(2024, 5, 10)


def test_shift_month_wraps_years():
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 6, -18) == (2022, 12)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


def test_parse_date():
    assert parse_date("2024-03-05T10:00:00+00:00") == date(2024, 3, 5)
    assert parse_date(datetime(2024, 3, 5, 23, 59)) == date(2024, 3, 5)
    assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)
