"""Unit tests for recurring transaction date rolling"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from finance_gateway.domain.models import RecurringTransaction
from finance_gateway.domain.recurrence import advance, due_entries, due_on, monthly_total, next_occurrence, upcoming


def make_entry(**overrides) -> RecurringTransaction:
    values = dict(
        id="rec-1",
        user_id="user-1",
        account_id="acc-1",
        type="expense",
        amount=Decimal("100.00"),
        description="Rent",
        frequency="monthly",
        start_date=date(2024, 1, 31),
        next_date=date(2024, 1, 31),
    )
    values.update(overrides)
    return RecurringTransaction(**values)


@pytest.mark.parametrize(
    "frequency,expected",
    [
        ("daily", date(2024, 1, 16)),
        ("weekly", date(2024, 1, 22)),
        ("biweekly", date(2024, 1, 29)),
        ("monthly", date(2024, 2, 15)),
        ("yearly", date(2025, 1, 15)),
    ],
)
def test_next_occurrence(frequency, expected):
    assert next_occurrence(date(2024, 1, 15), frequency) == expected


def test_next_occurrence_clamps_month_end():
    """Jan 31 rolls to Feb 29 in a leap year, Feb 29 to Feb 28 of the next year"""
    assert next_occurrence(date(2024, 1, 31), "monthly") == date(2024, 2, 29)
    assert next_occurrence(date(2024, 2, 29), "yearly") == date(2025, 2, 28)


def test_next_occurrence_unknown_frequency():
    with pytest.raises(ValueError):
        next_occurrence(date(2024, 1, 15), "hourly")


def test_advance_stays_active_until_end_date():
    entry = make_entry(next_date=date(2024, 1, 15), end_date=date(2024, 2, 15))
    assert advance(entry) == (date(2024, 2, 15), True)

    entry = make_entry(next_date=date(2024, 2, 15), end_date=date(2024, 2, 15))
    assert advance(entry) == (date(2024, 3, 15), False)


def test_advance_without_end_date():
    assert advance(make_entry(end_date=None))[1] is True


def test_due_entries():
    entries = [
        make_entry(id="today", next_date=date(2024, 3, 10)),
        make_entry(id="past", next_date=date(2024, 3, 1)),
        make_entry(id="future", next_date=date(2024, 3, 11)),
        make_entry(id="inactive", next_date=date(2024, 3, 1), is_active=False),
        make_entry(id="manual", next_date=date(2024, 3, 1), auto_create=False),
    ]
    due = due_entries(entries, datetime(2024, 3, 10, 8, 0))
    assert [e.id for e in due] == ["today", "past"]


def test_entry_dated_today_is_not_due_at_midnight():
    entries = [make_entry(next_date=date(2024, 3, 10))]
    assert due_entries(entries, datetime(2024, 3, 10, 0, 0)) == []


def test_due_on_and_upcoming():
    entries = [
        make_entry(id="a", next_date=date(2024, 3, 10)),
        make_entry(id="b", next_date=date(2024, 3, 16)),
        make_entry(id="c", next_date=date(2024, 3, 17)),
    ]
    assert [e.id for e in due_on(entries, date(2024, 3, 10))] == ["a"]
    assert [e.id for e in upcoming(entries, date(2024, 3, 10), 7)] == ["a", "b"]


def test_monthly_total_counts_active_monthly_entries():
    entries = [
        make_entry(id="a", amount=Decimal("100")),
        make_entry(id="b", amount=Decimal("50"), frequency="weekly"),
        make_entry(id="c", amount=Decimal("30"), is_active=False),
        make_entry(id="d", amount=Decimal("2000"), type="income"),
    ]
    assert monthly_total(entries, "expense") == Decimal("100")
    assert monthly_total(entries, "income") == Decimal("2000")


def roll(start: date, frequency: str, times: int) -> date:
    current = start
    for _ in range(times):
        current = next_occurrence(current, frequency)
    return current


@pytest.mark.parametrize(
    "start",
    [
        date(2024, 1, 1),
        date(2024, 1, 15),
        date(2023, 2, 28),
        date(2024, 6, 28),
        date(2023, 12, 10),
        date(2024, 1, 29),
    ],
)
def test_twelve_monthly_steps_equal_one_yearly_step(start):
    """Holds for days 1-28, and for day 29 when no month crossed is shorter"""
    assert roll(start, "monthly", 12) == roll(start, "yearly", 1)


@pytest.mark.parametrize(
    "start,monthly,yearly",
    [
        (date(2024, 1, 31), date(2025, 1, 29), date(2025, 1, 31)),
        (date(2023, 3, 31), date(2024, 3, 29), date(2024, 3, 31)),
        (date(2023, 1, 30), date(2024, 1, 28), date(2024, 1, 30)),
    ],
)
def test_month_end_start_drifts_to_clamped_day(start, monthly, yearly):
    """Each monthly step keeps the clamped day, yearly does not"""
    assert roll(start, "monthly", 12) == monthly
    assert roll(start, "yearly", 1) == yearly
