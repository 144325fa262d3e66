"""Recurring transaction date rolling"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, List, Tuple

from dateutil.relativedelta import relativedelta

from finance_gateway.domain.models import Frequency, RecurringTransaction, ZERO

_STEPS = {
    Frequency.DAILY: relativedelta(days=1),
    Frequency.WEEKLY: relativedelta(weeks=1),
    Frequency.BIWEEKLY: relativedelta(weeks=2),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.YEARLY: relativedelta(years=1),
}


def next_occurrence(current: date, frequency: str) -> date:
    """
    Next occurrence after ``current``.

    Monthly and yearly steps keep the day of month where possible and clamp it
    otherwise (Jan 31 -> Feb 28, Feb 29 -> Feb 28 of a common year).

    Raises:
        ValueError: frequency is not one of daily, weekly, biweekly, monthly, yearly
    """
    return current + _STEPS[Frequency(frequency)]


def advance(entry: RecurringTransaction) -> Tuple[date, bool]:
    """
    Roll an entry past its current occurrence.

    Returns the new next_date and whether the entry stays active: it stays
    active while the new next_date does not exceed its end_date.
    """
    next_date = next_occurrence(entry.next_date, entry.frequency)
    still_active = entry.end_date is None or next_date <= entry.end_date
    return next_date, still_active


def due_entries(entries: Iterable[RecurringTransaction], now: datetime) -> List[RecurringTransaction]:
    """
    Active auto-create entries whose next occurrence is strictly before ``now``.

    An occurrence starts at midnight of its date, so an entry dated today is
    due as soon as the day has begun.
    """
    return [
        e
        for e in entries
        if e.is_active and e.auto_create and datetime.combine(e.next_date, time.min) < now
    ]


def due_on(entries: Iterable[RecurringTransaction], day: date) -> List[RecurringTransaction]:
    return [e for e in entries if e.is_active and e.next_date == day]


def upcoming(entries: Iterable[RecurringTransaction], today: date, days: int = 7) -> List[RecurringTransaction]:
    """Active entries with next_date in [today, today + days)"""
    horizon = today + timedelta(days=days)
    return [e for e in entries if e.is_active and today <= e.next_date < horizon]


def monthly_total(entries: Iterable[RecurringTransaction], type_: str) -> Decimal:
    """Sum of active monthly entries of one type (income or expense)"""
    return sum(
        (e.amount for e in entries if e.is_active and e.type == type_ and e.frequency == Frequency.MONTHLY.value),
        ZERO,
    )
