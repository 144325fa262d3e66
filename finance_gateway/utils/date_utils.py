"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import List, Tuple

from dateutil.relativedelta import relativedelta


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day to the length of the month (31 in April -> 30)"""
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def add_months(from_date: date, months: int) -> date:
    """Calendar month arithmetic; Jan 31 + 1 month is the last day of February"""
    return from_date + relativedelta(months=months)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move a (year, month) pair by delta months, wrapping across years"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month"""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def parse_date(value) -> date:
    """Accept a date, a datetime or an ISO string (time part ignored)"""
    if isinstance(value, date):
        return value if type(value) is date else value.date()
    return date.fromisoformat(str(value)[:10])
