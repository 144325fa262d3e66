"""Bill due-date tracking and savings goal progress"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List

from finance_gateway.domain.models import Bill, Goal, ZERO


def upcoming_bills(bills: Iterable[Bill], today: date, days: int = 7) -> List[Bill]:
    """Unpaid bills due between today and ``days`` from now, inclusive"""
    return [b for b in bills if not b.is_paid and 0 <= (b.due_date - today).days <= days]


def overdue_bills(bills: Iterable[Bill], today: date) -> List[Bill]:
    return [b for b in bills if not b.is_paid and b.due_date < today]


def total_pending(bills: Iterable[Bill]) -> Decimal:
    return sum((b.amount for b in bills if not b.is_paid), ZERO)


def month_bills(bills: Iterable[Bill], year: int, month: int) -> List[Bill]:
    """Bills due in the given month, paid or not"""
    return [b for b in bills if b.due_date.year == year and b.due_date.month == month]


def total_paid_in_month(bills: Iterable[Bill], year: int, month: int) -> Decimal:
    return sum((b.amount for b in month_bills(bills, year, month) if b.is_paid), ZERO)


def goal_progress(goal: Goal) -> float:
    if goal.target_amount <= 0:
        return 100.0
    return float(goal.current_amount / goal.target_amount * 100)


def active_goals(goals: Iterable[Goal]) -> List[Goal]:
    return [g for g in goals if g.current_amount < g.target_amount]


def completed_goals(goals: Iterable[Goal]) -> List[Goal]:
    return [g for g in goals if g.current_amount >= g.target_amount]
