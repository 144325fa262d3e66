"""Credit card billing-cycle math

A card is configured with a closing day and a due day of the month. Purchases
dated up to and including the closing day land in that month's statement; later
purchases roll over to the next statement. Day values that do not exist in a
month (31 in April, 30 in February) are clamped to the month's last day.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Tuple

from finance_gateway.domain.models import (
    Account,
    BillPeriod,
    CardStatus,
    CardSummary,
    CreditCardBill,
    ZERO,
)
from finance_gateway.utils.date_utils import clamp_day, shift_month


def closing_date(closing_day: int, month: int, year: int) -> date:
    """Statement closing date for the given month"""
    return clamp_day(year, month, closing_day)


def due_date(due_day: int, closing_day: int, month: int, year: int) -> date:
    """
    Statement due date for the bill of (month, year).

    When the due day is on or before the closing day the payment is due in the
    following calendar month, since it must come after the closing date.
    """
    if due_day <= closing_day:
        year, month = shift_month(year, month, 1)
    return clamp_day(year, month, due_day)


def bill_period(transaction_date: date, closing_day: int) -> BillPeriod:
    """Statement (month, year) a purchase belongs to"""
    year, month = transaction_date.year, transaction_date.month
    if transaction_date.day > closing_day:
        year, month = shift_month(year, month, 1)
    return BillPeriod(month=month, year=year)


def billing_window(closing_day: int, month: int, year: int) -> Tuple[date, date]:
    """Inclusive purchase window of a statement: day after previous closing up to this closing"""
    prev_year, prev_month = shift_month(year, month, -1)
    start = closing_date(closing_day, prev_month, prev_year) + timedelta(days=1)
    return start, closing_date(closing_day, month, year)


def open_bills(bills: Iterable[CreditCardBill], today: date) -> List[CreditCardBill]:
    """Unpaid statements not yet due"""
    return [b for b in bills if not b.is_paid and today < b.due_date]


def overdue_bills(bills: Iterable[CreditCardBill], today: date) -> List[CreditCardBill]:
    """Unpaid statements past their due date"""
    return [b for b in bills if not b.is_paid and today > b.due_date]


def find_bill(
    bills: Iterable[CreditCardBill], account_id: str, month: int, year: int
) -> CreditCardBill | None:
    for bill in bills:
        if bill.account_id == account_id and bill.month == month and bill.year == year:
            return bill
    return None


def card_summary(
    cards: List[Account],
    bills: List[CreditCardBill],
    today: date,
    default_closing_day: int = 1,
    default_due_day: int = 10,
) -> CardSummary:
    """
    Limit usage of every card for the current month.

    Used amount is the open statement total when one exists, otherwise the
    absolute account balance. Available credit never goes below zero.
    """
    statuses = []
    for card in cards:
        limit = card.credit_limit or ZERO
        bill = find_bill(bills, card.id, today.month, today.year)
        used = bill.total_amount if bill and bill.total_amount else abs(card.balance)
        available = max(ZERO, limit - used)

        next_due = due_date(
            card.due_day or default_due_day,
            card.closing_day or default_closing_day,
            today.month,
            today.year,
        )

        statuses.append(
            CardStatus(
                account=card,
                limit=limit,
                used=used,
                available=available,
                current_bill=bill.total_amount if bill else ZERO,
                next_due_date=next_due,
            )
        )

    return CardSummary(
        total_limit=sum((s.limit for s in statuses), Decimal(0)),
        total_used=sum((s.used for s in statuses), Decimal(0)),
        total_available=sum((s.available for s in statuses), Decimal(0)),
        cards=statuses,
    )
