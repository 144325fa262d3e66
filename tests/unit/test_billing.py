"""Unit tests for credit card billing-cycle math"""

import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain import billing
from finance_gateway.domain.models import BillPeriod, CreditCardBill
from conftest import make_account


def make_bill(**overrides) -> CreditCardBill:
    values = dict(
        id="bill-1",
        user_id="user-1",
        account_id="card-1",
        month=3,
        year=2024,
        due_date=date(2024, 3, 15),
        closing_date=date(2024, 3, 5),
        total_amount=Decimal("800.00"),
    )
    values.update(overrides)
    return CreditCardBill(**values)


def test_due_date_after_closing_same_month():
    assert billing.due_date(15, 5, 3, 2024) == date(2024, 3, 15)


def test_due_date_on_or_before_closing_moves_to_next_month():
    assert billing.due_date(5, 25, 3, 2024) == date(2024, 4, 5)
    assert billing.due_date(10, 10, 3, 2024) == date(2024, 4, 10)


def test_due_date_wraps_year():
    assert billing.due_date(5, 25, 12, 2024) == date(2025, 1, 5)


def test_due_day_clamped_to_month_length():
    """Day 31 in a 30-day month lands on the last day instead of rolling over"""
    assert billing.due_date(31, 5, 4, 2024) == date(2024, 4, 30)
    assert billing.closing_date(30, 2, 2023) == date(2023, 2, 28)


@pytest.mark.parametrize(
    "purchase,expected",
    [
        (date(2024, 3, 5), BillPeriod(month=3, year=2024)),
        (date(2024, 3, 6), BillPeriod(month=4, year=2024)),
        (date(2024, 12, 20), BillPeriod(month=1, year=2025)),
    ],
)
def test_bill_period(purchase, expected):
    """Purchases after the closing day fall into next month's statement"""
    assert billing.bill_period(purchase, 5) == expected


def test_billing_window():
    assert billing.billing_window(5, 3, 2024) == (date(2024, 2, 6), date(2024, 3, 5))
    assert billing.billing_window(31, 3, 2024) == (date(2024, 3, 1), date(2024, 3, 31))


def test_open_and_overdue_bills():
    today = date(2024, 3, 20)
    upcoming = make_bill(id="a", due_date=date(2024, 4, 15))
    late = make_bill(id="b", due_date=date(2024, 3, 15))
    paid = make_bill(id="c", due_date=date(2024, 3, 1), is_paid=True)

    assert [b.id for b in billing.open_bills([upcoming, late, paid], today)] == ["a"]
    assert [b.id for b in billing.overdue_bills([upcoming, late, paid], today)] == ["b"]


def test_card_summary_uses_current_bill_total():
    card = make_account(id="card-1", type="credit_card", balance=Decimal("-300.00"), credit_limit=Decimal("1000.00"),
                        closing_day=5, due_day=15)
    summary = billing.card_summary([card], [make_bill()], date(2024, 3, 10))

    status = summary.cards[0]
    assert status.used == Decimal("800.00")
    assert status.available == Decimal("200.00")
    assert status.next_due_date == date(2024, 3, 15)
    assert summary.total_limit == Decimal("1000.00")


def test_card_summary_falls_back_to_balance_and_floors_available():
    card = make_account(id="card-1", type="credit_card", balance=Decimal("-1500.00"), credit_limit=Decimal("1000.00"))
    summary = billing.card_summary([card], [], date(2024, 3, 10))

    assert summary.cards[0].used == Decimal("1500.00")
    assert summary.cards[0].available == Decimal("0")
    assert summary.cards[0].current_bill == Decimal("0")
