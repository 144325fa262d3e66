"""Unit tests for debt amortization and payoff strategies"""

import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain.amortization import (
    amortization_schedule,
    apply_payment,
    avalanche,
    debt_summary,
    extra_payment_savings,
    next_due_date,
    price_installment,
    snowball,
    upcoming_debts,
)
from finance_gateway.domain.exceptions import InvalidOperationError
from conftest import make_debt


def test_price_installment():
    """1200 at 2% a month over 12 months"""
    assert price_installment(Decimal("1200"), Decimal("0.02"), 12) == Decimal("113.47")


def test_price_installment_without_interest():
    assert price_installment(Decimal("1200"), Decimal("0"), 12) == Decimal("100.00")


def test_price_installment_requires_term():
    with pytest.raises(InvalidOperationError):
        price_installment(Decimal("1200"), Decimal("0.02"), 0)


def test_amortization_schedule_first_row():
    schedule = amortization_schedule(Decimal("1200"), Decimal("0.02"), 12, date(2024, 1, 15))

    first = schedule[0]
    assert first.interest == Decimal("24.00")
    assert first.principal == Decimal("89.47")
    assert first.payment == Decimal("113.47")
    assert first.balance == Decimal("1110.53")
    assert first.date == date(2024, 1, 15)


def test_amortization_schedule_pays_off_exactly():
    schedule = amortization_schedule(Decimal("1200"), Decimal("0.02"), 12, date(2024, 1, 31))

    assert len(schedule) == 12
    assert sum(row.principal for row in schedule) == Decimal("1200.00")
    assert schedule[-1].balance == Decimal("0")
    assert schedule[1].date == date(2024, 2, 29)
    assert all(row.balance >= 0 for row in schedule)


def test_apply_payment_regular_and_extra():
    debt = make_debt(current_balance=Decimal("500.00"), paid_installments=3)

    regular = apply_payment(debt, Decimal("100.00"))
    assert regular.current_balance == Decimal("400.00")
    assert regular.paid_installments == 4
    assert regular.is_active

    extra = apply_payment(debt, Decimal("100.00"), is_extra=True)
    assert extra.paid_installments == 3


def test_apply_payment_never_goes_negative():
    effect = apply_payment(make_debt(current_balance=Decimal("50.00")), Decimal("80.00"))

    assert effect.current_balance == Decimal("0")
    assert not effect.is_active


def test_apply_payment_ignores_negative_principal():
    effect = apply_payment(make_debt(current_balance=Decimal("50.00")), Decimal("-10.00"))
    assert effect.current_balance == Decimal("50.00")


def test_snowball_orders_by_balance_then_rate():
    debts = [
        make_debt(id="a", name="A", current_balance=Decimal("900"), interest_rate=Decimal("1")),
        make_debt(id="b", name="B", current_balance=Decimal("300"), interest_rate=Decimal("1")),
        make_debt(id="c", name="C", current_balance=Decimal("300"), interest_rate=Decimal("5")),
        make_debt(id="d", name="D", current_balance=Decimal("10"), is_active=False),
    ]
    assert [d.id for d in snowball(debts)] == ["c", "b", "a"]


def test_avalanche_orders_by_rate_then_balance():
    debts = [
        make_debt(id="a", name="A", current_balance=Decimal("900"), interest_rate=Decimal("8")),
        make_debt(id="b", name="B", current_balance=Decimal("300"), interest_rate=Decimal("2")),
        make_debt(id="c", name="C", current_balance=Decimal("100"), interest_rate=Decimal("8")),
    ]
    assert [d.id for d in avalanche(debts)] == ["c", "a", "b"]


def test_debt_summary():
    debts = [
        make_debt(id="a", type="loan", original_amount=Decimal("1000"), current_balance=Decimal("600"),
                  interest_rate=Decimal("2"), monthly_payment=Decimal("100")),
        make_debt(id="b", type="loan", original_amount=Decimal("500"), current_balance=Decimal("400"),
                  interest_rate=Decimal("4"), monthly_payment=Decimal("100")),
        make_debt(id="c", type="personal", is_active=False),
    ]
    summary = debt_summary(debts, date(2024, 1, 10))

    assert summary.total_debt == Decimal("1500")
    assert summary.total_remaining == Decimal("1000")
    assert summary.total_paid == Decimal("500")
    assert summary.monthly_payments == Decimal("200")
    assert summary.average_interest_rate == Decimal("2.8000")
    assert summary.projected_payoff_date == date(2024, 6, 10)
    assert [(t.type, t.count) for t in summary.debts_by_type] == [("loan", 2)]


def test_debt_summary_without_debts():
    summary = debt_summary([], date(2024, 1, 10))
    assert summary.total_remaining == Decimal("0")
    assert summary.projected_payoff_date is None


def test_extra_payment_savings():
    debt = make_debt()
    savings = extra_payment_savings(debt, Decimal("300.00"))

    assert savings.months_saved > 0
    assert savings.interest_saved > 0


def test_extra_payment_paying_everything_saves_every_month():
    savings = extra_payment_savings(make_debt(paid_installments=2), Decimal("5000"))
    assert savings.months_saved == 10


def test_extra_payment_above_balance_saves_at_most_scheduled_interest():
    debt = make_debt(paid_installments=2)
    payoff = extra_payment_savings(debt, Decimal("1200.00"))
    overpaid = extra_payment_savings(debt, Decimal("5000.00"))

    assert payoff.interest_saved > 0
    assert overpaid.interest_saved == payoff.interest_saved


def test_next_due_date_and_upcoming():
    assert next_due_date(15, date(2024, 1, 10)) == date(2024, 1, 15)
    assert next_due_date(5, date(2024, 1, 10)) == date(2024, 2, 5)

    debts = [make_debt(id="soon", due_day=12), make_debt(id="later", due_day=28), make_debt(id="none", due_day=None)]
    assert [d.id for d in upcoming_debts(debts, date(2024, 1, 10), 7)] == ["soon"]
