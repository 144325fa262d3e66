"""Debt amortization (Price table) and payoff strategies"""

import math
from collections import OrderedDict
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Iterable, List

from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.models import (
    AmortizationRow,
    Debt,
    DebtSummary,
    DebtTypeTotal,
    ExtraPaymentSavings,
    PaymentEffect,
    ZERO,
    money,
    to_decimal,
)
from finance_gateway.utils.date_utils import add_months, clamp_day, shift_month

HUNDRED = Decimal(100)


def price_installment(principal: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """
    Fixed installment of a Price-table loan, rounded to cents.

    PMT = P * (i * (1+i)^n) / ((1+i)^n - 1), or P / n when there is no interest.
    """
    if months <= 0:
        raise InvalidOperationError("Loan term must be at least one month")

    principal = to_decimal(principal)
    rate = to_decimal(monthly_rate)
    if rate == 0:
        return money(principal / months)

    factor = (1 + rate) ** months
    return money(principal * (rate * factor) / (factor - 1))


def amortization_schedule(
    principal: Decimal,
    monthly_rate: Decimal,
    months: int,
    start_date: date,
) -> List[AmortizationRow]:
    """
    Month-by-month schedule of a Price-table loan.

    Each row charges interest on the running balance and amortizes the rest of
    the fixed payment. Amounts are kept in cents; the last row pays off whatever
    balance rounding left behind so the principal column sums exactly to the
    original principal and the final balance is zero.
    """
    rate = to_decimal(monthly_rate)
    payment = price_installment(principal, rate, months)
    balance = money(principal)

    schedule = []
    for number in range(1, months + 1):
        interest = money(balance * rate)
        if number == months:
            amortized = balance
        else:
            amortized = min(max(payment - interest, ZERO), balance)

        balance = max(ZERO, balance - amortized)
        schedule.append(
            AmortizationRow(
                number=number,
                date=add_months(start_date, number - 1),
                payment=amortized + interest,
                principal=amortized,
                interest=interest,
                balance=balance,
            )
        )

    return schedule


def debt_schedule(debt: Debt, default_term: int = 12) -> List[AmortizationRow]:
    """Schedule of a stored debt; interest_rate is a monthly percentage"""
    return amortization_schedule(
        debt.original_amount,
        to_decimal(debt.interest_rate) / HUNDRED,
        debt.total_installments or default_term,
        debt.start_date,
    )


def snowball(debts: Iterable[Debt]) -> List[Debt]:
    """Active debts, smallest balance first (ties: higher rate, then name)"""
    active = [d for d in debts if d.is_active]
    return sorted(active, key=lambda d: (d.current_balance, -d.interest_rate, d.name, d.id))


def avalanche(debts: Iterable[Debt]) -> List[Debt]:
    """Active debts, highest interest rate first (ties: smaller balance, then name)"""
    active = [d for d in debts if d.is_active]
    return sorted(active, key=lambda d: (-d.interest_rate, d.current_balance, d.name, d.id))


def apply_payment(debt: Debt, principal: Decimal, is_extra: bool = False) -> PaymentEffect:
    """
    Debt state after a payment amortizes ``principal``.

    Balance never goes below zero and never increases; regular payments count
    towards paid installments, extra payments do not.
    """
    new_balance = debt.current_balance - max(to_decimal(principal), ZERO)
    return PaymentEffect(
        current_balance=max(ZERO, new_balance),
        paid_installments=debt.paid_installments + (0 if is_extra else 1),
        is_active=new_balance > 0,
    )


def debt_summary(debts: Iterable[Debt], today: date) -> DebtSummary:
    active = [d for d in debts if d.is_active]

    total_debt = sum((d.original_amount for d in active), ZERO)
    total_remaining = sum((d.current_balance for d in active), ZERO)
    monthly_payments = sum((d.monthly_payment for d in active), ZERO)

    by_type: "OrderedDict[str, DebtTypeTotal]" = OrderedDict()
    for debt in active:
        entry = by_type.setdefault(debt.type, DebtTypeTotal(type=debt.type, count=0, total=ZERO))
        entry.count += 1
        entry.total += debt.current_balance

    # Balance-weighted average rate
    weighted = sum((d.interest_rate * d.current_balance for d in active), ZERO)
    average_rate = weighted / total_remaining if total_remaining > 0 else ZERO

    payoff = None
    if monthly_payments > 0 and total_remaining > 0:
        months = math.ceil(total_remaining / monthly_payments)
        payoff = add_months(today, months)

    return DebtSummary(
        total_debt=total_debt,
        total_paid=total_debt - total_remaining,
        total_remaining=total_remaining,
        monthly_payments=monthly_payments,
        debts_by_type=list(by_type.values()),
        average_interest_rate=average_rate.quantize(Decimal("0.0001")),
        projected_payoff_date=payoff,
    )


def extra_payment_savings(debt: Debt, extra_amount: Decimal, default_term: int = 12) -> ExtraPaymentSavings:
    """
    Months and interest saved by paying ``extra_amount`` off the balance now.

    An extra amount above the current balance only pays the balance off, so
    the interest saved never exceeds the interest still scheduled.
    """
    extra_amount = to_decimal(extra_amount)
    rate = debt.interest_rate / HUNDRED
    payment = debt.monthly_payment
    applied = min(extra_amount, max(debt.current_balance, ZERO))
    new_balance = debt.current_balance - applied

    remaining = (debt.total_installments or default_term) - debt.paid_installments
    normal_interest = sum(
        (row.interest for row in debt_schedule(debt, default_term)[debt.paid_installments:]),
        ZERO,
    )

    if new_balance <= 0:
        months_needed = 0
    elif rate == 0:
        months_needed = int((new_balance / payment).to_integral_value(ROUND_CEILING)) if payment > 0 else remaining
    elif payment <= new_balance * rate:
        # Payment does not even cover the interest
        months_needed = remaining
    else:
        periods = (payment / (payment - new_balance * rate)).ln() / (1 + rate).ln()
        months_needed = int(periods.to_integral_value(ROUND_CEILING))

    interest_saved = ZERO
    if debt.current_balance > 0:
        interest_saved = min(normal_interest, max(ZERO, money(normal_interest * applied / debt.current_balance)))

    return ExtraPaymentSavings(
        months_saved=max(0, remaining - months_needed),
        interest_saved=interest_saved,
    )


def next_due_date(due_day: int, today: date) -> date:
    """Next occurrence of a monthly due day, today included"""
    due = clamp_day(today.year, today.month, due_day)
    if due < today:
        year, month = shift_month(today.year, today.month, 1)
        due = clamp_day(year, month, due_day)
    return due


def upcoming_debts(debts: Iterable[Debt], today: date, days_ahead: int = 7) -> List[Debt]:
    """Active debts whose monthly due day falls within the next ``days_ahead`` days"""
    upcoming = [
        d
        for d in debts
        if d.is_active and d.due_day and 0 <= (next_due_date(d.due_day, today) - today).days <= days_ahead
    ]
    return sorted(upcoming, key=lambda d: d.due_day)
