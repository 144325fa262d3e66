"""Installment plan generation for credit card purchases"""

from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import Iterable, List

from finance_gateway.domain.models import CENT, Installment, ScheduledInstallment, ZERO, money
from finance_gateway.utils.date_utils import add_months


def split_purchase(
    total_amount: Decimal,
    num_installments: int,
    start_date: date,
) -> List[ScheduledInstallment]:
    """
    Split a card purchase into equal monthly installments.

    Requirements:
    - One installment per month starting at start_date
    - Day of month clamped on short months (Jan 31 -> Feb 28)
    - Last installment absorbs rounding remainder so the plan sums to the total

    Example:
        100.00 in 3 -> [33.33, 33.33, 33.34]
    """
    total_amount = money(total_amount)
    if total_amount <= 0 or num_installments <= 0:
        return []

    base_amount = (total_amount / num_installments).quantize(CENT, rounding=ROUND_DOWN)
    remainder = total_amount - base_amount * num_installments

    plan = []
    for i in range(num_installments):
        amount = base_amount + (remainder if i == num_installments - 1 else ZERO)
        plan.append(
            ScheduledInstallment(
                number=i + 1,
                due_date=add_months(start_date, i),
                amount=amount,
            )
        )

    return plan


def installment_description(description: str, number: int, total: int) -> str:
    return f"{description} ({number}/{total})"


def active_installments(installments: Iterable[Installment]) -> List[Installment]:
    """Purchases with installments still to be paid"""
    return [i for i in installments if i.paid_installments < i.total_installments]


def future_installments_total(installments: Iterable[Installment]) -> Decimal:
    """Amount still owed across all installment purchases"""
    return sum(
        ((i.total_installments - i.paid_installments) * i.installment_amount for i in installments),
        Decimal(0),
    )
