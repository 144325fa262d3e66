"""Unit tests for installment plan generation"""

import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain.installments import (
    active_installments,
    future_installments_total,
    installment_description,
    split_purchase,
)
from finance_gateway.domain.models import Installment


def make_installment(total: int, paid: int, amount: str = "100.00") -> Installment:
    return Installment(
        id=f"inst-{total}-{paid}",
        user_id="user-1",
        account_id="card-1",
        description="TV",
        total_amount=Decimal(amount) * total,
        installment_amount=Decimal(amount),
        total_installments=total,
        start_date=date(2024, 1, 10),
        paid_installments=paid,
    )


def test_split_purchase_equal_split():
    """Test plan with evenly divisible amount"""
    plan = split_purchase(Decimal("300.00"), 3, date(2024, 1, 10))

    assert len(plan) == 3
    assert all(p.amount == Decimal("100.00") for p in plan)
    assert [p.number for p in plan] == [1, 2, 3]


def test_split_purchase_rounding():
    """Test last installment absorbs remainder"""
    plan = split_purchase(Decimal("100.00"), 3, date(2024, 1, 10))

    assert [p.amount for p in plan] == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert sum(p.amount for p in plan) == Decimal("100.00")


def test_split_purchase_monthly_dates_clamped():
    """Test Jan 31 start rolls to the last day of short months"""
    plan = split_purchase(Decimal("400.00"), 4, date(2024, 1, 31))

    assert [p.due_date for p in plan] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_split_purchase_wraps_year():
    plan = split_purchase(Decimal("200.00"), 2, date(2024, 12, 5))
    assert plan[1].due_date == date(2025, 1, 5)


@pytest.mark.parametrize("amount,count", [(Decimal("0"), 3), (Decimal("100"), 0), (Decimal("-10"), 2)])
def test_split_purchase_invalid_input(amount, count):
    """Test non-positive amount or count yields no plan"""
    assert split_purchase(amount, count, date(2024, 1, 1)) == []


def test_installment_description():
    assert installment_description("Notebook", 2, 10) == "Notebook (2/10)"


def test_active_installments_and_future_total():
    installments = [make_installment(10, 4), make_installment(3, 3), make_installment(2, 0, "50.00")]

    active = active_installments(installments)
    assert [i.id for i in active] == ["inst-10-4", "inst-2-0"]
    # 6 x 100 + 2 x 50
    assert future_installments_total(installments) == Decimal("700.00")
