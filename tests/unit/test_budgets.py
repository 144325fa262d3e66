"""Unit tests for budget progress and suggestions"""

import pytest
from decimal import Decimal
from finance_gateway.domain.budgets import (
    budget_progress,
    budget_status,
    budget_summary,
    progress_for_month,
    spending_by_category,
    suggest_budgets,
)
from finance_gateway.domain.models import MonthlyBudget
from conftest import make_transaction


def make_budget(category_id: str = "cat-food", amount: str = "500.00") -> MonthlyBudget:
    return MonthlyBudget(
        id=f"budget-{category_id}", user_id="user-1", category_id=category_id, amount=Decimal(amount), month=3, year=2024
    )


@pytest.mark.parametrize("percentage,expected", [(0, "under"), (79.9, "under"), (80, "warning"), (100, "over"), (150, "over")])
def test_budget_status(percentage, expected):
    assert budget_status(percentage) == expected


def test_budget_progress():
    progress = budget_progress(make_budget(amount="500.00"), Decimal("400.00"))

    assert progress.remaining == Decimal("100.00")
    assert progress.percentage == pytest.approx(80.0)
    assert progress.status == "warning"


def test_budget_progress_zero_amount():
    progress = budget_progress(make_budget(amount="0"), Decimal("10"))
    assert progress.percentage == 0.0
    assert progress.status == "under"


def test_progress_for_month_and_summary():
    budgets = [make_budget("cat-food", "500"), make_budget("cat-fun", "100"), make_budget("cat-home", "1000")]
    spent = {"cat-food": Decimal("450"), "cat-fun": Decimal("150")}

    progress = progress_for_month(budgets, spent, {})
    summary = budget_summary(progress)

    assert [p.status for p in progress] == ["warning", "over", "under"]
    assert summary.total_budget == Decimal("1600")
    assert summary.total_spent == Decimal("600")
    assert summary.total_remaining == Decimal("1000")
    assert (summary.budgets_on_track, summary.budgets_warning, summary.budgets_over) == (1, 1, 1)
    assert summary.overall_percentage == pytest.approx(37.5)


def test_suggest_budgets_adds_margin_and_rounds_up():
    suggestions = suggest_budgets(
        {"cat-food": [Decimal("300"), Decimal("300"), Decimal("300")], "cat-fun": [Decimal("90")]},
        months=3,
    )

    assert [s.category_id for s in suggestions] == ["cat-food", "cat-fun"]
    assert suggestions[0].suggested_amount == Decimal("330")
    assert suggestions[0].average_spent == Decimal("300.00")
    assert suggestions[1].suggested_amount == Decimal("33")


def test_spending_by_category_skips_uncategorized():
    rows = [
        make_transaction(id="1", amount=Decimal("10")),
        make_transaction(id="2", amount=Decimal("15")),
        make_transaction(id="3", category_id=None),
    ]
    assert spending_by_category(rows) == {"cat-food": Decimal("25")}
