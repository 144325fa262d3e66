"""Monthly budget progress and suggestions"""

import math
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from finance_gateway.domain.models import (
    BudgetProgress,
    BudgetSuggestion,
    BudgetSummary,
    Category,
    MonthlyBudget,
    ZERO,
    money,
)

UNDER = "under"
WARNING = "warning"
OVER = "over"


def budget_status(percentage: float, warning_percent: int = 80) -> str:
    if percentage >= 100:
        return OVER
    if percentage >= warning_percent:
        return WARNING
    return UNDER


def budget_progress(
    budget: MonthlyBudget,
    spent: Decimal,
    warning_percent: int = 80,
    category: Optional[Category] = None,
) -> BudgetProgress:
    percentage = float(spent / budget.amount * 100) if budget.amount > 0 else 0.0
    return BudgetProgress(
        budget=budget,
        spent=spent,
        remaining=budget.amount - spent,
        percentage=percentage,
        status=budget_status(percentage, warning_percent),
        category=category,
    )


def progress_for_month(
    budgets: Iterable[MonthlyBudget],
    spent_by_category: Mapping[str, Decimal],
    categories: Mapping[str, Category],
    warning_percent: int = 80,
) -> List[BudgetProgress]:
    return [
        budget_progress(
            b,
            spent_by_category.get(b.category_id, ZERO),
            warning_percent,
            categories.get(b.category_id),
        )
        for b in budgets
    ]


def budget_summary(progress: List[BudgetProgress]) -> BudgetSummary:
    total_budget = sum((p.budget.amount for p in progress), ZERO)
    total_spent = sum((p.spent for p in progress), ZERO)
    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        overall_percentage=float(total_spent / total_budget * 100) if total_budget > 0 else 0.0,
        budgets_on_track=sum(1 for p in progress if p.status == UNDER),
        budgets_warning=sum(1 for p in progress if p.status == WARNING),
        budgets_over=sum(1 for p in progress if p.status == OVER),
    )


def suggest_budgets(
    expenses_by_category: Mapping[str, List[Decimal]],
    months: int = 3,
    margin: Decimal = Decimal("1.1"),
) -> List[BudgetSuggestion]:
    """
    Suggest a budget per category from recent spending.

    The suggestion is the monthly average over ``months`` plus a 10% margin,
    rounded up to a whole unit. Largest suggestions come first.
    """
    suggestions = []
    for category_id, amounts in expenses_by_category.items():
        average = sum(amounts, ZERO) / months
        suggested = Decimal(math.ceil(average * margin))
        if suggested > 0:
            suggestions.append(
                BudgetSuggestion(
                    category_id=category_id,
                    suggested_amount=suggested,
                    average_spent=money(average),
                )
            )
    return sorted(suggestions, key=lambda s: s.suggested_amount, reverse=True)


def spending_by_category(rows: Iterable) -> Dict[str, Decimal]:
    """Sum expense amounts per category_id"""
    totals: Dict[str, Decimal] = {}
    for txn in rows:
        if txn.category_id is None:
            continue
        totals[txn.category_id] = totals.get(txn.category_id, ZERO) + txn.amount
    return totals
