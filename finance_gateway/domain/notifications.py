"""Rules that turn bills and budgets into notification drafts"""

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Mapping

from finance_gateway.domain.models import Bill, MonthlyBudget, NotificationDraft, ZERO


def bill_reminders(bills: Iterable[Bill], today: date, days_before: int) -> List[NotificationDraft]:
    """One reminder per unpaid bill due exactly ``days_before`` days from today"""
    drafts = []
    for bill in bills:
        if bill.is_paid:
            continue
        days_until_due = (bill.due_date - today).days
        if days_until_due != days_before:
            continue

        if days_until_due == 0:
            message = f'Bill "{bill.name}" is due today!'
        elif days_until_due == 1:
            message = f'Bill "{bill.name}" is due tomorrow!'
        else:
            message = f'Bill "{bill.name}" is due in {days_until_due} days.'

        drafts.append(
            NotificationDraft(
                type="bill_due",
                title="Bill reminder",
                message=message,
                data={"bill_id": bill.id, "due_date": bill.due_date.isoformat()},
            )
        )
    return drafts


def budget_alerts(
    budgets: Iterable[MonthlyBudget],
    spent_by_category: Mapping[str, Decimal],
    warning_percent: int = 80,
) -> List[NotificationDraft]:
    """Alert for budgets past the warning threshold and for exceeded budgets"""
    drafts = []
    for budget in budgets:
        if budget.amount <= 0:
            continue
        spent = spent_by_category.get(budget.category_id, ZERO)
        percentage = float(spent / budget.amount * 100)
        data = {"budget_id": budget.id, "category_id": budget.category_id, "percentage": round(percentage, 1)}

        if percentage >= 100:
            drafts.append(
                NotificationDraft(
                    type="budget_alert",
                    title="Budget exceeded",
                    message=f"You went over this category's budget by {percentage - 100:.0f}%!",
                    data=data,
                )
            )
        elif percentage >= warning_percent:
            drafts.append(
                NotificationDraft(
                    type="budget_alert",
                    title="Budget alert",
                    message=f"You have used {percentage:.0f}% of this category's budget.",
                    data=data,
                )
            )
    return drafts
