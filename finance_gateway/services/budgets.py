"""Monthly budgets per expense category"""

from decimal import Decimal
from typing import Dict, List

from finance_gateway.domain.budgets import budget_summary, progress_for_month, spending_by_category, suggest_budgets
from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.models import BudgetProgress, BudgetSuggestion, BudgetSummary, MonthlyBudget, to_decimal
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection
from finance_gateway.utils.date_utils import month_bounds, shift_month


class BudgetService:
    def __init__(self, repos: Repositories, warning_percent: int = 80):
        self.repos = repos
        self.warning_percent = warning_percent
        self.budgets = EntityCollection(repos.budgets)

    async def list(self, year: int, month: int) -> List[MonthlyBudget]:
        return await self.budgets.refresh(eq={"year": year, "month": month})

    async def create(self, category_id: str, amount: Decimal, year: int, month: int) -> MonthlyBudget:
        """Create the category's budget for the month, or replace the amount of an existing one"""
        existing = [b for b in await self.list(year, month) if b.category_id == category_id]
        if existing:
            return await self.budgets.update(existing[0].id, {"amount": to_decimal(amount)})
        return await self.budgets.create(
            {"category_id": category_id, "amount": to_decimal(amount), "year": year, "month": month}
        )

    async def update(self, budget_id: str, amount: Decimal) -> MonthlyBudget:
        return await self.budgets.update(budget_id, {"amount": to_decimal(amount)})

    async def delete(self, budget_id: str) -> None:
        await self.budgets.delete(budget_id)

    async def copy_from_previous_month(self, year: int, month: int) -> List[MonthlyBudget]:
        """
        Copy last month's budgets into this month.

        Raises:
            InvalidOperationError: the previous month has no budgets
        """
        prev_year, prev_month = shift_month(year, month, -1)
        previous = await self.repos.budgets.list(eq={"year": prev_year, "month": prev_month})
        if not previous:
            raise InvalidOperationError(f"No budgets found for {prev_year:04d}-{prev_month:02d}")

        created = await self.repos.budgets.create_many(
            [{"category_id": b.category_id, "amount": b.amount, "year": year, "month": month} for b in previous]
        )
        await self.list(year, month)
        return created

    async def _spent(self, year: int, month: int) -> Dict[str, Decimal]:
        start, end = month_bounds(year, month)
        expenses = await self.repos.transactions.list(
            eq={"type": "expense"}, gte={"date": start}, lte={"date": end}
        )
        return spending_by_category(expenses)

    async def progress(self, year: int, month: int) -> List[BudgetProgress]:
        budgets = await self.list(year, month)
        categories = {c.id: c for c in await self.repos.categories.list()}
        return progress_for_month(budgets, await self._spent(year, month), categories, self.warning_percent)

    async def summary(self, year: int, month: int) -> BudgetSummary:
        return budget_summary(await self.progress(year, month))

    async def suggestions(self, year: int, month: int, months: int = 3) -> List[BudgetSuggestion]:
        """Suggestions from the ``months`` months before the given month, for known expense categories"""
        first_year, first_month = shift_month(year, month, -months)
        last_year, last_month = shift_month(year, month, -1)
        start, _ = month_bounds(first_year, first_month)
        _, end = month_bounds(last_year, last_month)

        expenses = await self.repos.transactions.list(eq={"type": "expense"}, gte={"date": start}, lte={"date": end})
        known = {c.id for c in await self.repos.categories.list(eq={"type": "expense"})}

        amounts: Dict[str, List[Decimal]] = {}
        for txn in expenses:
            if txn.category_id in known:
                amounts.setdefault(txn.category_id, []).append(txn.amount)
        return suggest_budgets(amounts, months)
