"""Savings goals and payable bills"""

from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping

from finance_gateway.domain import bills as bill_rules
from finance_gateway.domain.bills import active_goals, completed_goals
from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.models import Bill, Goal, to_decimal
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection


class GoalService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.goals = EntityCollection(repos.goals)

    async def list(self) -> List[Goal]:
        return await self.goals.refresh(order=[("created_at", True)])

    async def create(self, values: Mapping[str, Any]) -> Goal:
        return await self.goals.create(values)

    async def update(self, goal_id: str, changes: Mapping[str, Any]) -> Goal:
        return await self.goals.update(goal_id, changes)

    async def delete(self, goal_id: str) -> None:
        await self.goals.delete(goal_id)

    async def add_to_goal(self, goal_id: str, amount: Decimal) -> Goal:
        """Add a contribution; the goal is marked completed once the target is reached"""
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidOperationError("Contribution must be positive")
        goal = await self.repos.goals.get(goal_id)
        new_amount = goal.current_amount + amount
        return await self.goals.update(
            goal_id,
            {"current_amount": new_amount, "is_completed": new_amount >= goal.target_amount},
        )

    async def active(self) -> List[Goal]:
        return active_goals(await self.list())

    async def completed(self) -> List[Goal]:
        return completed_goals(await self.list())


class BillService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.bills = EntityCollection(repos.bills)

    async def list(self) -> List[Bill]:
        return await self.bills.refresh(order=[("due_date", False)])

    async def create(self, values: Mapping[str, Any]) -> Bill:
        return await self.bills.create(values)

    async def update(self, bill_id: str, changes: Mapping[str, Any]) -> Bill:
        return await self.bills.update(bill_id, changes)

    async def delete(self, bill_id: str) -> None:
        await self.bills.delete(bill_id)

    async def mark_paid(self, bill_id: str, paid_on: date) -> Bill:
        bill = await self.repos.bills.get(bill_id)
        return await self.bills.update(bill_id, {"is_paid": True, "paid_date": paid_on, "paid_amount": bill.amount})

    async def mark_unpaid(self, bill_id: str) -> Bill:
        return await self.bills.update(bill_id, {"is_paid": False, "paid_date": None, "paid_amount": None})

    async def upcoming(self, today: date, days: int = 7) -> List[Bill]:
        return bill_rules.upcoming_bills(await self.list(), today, days)

    async def overdue(self, today: date) -> List[Bill]:
        return bill_rules.overdue_bills(await self.list(), today)

    async def total_pending(self) -> Decimal:
        return bill_rules.total_pending(await self.list())

    async def month(self, year: int, month: int) -> List[Bill]:
        return bill_rules.month_bills(await self.list(), year, month)

    async def total_paid_in_month(self, year: int, month: int) -> Decimal:
        return bill_rules.total_paid_in_month(await self.list(), year, month)
