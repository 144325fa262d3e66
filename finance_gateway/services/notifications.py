"""Stored notifications and the checks that raise them"""

from dataclasses import asdict
from datetime import date
from typing import Any, List, Mapping

from finance_gateway.domain.budgets import spending_by_category
from finance_gateway.domain.models import Notification, NotificationDraft
from finance_gateway.domain.notifications import bill_reminders, budget_alerts
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection
from finance_gateway.utils.date_utils import month_bounds

NOTIFICATION_LIMIT = 50


class NotificationService:
    def __init__(self, repos: Repositories, reminder_days_before: int = 3, warning_percent: int = 80):
        self.repos = repos
        self.reminder_days_before = reminder_days_before
        self.warning_percent = warning_percent
        self.notifications = EntityCollection(repos.notifications)

    async def list(self) -> List[Notification]:
        """Most recent notifications first"""
        return await self.notifications.refresh(order=[("created_at", True)], limit=NOTIFICATION_LIMIT)

    async def unread_count(self) -> int:
        return sum(1 for n in await self.list() if not n.is_read)

    async def create(self, values: Mapping[str, Any]) -> Notification:
        return await self.notifications.create({"is_read": False, **values})

    async def mark_read(self, notification_id: str) -> Notification:
        return await self.notifications.update(notification_id, {"is_read": True})

    async def mark_all_read(self) -> int:
        """Mark every unread notification as read; returns how many changed"""
        updated = await self.repos.store.update(
            "notifications", {"user_id": self.repos.user_id, "is_read": False}, {"is_read": True}
        )
        await self.list()
        return len(updated)

    async def delete(self, notification_id: str) -> None:
        await self.notifications.delete(notification_id)

    async def _store_drafts(self, drafts: List[NotificationDraft]) -> List[Notification]:
        return [await self.create(asdict(draft)) for draft in drafts]

    async def check_bill_reminders(self, today: date) -> List[Notification]:
        bills = await self.repos.bills.list(eq={"is_paid": False})
        return await self._store_drafts(bill_reminders(bills, today, self.reminder_days_before))

    async def check_budget_alerts(self, year: int, month: int) -> List[Notification]:
        start, end = month_bounds(year, month)
        budgets = await self.repos.budgets.list(eq={"year": year, "month": month})
        expenses = await self.repos.transactions.list(eq={"type": "expense"}, gte={"date": start}, lte={"date": end})
        drafts = budget_alerts(budgets, spending_by_category(expenses), self.warning_percent)
        return await self._store_drafts(drafts)

    async def run_checks(self, today: date) -> List[Notification]:
        """Bill reminders for today plus budget alerts for the current month"""
        created = await self.check_bill_reminders(today)
        created.extend(await self.check_budget_alerts(today.year, today.month))
        return created
