"""Recurring transactions and the batch that materializes them"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Mapping

from finance_gateway.domain.models import RecurringTransaction, Transaction
from finance_gateway.domain.recurrence import advance, due_entries, due_on, monthly_total, upcoming
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.infrastructure.observability.logging import log_recurring_run
from finance_gateway.infrastructure.observability.metrics import record_recurring_run
from finance_gateway.services.collection import EntityCollection

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of one batch run"""

    processed: int = 0
    skipped: int = 0
    failed: int = 0
    created: List[Transaction] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class RecurringService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.entries = EntityCollection(repos.recurring)

    async def list(self) -> List[RecurringTransaction]:
        return await self.entries.refresh(order=[("next_date", False)])

    async def create(self, values: Mapping[str, Any]) -> RecurringTransaction:
        """New entries start at their start date"""
        return await self.entries.create({**values, "next_date": values["start_date"]})

    async def update(self, entry_id: str, changes: Mapping[str, Any]) -> RecurringTransaction:
        return await self.entries.update(entry_id, changes)

    async def delete(self, entry_id: str) -> None:
        await self.entries.delete(entry_id)

    async def toggle(self, entry_id: str) -> RecurringTransaction:
        entry = await self.repos.recurring.get(entry_id)
        return await self.entries.update(entry_id, {"is_active": not entry.is_active})

    async def _already_materialized(self, entry: RecurringTransaction) -> bool:
        existing = await self.repos.transactions.list(
            eq={"recurring_id": entry.id, "date": entry.next_date}, limit=1
        )
        return bool(existing)

    async def process(self, now: datetime) -> ProcessResult:
        """
        Materialize one transaction per due entry and roll each entry forward.

        Entries are independent: a failure is logged and counted, and the batch
        moves on. An occurrence that already has a transaction (same entry, same
        date) is not inserted twice, but the entry is still rolled forward.
        An entry counts as processed only once its next date has moved.
        Materialized transactions do not move account balances.
        """
        started = time.perf_counter()
        result = ProcessResult()

        for entry in due_entries(await self.repos.recurring.list(), now):
            try:
                next_date, still_active = advance(entry)
                created = None
                if not await self._already_materialized(entry):
                    created = await self.repos.transactions.create(
                        {
                            "account_id": entry.account_id,
                            "category_id": entry.category_id,
                            "type": entry.type,
                            "amount": entry.amount,
                            "description": entry.description,
                            "date": entry.next_date,
                            "recurring_id": entry.id,
                        }
                    )
                await self.repos.recurring.update(entry.id, {"next_date": next_date, "is_active": still_active})
            except Exception as e:
                result.failed += 1
                result.errors.append(f"{entry.id}: {e}")
                logger.error(
                    "Recurring entry failed to materialize",
                    extra={"recurring_id": entry.id, "error": str(e)},
                )
                continue

            if created is None:
                result.skipped += 1
            else:
                result.created.append(created)
                result.processed += 1

        record_recurring_run(result.processed, result.failed)
        log_recurring_run(
            self.repos.user_id,
            result.processed,
            result.failed,
            round((time.perf_counter() - started) * 1000, 2),
        )
        await self.list()
        return result

    async def due_today(self, today: date) -> List[RecurringTransaction]:
        return due_on(await self.list(), today)

    async def upcoming(self, today: date, days: int = 7) -> List[RecurringTransaction]:
        return upcoming(await self.list(), today, days)

    async def monthly_totals(self) -> Mapping[str, Decimal]:
        entries = await self.list()
        return {"income": monthly_total(entries, "income"), "expense": monthly_total(entries, "expense")}
