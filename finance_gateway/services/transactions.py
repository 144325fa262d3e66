"""Transactions, categories and tags"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from finance_gateway.domain.ledger import (
    balance_changes,
    category_breakdown,
    category_tree,
    flat_categories,
    month_summary,
    recent_months_summary,
    search_transactions,
)
from finance_gateway.domain.models import (
    Category,
    CategorySummary,
    MonthSummary,
    SearchResult,
    Tag,
    Transaction,
    TransactionSearch,
    ZERO,
)
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.accounts import AccountService
from finance_gateway.services.collection import EntityCollection
from finance_gateway.utils.date_utils import add_months, month_bounds, shift_month


def _merge(left: Dict[str, Decimal], right: Dict[str, Decimal]) -> Dict[str, Decimal]:
    merged = dict(left)
    for account_id, delta in right.items():
        merged[account_id] = merged.get(account_id, ZERO) + delta
    return {k: v for k, v in merged.items() if v != 0}


def _negate(changes: Dict[str, Decimal]) -> Dict[str, Decimal]:
    return {k: -v for k, v in changes.items()}


def _effect(txn_type: str, amount: Decimal, account_id: str, to_account_id: Optional[str]) -> Dict[str, Decimal]:
    return balance_changes(txn_type, Decimal(str(amount)), account_id, to_account_id)


class TransactionService:
    """
    Transactions and the account balances they move.

    Creating, editing or deleting a transaction adjusts the balances of the
    accounts involved. The transaction write and the balance writes are
    separate store calls.
    """

    def __init__(self, repos: Repositories):
        self.repos = repos
        self.accounts = AccountService(repos)
        self.transactions = EntityCollection(repos.transactions)

    async def list(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        txn_type: Optional[str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        eq = {}
        if txn_type:
            eq["type"] = txn_type
        if account_id:
            eq["account_id"] = account_id
        if category_id:
            eq["category_id"] = category_id
        return await self.transactions.refresh(
            eq=eq,
            gte={"date": start} if start else None,
            lte={"date": end} if end else None,
            order=[("date", True)],
            limit=limit,
        )

    async def recent(self, today: date, months: int = 3) -> List[Transaction]:
        """Transactions of the last ``months`` months, newest first"""
        return await self.list(start=add_months(today, -months))

    async def search(self, search: TransactionSearch) -> SearchResult:
        """
        Filter transactions and total the matches.

        Type and date range narrow the store query; the remaining filters run
        over the returned rows.
        """
        rows = await self.repos.transactions.list(
            eq={"type": search.type} if search.type else None,
            gte={"date": search.date_from} if search.date_from else None,
            lte={"date": search.date_to} if search.date_to else None,
            order=[("date", True)],
        )
        return search_transactions(rows, search)

    async def get(self, transaction_id: str) -> Transaction:
        return await self.repos.transactions.get(transaction_id)

    async def create(self, values: Mapping[str, Any]) -> Transaction:
        created = await self.transactions.create(values)
        await self.accounts.apply_balance_changes(
            _effect(created.type, created.amount, created.account_id, created.to_account_id)
        )
        return created

    async def update(self, transaction_id: str, changes: Mapping[str, Any]) -> Transaction:
        previous = await self.repos.transactions.get(transaction_id)
        updated = await self.transactions.update(transaction_id, changes)
        await self.accounts.apply_balance_changes(
            _merge(
                _negate(_effect(previous.type, previous.amount, previous.account_id, previous.to_account_id)),
                _effect(updated.type, updated.amount, updated.account_id, updated.to_account_id),
            )
        )
        return updated

    async def delete(self, transaction_id: str) -> None:
        existing = await self.repos.transactions.get(transaction_id)
        await self.transactions.delete(transaction_id)
        await self.accounts.apply_balance_changes(
            _negate(_effect(existing.type, existing.amount, existing.account_id, existing.to_account_id))
        )

    async def month_summary(self, year: int, month: int) -> MonthSummary:
        start, end = month_bounds(year, month)
        return month_summary(await self.list(start=start, end=end), year, month)

    async def recent_months(self, today: date, count: int = 6) -> List[MonthSummary]:
        year, month = shift_month(today.year, today.month, -(count - 1))
        start, _ = month_bounds(year, month)
        _, end = month_bounds(today.year, today.month)
        return recent_months_summary(await self.list(start=start, end=end), today, count)

    async def category_summary(self, year: int, month: int, txn_type: str = "expense") -> List[CategorySummary]:
        start, end = month_bounds(year, month)
        categories = {c.id: c for c in await self.repos.categories.list()}
        return category_breakdown(await self.list(start=start, end=end), txn_type, categories)


class CategoryService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.categories = EntityCollection(repos.categories, sort_key=lambda c: c.name)

    async def list(self, type_: Optional[str] = None, include_archived: bool = False) -> List[Category]:
        eq: Dict[str, Any] = {}
        if type_:
            eq["type"] = type_
        if not include_archived:
            eq["is_archived"] = False
        return await self.categories.refresh(eq=eq, order=[("name", False)])

    async def create(self, values: Mapping[str, Any]) -> Category:
        return await self.categories.create(values)

    async def create_subcategory(self, parent_id: str, values: Mapping[str, Any]) -> Category:
        """Subcategories inherit the parent's type"""
        parent = await self.repos.categories.get(parent_id)
        return await self.categories.create({**values, "parent_id": parent.id, "type": parent.type})

    async def update(self, category_id: str, changes: Mapping[str, Any]) -> Category:
        return await self.categories.update(category_id, changes)

    async def delete(self, category_id: str) -> None:
        await self.categories.delete(category_id)

    async def tree(self, type_: Optional[str] = None) -> List[Dict]:
        return category_tree(await self.list(), type_)

    async def flat(self, type_: Optional[str] = None) -> List[Tuple[Category, Optional[str]]]:
        return flat_categories(await self.list(), type_)


class TagService:
    def __init__(self, repos: Repositories):
        self.tags = EntityCollection(repos.tags, sort_key=lambda t: t.name)

    async def list(self) -> List[Tag]:
        return await self.tags.refresh(order=[("name", False)])

    async def create(self, values: Mapping[str, Any]) -> Tag:
        return await self.tags.create(values)

    async def update(self, tag_id: str, changes: Mapping[str, Any]) -> Tag:
        return await self.tags.update(tag_id, changes)

    async def delete(self, tag_id: str) -> None:
        await self.tags.delete(tag_id)
