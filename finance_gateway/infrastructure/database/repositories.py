"""Data access layer: typed repositories over a row store"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from finance_gateway.domain.exceptions import RecordNotFoundError
from finance_gateway.domain.models import (
    Account,
    Bill,
    Category,
    CreditCardBill,
    Debt,
    DebtPayment,
    Goal,
    Installment,
    Investment,
    InvestmentTransaction,
    MonthlyBudget,
    Notification,
    RecurringTransaction,
    Tag,
    Transaction,
    from_row,
)
from finance_gateway.infrastructure.store import Filters, Ordering, RowStore

T = TypeVar("T")

# Columns the store fills in; never sent on insert
SERVER_COLUMNS = ("id", "created_at", "updated_at")


class Repository(Generic[T]):
    """
    Rows of one table as records of one dataclass.

    Rows are scoped to their owner through ``owner_column``; tables owned
    through a parent row (debt payments, investment transactions) pass
    ``owner_column=None`` and are scoped by the parent id instead.
    """

    def __init__(
        self,
        store: RowStore,
        table: str,
        model: Type[T],
        owner_id: Optional[str] = None,
        owner_column: Optional[str] = "user_id",
    ):
        self.store = store
        self.table = table
        self.model = model
        self.owner_id = owner_id
        self.owner_column = owner_column

    def _scope(self, eq: Optional[Filters] = None) -> Dict[str, Any]:
        scoped = dict(eq or {})
        if self.owner_column:
            scoped[self.owner_column] = self.owner_id
        return scoped

    def _insert_row(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        row = {k: v for k, v in values.items() if not (k in SERVER_COLUMNS and v is None)}
        if self.owner_column:
            row[self.owner_column] = self.owner_id
        return row

    async def list(
        self,
        eq: Optional[Filters] = None,
        gte: Optional[Filters] = None,
        lte: Optional[Filters] = None,
        order: Optional[Ordering] = None,
        limit: Optional[int] = None,
    ) -> List[T]:
        rows = await self.store.select(self.table, eq=self._scope(eq), gte=gte, lte=lte, order=order, limit=limit)
        return [from_row(self.model, row) for row in rows]

    async def find(self, record_id: str) -> Optional[T]:
        row = await self.store.select_one(self.table, self._scope({"id": record_id}))
        return from_row(self.model, row) if row else None

    async def get(self, record_id: str) -> T:
        """
        Raises:
            RecordNotFoundError: no row with this id is visible to the owner
        """
        record = await self.find(record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.table} {record_id} not found")
        return record

    async def create(self, values: Mapping[str, Any]) -> T:
        row = await self.store.insert(self.table, self._insert_row(values))
        return from_row(self.model, row)

    async def create_many(self, values: Sequence[Mapping[str, Any]]) -> List[T]:
        rows = await self.store.insert_many(self.table, [self._insert_row(v) for v in values])
        return [from_row(self.model, row) for row in rows]

    async def update(self, record_id: str, values: Mapping[str, Any]) -> T:
        changes = {k: v for k, v in values.items() if k not in SERVER_COLUMNS}
        rows = await self.store.update(self.table, self._scope({"id": record_id}), changes)
        if not rows:
            raise RecordNotFoundError(f"{self.table} {record_id} not found")
        return from_row(self.model, rows[0])

    async def delete(self, record_id: str) -> None:
        removed = await self.store.delete(self.table, self._scope({"id": record_id}))
        if not removed:
            raise RecordNotFoundError(f"{self.table} {record_id} not found")


class Repositories:
    """All repositories for one user, sharing a store"""

    def __init__(self, store: RowStore, user_id: str):
        self.store = store
        self.user_id = user_id
        self.accounts = Repository(store, "accounts", Account, user_id)
        self.transactions = Repository(store, "transactions", Transaction, user_id)
        self.categories = Repository(store, "categories", Category, user_id)
        self.tags = Repository(store, "tags", Tag, user_id)
        self.goals = Repository(store, "goals", Goal, user_id)
        self.bills = Repository(store, "bills", Bill, user_id)
        self.budgets = Repository(store, "monthly_budgets", MonthlyBudget, user_id)
        self.debts = Repository(store, "debts", Debt, user_id)
        self.debt_payments = Repository(store, "debt_payments", DebtPayment, owner_column=None)
        self.investments = Repository(store, "investments", Investment, user_id)
        self.investment_transactions = Repository(
            store, "investment_transactions", InvestmentTransaction, owner_column=None
        )
        self.recurring = Repository(store, "recurring_transactions", RecurringTransaction, user_id)
        self.card_bills = Repository(store, "credit_card_bills", CreditCardBill, user_id)
        self.installments = Repository(store, "installments", Installment, user_id)
        self.notifications = Repository(store, "notifications", Notification, user_id)
