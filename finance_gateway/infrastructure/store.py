"""Row store interface shared by the hosted REST backend and the local SQL database"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Row = Dict[str, Any]
Filters = Mapping[str, Any]
Ordering = Sequence[Tuple[str, bool]]  # (column, descending)

TABLES = (
    "accounts",
    "transactions",
    "categories",
    "tags",
    "goals",
    "bills",
    "monthly_budgets",
    "debts",
    "debt_payments",
    "investments",
    "investment_transactions",
    "recurring_transactions",
    "credit_card_bills",
    "installments",
    "notifications",
)


class RowStore(ABC):
    """
    Flat table access: every resource is a table of rows keyed by ``id``.

    Filters are column equality (``eq``) and inclusive ranges (``gte``/``lte``).
    Implementations translate transport and database failures into
    ``BackendError``; there is no retry.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        eq: Optional[Filters] = None,
        gte: Optional[Filters] = None,
        lte: Optional[Filters] = None,
        order: Optional[Ordering] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        ...

    @abstractmethod
    async def insert_many(self, table: str, rows: Sequence[Row]) -> List[Row]:
        """Insert rows and return them as stored (ids and timestamps filled in)"""

    @abstractmethod
    async def update(self, table: str, eq: Filters, values: Row) -> List[Row]:
        """Apply ``values`` to every matching row; returns the updated rows"""

    @abstractmethod
    async def delete(self, table: str, eq: Filters) -> int:
        """Delete matching rows; returns how many were removed"""

    async def insert(self, table: str, row: Row) -> Row:
        return (await self.insert_many(table, [row]))[0]

    async def select_one(self, table: str, eq: Filters) -> Optional[Row]:
        rows = await self.select(table, eq=eq, limit=1)
        return rows[0] if rows else None
