"""Accounts and their balances"""

from decimal import Decimal
from typing import Any, Dict, List, Mapping

from finance_gateway.domain.ledger import total_balance
from finance_gateway.domain.models import Account
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection


class AccountService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.accounts = EntityCollection(repos.accounts, sort_key=lambda a: a.name)

    async def list(self, include_archived: bool = False) -> List[Account]:
        eq = None if include_archived else {"is_archived": False}
        return await self.accounts.refresh(eq=eq, order=[("name", False)])

    async def get(self, account_id: str) -> Account:
        return await self.repos.accounts.get(account_id)

    async def create(self, values: Mapping[str, Any]) -> Account:
        return await self.accounts.create({"is_archived": False, **values})

    async def update(self, account_id: str, changes: Mapping[str, Any]) -> Account:
        return await self.accounts.update(account_id, changes)

    async def delete(self, account_id: str) -> None:
        await self.accounts.delete(account_id)

    async def total_balance(self) -> Decimal:
        return total_balance(await self.list())

    async def apply_balance_changes(self, changes: Dict[str, Decimal]) -> None:
        """
        Add each delta to its account's balance.

        Read-modify-write against the store; concurrent writers race and the
        last write wins. Unknown accounts are skipped.
        """
        for account_id, delta in changes.items():
            account = await self.repos.accounts.find(account_id)
            if account is None:
                continue
            await self.repos.accounts.update(account_id, {"balance": account.balance + delta})
