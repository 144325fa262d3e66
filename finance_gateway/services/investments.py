"""Investment positions and their transactions"""

from decimal import Decimal
from typing import Any, List, Mapping, Optional

from finance_gateway.domain.investments import apply_investment_transaction, portfolio_summary, total_dividends
from finance_gateway.domain.models import Investment, InvestmentTransaction, PortfolioSummary, from_row, to_decimal
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection


class InvestmentService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.investments = EntityCollection(repos.investments, sort_key=lambda i: i.name)

    async def list(self) -> List[Investment]:
        return await self.investments.refresh(order=[("name", False)])

    async def get(self, investment_id: str) -> Investment:
        return await self.repos.investments.get(investment_id)

    async def create(self, values: Mapping[str, Any]) -> Investment:
        """Open a position and record its initial purchase"""
        investment = await self.investments.create(values)
        await self.repos.investment_transactions.create(
            {
                "investment_id": investment.id,
                "type": "buy",
                "quantity": investment.quantity,
                "price": investment.purchase_price,
                "total": investment.quantity * investment.purchase_price,
                "date": investment.purchase_date,
            }
        )
        return investment

    async def update(self, investment_id: str, changes: Mapping[str, Any]) -> Investment:
        return await self.investments.update(investment_id, changes)

    async def update_current_price(self, investment_id: str, price: Decimal) -> Investment:
        return await self.investments.update(investment_id, {"current_price": to_decimal(price)})

    async def delete(self, investment_id: str) -> None:
        await self.investments.delete(investment_id)

    async def transactions(self, investment_id: Optional[str] = None) -> List[InvestmentTransaction]:
        """Transactions of one position, or of every position the user holds"""
        if investment_id:
            await self.repos.investments.get(investment_id)
            return await self.repos.investment_transactions.list(eq={"investment_id": investment_id}, order=[("date", True)])

        result: List[InvestmentTransaction] = []
        for investment in await self.list():
            result.extend(await self.repos.investment_transactions.list(eq={"investment_id": investment.id}))
        return sorted(result, key=lambda t: t.date, reverse=True)

    async def add_transaction(self, investment_id: str, values: Mapping[str, Any]) -> InvestmentTransaction:
        """
        Record a buy, sell, split, dividend or yield and update the position.

        The new position is computed before anything is written, so an
        oversell or a non-positive split ratio leaves the store untouched.

        Raises:
            InvalidOperationError: selling more than held or splitting by a non-positive ratio
        """
        investment = await self.repos.investments.get(investment_id)
        draft = from_row(InvestmentTransaction, {"id": "", **values, "investment_id": investment_id})
        quantity, price = apply_investment_transaction(investment, draft)

        created = await self.repos.investment_transactions.create({**values, "investment_id": investment_id})
        if (quantity, price) != (investment.quantity, investment.purchase_price):
            await self.investments.update(investment_id, {"quantity": quantity, "purchase_price": price})
        return created

    async def summary(self) -> PortfolioSummary:
        return portfolio_summary(await self.list())

    async def dividends(self, investment_id: Optional[str] = None) -> Decimal:
        return total_dividends(await self.transactions(investment_id), investment_id)
