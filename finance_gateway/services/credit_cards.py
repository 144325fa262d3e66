"""Credit cards: statements, installment purchases and limit usage"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from finance_gateway.domain import billing
from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.installments import (
    active_installments,
    future_installments_total,
    installment_description,
    split_purchase,
)
from finance_gateway.domain.models import (
    Account,
    BillPeriod,
    CardSummary,
    CreditCardBill,
    Installment,
    Transaction,
    ZERO,
    money,
    to_decimal,
)
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.collection import EntityCollection


class CreditCardService:
    def __init__(self, repos: Repositories, default_closing_day: int = 1, default_due_day: int = 10):
        self.repos = repos
        self.default_closing_day = default_closing_day
        self.default_due_day = default_due_day
        self.bills = EntityCollection(repos.card_bills)
        self.installments = EntityCollection(repos.installments)

    async def cards(self) -> List[Account]:
        return await self.repos.accounts.list(
            eq={"type": "credit_card", "is_archived": False}, order=[("name", False)]
        )

    async def card(self, account_id: str) -> Account:
        account = await self.repos.accounts.get(account_id)
        if account.type != "credit_card":
            raise InvalidOperationError(f"Account {account.name} is not a credit card")
        return account

    def _closing_day(self, card: Account) -> int:
        return card.closing_day or self.default_closing_day

    def _due_day(self, card: Account) -> int:
        return card.due_day or self.default_due_day

    async def list_bills(self, account_id: Optional[str] = None) -> List[CreditCardBill]:
        eq = {"account_id": account_id} if account_id else None
        return await self.bills.refresh(eq=eq, order=[("year", True), ("month", True)])

    async def bill_period(self, account_id: str, purchase_date: date) -> BillPeriod:
        return billing.bill_period(purchase_date, self._closing_day(await self.card(account_id)))

    async def get_or_create_bill(self, account_id: str, month: int, year: int) -> CreditCardBill:
        """The card's statement for a month, created empty when it does not exist yet"""
        existing = await self.repos.card_bills.list(
            eq={"account_id": account_id, "month": month, "year": year}, limit=1
        )
        if existing:
            return existing[0]

        card = await self.card(account_id)
        return await self.bills.create(
            {
                "account_id": account_id,
                "month": month,
                "year": year,
                "total_amount": ZERO,
                "paid_amount": ZERO,
                "closing_date": billing.closing_date(self._closing_day(card), month, year),
                "due_date": billing.due_date(self._due_day(card), self._closing_day(card), month, year),
                "is_closed": False,
                "is_paid": False,
            }
        )

    async def pay_bill(self, bill_id: str, amount: Decimal) -> CreditCardBill:
        """Add a payment; the statement is paid once payments cover its total"""
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidOperationError("Payment amount must be positive")
        bill = await self.repos.card_bills.get(bill_id)
        paid = bill.paid_amount + amount
        return await self.bills.update(bill_id, {"paid_amount": paid, "is_paid": paid >= bill.total_amount})

    async def list_installments(self, account_id: Optional[str] = None) -> List[Installment]:
        eq = {"account_id": account_id} if account_id else None
        return await self.installments.refresh(eq=eq, order=[("created_at", True)])

    async def create_installment(
        self,
        account_id: str,
        description: str,
        total_amount: Decimal,
        total_installments: int,
        start_date: date,
        category_id: Optional[str] = None,
    ) -> Tuple[Installment, List[Transaction]]:
        """
        Record an installment purchase and one expense per installment.

        Each installment transaction is a separate insert; if one fails the
        purchase and the transactions already written stay in place.

        Raises:
            InvalidOperationError: non-positive amount or installment count
        """
        plan = split_purchase(total_amount, total_installments, start_date)
        if not plan:
            raise InvalidOperationError("Installment purchases need a positive amount and installment count")
        await self.card(account_id)

        installment = await self.installments.create(
            {
                "account_id": account_id,
                "description": description,
                "total_amount": money(total_amount),
                "installment_amount": plan[0].amount,
                "total_installments": total_installments,
                "start_date": start_date,
                "category_id": category_id,
                "paid_installments": 0,
            }
        )

        transactions = []
        for scheduled in plan:
            transactions.append(
                await self.repos.transactions.create(
                    {
                        "account_id": account_id,
                        "category_id": category_id,
                        "type": "expense",
                        "amount": scheduled.amount,
                        "description": installment_description(description, scheduled.number, total_installments),
                        "date": scheduled.due_date,
                        "installment_id": installment.id,
                        "installment_number": scheduled.number,
                        "total_installments": total_installments,
                    }
                )
            )
        return installment, transactions

    async def spending(self, account_id: str, start: date, end: date) -> Decimal:
        """Card expenses dated between start and end, inclusive"""
        expenses = await self.repos.transactions.list(
            eq={"account_id": account_id, "type": "expense"},
            gte={"date": start},
            lte={"date": end},
        )
        return sum((t.amount for t in expenses), ZERO)

    async def bill_spending(self, account_id: str, month: int, year: int) -> Decimal:
        """Card expenses inside the billing window of a month's statement"""
        card = await self.card(account_id)
        start, end = billing.billing_window(self._closing_day(card), month, year)
        return await self.spending(account_id, start, end)

    async def current_bill(self, account_id: str, today: date) -> Optional[CreditCardBill]:
        return billing.find_bill(await self.list_bills(account_id), account_id, today.month, today.year)

    async def open_bills(self, today: date) -> List[CreditCardBill]:
        return billing.open_bills(await self.list_bills(), today)

    async def overdue_bills(self, today: date) -> List[CreditCardBill]:
        return billing.overdue_bills(await self.list_bills(), today)

    async def active_installments(self) -> List[Installment]:
        return active_installments(await self.list_installments())

    async def future_installments_total(self) -> Decimal:
        return future_installments_total(await self.list_installments())

    async def summary(self, today: date) -> CardSummary:
        return billing.card_summary(
            await self.cards(),
            await self.list_bills(),
            today,
            self.default_closing_day,
            self.default_due_day,
        )
