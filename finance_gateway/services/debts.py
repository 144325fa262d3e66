"""Debts, their payments and payoff planning"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from finance_gateway.domain.amortization import (
    HUNDRED,
    apply_payment,
    avalanche,
    debt_schedule,
    debt_summary,
    extra_payment_savings,
    price_installment,
    snowball,
    upcoming_debts,
)
from finance_gateway.domain.exceptions import DomainException, InvalidOperationError
from finance_gateway.domain.models import (
    AmortizationRow,
    Debt,
    DebtPayment,
    DebtSummary,
    ExtraPaymentSavings,
    ZERO,
    money,
    to_decimal,
)
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.infrastructure.observability.logging import log_debt_payment
from finance_gateway.services.collection import EntityCollection

logger = logging.getLogger(__name__)


class DebtService:
    def __init__(self, repos: Repositories, default_term: int = 12):
        self.repos = repos
        self.default_term = default_term
        self.debts = EntityCollection(repos.debts)

    async def list(self, active_only: bool = False) -> List[Debt]:
        eq = {"is_active": True} if active_only else None
        return await self.debts.refresh(eq=eq, order=[("created_at", True)])

    async def get(self, debt_id: str) -> Debt:
        return await self.repos.debts.get(debt_id)

    async def create(self, values: Mapping[str, Any]) -> Debt:
        """
        Register a debt.

        When no monthly payment is given it is derived from the Price table
        over ``total_installments`` (or the default term).
        """
        values = dict(values)
        if values.get("current_balance") is None:
            values["current_balance"] = values.get("original_amount")
        if not values.get("monthly_payment"):
            values["monthly_payment"] = price_installment(
                to_decimal(values["current_balance"]),
                to_decimal(values.get("interest_rate")) / HUNDRED,
                values.get("total_installments") or self.default_term,
            )
        return await self.debts.create(values)

    async def update(self, debt_id: str, changes: Mapping[str, Any]) -> Debt:
        return await self.debts.update(debt_id, changes)

    async def delete(self, debt_id: str) -> None:
        await self.debts.delete(debt_id)

    async def payments(self, debt_id: str) -> List[DebtPayment]:
        await self.repos.debts.get(debt_id)
        return await self.repos.debt_payments.list(eq={"debt_id": debt_id}, order=[("date", True)])

    async def add_payment(
        self,
        debt_id: str,
        amount: Decimal,
        paid_on: date,
        principal: Optional[Decimal] = None,
        interest: Optional[Decimal] = None,
        installment_number: Optional[int] = None,
        is_extra: bool = False,
        notes: Optional[str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        create_transaction: bool = False,
    ) -> DebtPayment:
        """
        Record a payment and amortize the debt.

        Without an explicit split, interest is the current balance times the
        monthly rate and the rest of the amount is principal. When
        ``create_transaction`` is set a linked expense is recorded on
        ``account_id``; failing to create it does not undo the payment.

        Raises:
            InvalidOperationError: amount is not positive or the debt is already paid off
        """
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidOperationError("Payment amount must be positive")
        debt = await self.repos.debts.get(debt_id)
        if not debt.is_active:
            raise InvalidOperationError(f"Debt {debt.name} is already paid off")

        if principal is None:
            interest = ZERO if is_extra else money(debt.current_balance * debt.interest_rate / HUNDRED)
            principal = max(ZERO, amount - interest)
        principal = to_decimal(principal)
        interest = to_decimal(interest)
        if installment_number is None and not is_extra:
            installment_number = debt.paid_installments + 1

        payment = await self.repos.debt_payments.create(
            {
                "debt_id": debt_id,
                "amount": amount,
                "principal": principal,
                "interest": interest,
                "date": paid_on,
                "installment_number": installment_number,
                "is_extra": is_extra,
                "notes": notes,
            }
        )

        effect = apply_payment(debt, principal, is_extra)
        await self.debts.update(
            debt_id,
            {
                "current_balance": effect.current_balance,
                "paid_installments": effect.paid_installments,
                "is_active": effect.is_active,
            },
        )
        log_debt_payment(self.repos.user_id, debt_id, str(amount), str(effect.current_balance), is_extra)

        if create_transaction and account_id:
            suffix = " (Extra)" if is_extra else ""
            number = f" - Installment {installment_number}" if installment_number else ""
            try:
                await self.repos.transactions.create(
                    {
                        "account_id": account_id,
                        "category_id": category_id,
                        "type": "expense",
                        "amount": amount,
                        "description": f"Payment: {debt.name}{suffix}{number}",
                        "date": paid_on,
                        "notes": f"Debt: {debt.name} | Principal: {principal:.2f} | Interest: {interest:.2f}",
                    }
                )
            except DomainException as e:
                logger.warning(
                    "Linked transaction was not created",
                    extra={"debt_id": debt_id, "payment_id": payment.id, "error": str(e)},
                )

        return payment

    async def schedule(self, debt_id: str) -> List[AmortizationRow]:
        return debt_schedule(await self.repos.debts.get(debt_id), self.default_term)

    async def snowball(self) -> List[Debt]:
        return snowball(await self.list(active_only=True))

    async def avalanche(self) -> List[Debt]:
        return avalanche(await self.list(active_only=True))

    async def summary(self, today: date) -> DebtSummary:
        return debt_summary(await self.list(), today)

    async def extra_payment_savings(self, debt_id: str, extra_amount: Decimal) -> ExtraPaymentSavings:
        return extra_payment_savings(await self.repos.debts.get(debt_id), extra_amount, self.default_term)

    async def upcoming(self, today: date, days_ahead: int = 7) -> List[Debt]:
        return upcoming_debts(await self.list(active_only=True), today, days_ahead)
