"""Debts, payments and payoff planning"""

from datetime import date
from decimal import Decimal
from typing import List, Literal

from fastapi import APIRouter, Depends, Query

from finance_gateway.config import settings
from finance_gateway.api.dependencies import get_debt_service, get_today
from finance_gateway.api.v1.schemas import DebtCreate, DebtPaymentCreate, DebtUpdate, changes
from finance_gateway.domain.models import AmortizationRow, Debt, DebtPayment, DebtSummary, ExtraPaymentSavings
from finance_gateway.services.debts import DebtService

router = APIRouter()


@router.get("/debts", response_model=List[Debt])
async def list_debts(active_only: bool = Query(False), service: DebtService = Depends(get_debt_service)):
    return await service.list(active_only)


@router.get("/debts/summary", response_model=DebtSummary)
async def get_debt_summary(today: date = Depends(get_today), service: DebtService = Depends(get_debt_service)):
    return await service.summary(today)


@router.get("/debts/strategy/{strategy}", response_model=List[Debt])
async def get_payoff_order(strategy: Literal["snowball", "avalanche"], service: DebtService = Depends(get_debt_service)):
    """
    Active debts in payoff order.

    ``snowball`` pays the smallest balance first, ``avalanche`` the highest rate first.
    """
    if strategy == "avalanche":
        return await service.avalanche()
    return await service.snowball()


@router.get("/debts/upcoming", response_model=List[Debt])
async def list_upcoming_debts(
    days: int = Query(settings.upcoming_window_days, ge=0, le=31),
    today: date = Depends(get_today),
    service: DebtService = Depends(get_debt_service),
):
    return await service.upcoming(today, days)


@router.get("/debts/{debt_id}", response_model=Debt)
async def get_debt(debt_id: str, service: DebtService = Depends(get_debt_service)):
    return await service.get(debt_id)


@router.get("/debts/{debt_id}/schedule", response_model=List[AmortizationRow])
async def get_amortization_schedule(debt_id: str, service: DebtService = Depends(get_debt_service)):
    return await service.schedule(debt_id)


@router.get("/debts/{debt_id}/extra-payment", response_model=ExtraPaymentSavings)
async def simulate_extra_payment(
    debt_id: str,
    amount: Decimal = Query(..., gt=0),
    service: DebtService = Depends(get_debt_service),
):
    return await service.extra_payment_savings(debt_id, amount)


@router.post("/debts", response_model=Debt, status_code=201)
async def create_debt(body: DebtCreate, service: DebtService = Depends(get_debt_service)):
    return await service.create({**body.model_dump(), "paid_installments": 0, "is_active": True})


@router.patch("/debts/{debt_id}", response_model=Debt)
async def update_debt(debt_id: str, body: DebtUpdate, service: DebtService = Depends(get_debt_service)):
    return await service.update(debt_id, changes(body))


@router.delete("/debts/{debt_id}", status_code=204)
async def delete_debt(debt_id: str, service: DebtService = Depends(get_debt_service)):
    await service.delete(debt_id)


@router.get("/debts/{debt_id}/payments", response_model=List[DebtPayment])
async def list_debt_payments(debt_id: str, service: DebtService = Depends(get_debt_service)):
    return await service.payments(debt_id)


@router.post("/debts/{debt_id}/payments", response_model=DebtPayment, status_code=201)
async def add_debt_payment(debt_id: str, body: DebtPaymentCreate, service: DebtService = Depends(get_debt_service)):
    """Record a payment, amortize the balance and optionally log the matching expense"""
    return await service.add_payment(
        debt_id,
        body.amount,
        body.date,
        principal=body.principal,
        interest=body.interest,
        installment_number=body.installment_number,
        is_extra=body.is_extra,
        notes=body.notes,
        account_id=body.account_id,
        category_id=body.category_id,
        create_transaction=body.create_transaction,
    )
