"""Credit cards - statements and installment purchases"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from finance_gateway.api.dependencies import get_credit_card_service, get_today
from finance_gateway.api.v1.schemas import AmountRequest, AmountResponse, CardBillRequest, InstallmentCreate
from finance_gateway.domain.models import Account, BillPeriod, CardSummary, CreditCardBill, Installment, Transaction
from finance_gateway.services.credit_cards import CreditCardService

router = APIRouter()


class InstallmentPurchaseResponse(BaseModel):
    installment: Installment
    transactions: List[Transaction]


@router.get("/credit-cards", response_model=List[Account])
async def list_cards(service: CreditCardService = Depends(get_credit_card_service)):
    return await service.cards()


@router.get("/credit-cards/summary", response_model=CardSummary)
async def get_card_summary(
    today: date = Depends(get_today),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """Limit, usage and current statement of every card"""
    return await service.summary(today)


@router.get("/credit-cards/bills", response_model=List[CreditCardBill])
async def list_card_bills(
    account_id: Optional[str] = Query(None),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return await service.list_bills(account_id)


@router.get("/credit-cards/bills/open", response_model=List[CreditCardBill])
async def list_open_bills(today: date = Depends(get_today), service: CreditCardService = Depends(get_credit_card_service)):
    return await service.open_bills(today)


@router.get("/credit-cards/bills/overdue", response_model=List[CreditCardBill])
async def list_overdue_bills(
    today: date = Depends(get_today),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return await service.overdue_bills(today)


@router.post("/credit-cards/bills/{bill_id}/payments", response_model=CreditCardBill)
async def pay_card_bill(bill_id: str, body: AmountRequest, service: CreditCardService = Depends(get_credit_card_service)):
    return await service.pay_bill(bill_id, body.amount)


@router.get("/credit-cards/installments", response_model=List[Installment])
async def list_installments(
    account_id: Optional[str] = Query(None),
    active_only: bool = Query(False),
    service: CreditCardService = Depends(get_credit_card_service),
):
    if active_only:
        return await service.active_installments()
    return await service.list_installments(account_id)


@router.get("/credit-cards/installments/future-total", response_model=AmountResponse)
async def get_future_installments_total(service: CreditCardService = Depends(get_credit_card_service)):
    return AmountResponse(amount=await service.future_installments_total())


@router.post("/credit-cards/installments", response_model=InstallmentPurchaseResponse, status_code=201)
async def create_installment_purchase(
    body: InstallmentCreate,
    service: CreditCardService = Depends(get_credit_card_service),
):
    """Split a card purchase into monthly installments, one expense per installment"""
    installment, transactions = await service.create_installment(
        body.account_id,
        body.description,
        body.total_amount,
        body.total_installments,
        body.start_date,
        body.category_id,
    )
    return InstallmentPurchaseResponse(installment=installment, transactions=transactions)


@router.get("/credit-cards/{account_id}", response_model=Account)
async def get_card(account_id: str, service: CreditCardService = Depends(get_credit_card_service)):
    return await service.card(account_id)


@router.get("/credit-cards/{account_id}/period", response_model=BillPeriod)
async def get_bill_period(
    account_id: str,
    purchase_date: date = Query(...),
    service: CreditCardService = Depends(get_credit_card_service),
):
    """Statement a purchase made on ``purchase_date`` falls into"""
    return await service.bill_period(account_id, purchase_date)


@router.get("/credit-cards/{account_id}/current-bill", response_model=Optional[CreditCardBill])
async def get_current_bill(
    account_id: str,
    today: date = Depends(get_today),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return await service.current_bill(account_id, today)


@router.get("/credit-cards/{account_id}/spending", response_model=AmountResponse)
async def get_bill_spending(
    account_id: str,
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=2000, le=2100),
    service: CreditCardService = Depends(get_credit_card_service),
):
    return AmountResponse(amount=await service.bill_spending(account_id, month, year))


@router.post("/credit-cards/{account_id}/bills", response_model=CreditCardBill)
async def get_or_create_card_bill(
    account_id: str,
    body: CardBillRequest,
    service: CreditCardService = Depends(get_credit_card_service),
):
    return await service.get_or_create_bill(account_id, body.month, body.year)
