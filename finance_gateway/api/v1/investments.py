"""Investment positions and their transactions"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_investment_service
from finance_gateway.api.v1.schemas import (
    AmountResponse,
    InvestmentCreate,
    InvestmentTransactionCreate,
    InvestmentUpdate,
    PriceUpdate,
    changes,
)
from finance_gateway.domain.models import Investment, InvestmentTransaction, PortfolioSummary
from finance_gateway.services.investments import InvestmentService

router = APIRouter()


@router.get("/investments", response_model=List[Investment])
async def list_investments(service: InvestmentService = Depends(get_investment_service)):
    return await service.list()


@router.get("/investments/summary", response_model=PortfolioSummary)
async def get_portfolio_summary(service: InvestmentService = Depends(get_investment_service)):
    return await service.summary()


@router.get("/investments/dividends", response_model=AmountResponse)
async def get_dividends(
    investment_id: Optional[str] = Query(None),
    service: InvestmentService = Depends(get_investment_service),
):
    return AmountResponse(amount=await service.dividends(investment_id))


@router.get("/investments/transactions", response_model=List[InvestmentTransaction])
async def list_all_investment_transactions(service: InvestmentService = Depends(get_investment_service)):
    return await service.transactions()


@router.get("/investments/{investment_id}", response_model=Investment)
async def get_investment(investment_id: str, service: InvestmentService = Depends(get_investment_service)):
    return await service.get(investment_id)


@router.post("/investments", response_model=Investment, status_code=201)
async def create_investment(body: InvestmentCreate, service: InvestmentService = Depends(get_investment_service)):
    """Open a position; the current price starts at the purchase price unless given"""
    values = body.model_dump()
    if values["current_price"] is None:
        values["current_price"] = body.purchase_price
    return await service.create(values)


@router.patch("/investments/{investment_id}", response_model=Investment)
async def update_investment(
    investment_id: str,
    body: InvestmentUpdate,
    service: InvestmentService = Depends(get_investment_service),
):
    return await service.update(investment_id, changes(body))


@router.put("/investments/{investment_id}/price", response_model=Investment)
async def update_investment_price(
    investment_id: str,
    body: PriceUpdate,
    service: InvestmentService = Depends(get_investment_service),
):
    return await service.update_current_price(investment_id, body.current_price)


@router.delete("/investments/{investment_id}", status_code=204)
async def delete_investment(investment_id: str, service: InvestmentService = Depends(get_investment_service)):
    await service.delete(investment_id)


@router.get("/investments/{investment_id}/transactions", response_model=List[InvestmentTransaction])
async def list_investment_transactions(
    investment_id: str,
    service: InvestmentService = Depends(get_investment_service),
):
    return await service.transactions(investment_id)


@router.post("/investments/{investment_id}/transactions", response_model=InvestmentTransaction, status_code=201)
async def add_investment_transaction(
    investment_id: str,
    body: InvestmentTransactionCreate,
    service: InvestmentService = Depends(get_investment_service),
):
    values = body.model_dump()
    if values["total"] is None:
        values["total"] = body.quantity * body.price
    return await service.add_transaction(investment_id, values)
