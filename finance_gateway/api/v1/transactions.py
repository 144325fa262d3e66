"""Transactions and monthly summaries"""

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_today, get_transaction_service
from finance_gateway.api.v1.schemas import TransactionCreate, TransactionUpdate, changes
from finance_gateway.domain.models import CategorySummary, MonthSummary, SearchResult, Transaction, TransactionSearch
from finance_gateway.services.transactions import TransactionService

router = APIRouter()


@router.get("/transactions", response_model=List[Transaction])
async def list_transactions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    type: Optional[Literal["income", "expense", "transfer"]] = Query(None),
    account_id: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, gt=0, le=1000),
    service: TransactionService = Depends(get_transaction_service),
):
    """Newest first, optionally filtered by period, type, account and category"""
    return await service.list(start, end, type, account_id, category_id, limit)


@router.get("/transactions/recent", response_model=List[Transaction])
async def list_recent_transactions(
    months: int = Query(3, ge=1, le=24),
    today: date = Depends(get_today),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.recent(today, months)


@router.get("/transactions/search", response_model=SearchResult)
async def search_transactions(
    q: Optional[str] = Query(None, description="Text in description, notes or location"),
    type: Optional[Literal["income", "expense", "transfer"]] = Query(None),
    category_id: List[str] = Query([]),
    account_id: List[str] = Query([]),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    amount_min: Optional[Decimal] = Query(None, ge=0),
    amount_max: Optional[Decimal] = Query(None, ge=0),
    tag: List[str] = Query([]),
    has_receipt: Optional[bool] = Query(None),
    is_pending: Optional[bool] = Query(None),
    service: TransactionService = Depends(get_transaction_service),
):
    """Search transactions; repeat category_id, account_id or tag to match any of several"""
    return await service.search(
        TransactionSearch(
            query=q,
            type=type,
            category_ids=category_id,
            account_ids=account_id,
            date_from=date_from,
            date_to=date_to,
            amount_min=amount_min,
            amount_max=amount_max,
            tags=tag,
            has_receipt=has_receipt,
            is_pending=is_pending,
        )
    )


@router.get("/transactions/summary/{year}/{month}", response_model=MonthSummary)
async def get_month_summary(year: int, month: int, service: TransactionService = Depends(get_transaction_service)):
    return await service.month_summary(year, month)


@router.get("/transactions/summary", response_model=List[MonthSummary])
async def get_recent_months(
    count: int = Query(6, ge=1, le=24),
    today: date = Depends(get_today),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.recent_months(today, count)


@router.get("/transactions/categories/{year}/{month}", response_model=List[CategorySummary])
async def get_category_summary(
    year: int,
    month: int,
    type: Literal["income", "expense"] = Query("expense"),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.category_summary(year, month, type)


@router.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(transaction_id: str, service: TransactionService = Depends(get_transaction_service)):
    return await service.get(transaction_id)


@router.post("/transactions", response_model=Transaction, status_code=201)
async def create_transaction(body: TransactionCreate, service: TransactionService = Depends(get_transaction_service)):
    """Record a transaction and move the balances of the accounts involved"""
    return await service.create(body.model_dump())


@router.patch("/transactions/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    body: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.update(transaction_id, changes(body))


@router.delete("/transactions/{transaction_id}", status_code=204)
async def delete_transaction(transaction_id: str, service: TransactionService = Depends(get_transaction_service)):
    await service.delete(transaction_id)
