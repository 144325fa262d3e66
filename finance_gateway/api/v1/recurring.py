"""Recurring transactions and the batch that materializes them"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List

from fastapi import APIRouter, Depends, Query

from finance_gateway.config import settings
from finance_gateway.api.dependencies import get_recurring_service, get_today
from finance_gateway.api.v1.schemas import ProcessResponse, RecurringCreate, RecurringUpdate, changes
from finance_gateway.domain.models import RecurringTransaction
from finance_gateway.services.recurring import RecurringService

router = APIRouter()


def get_now() -> datetime:
    return datetime.now()


@router.get("/recurring", response_model=List[RecurringTransaction])
async def list_recurring(service: RecurringService = Depends(get_recurring_service)):
    return await service.list()


@router.get("/recurring/due", response_model=List[RecurringTransaction])
async def list_due_today(today: date = Depends(get_today), service: RecurringService = Depends(get_recurring_service)):
    return await service.due_today(today)


@router.get("/recurring/upcoming", response_model=List[RecurringTransaction])
async def list_upcoming_recurring(
    days: int = Query(settings.upcoming_window_days, ge=0, le=90),
    today: date = Depends(get_today),
    service: RecurringService = Depends(get_recurring_service),
):
    return await service.upcoming(today, days)


@router.get("/recurring/monthly-totals", response_model=Dict[str, Decimal])
async def get_monthly_totals(service: RecurringService = Depends(get_recurring_service)):
    """Income and expense totals of the active monthly entries"""
    return await service.monthly_totals()


@router.post("/recurring", response_model=RecurringTransaction, status_code=201)
async def create_recurring(body: RecurringCreate, service: RecurringService = Depends(get_recurring_service)):
    return await service.create({**body.model_dump(), "is_active": True})


@router.post("/recurring/process", response_model=ProcessResponse)
async def process_recurring(
    now: datetime = Depends(get_now),
    service: RecurringService = Depends(get_recurring_service),
):
    """Materialize one transaction for every active entry whose next date has passed"""
    result = await service.process(now)
    return ProcessResponse(processed=result.processed, skipped=result.skipped, failed=result.failed, errors=result.errors)


@router.patch("/recurring/{entry_id}", response_model=RecurringTransaction)
async def update_recurring(
    entry_id: str,
    body: RecurringUpdate,
    service: RecurringService = Depends(get_recurring_service),
):
    return await service.update(entry_id, changes(body))


@router.post("/recurring/{entry_id}/toggle", response_model=RecurringTransaction)
async def toggle_recurring(entry_id: str, service: RecurringService = Depends(get_recurring_service)):
    return await service.toggle(entry_id)


@router.delete("/recurring/{entry_id}", status_code=204)
async def delete_recurring(entry_id: str, service: RecurringService = Depends(get_recurring_service)):
    await service.delete(entry_id)
