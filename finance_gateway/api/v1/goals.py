"""Savings goals and payable bills"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from finance_gateway.config import settings
from finance_gateway.api.dependencies import get_bill_service, get_goal_service, get_today
from finance_gateway.api.v1.schemas import (
    AmountRequest,
    BillCreate,
    BillPaymentRequest,
    BillUpdate,
    GoalCreate,
    GoalUpdate,
    AmountResponse,
    changes,
)
from finance_gateway.domain.models import Bill, Goal
from finance_gateway.services.goals import BillService, GoalService

router = APIRouter()


@router.get("/goals", response_model=List[Goal])
async def list_goals(service: GoalService = Depends(get_goal_service)):
    return await service.list()


@router.get("/goals/active", response_model=List[Goal])
async def list_active_goals(service: GoalService = Depends(get_goal_service)):
    return await service.active()


@router.get("/goals/completed", response_model=List[Goal])
async def list_completed_goals(service: GoalService = Depends(get_goal_service)):
    return await service.completed()


@router.post("/goals", response_model=Goal, status_code=201)
async def create_goal(body: GoalCreate, service: GoalService = Depends(get_goal_service)):
    return await service.create(body.model_dump())


@router.patch("/goals/{goal_id}", response_model=Goal)
async def update_goal(goal_id: str, body: GoalUpdate, service: GoalService = Depends(get_goal_service)):
    return await service.update(goal_id, changes(body))


@router.post("/goals/{goal_id}/contributions", response_model=Goal)
async def add_to_goal(goal_id: str, body: AmountRequest, service: GoalService = Depends(get_goal_service)):
    return await service.add_to_goal(goal_id, body.amount)


@router.delete("/goals/{goal_id}", status_code=204)
async def delete_goal(goal_id: str, service: GoalService = Depends(get_goal_service)):
    await service.delete(goal_id)


@router.get("/bills", response_model=List[Bill])
async def list_bills(service: BillService = Depends(get_bill_service)):
    return await service.list()


@router.get("/bills/upcoming", response_model=List[Bill])
async def list_upcoming_bills(
    days: int = Query(settings.upcoming_window_days, ge=0, le=90),
    today: date = Depends(get_today),
    service: BillService = Depends(get_bill_service),
):
    return await service.upcoming(today, days)


@router.get("/bills/overdue", response_model=List[Bill])
async def list_overdue_bills(today: date = Depends(get_today), service: BillService = Depends(get_bill_service)):
    return await service.overdue(today)


@router.get("/bills/pending-total", response_model=AmountResponse)
async def get_pending_total(service: BillService = Depends(get_bill_service)):
    return AmountResponse(amount=await service.total_pending())


@router.get("/bills/month/{year}/{month}", response_model=List[Bill])
async def list_month_bills(year: int, month: int, service: BillService = Depends(get_bill_service)):
    return await service.month(year, month)


@router.post("/bills", response_model=Bill, status_code=201)
async def create_bill(body: BillCreate, service: BillService = Depends(get_bill_service)):
    return await service.create({**body.model_dump(), "is_paid": False})


@router.patch("/bills/{bill_id}", response_model=Bill)
async def update_bill(bill_id: str, body: BillUpdate, service: BillService = Depends(get_bill_service)):
    return await service.update(bill_id, changes(body))


@router.post("/bills/{bill_id}/pay", response_model=Bill)
async def pay_bill(
    bill_id: str,
    body: BillPaymentRequest,
    today: date = Depends(get_today),
    service: BillService = Depends(get_bill_service),
):
    return await service.mark_paid(bill_id, body.paid_date or today)


@router.post("/bills/{bill_id}/unpay", response_model=Bill)
async def unpay_bill(bill_id: str, service: BillService = Depends(get_bill_service)):
    return await service.mark_unpaid(bill_id)


@router.delete("/bills/{bill_id}", status_code=204)
async def delete_bill(bill_id: str, service: BillService = Depends(get_bill_service)):
    await service.delete(bill_id)
