"""Monthly category budgets"""

from typing import List

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_budget_service
from finance_gateway.api.v1.schemas import AmountRequest, BudgetCreate, PeriodRequest
from finance_gateway.domain.models import BudgetProgress, BudgetSuggestion, BudgetSummary, MonthlyBudget
from finance_gateway.services.budgets import BudgetService

router = APIRouter()


@router.get("/budgets/{year}/{month}", response_model=List[MonthlyBudget])
async def list_budgets(year: int, month: int, service: BudgetService = Depends(get_budget_service)):
    return await service.list(year, month)


@router.get("/budgets/{year}/{month}/progress", response_model=List[BudgetProgress])
async def get_budget_progress(year: int, month: int, service: BudgetService = Depends(get_budget_service)):
    """Spent, remaining and status of each budget in the month"""
    return await service.progress(year, month)


@router.get("/budgets/{year}/{month}/summary", response_model=BudgetSummary)
async def get_budget_summary(year: int, month: int, service: BudgetService = Depends(get_budget_service)):
    return await service.summary(year, month)


@router.get("/budgets/{year}/{month}/suggestions", response_model=List[BudgetSuggestion])
async def get_budget_suggestions(
    year: int,
    month: int,
    months: int = Query(3, ge=1, le=12),
    service: BudgetService = Depends(get_budget_service),
):
    return await service.suggestions(year, month, months)


@router.post("/budgets", response_model=MonthlyBudget, status_code=201)
async def create_budget(body: BudgetCreate, service: BudgetService = Depends(get_budget_service)):
    """Create the category's budget for the month, or replace its amount"""
    return await service.create(body.category_id, body.amount, body.year, body.month)


@router.post("/budgets/copy", response_model=List[MonthlyBudget], status_code=201)
async def copy_budgets(body: PeriodRequest, service: BudgetService = Depends(get_budget_service)):
    return await service.copy_from_previous_month(body.year, body.month)


@router.patch("/budgets/{budget_id}", response_model=MonthlyBudget)
async def update_budget(budget_id: str, body: AmountRequest, service: BudgetService = Depends(get_budget_service)):
    return await service.update(budget_id, body.amount)


@router.delete("/budgets/{budget_id}", status_code=204)
async def delete_budget(budget_id: str, service: BudgetService = Depends(get_budget_service)):
    await service.delete(budget_id)
