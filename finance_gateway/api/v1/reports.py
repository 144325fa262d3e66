"""Monthly and yearly reports, expense analysis and financial health"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_report_service, get_today
from finance_gateway.domain.models import ExpenseAnalysis, FinancialHealth, MonthlyReport, YearlyReport
from finance_gateway.services.reports import ReportService

router = APIRouter()


@router.get("/reports/monthly/{year}/{month}", response_model=MonthlyReport)
async def get_monthly_report(year: int, month: int, service: ReportService = Depends(get_report_service)):
    return await service.monthly(year, month)


@router.get("/reports/yearly/{year}", response_model=YearlyReport)
async def get_yearly_report(year: int, service: ReportService = Depends(get_report_service)):
    return await service.yearly(year)


@router.get("/reports/expense-analysis", response_model=ExpenseAnalysis)
async def get_expense_analysis(
    months: int = Query(3, ge=1, le=24),
    today: date = Depends(get_today),
    service: ReportService = Depends(get_report_service),
):
    return await service.expense_analysis(today, months)


@router.get("/reports/financial-health", response_model=FinancialHealth)
async def get_financial_health(
    months: int = Query(3, ge=1, le=24),
    today: date = Depends(get_today),
    service: ReportService = Depends(get_report_service),
):
    """Health score from 0 to 1000 with recommendations"""
    return await service.financial_health(today, months)
