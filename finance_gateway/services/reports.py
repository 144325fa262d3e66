"""Reports over the user's transactions, accounts and debts"""

from datetime import date
from typing import Dict

from finance_gateway.domain.models import Category, ExpenseAnalysis, FinancialHealth, MonthlyReport, YearlyReport
from finance_gateway.domain.reports import assess_financial_health, expense_analysis, monthly_report, yearly_report
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.utils.date_utils import add_months, month_bounds


class ReportService:
    def __init__(self, repos: Repositories):
        self.repos = repos

    async def _categories(self) -> Dict[str, Category]:
        return {c.id: c for c in await self.repos.categories.list()}

    async def _transactions(self, start: date, end: date):
        return await self.repos.transactions.list(gte={"date": start}, lte={"date": end}, order=[("date", False)])

    async def monthly(self, year: int, month: int) -> MonthlyReport:
        start, end = month_bounds(year, month)
        return monthly_report(await self._transactions(start, end), await self._categories(), year, month)

    async def yearly(self, year: int) -> YearlyReport:
        transactions = await self._transactions(date(year, 1, 1), date(year, 12, 31))
        return yearly_report(transactions, await self._categories(), year)

    async def expense_analysis(self, today: date, months: int = 3) -> ExpenseAnalysis:
        start = add_months(today, -months)
        return expense_analysis(await self._transactions(start, today), start, today, months)

    async def financial_health(self, today: date, months: int = 3) -> FinancialHealth:
        start = add_months(today, -months)
        accounts = await self.repos.accounts.list(eq={"is_archived": False})
        debts = await self.repos.debts.list(eq={"is_active": True})
        return assess_financial_health(await self._transactions(start, today), accounts, debts, months)
