"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from finance_gateway.config import settings
from finance_gateway.domain.exceptions import NotAuthenticatedError
from finance_gateway.infrastructure.clients.rest import RestRowStore
from finance_gateway.infrastructure.clients.vision import VisionClient
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.infrastructure.database.session import get_db
from finance_gateway.infrastructure.database.sql_store import SqlRowStore
from finance_gateway.infrastructure.store import RowStore
from finance_gateway.services.accounts import AccountService
from finance_gateway.services.budgets import BudgetService
from finance_gateway.services.credit_cards import CreditCardService
from finance_gateway.services.debts import DebtService
from finance_gateway.services.extraction import ExtractionService
from finance_gateway.services.goals import BillService, GoalService
from finance_gateway.services.investments import InvestmentService
from finance_gateway.services.notifications import NotificationService
from finance_gateway.services.recurring import RecurringService
from finance_gateway.services.reports import ReportService
from finance_gateway.services.statements import StatementService
from finance_gateway.services.transactions import CategoryService, TagService, TransactionService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Owning user of the request, taken from the X-User-ID header"""
    if not x_user_id:
        raise NotAuthenticatedError("X-User-ID header is required")
    return x_user_id


def get_today() -> date:
    return date.today()


def get_store(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None),
) -> RowStore:
    """Hosted backend when one is configured, local SQL store otherwise"""
    if settings.uses_hosted_backend:
        token = None
        if authorization and authorization.lower().startswith("bearer "):
            token = authorization[7:]
        return RestRowStore(access_token=token)
    return SqlRowStore(db)


def get_repos(user_id: str = Depends(get_user_id), store: RowStore = Depends(get_store)) -> Repositories:
    return Repositories(store, user_id)


def get_vision_client() -> VisionClient:
    """Provide vision API client instance"""
    return VisionClient()


def get_account_service(repos: Repositories = Depends(get_repos)) -> AccountService:
    return AccountService(repos)


def get_transaction_service(repos: Repositories = Depends(get_repos)) -> TransactionService:
    return TransactionService(repos)


def get_category_service(repos: Repositories = Depends(get_repos)) -> CategoryService:
    return CategoryService(repos)


def get_tag_service(repos: Repositories = Depends(get_repos)) -> TagService:
    return TagService(repos)


def get_goal_service(repos: Repositories = Depends(get_repos)) -> GoalService:
    return GoalService(repos)


def get_bill_service(repos: Repositories = Depends(get_repos)) -> BillService:
    return BillService(repos)


def get_budget_service(repos: Repositories = Depends(get_repos)) -> BudgetService:
    return BudgetService(repos, settings.budget_warning_percent)


def get_debt_service(repos: Repositories = Depends(get_repos)) -> DebtService:
    return DebtService(repos, settings.default_debt_term_months)


def get_investment_service(repos: Repositories = Depends(get_repos)) -> InvestmentService:
    return InvestmentService(repos)


def get_recurring_service(repos: Repositories = Depends(get_repos)) -> RecurringService:
    return RecurringService(repos)


def get_credit_card_service(repos: Repositories = Depends(get_repos)) -> CreditCardService:
    return CreditCardService(repos, settings.default_closing_day, settings.default_due_day)


def get_notification_service(repos: Repositories = Depends(get_repos)) -> NotificationService:
    return NotificationService(repos, settings.bill_reminder_days_before, settings.budget_warning_percent)


def get_report_service(repos: Repositories = Depends(get_repos)) -> ReportService:
    return ReportService(repos)


def get_statement_service(repos: Repositories = Depends(get_repos)) -> StatementService:
    return StatementService(repos)


def get_extraction_service(
    repos: Repositories = Depends(get_repos),
    client: VisionClient = Depends(get_vision_client),
) -> ExtractionService:
    return ExtractionService(repos, client)
