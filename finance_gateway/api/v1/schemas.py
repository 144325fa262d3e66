"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

AccountType = Literal["checking", "savings", "credit_card", "cash", "investment", "wallet"]
EntryType = Literal["income", "expense"]
FrequencyName = Literal["daily", "weekly", "biweekly", "monthly", "yearly"]


def changes(body: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent in a partial update"""
    return body.model_dump(exclude_unset=True)


# Accounts


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: AccountType
    balance: Decimal = Decimal("0")
    color: str = "#6366F1"
    icon: str = "bank"
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    closing_day: Optional[int] = Field(default=None, ge=1, le=31)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    institution: Optional[str] = None
    account_number: Optional[str] = None


class AccountUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    balance: Optional[Decimal] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    closing_day: Optional[int] = Field(default=None, ge=1, le=31)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    institution: Optional[str] = None
    account_number: Optional[str] = None
    is_archived: Optional[bool] = None


class TotalBalanceResponse(BaseModel):
    total_balance: Decimal


# Transactions, categories, tags


class TransactionCreate(BaseModel):
    account_id: str
    type: Literal["income", "expense", "transfer"]
    amount: Decimal = Field(..., gt=0)
    date: dt.date
    category_id: Optional[str] = None
    description: str = ""
    to_account_id: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    receipt_url: Optional[str] = None
    location: Optional[str] = None
    is_pending: bool = False


class TransactionUpdate(BaseModel):
    account_id: Optional[str] = None
    type: Optional[Literal["income", "expense", "transfer"]] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    date: Optional[dt.date] = None
    category_id: Optional[str] = None
    description: Optional[str] = None
    to_account_id: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    is_pending: Optional[bool] = None


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: EntryType
    icon: str = "package-variant"
    color: str = "#6366F1"
    parent_id: Optional[str] = None


class SubcategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    icon: str = "package-variant"
    color: str = "#6366F1"


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    icon: Optional[str] = None
    color: Optional[str] = None
    is_archived: Optional[bool] = None


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1)
    color: str = "#6366F1"


class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    color: Optional[str] = None


# Goals and bills


class GoalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    target_amount: Decimal = Field(..., gt=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    deadline: Optional[dt.date] = None
    category_id: Optional[str] = None
    color: str = "#6366F1"
    icon: Optional[str] = None
    description: Optional[str] = None
    priority: Literal["low", "medium", "high"] = "medium"
    monthly_contribution: Optional[Decimal] = None
    linked_account_id: Optional[str] = None


class GoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    target_amount: Optional[Decimal] = Field(default=None, gt=0)
    deadline: Optional[dt.date] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Literal["low", "medium", "high"]] = None
    monthly_contribution: Optional[Decimal] = None


class AmountRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)


class BillCreate(BaseModel):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    due_date: dt.date
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    is_recurring: bool = False
    reminder_days_before: int = Field(default=3, ge=0)
    frequency: Optional[FrequencyName] = None
    notes: Optional[str] = None
    barcode: Optional[str] = None


class BillUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, gt=0)
    due_date: Optional[dt.date] = None
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    is_recurring: Optional[bool] = None
    reminder_days_before: Optional[int] = Field(default=None, ge=0)
    frequency: Optional[FrequencyName] = None
    notes: Optional[str] = None
    barcode: Optional[str] = None


class BillPaymentRequest(BaseModel):
    paid_date: Optional[dt.date] = None


# Budgets


class BudgetCreate(BaseModel):
    category_id: str
    amount: Decimal = Field(..., gt=0)
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)


class PeriodRequest(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)


# Debts


class DebtCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["loan", "financing", "credit_card", "overdraft", "personal", "other"]
    creditor: str = Field(..., min_length=1)
    original_amount: Decimal = Field(..., gt=0)
    current_balance: Optional[Decimal] = Field(default=None, ge=0)
    interest_rate: Decimal = Field(..., ge=0, description="Monthly interest rate in percent")
    monthly_payment: Optional[Decimal] = Field(default=None, gt=0)
    start_date: dt.date
    end_date: Optional[dt.date] = None
    total_installments: Optional[int] = Field(default=None, gt=0)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    notes: Optional[str] = None


class DebtUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    creditor: Optional[str] = None
    interest_rate: Optional[Decimal] = Field(default=None, ge=0)
    monthly_payment: Optional[Decimal] = Field(default=None, gt=0)
    end_date: Optional[dt.date] = None
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class DebtPaymentCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    date: dt.date
    principal: Optional[Decimal] = Field(default=None, ge=0)
    interest: Optional[Decimal] = Field(default=None, ge=0)
    installment_number: Optional[int] = None
    is_extra: bool = False
    notes: Optional[str] = None
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    create_transaction: bool = False


# Investments


class InvestmentCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Literal["stocks", "fixed_income", "funds", "crypto", "real_estate", "savings", "other"]
    quantity: Decimal = Field(..., gt=0)
    purchase_price: Decimal = Field(..., ge=0)
    current_price: Optional[Decimal] = Field(default=None, ge=0)
    purchase_date: dt.date
    account_id: Optional[str] = None
    ticker: Optional[str] = None
    institution: Optional[str] = None
    notes: Optional[str] = None


class InvestmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    ticker: Optional[str] = None
    institution: Optional[str] = None
    notes: Optional[str] = None
    account_id: Optional[str] = None


class PriceUpdate(BaseModel):
    current_price: Decimal = Field(..., ge=0)


class InvestmentTransactionCreate(BaseModel):
    type: Literal["buy", "sell", "dividend", "yield", "split"]
    quantity: Decimal = Field(default=Decimal("0"), ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    total: Optional[Decimal] = None
    date: dt.date
    fees: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


# Recurring transactions


class RecurringCreate(BaseModel):
    account_id: str
    type: EntryType
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1)
    frequency: FrequencyName
    start_date: dt.date
    category_id: Optional[str] = None
    end_date: Optional[dt.date] = None
    auto_create: bool = True


class RecurringUpdate(BaseModel):
    account_id: Optional[str] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    description: Optional[str] = None
    frequency: Optional[FrequencyName] = None
    next_date: Optional[dt.date] = None
    category_id: Optional[str] = None
    end_date: Optional[dt.date] = None
    auto_create: Optional[bool] = None


class ProcessResponse(BaseModel):
    processed: int
    skipped: int
    failed: int
    errors: List[str]


# Credit cards


class CardBillRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)


class InstallmentCreate(BaseModel):
    account_id: str
    description: str = Field(..., min_length=1)
    total_amount: Decimal = Field(..., gt=0)
    total_installments: int = Field(..., gt=0)
    start_date: dt.date
    category_id: Optional[str] = None


# Notifications


class NotificationCreate(BaseModel):
    type: Literal[
        "bill_due", "budget_alert", "goal_progress", "unusual_expense", "recurring", "insight", "goal_reached", "system"
    ]
    title: str = Field(..., min_length=1)
    message: str
    data: Optional[Dict[str, Any]] = None
    action_route: Optional[str] = None
    action_params: Optional[Dict[str, Any]] = None


class CountResponse(BaseModel):
    count: int


# Statements


class ImportSummaryResponse(BaseModel):
    imported: int
    failed: int
    duplicates: int


class AmountResponse(BaseModel):
    amount: Decimal
