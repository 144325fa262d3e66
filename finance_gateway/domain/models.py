"""Domain models - pure Python dataclasses representing business entities

Every entity mirrors one backend row. ``from_row`` / ``to_row`` convert between
the loosely typed dictionaries a row store hands back (ISO date strings, numbers,
"true"/"false" strings) and these typed records.
"""

import dataclasses
import typing
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from finance_gateway.utils.date_utils import parse_date

CENT = Decimal("0.01")
ZERO = Decimal("0")

T = TypeVar("T")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return ZERO
    return Decimal(str(value))


def money(value: Any) -> Decimal:
    """Quantize to cents, rounding half up"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_bool(value: Any) -> bool:
    # Some backends hand booleans back as strings
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# Entities
# =============================================================================


@dataclass
class Account:
    """Bank account, wallet or credit card"""

    id: str
    user_id: str
    name: str
    type: str  # checking | savings | credit_card | cash | investment | wallet
    balance: Decimal = ZERO
    color: str = "#6366F1"
    icon: str = "bank"
    credit_limit: Optional[Decimal] = None
    closing_day: Optional[int] = None
    due_day: Optional[int] = None
    institution: Optional[str] = None
    account_number: Optional[str] = None
    is_archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    type: str  # income | expense
    icon: str = "package-variant"
    color: str = "#6366F1"
    parent_id: Optional[str] = None
    is_archived: bool = False
    created_at: Optional[datetime] = None


@dataclass
class Transaction:
    """Money movement on an account"""

    id: str
    user_id: str
    account_id: str
    type: str  # income | expense | transfer
    amount: Decimal
    date: date
    category_id: Optional[str] = None
    description: str = ""
    to_account_id: Optional[str] = None
    recurring_id: Optional[str] = None
    installment_id: Optional[str] = None
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    receipt_url: Optional[str] = None
    location: Optional[str] = None
    is_pending: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Tag:
    id: str
    user_id: str
    name: str
    color: str = "#6366F1"
    created_at: Optional[datetime] = None


@dataclass
class Goal:
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal = ZERO
    deadline: Optional[date] = None
    category_id: Optional[str] = None
    color: str = "#6366F1"
    icon: Optional[str] = None
    description: Optional[str] = None
    priority: str = "medium"  # low | medium | high
    is_completed: bool = False
    monthly_contribution: Optional[Decimal] = None
    linked_account_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Bill:
    """Payable bill with a due date"""

    id: str
    user_id: str
    name: str
    amount: Decimal
    due_date: date
    category_id: Optional[str] = None
    account_id: Optional[str] = None
    is_recurring: bool = False
    is_paid: bool = False
    reminder_days_before: int = 3
    frequency: Optional[str] = None
    notes: Optional[str] = None
    barcode: Optional[str] = None
    paid_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class MonthlyBudget:
    id: str
    user_id: str
    category_id: str
    amount: Decimal
    month: int
    year: int
    created_at: Optional[datetime] = None


@dataclass
class Debt:
    """Loan or financing; interest_rate is a monthly percentage"""

    id: str
    user_id: str
    name: str
    type: str  # loan | financing | credit_card | overdraft | personal | other
    creditor: str
    original_amount: Decimal
    current_balance: Decimal
    interest_rate: Decimal
    monthly_payment: Decimal
    start_date: date
    end_date: Optional[date] = None
    total_installments: Optional[int] = None
    paid_installments: int = 0
    due_day: Optional[int] = None
    is_active: bool = True
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class DebtPayment:
    id: str
    debt_id: str
    amount: Decimal
    principal: Decimal
    interest: Decimal
    date: date
    installment_number: Optional[int] = None
    is_extra: bool = False
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class Investment:
    id: str
    user_id: str
    name: str
    type: str  # stocks | fixed_income | funds | crypto | real_estate | savings | other
    quantity: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchase_date: date
    account_id: Optional[str] = None
    ticker: Optional[str] = None
    institution: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class InvestmentTransaction:
    id: str
    investment_id: str
    type: str  # buy | sell | dividend | yield | split
    quantity: Decimal
    price: Decimal
    total: Decimal
    date: date
    fees: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class RecurringTransaction:
    """Template that materializes a transaction every period"""

    id: str
    user_id: str
    account_id: str
    type: str  # income | expense
    amount: Decimal
    description: str
    frequency: str
    start_date: date
    next_date: date
    category_id: Optional[str] = None
    end_date: Optional[date] = None
    is_active: bool = True
    auto_create: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CreditCardBill:
    """Monthly statement of a credit card account"""

    id: str
    user_id: str
    account_id: str
    month: int
    year: int
    due_date: date
    closing_date: date
    total_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    is_closed: bool = False
    is_paid: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Installment:
    """Credit card purchase split into monthly installments"""

    id: str
    user_id: str
    account_id: str
    description: str
    total_amount: Decimal
    installment_amount: Decimal
    total_installments: int
    start_date: date
    category_id: Optional[str] = None
    paid_installments: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Notification:
    id: str
    user_id: str
    type: str  # bill_due | budget_alert | goal_progress | unusual_expense | recurring | insight | goal_reached | system
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool = False
    action_route: Optional[str] = None
    action_params: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None


# =============================================================================
# Calculated values
# =============================================================================


@dataclass
class BillPeriod:
    """Statement a credit card purchase falls into"""

    month: int
    year: int


@dataclass
class CardStatus:
    account: Account
    limit: Decimal
    used: Decimal
    available: Decimal
    current_bill: Decimal
    next_due_date: date


@dataclass
class CardSummary:
    total_limit: Decimal
    total_used: Decimal
    total_available: Decimal
    cards: List[CardStatus]


@dataclass
class ScheduledInstallment:
    """Single monthly slice of an installment purchase"""

    number: int
    due_date: date
    amount: Decimal


@dataclass
class AmortizationRow:
    number: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


@dataclass
class PaymentEffect:
    """Debt state after a payment is recorded"""

    current_balance: Decimal
    paid_installments: int
    is_active: bool


@dataclass
class DebtTypeTotal:
    type: str
    count: int
    total: Decimal


@dataclass
class DebtSummary:
    total_debt: Decimal
    total_paid: Decimal
    total_remaining: Decimal
    monthly_payments: Decimal
    debts_by_type: List[DebtTypeTotal]
    average_interest_rate: Decimal
    projected_payoff_date: Optional[date]


@dataclass
class ExtraPaymentSavings:
    months_saved: int
    interest_saved: Decimal


@dataclass
class BudgetProgress:
    budget: MonthlyBudget
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str  # under | warning | over
    category: Optional[Category] = None


@dataclass
class BudgetSummary:
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    overall_percentage: float
    budgets_on_track: int
    budgets_warning: int
    budgets_over: int


@dataclass
class BudgetSuggestion:
    category_id: str
    suggested_amount: Decimal
    average_spent: Decimal


@dataclass
class PositionProfit:
    invested: Decimal
    current: Decimal
    profit: Decimal
    percentage: float


@dataclass
class InvestmentTypeTotal:
    type: str
    invested: Decimal
    current_value: Decimal
    profit: Decimal
    percentage: float


@dataclass
class PortfolioSummary:
    total_invested: Decimal
    current_value: Decimal
    total_profit: Decimal
    profit_percentage: float
    by_type: List[InvestmentTypeTotal]


@dataclass
class MonthSummary:
    month: str  # YYYY-MM
    income: Decimal
    expense: Decimal
    balance: Decimal


@dataclass
class TransactionSearch:
    """Search filters; unset fields do not filter"""

    query: Optional[str] = None
    type: Optional[str] = None
    category_ids: List[str] = field(default_factory=list)
    account_ids: List[str] = field(default_factory=list)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None
    tags: List[str] = field(default_factory=list)
    has_receipt: Optional[bool] = None
    is_pending: Optional[bool] = None


@dataclass
class SearchResult:
    transactions: List[Transaction]
    total_count: int
    income_total: Decimal
    expense_total: Decimal
    net_total: Decimal


@dataclass
class CategorySummary:
    category_id: str
    total: Decimal
    percentage: float
    transactions_count: int
    category: Optional[Category] = None


@dataclass
class MonthlyReport:
    month: int
    year: int
    income: Decimal
    expense: Decimal
    balance: Decimal
    savings_rate: float
    top_expense_categories: List[CategorySummary]
    top_income_categories: List[CategorySummary]
    transaction_count: int
    average_expense: Decimal
    largest_expense: Optional[Transaction]


@dataclass
class YearlyReport:
    year: int
    total_income: Decimal
    total_expense: Decimal
    total_balance: Decimal
    average_monthly_income: Decimal
    average_monthly_expense: Decimal
    best_month: MonthSummary
    worst_month: MonthSummary
    monthly_breakdown: List[MonthSummary]
    category_breakdown: List[CategorySummary]


@dataclass
class ExpenseAnalysis:
    daily_average: Decimal
    weekly_average: Decimal
    monthly_average: Decimal
    trend: str  # increasing | decreasing | stable
    trend_percentage: float
    peak_day: Optional[date]
    peak_day_amount: Decimal
    peak_category_id: Optional[str]
    peak_category_amount: Decimal
    unusual_expenses: List[Transaction]


@dataclass
class FinancialHealth:
    """Health score from 0 (critical) to 1000 (excellent)"""

    score: int
    savings_rate: float
    expense_ratio: float
    debt_ratio: float
    emergency_fund_months: float
    recommendations: List[str] = field(default_factory=list)


@dataclass
class NotificationDraft:
    """Notification produced by a rule, not yet stored"""

    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None


@dataclass
class ImportedTransaction:
    date: date
    amount: Decimal
    description: str
    type: str  # income | expense
    memo: Optional[str] = None
    fitid: Optional[str] = None
    check_number: Optional[str] = None
    original_line: Optional[str] = None


@dataclass
class ImportResult:
    transactions: List[ImportedTransaction]
    errors: List[str]
    file_type: str  # OFX | CSV
    bank_name: Optional[str] = None
    account_number: Optional[str] = None

    @property
    def success(self) -> bool:
        return len(self.transactions) > 0

    @property
    def start_date(self) -> Optional[date]:
        return self.transactions[0].date if self.transactions else None

    @property
    def end_date(self) -> Optional[date]:
        return self.transactions[-1].date if self.transactions else None


@dataclass
class ExtractedBill:
    """Fields read from a bill or receipt image"""

    name: Optional[str]
    amount: Optional[Decimal]
    due_date: Optional[date]
    category: Optional[str]
    description: Optional[str]


# =============================================================================
# Row conversion
# =============================================================================


def _unwrap_optional(hint: Any) -> Any:
    if typing.get_origin(hint) is typing.Union:
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _coerce(hint: Any, value: Any) -> Any:
    if value is None:
        return None
    target = _unwrap_optional(hint)
    if target is Decimal:
        return to_decimal(value)
    if target is bool:
        return to_bool(value)
    if target is int:
        return int(value)
    if target is date:
        return parse_date(value)
    if target is datetime:
        if isinstance(value, datetime):
            return value
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return value


def from_row(cls: Type[T], row: Mapping[str, Any]) -> T:
    """Build a record from a store row, ignoring unknown columns"""
    hints = typing.get_type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.name in row:
            kwargs[f.name] = _coerce(hints[f.name], row[f.name])
    return cls(**kwargs)


def to_row(record: Any, exclude: tuple = ()) -> Dict[str, Any]:
    """Flatten a record into a row dictionary"""
    return {
        f.name: getattr(record, f.name)
        for f in dataclasses.fields(record)
        if f.name not in exclude
    }
