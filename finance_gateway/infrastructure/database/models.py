"""SQLAlchemy ORM models for the local row store, one table per resource"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey, Numeric, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(14, 2)
RATE = Numeric(8, 4)
QUANTITY = Numeric(20, 8)


def _new_id() -> str:
    return str(uuid.uuid4())


def _id_column():
    return Column(String(36), primary_key=True, default=_new_id)


def _created_at():
    return Column(DateTime(timezone=True), nullable=False, server_default=func.now())


def _updated_at():
    return Column(DateTime(timezone=True), nullable=True, server_default=func.now(), onupdate=func.now())


class AccountRow(Base):
    __tablename__ = "accounts"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    balance = Column(MONEY, nullable=False, default=0)
    color = Column(Text, nullable=False, default="#6366F1")
    icon = Column(Text, nullable=False, default="bank")
    credit_limit = Column(MONEY, nullable=True)
    closing_day = Column(Integer, nullable=True)
    due_day = Column(Integer, nullable=True)
    institution = Column(Text, nullable=True)
    account_number = Column(Text, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class CategoryRow(Base):
    __tablename__ = "categories"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    icon = Column(Text, nullable=False, default="package-variant")
    color = Column(Text, nullable=False, default="#6366F1")
    parent_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()


class TransactionRow(Base):
    """Money movement; recurring_id / installment_id link generated rows to their source"""

    __tablename__ = "transactions"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), nullable=False, index=True)
    type = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False, index=True)
    category_id = Column(String(36), nullable=True)
    description = Column(Text, nullable=False, default="")
    to_account_id = Column(String(36), nullable=True)
    recurring_id = Column(String(36), nullable=True, index=True)
    installment_id = Column(String(36), nullable=True, index=True)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    tags = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    receipt_url = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    is_pending = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class TagRow(Base):
    __tablename__ = "tags"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    color = Column(Text, nullable=False, default="#6366F1")
    created_at = _created_at()


class GoalRow(Base):
    __tablename__ = "goals"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    target_amount = Column(MONEY, nullable=False)
    current_amount = Column(MONEY, nullable=False, default=0)
    deadline = Column(Date, nullable=True)
    category_id = Column(String(36), nullable=True)
    color = Column(Text, nullable=False, default="#6366F1")
    icon = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    priority = Column(Text, nullable=False, default="medium")
    is_completed = Column(Boolean, nullable=False, default=False)
    monthly_contribution = Column(MONEY, nullable=True)
    linked_account_id = Column(String(36), nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class BillRow(Base):
    __tablename__ = "bills"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    due_date = Column(Date, nullable=False)
    category_id = Column(String(36), nullable=True)
    account_id = Column(String(36), nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    reminder_days_before = Column(Integer, nullable=False, default=3)
    frequency = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    barcode = Column(Text, nullable=True)
    paid_date = Column(Date, nullable=True)
    paid_amount = Column(MONEY, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class MonthlyBudgetRow(Base):
    __tablename__ = "monthly_budgets"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    category_id = Column(String(36), nullable=False)
    amount = Column(MONEY, nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    created_at = _created_at()


class DebtRow(Base):
    __tablename__ = "debts"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    creditor = Column(Text, nullable=False)
    original_amount = Column(MONEY, nullable=False)
    current_balance = Column(MONEY, nullable=False)
    interest_rate = Column(RATE, nullable=False, default=0)
    monthly_payment = Column(MONEY, nullable=False, default=0)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    total_installments = Column(Integer, nullable=True)
    paid_installments = Column(Integer, nullable=False, default=0)
    due_day = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class DebtPaymentRow(Base):
    __tablename__ = "debt_payments"

    id = _id_column()
    debt_id = Column(String(36), ForeignKey("debts.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    principal = Column(MONEY, nullable=False, default=0)
    interest = Column(MONEY, nullable=False, default=0)
    date = Column(Date, nullable=False)
    installment_number = Column(Integer, nullable=True)
    is_extra = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = _created_at()


class InvestmentRow(Base):
    __tablename__ = "investments"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    quantity = Column(QUANTITY, nullable=False)
    purchase_price = Column(QUANTITY, nullable=False)
    current_price = Column(QUANTITY, nullable=False)
    purchase_date = Column(Date, nullable=False)
    account_id = Column(String(36), nullable=True)
    ticker = Column(Text, nullable=True)
    institution = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class InvestmentTransactionRow(Base):
    __tablename__ = "investment_transactions"

    id = _id_column()
    investment_id = Column(String(36), ForeignKey("investments.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    quantity = Column(QUANTITY, nullable=False, default=0)
    price = Column(QUANTITY, nullable=False, default=0)
    total = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    fees = Column(MONEY, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = _created_at()


class RecurringTransactionRow(Base):
    __tablename__ = "recurring_transactions"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), nullable=False)
    type = Column(Text, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(Text, nullable=False)
    frequency = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False)
    next_date = Column(Date, nullable=False)
    category_id = Column(String(36), nullable=True)
    end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    auto_create = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class CreditCardBillRow(Base):
    __tablename__ = "credit_card_bills"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    closing_date = Column(Date, nullable=False)
    total_amount = Column(MONEY, nullable=False, default=0)
    paid_amount = Column(MONEY, nullable=False, default=0)
    is_closed = Column(Boolean, nullable=False, default=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class InstallmentRow(Base):
    __tablename__ = "installments"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    account_id = Column(String(36), nullable=False, index=True)
    description = Column(Text, nullable=False)
    total_amount = Column(MONEY, nullable=False)
    installment_amount = Column(MONEY, nullable=False)
    total_installments = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    category_id = Column(String(36), nullable=True)
    paid_installments = Column(Integer, nullable=False, default=0)
    created_at = _created_at()
    updated_at = _updated_at()


class NotificationRow(Base):
    __tablename__ = "notifications"

    id = _id_column()
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    action_route = Column(Text, nullable=True)
    action_params = Column(JSON, nullable=True)
    created_at = _created_at()


ROW_MODELS = {mapper.class_.__tablename__: mapper.class_ for mapper in Base.registry.mappers}
