"""Financial reports and health scoring"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping

from finance_gateway.domain.ledger import category_breakdown, month_summary, totals
from finance_gateway.domain.models import (
    Account,
    Category,
    Debt,
    ExpenseAnalysis,
    FinancialHealth,
    MonthlyReport,
    Transaction,
    YearlyReport,
    ZERO,
    money,
)


def monthly_report(
    transactions: List[Transaction],
    categories: Mapping[str, Category],
    year: int,
    month: int,
) -> MonthlyReport:
    """Totals, savings rate and top-5 categories of one month's transactions"""
    income, expense = totals(transactions)
    expenses = [t for t in transactions if t.type == "expense"]

    return MonthlyReport(
        month=month,
        year=year,
        income=income,
        expense=expense,
        balance=income - expense,
        savings_rate=float((income - expense) / income * 100) if income > 0 else 0.0,
        top_expense_categories=category_breakdown(transactions, "expense", categories, limit=5),
        top_income_categories=category_breakdown(transactions, "income", categories, limit=5),
        transaction_count=len(transactions),
        average_expense=money(expense / len(expenses)) if expenses else ZERO,
        largest_expense=max(expenses, key=lambda t: t.amount) if expenses else None,
    )


def yearly_report(
    transactions: List[Transaction],
    categories: Mapping[str, Category],
    year: int,
) -> YearlyReport:
    """Yearly totals with a month-by-month breakdown; best/worst month by balance"""
    total_income, total_expense = totals(transactions)
    breakdown = [month_summary(transactions, year, m) for m in range(1, 13)]

    # Stable sort keeps the earliest month on ties
    ranked = sorted(breakdown, key=lambda m: m.balance, reverse=True)

    return YearlyReport(
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        total_balance=total_income - total_expense,
        average_monthly_income=money(total_income / 12),
        average_monthly_expense=money(total_expense / 12),
        best_month=ranked[0],
        worst_month=ranked[-1],
        monthly_breakdown=breakdown,
        category_breakdown=category_breakdown(transactions, "expense", categories),
    )


def expense_analysis(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
    months: int,
) -> ExpenseAnalysis:
    """
    Spending pattern between start and end.

    Trend compares the two halves of the window: more than 10% growth is
    "increasing", more than 10% decline is "decreasing". Unusual expenses are
    single expenses above twice the average daily spend (at most 10).
    """
    expenses = [t for t in transactions if t.type == "expense"]
    total = sum((t.amount for t in expenses), ZERO)
    days = (end - start).days or 1

    daily_average = total / days
    monthly_average = total / months if months > 0 else total

    midpoint = start + (end - start) / 2
    first_half = sum((t.amount for t in expenses if t.date < midpoint), ZERO)
    second_half = sum((t.amount for t in expenses if t.date >= midpoint), ZERO)

    trend = "stable"
    trend_percentage = 0.0
    if first_half > 0:
        trend_percentage = float((second_half - first_half) / first_half * 100)
        if trend_percentage > 10:
            trend = "increasing"
        elif trend_percentage < -10:
            trend = "decreasing"

    daily_totals: Dict[date, Decimal] = {}
    category_totals: Dict[str, Decimal] = {}
    for t in expenses:
        daily_totals[t.date] = daily_totals.get(t.date, ZERO) + t.amount
        if t.category_id is not None:
            category_totals[t.category_id] = category_totals.get(t.category_id, ZERO) + t.amount

    peak_day = max(daily_totals.items(), key=lambda kv: kv[1], default=(None, ZERO))
    peak_category = max(category_totals.items(), key=lambda kv: kv[1], default=(None, ZERO))

    threshold = monthly_average / 30 * 2
    unusual = [t for t in expenses if t.amount > threshold][:10]

    return ExpenseAnalysis(
        daily_average=money(daily_average),
        weekly_average=money(daily_average * 7),
        monthly_average=money(monthly_average),
        trend=trend,
        trend_percentage=trend_percentage,
        peak_day=peak_day[0],
        peak_day_amount=peak_day[1],
        peak_category_id=peak_category[0],
        peak_category_amount=peak_category[1],
        unusual_expenses=unusual,
    )


def calculate_health_score(
    savings_rate: float,
    emergency_fund_months: float,
    debt_ratio: float,
    expense_ratio: float,
) -> int:
    """
    Financial health score from 0 (critical) to 1000 (excellent).

    Starts at 500 and adjusts:
    - Savings rate: +150 at 30%+, +100 at 20%+, +50 at 10%+, -100 when negative
    - Emergency fund: +150 at 6+ months, +100 at 3+, +50 at 1+, -50 below one month
    - Debt ratio (debt over a year of income): +150 debt-free, +100 under 20%,
      +50 under 40%, -100 above 60%, -150 above 80%
    - Expense ratio: +50 under 50% of income, -50 above 100%
    """
    score = 500

    if savings_rate >= 30:
        score += 150
    elif savings_rate >= 20:
        score += 100
    elif savings_rate >= 10:
        score += 50
    elif savings_rate < 0:
        score -= 100

    if emergency_fund_months >= 6:
        score += 150
    elif emergency_fund_months >= 3:
        score += 100
    elif emergency_fund_months >= 1:
        score += 50
    else:
        score -= 50

    if debt_ratio == 0:
        score += 150
    elif debt_ratio < 20:
        score += 100
    elif debt_ratio < 40:
        score += 50
    elif debt_ratio > 80:
        score -= 150
    elif debt_ratio > 60:
        score -= 100

    if expense_ratio < 50:
        score += 50
    elif expense_ratio > 100:
        score -= 50

    return max(0, min(1000, score))


def assess_financial_health(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    active_debts: List[Debt],
    months: int = 3,
) -> FinancialHealth:
    """Score and recommendations from the last ``months`` months of activity"""
    income, expense = totals(transactions)
    monthly_income = float(income) / months
    monthly_expense = float(expense) / months

    total_balance = float(sum((a.balance for a in accounts), ZERO))
    total_debt = float(sum((d.current_balance for d in active_debts), ZERO))
    monthly_debt_payments = float(sum((d.monthly_payment for d in active_debts), ZERO))

    savings_rate = (monthly_income - monthly_expense) / monthly_income * 100 if monthly_income > 0 else 0.0
    expense_ratio = monthly_expense / monthly_income * 100 if monthly_income > 0 else 0.0
    debt_ratio = total_debt / (monthly_income * 12) * 100 if monthly_income > 0 else 0.0
    emergency_fund_months = total_balance / monthly_expense if monthly_expense > 0 else 0.0
    debt_income_ratio = monthly_debt_payments / monthly_income * 100 if monthly_income > 0 else 0.0

    score = calculate_health_score(savings_rate, emergency_fund_months, debt_ratio, expense_ratio)

    recommendations = []
    if savings_rate < 20:
        recommendations.append("Try to save at least 20% of your monthly income")
    if emergency_fund_months < 6:
        recommendations.append("Build an emergency fund covering 6 months of expenses")
    if debt_ratio > 30:
        recommendations.append("Pay down the debts with the highest interest first (avalanche strategy)")
    if debt_income_ratio > 30:
        recommendations.append(
            f"Debt installments take {debt_income_ratio:.0f}% of your income. "
            "Consider renegotiating terms or rates."
        )
    if active_debts and debt_ratio <= 30:
        recommendations.append("Keep paying your debts on time and make extra payments when possible")
    if expense_ratio > 80:
        recommendations.append("Review your expenses and find where you can cut back")
    if score >= 800:
        recommendations.append("Excellent! Consider diversifying your investments")

    return FinancialHealth(
        score=score,
        savings_rate=round(savings_rate, 2),
        expense_ratio=round(expense_ratio, 2),
        debt_ratio=round(debt_ratio, 2),
        emergency_fund_months=round(emergency_fund_months, 2),
        recommendations=recommendations,
    )
