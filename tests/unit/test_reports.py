"""Unit tests for reports and health scoring"""

import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain.reports import (
    assess_financial_health,
    calculate_health_score,
    expense_analysis,
    monthly_report,
    yearly_report,
)
from conftest import make_account, make_debt, make_transaction


def test_monthly_report():
    transactions = [
        make_transaction(id="1", type="income", amount=Decimal("4000"), category_id="salary"),
        make_transaction(id="2", amount=Decimal("600")),
        make_transaction(id="3", amount=Decimal("400")),
    ]
    report = monthly_report(transactions, {}, 2024, 3)

    assert report.income == Decimal("4000")
    assert report.expense == Decimal("1000")
    assert report.balance == Decimal("3000")
    assert report.savings_rate == pytest.approx(75.0)
    assert report.average_expense == Decimal("500.00")
    assert report.largest_expense.id == "2"
    assert report.transaction_count == 3


def test_monthly_report_empty():
    report = monthly_report([], {}, 2024, 3)
    assert report.savings_rate == 0.0
    assert report.largest_expense is None
    assert report.average_expense == Decimal("0")


def test_yearly_report_best_and_worst_month():
    transactions = [
        make_transaction(id="1", type="income", amount=Decimal("1200"), date=date(2024, 2, 1)),
        make_transaction(id="2", amount=Decimal("300"), date=date(2024, 5, 1)),
    ]
    report = yearly_report(transactions, {}, 2024)

    assert report.best_month.month == "2024-02"
    assert report.worst_month.month == "2024-05"
    assert report.average_monthly_income == Decimal("100.00")
    assert report.average_monthly_expense == Decimal("25.00")
    assert len(report.monthly_breakdown) == 12


def test_expense_analysis_trend_and_unusual():
    start, end = date(2024, 1, 1), date(2024, 1, 31)
    transactions = [
        make_transaction(id="1", amount=Decimal("100"), date=date(2024, 1, 5), category_id="food"),
        make_transaction(id="2", amount=Decimal("300"), date=date(2024, 1, 25), category_id="fun"),
    ]
    analysis = expense_analysis(transactions, start, end, months=1)

    assert analysis.trend == "increasing"
    assert analysis.trend_percentage == pytest.approx(200.0)
    assert analysis.peak_day == date(2024, 1, 25)
    assert analysis.peak_category_id == "fun"
    assert analysis.monthly_average == Decimal("400.00")
    # Threshold is 400 / 30 * 2 = 26.67, both expenses are above it
    assert len(analysis.unusual_expenses) == 2


def test_expense_analysis_without_expenses():
    analysis = expense_analysis([], date(2024, 1, 1), date(2024, 1, 31), months=1)
    assert analysis.trend == "stable"
    assert analysis.peak_day is None
    assert analysis.daily_average == Decimal("0.00")


@pytest.mark.parametrize(
    "args,expected",
    [
        ((35, 7, 0, 40), 1000),
        ((25, 4, 10, 75), 800),
        ((-5, 0.5, 90, 120), 150),
        ((15, 1.5, 50, 85), 650),
    ],
)
def test_calculate_health_score(args, expected):
    assert calculate_health_score(*args) == expected


def test_assess_financial_health():
    transactions = [
        make_transaction(id="1", type="income", amount=Decimal("3000")),
        make_transaction(id="2", amount=Decimal("1500")),
    ]
    accounts = [make_account(balance=Decimal("3000"))]
    health = assess_financial_health(transactions, accounts, [], months=1)

    assert health.savings_rate == 50.0
    assert health.expense_ratio == 50.0
    assert health.debt_ratio == 0.0
    assert health.emergency_fund_months == 2.0
    # 500 + 150 (savings) + 50 (fund) + 150 (no debt) + 0 (expense ratio at 50%)
    assert health.score == 850
    assert "Build an emergency fund covering 6 months of expenses" in health.recommendations
    assert "Excellent! Consider diversifying your investments" in health.recommendations


def test_assess_financial_health_with_heavy_debt():
    transactions = [make_transaction(id="1", type="income", amount=Decimal("1000"))]
    debts = [make_debt(current_balance=Decimal("12000"), monthly_payment=Decimal("500"))]
    health = assess_financial_health(transactions, [], debts, months=1)

    assert health.debt_ratio == 100.0
    assert any("Debt installments take 50%" in r for r in health.recommendations)
