"""Unit tests for row to record conversion"""

from datetime import date
from decimal import Decimal
from finance_gateway.domain.models import Account, Transaction, from_row, money, to_row


def test_from_row_coerces_loose_values():
    account = from_row(
        Account,
        {
            "id": "a1",
            "user_id": "u1",
            "name": "Card",
            "type": "credit_card",
            "balance": 1500.5,
            "credit_limit": "5000",
            "closing_day": "10",
            "is_archived": "false",
            "created_at": "2024-03-01T12:00:00Z",
            "unknown_column": "ignored",
        },
    )
    assert account.balance == Decimal("1500.5")
    assert account.credit_limit == Decimal("5000")
    assert account.closing_day == 10
    assert account.is_archived is False
    assert account.created_at.year == 2024


def test_from_row_parses_dates_and_keeps_nulls():
    txn = from_row(
        Transaction,
        {
            "id": "t1",
            "user_id": "u1",
            "account_id": "a1",
            "type": "expense",
            "amount": "12.30",
            "date": "2024-02-29",
            "category_id": None,
        },
    )
    assert txn.date == date(2024, 2, 29)
    assert txn.category_id is None


def test_to_row_excludes_columns():
    row = to_row(Account(id="a1", user_id="u1", name="Cash", type="cash"), exclude=("created_at", "updated_at"))
    assert row["name"] == "Cash"
    assert "created_at" not in row


def test_money_rounds_half_up():
    assert money("2.345") == Decimal("2.35")
    assert money(None) == Decimal("0.00")
