"""Unit tests for investment position math"""

import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.investments import (
    apply_investment_transaction,
    investment_profit,
    portfolio_summary,
    total_dividends,
)
from finance_gateway.domain.models import Investment, InvestmentTransaction


def make_investment(**overrides) -> Investment:
    values = dict(
        id="inv-1",
        user_id="user-1",
        name="ACME",
        type="stocks",
        quantity=Decimal("10"),
        purchase_price=Decimal("20"),
        current_price=Decimal("25"),
        purchase_date=date(2024, 1, 2),
    )
    values.update(overrides)
    return Investment(**values)


def make_txn(type_: str, quantity: str = "0", price: str = "0", total: str = "0", **overrides) -> InvestmentTransaction:
    values = dict(
        id="itx-1",
        investment_id="inv-1",
        type=type_,
        quantity=Decimal(quantity),
        price=Decimal(price),
        total=Decimal(total),
        date=date(2024, 2, 1),
    )
    values.update(overrides)
    return InvestmentTransaction(**values)


def test_buy_averages_price_by_cost():
    quantity, price = apply_investment_transaction(make_investment(), make_txn("buy", "10", "30", "300"))
    assert quantity == Decimal("20")
    assert price == Decimal("25")


def test_sell_keeps_average_price():
    quantity, price = apply_investment_transaction(make_investment(), make_txn("sell", "4", "30", "120"))
    assert quantity == Decimal("6")
    assert price == Decimal("20")


def test_oversell_is_rejected():
    with pytest.raises(InvalidOperationError):
        apply_investment_transaction(make_investment(), make_txn("sell", "11"))


def test_split_multiplies_quantity_and_divides_price():
    quantity, price = apply_investment_transaction(make_investment(), make_txn("split", "2"))
    assert (quantity, price) == (Decimal("20"), Decimal("10"))

    with pytest.raises(InvalidOperationError):
        apply_investment_transaction(make_investment(), make_txn("split", "0"))


def test_dividend_leaves_position_unchanged():
    assert apply_investment_transaction(make_investment(), make_txn("dividend", total="15")) == (Decimal("10"), Decimal("20"))


def test_investment_profit():
    profit = investment_profit(make_investment())
    assert profit.invested == Decimal("200")
    assert profit.current == Decimal("250")
    assert profit.profit == Decimal("50")
    assert profit.percentage == pytest.approx(25.0)


def test_portfolio_summary_by_type():
    investments = [
        make_investment(),
        make_investment(id="inv-2", type="crypto", quantity=Decimal("1"), purchase_price=Decimal("100"),
                        current_price=Decimal("50")),
    ]
    summary = portfolio_summary(investments)

    assert summary.total_invested == Decimal("300")
    assert summary.current_value == Decimal("300")
    assert summary.total_profit == Decimal("0")
    assert [t.type for t in summary.by_type] == ["stocks", "crypto"]
    assert summary.by_type[1].profit == Decimal("-50")
    assert summary.by_type[0].percentage == pytest.approx(250 / 300 * 100)


def test_empty_portfolio():
    summary = portfolio_summary([])
    assert summary.profit_percentage == 0.0
    assert summary.by_type == []


def test_total_dividends():
    transactions = [
        make_txn("dividend", total="10"),
        make_txn("dividend", total="5", investment_id="inv-2"),
        make_txn("buy", "1", "10", "10"),
    ]
    assert total_dividends(transactions) == Decimal("15")
    assert total_dividends(transactions, "inv-2") == Decimal("5")
