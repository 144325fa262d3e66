"""Investment position math"""

from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from finance_gateway.domain.exceptions import InvalidOperationError
from finance_gateway.domain.models import (
    Investment,
    InvestmentTransaction,
    InvestmentTypeTotal,
    PortfolioSummary,
    PositionProfit,
    ZERO,
)


def apply_investment_transaction(investment: Investment, txn: InvestmentTransaction) -> Tuple[Decimal, Decimal]:
    """
    Position (quantity, average purchase price) after a transaction.

    - buy: average price weighted by cost
    - sell: quantity reduced, average price unchanged
    - split: quantity multiplied and price divided by the split ratio
    - dividend / yield: position unchanged
    """
    quantity = investment.quantity
    price = investment.purchase_price

    if txn.type == "buy":
        total_cost = quantity * price + txn.total
        quantity = quantity + txn.quantity
        price = total_cost / quantity if quantity > 0 else price
    elif txn.type == "sell":
        if txn.quantity > quantity:
            raise InvalidOperationError(
                f"Cannot sell {txn.quantity} units of {investment.name}, position holds {quantity}"
            )
        quantity = quantity - txn.quantity
    elif txn.type == "split":
        if txn.quantity <= 0:
            raise InvalidOperationError("Split ratio must be positive")
        quantity = quantity * txn.quantity
        price = price / txn.quantity

    return quantity, price


def investment_profit(investment: Investment) -> PositionProfit:
    invested = investment.quantity * investment.purchase_price
    current = investment.quantity * investment.current_price
    profit = current - invested
    return PositionProfit(
        invested=invested,
        current=current,
        profit=profit,
        percentage=float(profit / invested * 100) if invested > 0 else 0.0,
    )


def portfolio_summary(investments: Iterable[Investment]) -> PortfolioSummary:
    investments = list(investments)
    total_invested = sum((i.quantity * i.purchase_price for i in investments), ZERO)
    current_value = sum((i.quantity * i.current_price for i in investments), ZERO)
    total_profit = current_value - total_invested

    by_type: "OrderedDict[str, Dict[str, Decimal]]" = OrderedDict()
    for inv in investments:
        bucket = by_type.setdefault(inv.type, {"invested": ZERO, "current": ZERO})
        bucket["invested"] += inv.quantity * inv.purchase_price
        bucket["current"] += inv.quantity * inv.current_price

    breakdown: List[InvestmentTypeTotal] = [
        InvestmentTypeTotal(
            type=type_,
            invested=bucket["invested"],
            current_value=bucket["current"],
            profit=bucket["current"] - bucket["invested"],
            percentage=float(bucket["current"] / current_value * 100) if current_value > 0 else 0.0,
        )
        for type_, bucket in by_type.items()
    ]

    return PortfolioSummary(
        total_invested=total_invested,
        current_value=current_value,
        total_profit=total_profit,
        profit_percentage=float(total_profit / total_invested * 100) if total_invested > 0 else 0.0,
        by_type=breakdown,
    )


def total_dividends(transactions: Iterable[InvestmentTransaction], investment_id: Optional[str] = None) -> Decimal:
    return sum(
        (
            t.total
            for t in transactions
            if t.type == "dividend" and (investment_id is None or t.investment_id == investment_id)
        ),
        ZERO,
    )
