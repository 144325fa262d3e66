"""Account balances, transaction summaries and category trees"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from finance_gateway.domain.models import (
    Account,
    Category,
    CategorySummary,
    MonthSummary,
    SearchResult,
    Transaction,
    TransactionSearch,
    TransactionType,
    ZERO,
)
from finance_gateway.utils.date_utils import shift_month


def balance_changes(txn_type: str, amount: Decimal, account_id: str, to_account_id: Optional[str] = None) -> Dict[str, Decimal]:
    """
    Effect of a transaction on account balances.

    Income credits the account, expense debits it, a transfer debits the source
    and credits the destination account.
    """
    if txn_type == TransactionType.INCOME.value:
        return {account_id: amount}
    changes = {account_id: -amount}
    if txn_type == TransactionType.TRANSFER.value and to_account_id:
        changes[to_account_id] = changes.get(to_account_id, ZERO) + amount
    return changes


def total_balance(accounts: Iterable[Account]) -> Decimal:
    """
    Net worth across accounts; credit card balances count as owed.

    Card expenses debit the card account, so what is owed is stored as a
    negative balance; either sign is treated as debt.
    """
    total = ZERO
    for account in accounts:
        if account.is_archived:
            continue
        if account.type == "credit_card":
            total -= abs(account.balance)
        else:
            total += account.balance
    return total


def in_month(txn_date: date, year: int, month: int) -> bool:
    return txn_date.year == year and txn_date.month == month


def month_transactions(transactions: Iterable[Transaction], year: int, month: int) -> List[Transaction]:
    return [t for t in transactions if in_month(t.date, year, month)]


def totals(transactions: Iterable[Transaction]) -> Tuple[Decimal, Decimal]:
    """(income, expense) totals; transfers are neither"""
    income = expense = ZERO
    for t in transactions:
        if t.type == TransactionType.INCOME.value:
            income += t.amount
        elif t.type == TransactionType.EXPENSE.value:
            expense += t.amount
    return income, expense


def month_summary(transactions: Iterable[Transaction], year: int, month: int) -> MonthSummary:
    income, expense = totals(month_transactions(transactions, year, month))
    return MonthSummary(
        month=f"{year:04d}-{month:02d}",
        income=income,
        expense=expense,
        balance=income - expense,
    )


def _matches_text(t: Transaction, term: str) -> bool:
    return any(term in (text or "").lower() for text in (t.description, t.notes, t.location))


def matches(t: Transaction, search: TransactionSearch) -> bool:
    """
    Whether a transaction passes every set filter.

    Text matches description, notes or location, case-insensitively. Tags
    match when the transaction carries any of the requested tags.
    """
    if search.type and t.type != search.type:
        return False
    if search.category_ids and t.category_id not in search.category_ids:
        return False
    if search.account_ids and t.account_id not in search.account_ids:
        return False
    if search.date_from and t.date < search.date_from:
        return False
    if search.date_to and t.date > search.date_to:
        return False
    if search.amount_min is not None and t.amount < search.amount_min:
        return False
    if search.amount_max is not None and t.amount > search.amount_max:
        return False
    if search.has_receipt is not None and bool(t.receipt_url) != search.has_receipt:
        return False
    if search.is_pending is not None and t.is_pending != search.is_pending:
        return False
    if search.tags and not set(t.tags or ()) & set(search.tags):
        return False
    term = (search.query or "").strip().lower()
    return not term or _matches_text(t, term)


def search_transactions(transactions: Iterable[Transaction], search: TransactionSearch) -> SearchResult:
    """Matching transactions, newest first, with income, expense and net totals"""
    found = sorted((t for t in transactions if matches(t, search)), key=lambda t: t.date, reverse=True)
    income, expense = totals(found)
    return SearchResult(
        transactions=found,
        total_count=len(found),
        income_total=income,
        expense_total=expense,
        net_total=income - expense,
    )


def recent_months_summary(transactions: Iterable[Transaction], today: date, count: int = 6) -> List[MonthSummary]:
    """Summaries of the last ``count`` months, oldest first, current month included"""
    transactions = list(transactions)
    summaries = []
    for offset in range(count - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        summaries.append(month_summary(transactions, year, month))
    return summaries


def category_breakdown(
    transactions: Iterable[Transaction],
    txn_type: str,
    categories: Mapping[str, Category],
    limit: Optional[int] = None,
) -> List[CategorySummary]:
    """
    Totals per category for one transaction type, largest first.

    Transactions whose category is unknown are left out of the rows but still
    count towards the percentage base.
    """
    selected = [t for t in transactions if t.type == txn_type]
    grand_total = sum((t.amount for t in selected), ZERO)

    buckets: Dict[str, List[Decimal]] = {}
    for t in selected:
        if t.category_id is not None:
            buckets.setdefault(t.category_id, []).append(t.amount)

    rows = []
    for category_id, amounts in buckets.items():
        category = categories.get(category_id)
        if category is None:
            continue
        total = sum(amounts, ZERO)
        rows.append(
            CategorySummary(
                category_id=category_id,
                total=total,
                percentage=float(total / grand_total * 100) if grand_total > 0 else 0.0,
                transactions_count=len(amounts),
                category=category,
            )
        )

    rows.sort(key=lambda r: r.total, reverse=True)
    return rows[:limit] if limit else rows


def category_tree(categories: Iterable[Category], type_: Optional[str] = None) -> List[Dict]:
    """Top-level categories with their subcategories"""
    categories = list(categories)
    mains = [c for c in categories if not c.parent_id and (type_ is None or c.type == type_)]
    return [
        {"category": main, "subcategories": [c for c in categories if c.parent_id == main.id]}
        for main in mains
    ]


def flat_categories(categories: Iterable[Category], type_: Optional[str] = None) -> List[Tuple[Category, Optional[str]]]:
    """Categories ordered parent first, each followed by its children; pairs of (category, parent name)"""
    filtered = [c for c in categories if type_ is None or c.type == type_]
    result: List[Tuple[Category, Optional[str]]] = []
    for main in (c for c in filtered if not c.parent_id):
        result.append((main, None))
        result.extend((sub, main.name) for sub in filtered if sub.parent_id == main.id)
    return result
