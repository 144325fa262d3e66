"""Spreadsheet and backup exports"""

import csv
import io
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping

from finance_gateway.domain.ledger import totals
from finance_gateway.domain.models import Account, Category, Transaction, ZERO, money, to_row

BACKUP_VERSION = "1.0"

TYPE_LABELS = {"income": "Income", "expense": "Expense", "transfer": "Transfer"}


def format_amount(value: Decimal) -> str:
    """Two decimals with a comma separator ("1234,50"), as spreadsheets in pt-BR expect"""
    return f"{money(value):.2f}".replace(".", ",")


def transactions_csv(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    categories: Iterable[Category],
    start: date,
    end: date,
) -> str:
    """`;`-delimited export of the transactions dated between start and end (inclusive)"""
    account_names = {a.id: a.name for a in accounts}
    category_names = {c.id: c.name for c in categories}

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(["Date", "Type", "Category", "Account", "Description", "Amount"])
    for t in sorted(transactions, key=lambda t: t.date):
        if not start <= t.date <= end:
            continue
        writer.writerow(
            [
                t.date.strftime("%d/%m/%Y"),
                TYPE_LABELS.get(t.type, t.type),
                category_names.get(t.category_id, "Uncategorized"),
                account_names.get(t.account_id, "Unknown account"),
                t.description or "",
                format_amount(t.amount),
            ]
        )
    return buffer.getvalue()


def summary_csv(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    year: int,
    month: int,
) -> str:
    """Income and expense totals per category for one month, followed by overall totals"""
    selected = [t for t in transactions if t.date.year == year and t.date.month == month]
    by_id = {c.id: c for c in categories}

    per_category: Dict[str, Dict[str, Decimal]] = {}
    for t in selected:
        if t.type not in ("income", "expense") or t.category_id not in by_id:
            continue
        bucket = per_category.setdefault(t.category_id, {"income": ZERO, "expense": ZERO})
        bucket[t.type] += t.amount

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(["Category", "Type", "Total"])
    for category_id, bucket in per_category.items():
        name = by_id[category_id].name
        for kind in ("income", "expense"):
            if bucket[kind] > 0:
                writer.writerow([name, TYPE_LABELS[kind], format_amount(bucket[kind])])

    income, expense = totals(selected)
    writer.writerow([])
    writer.writerow(["TOTAL INCOME", "", format_amount(income)])
    writer.writerow(["TOTAL EXPENSE", "", format_amount(expense)])
    writer.writerow(["BALANCE", "", format_amount(income - expense)])
    return buffer.getvalue()


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def backup_json(collections: Mapping[str, Iterable[Any]], exported_at: datetime) -> str:
    """
    Full JSON backup of the user's records.

    Args:
        collections: resource name -> records (dataclasses), e.g. {"accounts": [...]}
        exported_at: timestamp written into the backup header

    Returns:
        JSON document {"exported_at", "version", <resource>: [rows...]}
    """
    document: Dict[str, Any] = {"exported_at": exported_at.isoformat(), "version": BACKUP_VERSION}
    for name, records in collections.items():
        rows: List[Dict[str, Any]] = [to_row(r) for r in records]
        document[name] = rows
    return json.dumps(document, default=_json_default, ensure_ascii=False, indent=2)
