"""Bank statement import: OFX and delimited CSV parsing"""

import csv
import io
import re
import unicodedata
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence

from finance_gateway.domain.exceptions import ImportFormatError
from finance_gateway.domain.models import Category, ImportResult, ImportedTransaction, Transaction

_STMTTRN = re.compile(r"<STMTTRN>(.*?)</STMTTRN>", re.IGNORECASE | re.DOTALL)

# Category name fragment -> description keywords (accent-free, lower case)
CATEGORY_KEYWORDS = {
    "aliment": ["mercado", "supermercado", "restaurante", "lanchonete", "padaria", "ifood", "uber eats", "rappi", "grocery", "restaurant"],
    "food": ["mercado", "supermercado", "restaurante", "ifood", "grocery", "restaurant", "bakery"],
    "transport": ["uber", "99", "cabify", "combustivel", "gasolina", "estacionamento", "pedagio", "metro", "onibus", "fuel", "parking"],
    "saude": ["farmacia", "drogaria", "hospital", "clinica", "medico", "dentista", "laborat"],
    "health": ["pharmacy", "hospital", "clinic", "doctor", "dentist"],
    "moradia": ["aluguel", "condominio", "iptu", "luz", "energia", "agua", "gas", "internet"],
    "housing": ["rent", "electricity", "water", "internet"],
    "lazer": ["cinema", "teatro", "show", "netflix", "spotify", "amazon prime", "disney"],
    "leisure": ["cinema", "theater", "netflix", "spotify", "disney"],
    "educa": ["escola", "faculdade", "curso", "livro", "udemy", "mensalidade", "school", "course"],
    "salari": ["salario", "pagamento", "vencimento", "transferencia recebida", "payroll"],
    "salary": ["salario", "payroll"],
}


def normalize_text(value: str) -> str:
    """Lower case without diacritics ("Saúde" -> "saude")"""
    decomposed = unicodedata.normalize("NFD", value.lower())
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def _tag(block: str, name: str) -> Optional[str]:
    match = re.search(rf"<{name}>([^<\r\n]+)", block, re.IGNORECASE)
    return match.group(1).strip() if match else None


def parse_ofx(content: str) -> ImportResult:
    """
    Parse an OFX statement.

    Each STMTTRN block needs at least DTPOSTED and TRNAMT; blocks missing them
    are skipped. Negative amounts are expenses. Results are ordered by date.
    """
    transactions: List[ImportedTransaction] = []
    errors: List[str] = []

    for index, match in enumerate(_STMTTRN.finditer(content), start=1):
        block = match.group(1)
        raw_date = _tag(block, "DTPOSTED")
        raw_amount = _tag(block, "TRNAMT")
        if not raw_date or not raw_amount:
            continue

        try:
            posted = date(int(raw_date[0:4]), int(raw_date[4:6]), int(raw_date[6:8]))
            amount = Decimal(raw_amount.replace(",", "."))
        except (ValueError, InvalidOperation) as e:
            errors.append(f"Transaction {index}: {e}")
            continue

        name = _tag(block, "NAME")
        memo = _tag(block, "MEMO")
        transactions.append(
            ImportedTransaction(
                date=posted,
                amount=abs(amount),
                type="income" if amount >= 0 else "expense",
                description=name or memo or "Imported transaction",
                memo=memo,
                fitid=_tag(block, "FITID"),
                check_number=_tag(block, "CHECKNUM"),
            )
        )

    transactions.sort(key=lambda t: t.date)
    return ImportResult(
        transactions=transactions,
        errors=errors,
        file_type="OFX",
        bank_name=_tag(content, "BANKID"),
        account_number=_tag(content, "ACCTID"),
    )


def _find_column(columns: Sequence[str], *fragments: str) -> int:
    for index, column in enumerate(columns):
        if any(fragment in column for fragment in fragments):
            return index
    return -1


def parse_amount(raw: str) -> Decimal:
    """Parse "R$ 1.234,56", "-45,90" or "-45.90" """
    cleaned = re.sub(r"[R$\s]", "", raw)
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    return Decimal(cleaned)


def parse_statement_date(raw: str) -> date:
    """Parse DD/MM/YYYY or ISO YYYY-MM-DD"""
    if "/" in raw:
        day, month, year = raw.split("/")
        return date(int(year), int(month), int(day))
    return date.fromisoformat(raw)


def parse_csv(content: str, delimiter: str = ";") -> ImportResult:
    """
    Parse a delimited statement export.

    The header row must contain a date column (data/date/dt) and an amount
    column (valor/amount/quantia); a description column is optional.

    Raises:
        ImportFormatError: file has no data rows or the columns cannot be identified
    """
    rows = [row for row in csv.reader(io.StringIO(content.strip()), delimiter=delimiter) if any(cell.strip() for cell in row)]
    if len(rows) < 2:
        raise ImportFormatError("CSV file is empty or has no data rows")

    columns = [normalize_text(c.strip()) for c in rows[0]]
    date_index = _find_column(columns, "data", "date")
    if date_index == -1:
        date_index = columns.index("dt") if "dt" in columns else -1
    amount_index = _find_column(columns, "valor", "amount", "quantia")
    desc_index = _find_column(columns, "descri", "memo", "hist", "observ")

    if date_index == -1 or amount_index == -1:
        raise ImportFormatError("Could not identify the date and amount columns")

    transactions: List[ImportedTransaction] = []
    errors: List[str] = []
    for line_number, row in enumerate(rows[1:], start=2):
        try:
            raw_date = row[date_index].strip()
            raw_amount = row[amount_index].strip()
        except IndexError:
            errors.append(f"Line {line_number}: missing columns")
            continue
        if not raw_date or not raw_amount:
            continue

        try:
            amount = parse_amount(raw_amount)
            posted = parse_statement_date(raw_date)
        except (ValueError, InvalidOperation) as e:
            errors.append(f"Line {line_number}: {e}")
            continue

        description = row[desc_index].strip() if 0 <= desc_index < len(row) else ""
        transactions.append(
            ImportedTransaction(
                date=posted,
                amount=abs(amount),
                type="income" if amount >= 0 else "expense",
                description=description or "Imported transaction",
                original_line=delimiter.join(row),
            )
        )

    return ImportResult(transactions=transactions, errors=errors, file_type="CSV")


def suggest_category(description: str, categories: Iterable[Category]) -> Optional[Category]:
    """First category whose name matches a keyword found in the description"""
    desc = normalize_text(description)
    categories = list(categories)
    for fragment, keywords in CATEGORY_KEYWORDS.items():
        if not any(keyword in desc for keyword in keywords):
            continue
        for category in categories:
            if fragment in normalize_text(category.name):
                return category
    return None


def remove_duplicates(imported: Iterable[ImportedTransaction], existing: Iterable[Transaction]) -> List[ImportedTransaction]:
    """
    Drop imported rows already present: same date and amount within one cent.

    When the imported row carries an OFX FITID, the existing description must
    also mention it for the row to count as a duplicate.
    """
    existing = list(existing)

    def is_duplicate(imp: ImportedTransaction) -> bool:
        return any(
            ex.date == imp.date
            and abs(ex.amount - imp.amount) < Decimal("0.01")
            and (not imp.fitid or imp.fitid in (ex.description or ""))
            for ex in existing
        )

    return [imp for imp in imported if not is_duplicate(imp)]
