"""Statement import and data export"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from finance_gateway.domain.exceptions import DomainException, ImportFormatError
from finance_gateway.domain.exports import backup_json, summary_csv, transactions_csv
from finance_gateway.domain.imports import normalize_text, parse_csv, parse_ofx, remove_duplicates, suggest_category
from finance_gateway.domain.models import Category, ImportResult, Transaction
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.transactions import TransactionService
from finance_gateway.utils.date_utils import month_bounds

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY_NAMES = ("other", "others", "outros", "geral")


@dataclass
class ImportPreview:
    result: ImportResult
    duplicates: int
    suggested_category_ids: List[Optional[str]]


@dataclass
class ImportSummary:
    imported: int = 0
    failed: int = 0
    duplicates: int = 0
    transactions: List[Transaction] = field(default_factory=list)


class StatementService:
    def __init__(self, repos: Repositories):
        self.repos = repos
        self.transactions = TransactionService(repos)

    def parse(self, content: str, file_type: str, delimiter: str = ";") -> ImportResult:
        """
        Raises:
            ImportFormatError: unknown file type, or a CSV whose columns cannot be identified
        """
        kind = file_type.lower()
        if kind == "ofx":
            return parse_ofx(content)
        if kind == "csv":
            return parse_csv(content, delimiter)
        raise ImportFormatError(f"Unsupported statement type: {file_type}")

    async def _existing(self, result: ImportResult) -> List[Transaction]:
        if not result.transactions:
            return []
        start = min(t.date for t in result.transactions)
        end = max(t.date for t in result.transactions)
        return await self.repos.transactions.list(gte={"date": start}, lte={"date": end})

    async def preview(self, content: str, file_type: str, delimiter: str = ";") -> ImportPreview:
        """Parsed rows minus those already recorded, with a suggested category per row"""
        result = self.parse(content, file_type, delimiter)
        unique = remove_duplicates(result.transactions, await self._existing(result))
        duplicates = len(result.transactions) - len(unique)
        result.transactions = unique

        categories = await self.repos.categories.list()
        suggestions = []
        for imported in unique:
            category = suggest_category(imported.description, [c for c in categories if c.type == imported.type])
            suggestions.append(category.id if category else None)
        return ImportPreview(result=result, duplicates=duplicates, suggested_category_ids=suggestions)

    def _fallback_category(self, categories: List[Category], txn_type: str) -> Optional[str]:
        for category in categories:
            if category.type == txn_type and normalize_text(category.name) in FALLBACK_CATEGORY_NAMES:
                return category.id
        return None

    async def import_transactions(
        self, account_id: str, content: str, file_type: str, delimiter: str = ";"
    ) -> ImportSummary:
        """
        Record every new row of a statement on ``account_id``.

        Rows without a suggested category fall back to an "Other" category when
        one exists. A row that fails to save is logged and counted; the rest of
        the statement is still imported.
        """
        await self.repos.accounts.get(account_id)
        preview = await self.preview(content, file_type, delimiter)
        categories = await self.repos.categories.list()
        summary = ImportSummary(duplicates=preview.duplicates)

        for imported, category_id in zip(preview.result.transactions, preview.suggested_category_ids):
            try:
                created = await self.transactions.create(
                    {
                        "account_id": account_id,
                        "type": imported.type,
                        "amount": imported.amount,
                        "description": imported.description,
                        "date": imported.date,
                        "category_id": category_id or self._fallback_category(categories, imported.type),
                        "notes": imported.memo,
                    }
                )
            except DomainException as e:
                summary.failed += 1
                logger.warning("Imported row was not saved", extra={"date": imported.date.isoformat(), "error": str(e)})
                continue
            summary.imported += 1
            summary.transactions.append(created)

        return summary

    async def export_transactions(self, start: date, end: date) -> str:
        return transactions_csv(
            await self.repos.transactions.list(gte={"date": start}, lte={"date": end}),
            await self.repos.accounts.list(),
            await self.repos.categories.list(),
            start,
            end,
        )

    async def export_summary(self, year: int, month: int) -> str:
        start, end = month_bounds(year, month)
        return summary_csv(
            await self.repos.transactions.list(gte={"date": start}, lte={"date": end}),
            await self.repos.categories.list(),
            year,
            month,
        )

    async def backup(self, exported_at: datetime) -> str:
        return backup_json(
            {
                "accounts": await self.repos.accounts.list(),
                "categories": await self.repos.categories.list(),
                "transactions": await self.repos.transactions.list(order=[("date", False)]),
            },
            exported_at,
        )
