"""Bank statement import and data export"""

from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from pydantic import BaseModel
from starlette.responses import Response

from finance_gateway.api.dependencies import get_statement_service
from finance_gateway.api.v1.schemas import ImportSummaryResponse
from finance_gateway.domain.models import ImportedTransaction
from finance_gateway.services.statements import StatementService

router = APIRouter()


class ImportPreviewResponse(BaseModel):
    file_type: str
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    transactions: List[ImportedTransaction]
    suggested_category_ids: List[Optional[str]]
    duplicates: int
    errors: List[str]


def statement_type(filename: Optional[str], file_type: Optional[str]) -> str:
    """Explicit type wins; otherwise OFX/QFX extensions are OFX and anything else is CSV"""
    if file_type:
        return file_type
    if filename and filename.lower().endswith((".ofx", ".qfx")):
        return "ofx"
    return "csv"


async def read_text(upload: UploadFile) -> str:
    raw = await upload.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Brazilian bank exports are commonly Latin-1
        return raw.decode("latin-1")


@router.post("/statements/preview", response_model=ImportPreviewResponse)
async def preview_statement(
    file: UploadFile = File(...),
    file_type: Optional[Literal["ofx", "csv"]] = Query(None),
    delimiter: str = Query(";", min_length=1, max_length=1),
    service: StatementService = Depends(get_statement_service),
):
    """Parse a statement and report which rows are new, with a suggested category for each"""
    preview = await service.preview(await read_text(file), statement_type(file.filename, file_type), delimiter)
    result = preview.result
    return ImportPreviewResponse(
        file_type=result.file_type,
        bank_name=result.bank_name,
        account_number=result.account_number,
        start_date=result.start_date,
        end_date=result.end_date,
        transactions=result.transactions,
        suggested_category_ids=preview.suggested_category_ids,
        duplicates=preview.duplicates,
        errors=result.errors,
    )


@router.post("/statements/import", response_model=ImportSummaryResponse)
async def import_statement(
    account_id: str = Query(...),
    file: UploadFile = File(...),
    file_type: Optional[Literal["ofx", "csv"]] = Query(None),
    delimiter: str = Query(";", min_length=1, max_length=1),
    service: StatementService = Depends(get_statement_service),
):
    summary = await service.import_transactions(
        account_id, await read_text(file), statement_type(file.filename, file_type), delimiter
    )
    return ImportSummaryResponse(imported=summary.imported, failed=summary.failed, duplicates=summary.duplicates)


@router.get("/exports/transactions")
async def export_transactions(
    start: date = Query(...),
    end: date = Query(...),
    service: StatementService = Depends(get_statement_service),
):
    content = await service.export_transactions(start, end)
    filename = f"transactions_{start.isoformat()}_{end.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/exports/summary/{year}/{month}")
async def export_month_summary(year: int, month: int, service: StatementService = Depends(get_statement_service)):
    content = await service.export_summary(year, month)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="summary_{year:04d}_{month:02d}.csv"'},
    )


@router.get("/exports/backup")
async def export_backup(service: StatementService = Depends(get_statement_service)):
    """Accounts, categories and transactions as a versioned JSON document"""
    content = await service.backup(datetime.now(timezone.utc))
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="finance_backup.json"'},
    )
