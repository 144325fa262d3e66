"""POST /v1/bills/extract - read a bill from a photo"""

from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from finance_gateway.api.dependencies import get_extraction_service
from finance_gateway.services.extraction import ExtractionService, image_mime_type

router = APIRouter()


class ExtractedBillResponse(BaseModel):
    name: Optional[str] = None
    amount: Optional[Decimal] = None
    due_date: Optional[date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None


@router.post("/bills/extract", response_model=ExtractedBillResponse)
async def extract_bill(
    file: UploadFile = File(...),
    service: ExtractionService = Depends(get_extraction_service),
):
    """
    Extract name, amount, due date and category from a bill image.

    The category is matched against the user's expense categories; an
    unmatched category is returned with ``category_id`` null.
    """
    mime_type = file.content_type if file.content_type in ("image/png", "image/jpeg") else image_mime_type(file.filename or "")
    extraction = await service.extract(await file.read(), mime_type)
    bill = extraction.bill
    return ExtractedBillResponse(
        name=bill.name,
        amount=bill.amount,
        due_date=bill.due_date,
        category=bill.category,
        description=bill.description,
        category_id=extraction.category_id,
    )
