"""Bill extraction from photos of bills and receipts"""

import base64
import time
from dataclasses import dataclass
from typing import Optional

from finance_gateway.domain.exceptions import ExtractionError
from finance_gateway.domain.extraction import map_extracted_category, parse_reply
from finance_gateway.domain.models import ExtractedBill
from finance_gateway.infrastructure.clients.vision import VisionClient
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.infrastructure.observability.logging import log_extraction
from finance_gateway.infrastructure.observability.metrics import extraction_failure_counter


@dataclass
class BillExtraction:
    bill: ExtractedBill
    category_id: Optional[str]


def image_mime_type(filename: str) -> str:
    return "image/png" if filename.lower().endswith(".png") else "image/jpeg"


class ExtractionService:
    def __init__(self, repos: Repositories, client: VisionClient):
        self.repos = repos
        self.client = client

    async def extract(self, image: bytes, mime_type: str = "image/jpeg") -> BillExtraction:
        """
        Read a bill image and match its category against the user's categories.

        Raises:
            ExtractionError: the model call failed or its reply carried no JSON object
        """
        started = time.perf_counter()
        success = False
        try:
            reply = await self.client.describe_image(base64.b64encode(image).decode("ascii"), mime_type)
            try:
                bill = parse_reply(reply)
            except ExtractionError:
                extraction_failure_counter.inc()
                raise
            success = True
        finally:
            log_extraction(self.repos.user_id, success, round((time.perf_counter() - started) * 1000, 2))

        categories = await self.repos.categories.list(eq={"type": "expense"})
        return BillExtraction(bill=bill, category_id=map_extracted_category(bill.category, categories))
