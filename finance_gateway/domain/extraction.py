"""Bill and receipt extraction: prompt, reply parsing and category mapping"""

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

from finance_gateway.domain.exceptions import ExtractionError
from finance_gateway.domain.imports import normalize_text, parse_statement_date
from finance_gateway.domain.models import Category, ExtractedBill

SYSTEM_PROMPT = """You are an assistant that extracts information from bills, payment slips, PIX receipts and invoices.

Read the image and extract:
- Name or description of the bill (e.g. "Electricity", "Internet", "Groceries")
- Amount (numbers only, no currency symbol)
- Due date (DD/MM/YYYY)
- Suggested category (one of: Food, Transport, Housing, Health, Education, Leisure, Shopping, Bills, Other)

Rules:
- Return null for any field you cannot identify
- For PIX receipts the name is the description or the recipient
- For utility bills identify the company and the kind of service
- The amount must be numeric only (e.g. 150.50)

Reply ONLY with valid JSON in this format:
{
  "name": "string or null",
  "amount": number or null,
  "dueDate": "DD/MM/YYYY or null",
  "category": "string or null",
  "description": "string or null"
}"""

USER_PROMPT = "Extract the information from this bill or receipt:"

# System category -> keywords found in the extracted category (accent-free, lower case)
CATEGORY_MAP = {
    "aliment": ["aliment", "mercado", "supermercado", "restaurante", "comida", "food", "grocer"],
    "transport": ["transport", "combustivel", "gasolina", "uber", "99", "onibus", "metro", "fuel"],
    "moradia": ["moradia", "aluguel", "condominio", "iptu", "luz", "agua", "gas", "energia", "housing", "rent"],
    "saude": ["saude", "farmacia", "medico", "hospital", "remedio", "health", "pharmacy"],
    "educa": ["educa", "escola", "faculdade", "curso", "livro", "school"],
    "lazer": ["lazer", "entretenimento", "cinema", "streaming", "netflix", "spotify", "leisure"],
    "compras": ["compras", "shopping", "roupa", "eletronico"],
    "contas": ["contas", "internet", "telefone", "celular", "tv", "assinatura", "bills", "utilit"],
}

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def build_request(image_base64: str, mime_type: str, model: str) -> Dict[str, Any]:
    """Chat completion payload carrying the image as a base64 data URL"""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{image_base64}", "detail": "high"},
                    },
                ],
            },
        ],
        "max_tokens": 500,
        "temperature": 0.1,
    }


def parse_reply(content: str) -> ExtractedBill:
    """
    Read the JSON object embedded in the model's reply.

    Fields that are missing or unreadable come back as None.

    Raises:
        ExtractionError: the reply carries no JSON object
    """
    match = _JSON_OBJECT.search(content or "")
    if not match:
        raise ExtractionError("Could not extract data from the image")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Malformed extraction reply: {e}") from e

    amount = None
    if data.get("amount") not in (None, ""):
        try:
            amount = Decimal(str(data["amount"]).replace(",", "."))
        except InvalidOperation:
            amount = None

    due = None
    if data.get("dueDate"):
        try:
            due = parse_statement_date(str(data["dueDate"]))
        except ValueError:
            due = None

    return ExtractedBill(
        name=data.get("name") or None,
        amount=amount,
        due_date=due,
        category=data.get("category") or None,
        description=data.get("description") or None,
    )


def map_extracted_category(extracted: Optional[str], categories: Iterable[Category]) -> Optional[str]:
    """Id of the user category matching an extracted category name, if any"""
    if not extracted:
        return None
    wanted = normalize_text(extracted)
    categories = list(categories)

    for fragment, keywords in CATEGORY_MAP.items():
        if any(keyword in wanted for keyword in keywords):
            for category in categories:
                if fragment in normalize_text(category.name):
                    return category.id

    for category in categories:
        if normalize_text(category.name) == wanted:
            return category.id
    return None
