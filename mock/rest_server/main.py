"""In-memory stand-in for the hosted row backend's REST interface (PostgREST dialect)"""

import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="Mock Row Backend", version="1.0.0")

TABLES: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
RESERVED = {"select", "order", "limit"}


def reset() -> None:
    TABLES.clear()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _predicate(column: str, expression: str) -> Callable[[Dict[str, Any]], bool]:
    op, _, operand = expression.partition(".")
    if op == "is" and operand == "null":
        return lambda row: row.get(column) is None
    if op == "eq":
        return lambda row: row.get(column) is not None and _text(row[column]) == operand
    if op == "gte":
        return lambda row: row.get(column) is not None and _text(row[column]) >= operand
    if op == "lte":
        return lambda row: row.get(column) is not None and _text(row[column]) <= operand
    raise HTTPException(status_code=400, detail=f"unsupported filter {column}={expression}")


def _matching(request: Request) -> Callable[[Dict[str, Any]], bool]:
    predicates = [_predicate(k, v) for k, v in request.query_params.multi_items() if k not in RESERVED]
    return lambda row: all(p(row) for p in predicates)


def _ordered(rows: List[Dict[str, Any]], order: Optional[str]) -> List[Dict[str, Any]]:
    # Stable sorts applied from the last key to the first
    for term in reversed(order.split(",") if order else []):
        column, _, direction = term.partition(".")
        present = [r for r in rows if r.get(column) is not None]
        missing = [r for r in rows if r.get(column) is None]
        rows = sorted(present, key=lambda r: r[column], reverse=direction == "desc") + missing
    return rows


def _require_key(apikey: Optional[str]) -> None:
    if not apikey:
        raise HTTPException(status_code=401, detail="missing apikey")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/rest/v1/{table}")
def select(table: str, request: Request, apikey: Optional[str] = Header(None)):
    _require_key(apikey)
    match = _matching(request)
    rows = _ordered([r for r in TABLES[table] if match(r)], request.query_params.get("order"))
    limit = request.query_params.get("limit")
    if limit is not None:
        rows = rows[: int(limit)]
    return rows


@app.post("/rest/v1/{table}", status_code=201)
async def insert(table: str, request: Request, apikey: Optional[str] = Header(None)):
    _require_key(apikey)
    payload = await request.json()
    created = []
    for row in payload if isinstance(payload, list) else [payload]:
        now = _now()
        stored = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **row}
        TABLES[table].append(stored)
        created.append(stored)
    return JSONResponse(status_code=201, content=created)


@app.patch("/rest/v1/{table}")
async def update(table: str, request: Request, apikey: Optional[str] = Header(None)):
    _require_key(apikey)
    changes = await request.json()
    match = _matching(request)
    updated = []
    for row in TABLES[table]:
        if match(row):
            row.update(changes)
            row["updated_at"] = _now()
            updated.append(row)
    return updated


@app.delete("/rest/v1/{table}")
def delete(table: str, request: Request, apikey: Optional[str] = Header(None)):
    _require_key(apikey)
    match = _matching(request)
    removed = [r for r in TABLES[table] if match(r)]
    TABLES[table] = [r for r in TABLES[table] if not match(r)]
    return removed
