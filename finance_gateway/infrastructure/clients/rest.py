"""HTTP client for the hosted row backend (PostgREST dialect)"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional, Sequence

import httpx

from finance_gateway.config import settings
from finance_gateway.domain.exceptions import BackendError
from finance_gateway.infrastructure.observability.metrics import store_failure_counter, store_latency_histogram
from finance_gateway.infrastructure.store import Filters, Ordering, Row, RowStore


def _encode_value(value: Any) -> str:
    """Value as it appears in a PostgREST filter (``col=eq.<value>``)"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def build_params(
    eq: Optional[Filters] = None,
    gte: Optional[Filters] = None,
    lte: Optional[Filters] = None,
    order: Optional[Ordering] = None,
    limit: Optional[int] = None,
) -> List[tuple]:
    """
    Translate filters into PostgREST query parameters.

    Example:
        build_params(eq={"user_id": "u1"}, gte={"date": date(2024, 1, 1)}, order=[("date", True)])
        -> [("user_id", "eq.u1"), ("date", "gte.2024-01-01"), ("order", "date.desc")]
    """
    params: List[tuple] = []
    for column, value in (eq or {}).items():
        params.append((column, "is.null" if value is None else f"eq.{_encode_value(value)}"))
    for column, value in (gte or {}).items():
        params.append((column, f"gte.{_encode_value(value)}"))
    for column, value in (lte or {}).items():
        params.append((column, f"lte.{_encode_value(value)}"))
    if order:
        params.append(("order", ",".join(f"{col}.{'desc' if desc else 'asc'}" for col, desc in order)))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


class RestRowStore(RowStore):
    """
    Row store backed by the hosted backend's REST interface.

    Every call is a single HTTP request to ``{base_url}/rest/v1/{table}``. The
    caller's access token (when given) is forwarded so the backend's row-level
    security applies; otherwise the service API key is used.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.backend_api_key
        self.access_token = access_token
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _headers(self, prefer: str | None = None) -> dict:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        operation: str,
        method: str,
        table: str,
        params: Optional[List[tuple]] = None,
        body: Any = None,
        prefer: str | None = None,
    ) -> Any:
        """
        Send one request and decode its JSON body.

        Raises:
            BackendError: On timeout, network failure, HTTP error status or invalid JSON
        """
        url = f"{self.base_url}/rest/v1/{table}"
        content = json.dumps(_jsonable(body)) if body is not None else None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with store_latency_histogram.labels(operation=operation).time():
                    response = await client.request(
                        method,
                        url,
                        params=params,
                        content=content,
                        headers=self._headers(prefer),
                    )
                    response.raise_for_status()
                if not response.content:
                    return []
                return response.json()

            except httpx.TimeoutException as e:
                store_failure_counter.labels(operation=operation).inc()
                raise BackendError(f"Backend timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise BackendError(
                    f"Backend error on {table}: {e.response.status_code} {e.response.text}",
                    status_code=e.response.status_code,
                ) from e
            except httpx.RequestError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise BackendError(f"Backend unreachable: {e}") from e
            except ValueError as e:
                store_failure_counter.labels(operation=operation).inc()
                raise BackendError(f"Invalid response from backend: {e}") from e

    async def select(
        self,
        table: str,
        eq: Optional[Filters] = None,
        gte: Optional[Filters] = None,
        lte: Optional[Filters] = None,
        order: Optional[Ordering] = None,
        limit: Optional[int] = None,
    ) -> List[Row]:
        params = [("select", "*")] + build_params(eq, gte, lte, order, limit)
        return await self._request("select", "GET", table, params=params)

    async def insert_many(self, table: str, rows: Sequence[Row]) -> List[Row]:
        if not rows:
            return []
        return await self._request("insert", "POST", table, body=list(rows), prefer="return=representation")

    async def update(self, table: str, eq: Filters, values: Row) -> List[Row]:
        return await self._request(
            "update", "PATCH", table, params=build_params(eq), body=values, prefer="return=representation"
        )

    async def delete(self, table: str, eq: Filters) -> int:
        removed = await self._request("delete", "DELETE", table, params=build_params(eq), prefer="return=representation")
        return len(removed)
