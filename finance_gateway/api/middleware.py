"""FastAPI middleware for request tracing, access logs and metrics"""

import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from finance_gateway.infrastructure.observability.logging import log_request
from finance_gateway.infrastructure.observability.metrics import request_duration_histogram


def route_template(request: Request) -> str:
    """Matched route path (``/v1/accounts/{account_id}``), or the raw path when nothing matched"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and write one access log line per request.

    An incoming X-Request-ID is reused so callers can correlate their own logs.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        log_request(
            request_id,
            request.headers.get("X-User-ID"),
            request.method,
            route_template(request),
            response.status_code,
            round((time.perf_counter() - started) * 1000, 2),
        )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request latency, labelled by route template"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=route_template(request),
            status=response.status_code,
        ).observe(time.perf_counter() - started)
        return response
