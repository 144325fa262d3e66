"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_gateway.api.dependencies import get_request_id
from finance_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_gateway.api.v1 import (
    accounts,
    budgets,
    categories,
    credit_cards,
    debts,
    extraction,
    goals,
    investments,
    notifications,
    recurring,
    reports,
    statements,
    transactions,
)
from finance_gateway.domain.exceptions import (
    BackendError,
    DomainException,
    ExtractionError,
    ImportFormatError,
    InvalidOperationError,
    NotAuthenticatedError,
    RecordNotFoundError,
)
from finance_gateway.infrastructure.database.session import init_db
from finance_gateway.infrastructure.observability.logging import setup_logging
from finance_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Domain errors mapped to HTTP status codes; anything else is a 500
ERROR_STATUS = (
    (NotAuthenticatedError, 401),
    (RecordNotFoundError, 404),
    (InvalidOperationError, 422),
    (ImportFormatError, 422),
    (ExtractionError, 502),
    (BackendError, 503),
)


def error_status(exc: DomainException) -> int:
    for exc_type, status in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status
    return 500


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status = error_status(exc)
    request_id = get_request_id(request)
    if status >= 500:
        logger.error(f"{type(exc).__name__}: {exc}", extra={"request_id": request_id})
    else:
        logger.warning(f"{type(exc).__name__}: {exc}", extra={"request_id": request_id})
    return JSONResponse(status_code=status, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Local SQL store creates its tables; a hosted backend owns its own schema
    if not settings.uses_hosted_backend:
        init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Gateway",
        description="Personal finance ledger, planning and reporting service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainException, domain_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "backend": "rest" if settings.uses_hosted_backend else "sql",
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(categories.router, prefix="/v1", tags=["categories"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(extraction.router, prefix="/v1", tags=["bills"])
    app.include_router(budgets.router, prefix="/v1", tags=["budgets"])
    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(investments.router, prefix="/v1", tags=["investments"])
    app.include_router(recurring.router, prefix="/v1", tags=["recurring"])
    app.include_router(credit_cards.router, prefix="/v1", tags=["credit-cards"])
    app.include_router(notifications.router, prefix="/v1", tags=["notifications"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(statements.router, prefix="/v1", tags=["statements"])

    return app


app = create_app()
