"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from finance_gateway.config import settings

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """Stamps every record with a UTC time, its level and the service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=record.levelname,
            service=settings.service_name,
        )


def setup_logging(level: str = "INFO") -> None:
    """Send every log record to stdout as one JSON object per line"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(stream)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_recurring_run(user_id: str, processed: int, failed: int, duration_ms: float) -> None:
    """Log the outcome of one recurring-transaction batch"""
    logging.info(
        "Recurring batch completed",
        extra={
            "user_id": user_id,
            "step": "recurring_batch",
            "processed": processed,
            "failed": failed,
            "duration_ms": duration_ms,
        },
    )


def log_debt_payment(user_id: str, debt_id: str, amount: str, remaining: str, is_extra: bool) -> None:
    logging.info(
        "Debt payment recorded",
        extra={
            "user_id": user_id,
            "debt_id": debt_id,
            "step": "debt_payment",
            "amount": amount,
            "remaining_balance": remaining,
            "is_extra": is_extra,
        },
    )


def log_extraction(user_id: str, success: bool, duration_ms: float) -> None:
    logging.info(
        "Bill extraction finished",
        extra={
            "user_id": user_id,
            "step": "bill_extraction",
            "outcome": "success" if success else "failure",
            "duration_ms": duration_ms,
        },
    )


def log_request(
    request_id: str,
    user_id: Optional[str],
    method: str,
    route: str,
    status: int,
    duration_ms: float,
) -> None:
    """Access log line; health and metrics polling is logged at debug level"""
    level = logging.DEBUG if route in ("/health", "/metrics") else logging.INFO
    logging.log(
        level,
        f"{method} {route} {status}",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "method": method,
            "route": route,
            "status": status,
            "duration_ms": duration_ms,
        },
    )
