"""Prometheus metrics for row store calls, recurring batches and bill extraction"""

from prometheus_client import Counter, Histogram

# Row store
store_latency_histogram = Histogram(
    "finance_store_latency_seconds",
    "Row store call latency",
    ["operation"],  # select | insert | update | delete
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

store_failure_counter = Counter(
    "finance_store_failures_total",
    "Failed row store calls",
    ["operation"],
)

# Recurring transactions
recurring_materialized_counter = Counter(
    "finance_recurring_materialized_total",
    "Transactions created from recurring entries",
)

recurring_failure_counter = Counter(
    "finance_recurring_failures_total",
    "Recurring entries that failed to materialize",
)

# Bill extraction
extraction_latency_histogram = Histogram(
    "finance_extraction_latency_seconds",
    "Bill extraction model response time",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

extraction_failure_counter = Counter(
    "finance_extraction_failures_total",
    "Failed bill extractions",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recurring_run(processed: int, failed: int) -> None:
    """Record the outcome of a recurring-transaction batch"""
    if processed:
        recurring_materialized_counter.inc(processed)
    if failed:
        recurring_failure_counter.inc(failed)
