"""Prometheus metric definitions shared across services."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


payment_requests_total = Counter("payment_requests_total", "Total payment submissions", ["service"])
payment_outcomes_total = Counter(
    "payment_outcomes_total",
    "Payment submissions by client-visible status",
    ["service", "status"],
)
payment_lookups_total = Counter(
    "payment_lookups_total",
    "Payment lookups by outcome",
    ["service", "outcome"],
)
bank_request_duration_seconds = Histogram(
    "bank_request_duration_seconds",
    "Acquiring bank call duration seconds",
    ["service", "operation"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
