"""
Prometheus metrics for the catalog API.

Tracks HTTP traffic, authentication events and product commands.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "clean_api_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "clean_api_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0),
)

# Auth metrics
auth_events_total = Counter(
    "clean_api_auth_events_total",
    "Total authentication events",
    ["event", "status"],
)

# Product metrics
product_commands_total = Counter(
    "clean_api_product_commands_total",
    "Total product commands handled",
    ["command", "status"],
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_auth_event(event: str, success: bool):
    """Track login, register, password and logout outcomes."""
    status = "success" if success else "failure"
    auth_events_total.labels(event=event, status=status).inc()


def track_product_command(command: str, success: bool):
    """Track create, update and delete product commands."""
    status = "success" if success else "failure"
    product_commands_total.labels(command=command, status=status).inc()


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
