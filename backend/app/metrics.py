"""Prometheus metrics for monitoring and observability."""

from __future__ import annotations

import time
from collections.abc import Callable

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    Info,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .settings import APP_VERSION, SERVICE_NAME

# ==============================================================================
# APPLICATION INFO
# ==============================================================================

app_info = Info("ride_fare_compare", "Ride fare compare API information")
app_info.info({"version": APP_VERSION, "service": SERVICE_NAME})

# ==============================================================================
# HTTP METRICS
# ==============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ==============================================================================
# FARE COMPARISON METRICS
# ==============================================================================

fare_comparisons_total = Counter(
    "fare_comparisons_total",
    "Total fare comparisons by distance strategy and outcome",
    ["strategy", "result"],
)

distance_lookup_duration_seconds = Histogram(
    "distance_lookup_duration_seconds",
    "Distance resolution duration in seconds",
    ["strategy"],
    buckets=(0.0005, 0.001, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Only fixed routes are served; anything else collapses into one label.
KNOWN_ENDPOINTS = frozenset({"/fare", "/api/fare", "/health", "/health/details"})


def normalize_endpoint(path: str) -> str:
    """Bound label cardinality: unknown paths are reported as ``other``."""
    trimmed = path.rstrip("/") or "/"
    return trimmed if trimmed in KNOWN_ENDPOINTS else "other"


# ==============================================================================
# PROMETHEUS MIDDLEWARE
# ==============================================================================


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP request metrics."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Skip metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = normalize_endpoint(request.url.path)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status="500").inc()
            raise
        finally:
            duration = time.perf_counter() - start_time
            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

        http_requests_total.labels(
            method=method, endpoint=endpoint, status=str(response.status_code)
        ).inc()
        return response


# ==============================================================================
# METRICS ENDPOINT
# ==============================================================================


def get_metrics() -> Response:
    """Generate Prometheus metrics response."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "PrometheusMiddleware",
    "distance_lookup_duration_seconds",
    "fare_comparisons_total",
    "get_metrics",
    "http_request_duration_seconds",
    "http_requests_total",
    "normalize_endpoint",
]
