from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from uuid import uuid4

import structlog
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request ID (accessible throughout the request lifecycle)
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

access_logger = structlog.get_logger("backend.app.access")


def add_cors(app, origins: list[str]):
    if not origins:
        # Nothing configured: no cross-origin access
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add request ID tracing for distributed debugging.

    - Generates UUID for each request or uses existing X-Request-ID header
    - Adds X-Request-ID to response headers
    - Sets request ID in context variable so every log line carries it
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        token = request_id_ctx.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, path, status, latency."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        started = time.perf_counter()
        response = await call_next(request)
        access_logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            latency_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response


class RequestIDLogFilter(logging.Filter):
    """Adds ``request_id`` to stdlib log records (``%(request_id)s``)."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = request_id_ctx.get("")
        record.request_id = request_id if request_id else "-"  # type: ignore[attr-defined]
        return True


def add_request_id_tracing(app):
    """Add request ID middleware and configure logging."""
    # Added last so it runs outermost and the access log sees the request id.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    root = logging.getLogger()
    if not any(isinstance(f, RequestIDLogFilter) for f in root.filters):
        root.addFilter(RequestIDLogFilter())


def get_request_id() -> str:
    """Get the current request ID from context."""
    return request_id_ctx.get("")
