"""Health diagnostics for the fare comparison service."""

from __future__ import annotations

import time
from typing import Any
from urllib.parse import urlparse

from .distance import DistanceResolver, LocalDistanceResolver, RemoteDistanceResolver
from .settings import APP_VERSION, SERVICE_NAME, Settings


def _is_configured(value: str | None) -> bool:
    """Return True when a config string is non-empty after trimming."""
    if value is None:
        return False
    return bool(value.strip())


class HealthChecker:
    """Reports how the service is wired without calling paid upstreams."""

    def __init__(self, config: Settings, resolver: DistanceResolver) -> None:
        self._config = config
        self._resolver = resolver

    async def check_all(self) -> dict[str, Any]:
        checks = {
            "distance": self._check_distance(),
            "sentry": (
                self._check_sentry() if _is_configured(self._config.SENTRY_DSN) else {"status": "disabled"}
            ),
        }
        all_ok = all(check.get("status") in {"ok", "disabled"} for check in checks.values())
        return {
            "status": "healthy" if all_ok else "degraded",
            "timestamp": time.time(),
            "service": SERVICE_NAME,
            "version": APP_VERSION,
            "checks": checks,
        }

    def _check_distance(self) -> dict[str, Any]:
        resolver = self._resolver
        if isinstance(resolver, RemoteDistanceResolver):
            # Only the host is reported; the key stays out of responses.
            host = urlparse(resolver.base_url).netloc
            if not host:
                return {
                    "status": "error",
                    "strategy": resolver.strategy,
                    "error": "Invalid DISTANCE_MATRIX_URL",
                }
            return {
                "status": "ok",
                "strategy": resolver.strategy,
                "host": host,
                "timeout_seconds": resolver.timeout_seconds,
            }
        if isinstance(resolver, LocalDistanceResolver):
            return {
                "status": "ok",
                "strategy": resolver.strategy,
                "speed_kmh": resolver.speed_kmh,
                "accepts": "lat,lng pairs only",
            }
        return {"status": "ok", "strategy": resolver.strategy}

    def _check_sentry(self) -> dict[str, Any]:
        """Check if Sentry is configured (doesn't actually test connectivity)."""
        dsn = self._config.SENTRY_DSN or ""
        if "@" in dsn and "//" in dsn:
            return {
                "status": "ok",
                "environment": self._config.SENTRY_ENVIRONMENT,
                "release": self._config.SENTRY_RELEASE or "unset",
            }
        return {"status": "error", "error": "Invalid SENTRY_DSN format"}


__all__ = ["HealthChecker"]
