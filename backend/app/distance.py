"""Distance/duration resolution for an origin/destination pair.

Two strategies share the :class:`DistanceResolver` interface:

- :class:`LocalDistanceResolver` estimates from strict ``lat,lng`` pairs using the
  haversine great-circle distance and an assumed average city speed.
- :class:`RemoteDistanceResolver` asks the Google Distance Matrix API, which also
  accepts free-form addresses.

:func:`build_resolver` picks one once at startup, based on whether a Google API key
is configured.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import DistanceUnavailable
from .settings import Settings

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_CITY_SPEED_KMH = 22.0

LAT_LNG_PATTERN = re.compile(r"^\s*-?\d+\.\d+\s*,\s*-?\d+\.\d+\s*$")
# Only digits, signs, dots, whitespace and commas: meant as coordinates, not an address.
_COORDINATE_LIKE = re.compile(r"^[\d\s.,+\-]*\d[\d\s.,+\-]*$")

REMOTE_FAILED_MESSAGE = "Google Distance Matrix request failed"
REMOTE_TIMEOUT_MESSAGE = "Google Distance Matrix request timed out"
ADDRESS_NEEDS_KEY_MESSAGE = (
    "GOOGLE_API_KEY missing. Provide lat,lng pairs, or set a key to use addresses."
)


@dataclass(frozen=True, slots=True)
class DistanceResult:
    distance_km: float
    duration_min: float

    def __post_init__(self) -> None:
        for name in ("distance_km", "duration_min"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise DistanceUnavailable(
                    f"Invalid {name} resolved: {value!r}", reason="invalid_result"
                )


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two points."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_lat_lng(raw: str) -> bool:
    return bool(LAT_LNG_PATTERN.match(raw or ""))


def looks_like_coordinates(raw: str) -> bool:
    payload = (raw or "").strip()
    return bool(_COORDINATE_LIKE.match(payload))


def parse_lat_lng(raw: str) -> tuple[float, float]:
    """Parse a strict ``lat,lng`` string.

    Raises:
        DistanceUnavailable: ``malformed_coordinates`` when the string does not match
            the strict decimal pattern or falls outside valid lat/lng ranges.
    """
    if not is_lat_lng(raw):
        raise DistanceUnavailable(
            f"Malformed coordinates {raw.strip()!r}. Use decimal 'lat,lng' "
            "(e.g. 12.9352,77.6245).",
            reason="malformed_coordinates",
        )
    lat_str, lng_str = raw.split(",", 1)
    lat = float(lat_str)
    lng = float(lng_str)
    if not -90 <= lat <= 90:
        raise DistanceUnavailable(
            f"Malformed coordinates {raw.strip()!r}: latitude must be between -90 and 90",
            reason="malformed_coordinates",
        )
    if not -180 <= lng <= 180:
        raise DistanceUnavailable(
            f"Malformed coordinates {raw.strip()!r}: longitude must be between -180 and 180",
            reason="malformed_coordinates",
        )
    return lat, lng


class DistanceResolver(ABC):
    """Turns an (origin, destination) pair into a :class:`DistanceResult`."""

    strategy: str = "unknown"

    @abstractmethod
    async def resolve(self, origin: str, destination: str) -> DistanceResult:
        """Resolve travel distance and duration, or raise DistanceUnavailable."""


class LocalDistanceResolver(DistanceResolver):
    strategy = "local"

    def __init__(self, speed_kmh: float = DEFAULT_CITY_SPEED_KMH) -> None:
        if speed_kmh <= 0:
            raise ValueError("speed_kmh must be positive")
        self.speed_kmh = speed_kmh

    async def resolve(self, origin: str, destination: str) -> DistanceResult:
        return self.estimate(origin, destination)

    def estimate(self, origin: str, destination: str) -> DistanceResult:
        for raw in (origin, destination):
            if not is_lat_lng(raw) and not looks_like_coordinates(raw):
                raise DistanceUnavailable(ADDRESS_NEEDS_KEY_MESSAGE, reason="remote_unavailable")

        olat, olng = parse_lat_lng(origin)
        dlat, dlng = parse_lat_lng(destination)
        distance_km = haversine_km(olat, olng, dlat, dlng)
        duration_min = distance_km / self.speed_kmh * 60
        return DistanceResult(distance_km=distance_km, duration_min=duration_min)


class RemoteDistanceResolver(DistanceResolver):
    """Google Distance Matrix lookup; one request, no retries."""

    strategy = "remote"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://maps.googleapis.com/maps/api/distancematrix/json",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required for remote distance lookups")
        self._api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def resolve(self, origin: str, destination: str) -> DistanceResult:
        started = time.perf_counter()
        try:
            payload = await asyncio.wait_for(
                self._fetch(origin, destination), timeout=self.timeout_seconds
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning(
                "Distance matrix lookup timed out after %.1fs", self.timeout_seconds
            )
            raise DistanceUnavailable(REMOTE_TIMEOUT_MESSAGE, reason="remote_timeout") from exc
        except httpx.HTTPStatusError as exc:
            # str(exc) embeds the request URL, which carries the key.
            logger.warning(
                "Distance matrix lookup failed: HTTP %s", exc.response.status_code
            )
            raise DistanceUnavailable(REMOTE_FAILED_MESSAGE) from exc
        except httpx.HTTPError as exc:
            logger.warning("Distance matrix lookup failed: %s", type(exc).__name__)
            raise DistanceUnavailable(REMOTE_FAILED_MESSAGE) from exc
        except ValueError as exc:
            logger.warning("Distance matrix returned a non-JSON body")
            raise DistanceUnavailable(REMOTE_FAILED_MESSAGE) from exc

        result = parse_distance_matrix(payload)
        logger.info(
            "Distance matrix lookup distance=%.3fkm duration=%.1fmin latency=%.1fms",
            result.distance_km,
            result.duration_min,
            (time.perf_counter() - started) * 1000,
        )
        return result

    async def _fetch(self, origin: str, destination: str) -> Any:
        params = {"origins": origin, "destinations": destination, "key": self._api_key}
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport
        ) as client:
            resp = await client.get(self.base_url, params=params)
            resp.raise_for_status()
            return resp.json()


def parse_distance_matrix(payload: Any) -> DistanceResult:
    """Extract the single origin/destination element from a Distance Matrix reply."""
    if not isinstance(payload, dict):
        raise DistanceUnavailable(REMOTE_FAILED_MESSAGE)
    status = payload.get("status")
    if status != "OK":
        logger.warning("Distance matrix status=%s", status)
        raise DistanceUnavailable(f"{REMOTE_FAILED_MESSAGE} ({status or 'no status'})")

    rows = payload.get("rows")
    first_row = rows[0] if isinstance(rows, list) and rows and isinstance(rows[0], dict) else {}
    elements = first_row.get("elements")
    element = (
        elements[0]
        if isinstance(elements, list) and elements and isinstance(elements[0], dict)
        else None
    )
    if element is None:
        raise DistanceUnavailable(f"{REMOTE_FAILED_MESSAGE} (no route element)")
    element_status = element.get("status")
    if element_status != "OK":
        logger.warning("Distance matrix element status=%s", element_status)
        raise DistanceUnavailable(
            f"{REMOTE_FAILED_MESSAGE} ({element_status or 'no element status'})"
        )

    try:
        meters = float(element["distance"]["value"])
        seconds = float(element["duration"]["value"])
    except (KeyError, TypeError, ValueError) as exc:
        raise DistanceUnavailable(f"{REMOTE_FAILED_MESSAGE} (incomplete element)") from exc
    return DistanceResult(distance_km=meters / 1000, duration_min=seconds / 60)


def build_resolver(config: Settings) -> DistanceResolver:
    """Select the resolution strategy from configuration."""
    api_key = config.google_api_key
    if api_key:
        logger.info("Distance resolver: remote (Google Distance Matrix)")
        return RemoteDistanceResolver(
            api_key,
            base_url=config.DISTANCE_MATRIX_URL,
            timeout_seconds=config.DISTANCE_TIMEOUT_SECONDS,
        )
    logger.info(
        "Distance resolver: local haversine at %.1f km/h", config.AVERAGE_CITY_SPEED_KMH
    )
    return LocalDistanceResolver(speed_kmh=config.AVERAGE_CITY_SPEED_KMH)


__all__ = [
    "DistanceResult",
    "DistanceResolver",
    "LocalDistanceResolver",
    "RemoteDistanceResolver",
    "build_resolver",
    "haversine_km",
    "parse_distance_matrix",
    "parse_lat_lng",
]
