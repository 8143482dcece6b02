"""Fare comparison orchestration: validate, resolve distance, price, link."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .deeplinks import build_links
from .distance import DistanceResolver
from .errors import DistanceUnavailable, ValidationError
from .fares import DEFAULT_PROVIDERS, FareQuote, Provider, compute_fares, round_half_up
from .logging_config import get_logger
from .metrics import distance_lookup_duration_seconds, fare_comparisons_total

logger = get_logger(__name__)

MISSING_INPUT_MESSAGE = "origin and destination are required"


@dataclass(slots=True)
class ComparisonResult:
    distance_km: float
    duration_min: int
    fares: list[FareQuote] = field(default_factory=list)
    links: dict[str, str] = field(default_factory=dict)

    @property
    def meta(self) -> dict[str, Any]:
        return {"distance_km": self.distance_km, "duration_min": self.duration_min}

    def as_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta,
            "fares": [quote.as_dict() for quote in self.fares],
            "links": dict(self.links),
        }


def _require(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(MISSING_INPUT_MESSAGE)
    return value


class FareComparisonService:
    def __init__(
        self,
        resolver: DistanceResolver,
        providers: Sequence[Provider] = DEFAULT_PROVIDERS,
    ) -> None:
        self.resolver = resolver
        self.providers = tuple(providers)

    @property
    def strategy(self) -> str:
        return self.resolver.strategy

    async def compare(self, origin: Any, destination: Any) -> ComparisonResult:
        """Build the ranked quote list and continuation links for one trip.

        Raises:
            ValidationError: origin or destination missing/blank; nothing is resolved.
            DistanceUnavailable: propagated from the resolver unchanged.
        """
        origin = _require(origin)
        destination = _require(destination)

        started = time.perf_counter()
        try:
            distance = await self.resolver.resolve(origin, destination)
        except DistanceUnavailable as exc:
            fare_comparisons_total.labels(strategy=self.strategy, result=exc.reason).inc()
            logger.info("fare_comparison_failed", strategy=self.strategy, reason=exc.reason)
            raise
        finally:
            distance_lookup_duration_seconds.labels(strategy=self.strategy).observe(
                time.perf_counter() - started
            )

        fares = compute_fares(distance.distance_km, distance.duration_min, self.providers)
        result = ComparisonResult(
            distance_km=round(distance.distance_km, 2),
            duration_min=round_half_up(distance.duration_min),
            fares=fares,
            links=build_links(origin, destination),
        )
        fare_comparisons_total.labels(strategy=self.strategy, result="ok").inc()
        logger.info(
            "fare_compared",
            strategy=self.strategy,
            distance_km=result.distance_km,
            duration_min=result.duration_min,
            cheapest=fares[0].key if fares else None,
        )
        return result


__all__ = ["ComparisonResult", "FareComparisonService", "MISSING_INPUT_MESSAGE"]
