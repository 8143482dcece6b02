"""Per-provider fare estimation and ranking."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FareQuote:
    key: str
    label: str
    price: int

    def as_dict(self) -> dict[str, object]:
        return {"key": self.key, "label": self.label, "price": self.price}


@dataclass(frozen=True, slots=True)
class Provider:
    key: str
    label: str
    base_fee: float
    per_km_rate: float
    per_min_rate: float
    link_group: str

    def raw_price(self, distance_km: float, duration_min: float) -> float:
        return self.base_fee + self.per_km_rate * distance_km + self.per_min_rate * duration_min

    def quote(self, distance_km: float, duration_min: float) -> FareQuote:
        price = max(0, round_half_up(self.raw_price(distance_km, duration_min)))
        return FareQuote(key=self.key, label=self.label, price=price)


# Tuned roughly for Bengaluru local mobility.
DEFAULT_PROVIDERS: tuple[Provider, ...] = (
    Provider("ola_auto", "Ola (Auto)", 30, 12.0, 0.5, link_group="ola"),
    Provider("uber_auto", "Uber (Auto)", 35, 11.0, 0.6, link_group="uber"),
    Provider("rapido_bike", "Rapido (Bike)", 20, 9.0, 0.4, link_group="rapido"),
    Provider("nammayatri_auto", "Namma Yatri (Auto)", 25, 10.0, 0.4, link_group="namma"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (builtin ``round`` is half-to-even)."""
    return math.floor(value + 0.5)


def _check_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a non-negative finite number, got {value!r}")


def compute_fares(
    distance_km: float,
    duration_min: float,
    providers: Iterable[Provider] = DEFAULT_PROVIDERS,
) -> list[FareQuote]:
    """Price every provider and rank the quotes, cheapest first.

    Equal prices are ordered by provider key so the ranking never depends on the
    order of ``providers``.
    """
    _check_non_negative("distance_km", distance_km)
    _check_non_negative("duration_min", duration_min)
    quotes = [provider.quote(distance_km, duration_min) for provider in providers]
    quotes.sort(key=lambda q: (q.price, q.key, q.label))
    return quotes


def provider_index(providers: Sequence[Provider]) -> dict[str, Provider]:
    return {provider.key: provider for provider in providers}


__all__ = [
    "DEFAULT_PROVIDERS",
    "FareQuote",
    "Provider",
    "compute_fares",
    "provider_index",
    "round_half_up",
]
