from __future__ import annotations

from pydantic import BaseModel, Field


# --- Request ---
class FareRequest(BaseModel):
    # Optional at the schema level so a missing field reaches the service's
    # own validation and comes back as {"error": ...}.
    origin: str | None = Field(
        default=None, description="'lat,lng' (e.g. 12.9352,77.6245) or an address"
    )
    destination: str | None = Field(
        default=None, description="'lat,lng' (e.g. 12.9716,77.5946) or an address"
    )


# --- Response ---
class FareMeta(BaseModel):
    distance_km: float = Field(ge=0)
    duration_min: int = Field(ge=0)


class FareQuoteOut(BaseModel):
    key: str
    label: str
    price: int = Field(ge=0)


class ProviderLinks(BaseModel):
    ola: str
    uber: str
    rapido: str
    namma: str


class FareResponse(BaseModel):
    meta: FareMeta
    fares: list[FareQuoteOut] = Field(default_factory=list)
    links: ProviderLinks


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool = True
