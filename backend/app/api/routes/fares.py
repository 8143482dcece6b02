from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Request

from ...contracts import ErrorResponse, FareRequest, FareResponse
from ...service import FareComparisonService

router = APIRouter(tags=["fares"])


def get_fare_service(request: Request) -> FareComparisonService:
    return request.app.state.fare_service


@router.post(
    "/fare",
    response_model=FareResponse,
    responses={400: {"model": ErrorResponse}},
)
async def compare_fares(
    payload: FareRequest | None = Body(default=None),
    service: FareComparisonService = Depends(get_fare_service),
):
    """Rank provider fares for a trip and return continuation links."""
    payload = payload or FareRequest()
    result = await service.compare(payload.origin, payload.destination)
    return result.as_dict()


# Path used by the original web client.
router.add_api_route(
    "/api/fare",
    compare_fares,
    methods=["POST"],
    response_model=FareResponse,
    responses={400: {"model": ErrorResponse}},
    include_in_schema=False,
)


__all__ = ["router", "get_fare_service"]
