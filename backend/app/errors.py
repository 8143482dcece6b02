"""Error taxonomy surfaced to callers of the fare comparison service."""

from __future__ import annotations


class FareComparisonError(Exception):
    """Base class for failures reported back to the caller as a 400."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(FareComparisonError):
    """Origin or destination missing/empty."""


class DistanceUnavailable(FareComparisonError):
    """Distance/duration could not be resolved for the requested pair.

    ``reason`` tells the failure modes apart:

    - ``remote_unavailable``: an address was given but no Google API key is set
    - ``malformed_coordinates``: input looked like ``lat,lng`` but is not valid
    - ``remote_failed``: the distance service answered with an error
    - ``remote_timeout``: the distance service did not answer in time
    - ``invalid_result``: a resolver produced a negative or non-finite value
    """

    def __init__(self, message: str, *, reason: str = "remote_failed") -> None:
        super().__init__(message)
        self.reason = reason


__all__ = ["FareComparisonError", "ValidationError", "DistanceUnavailable"]
