"""Error types raised by the trip planner and its map provider."""
from __future__ import annotations

from typing import Optional


class TripPlannerError(Exception):
    """Base class for trip planner failures."""


class ConfigurationError(TripPlannerError):
    """A required provider setting (the API key) is missing."""


class ProviderError(TripPlannerError):
    """An external map provider rejected a request or could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RoutingError(ProviderError):
    """Routes API returned a non-success status or no routes."""


class PlacesError(ProviderError):
    """Places API returned a non-success status."""


class DiscoveryError(TripPlannerError):
    """At least one keyword search failed during optional stop discovery."""
