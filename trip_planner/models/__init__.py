from .request import MustStop, TripPlanRequest
from .response import (
    AddressSuggestion,
    MapsSegment,
    SuggestResponse,
    TimedStop,
    TripPlanResponse,
    TripSummary,
)
from .trip import (
    Itinerary,
    LatLng,
    LegLocation,
    PlaceCandidate,
    PlannedStop,
    RouteResult,
    StopTiming,
    StopType,
)

__all__ = [
    "AddressSuggestion",
    "Itinerary",
    "LatLng",
    "LegLocation",
    "MapsSegment",
    "MustStop",
    "PlaceCandidate",
    "PlannedStop",
    "RouteResult",
    "StopTiming",
    "StopType",
    "SuggestResponse",
    "TimedStop",
    "TripPlanRequest",
    "TripPlanResponse",
    "TripSummary",
]
