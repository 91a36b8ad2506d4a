"""Shared stubs for trip planner tests."""
from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest

from trip_planner.config import Settings
from trip_planner.exceptions import PlacesError, RoutingError
from trip_planner.models.request import TripPlanRequest
from trip_planner.models.response import AddressSuggestion
from trip_planner.models.trip import PlaceCandidate, RouteResult
from trip_planner.services.map.map_service import MapService

# Google's reference polyline: (38.5, -120.2), (40.7, -120.95), (43.252, -126.453)
SAMPLE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


class StubMapService(MapService):
    """In-memory map provider recording every call."""

    def __init__(
        self,
        *,
        leg_minutes: int = 20,
        polyline: Optional[str] = SAMPLE_POLYLINE,
        places: Optional[Dict[str, Union[List[PlaceCandidate], Exception]]] = None,
        reject_route: Optional[Callable[[Sequence[str]], bool]] = None,
        suggestions: Sequence[AddressSuggestion] = (),
    ):
        self.leg_minutes = leg_minutes
        self.polyline = polyline
        self.places = places or {}
        self.reject_route = reject_route
        self.suggestions = list(suggestions)
        self.route_calls: List[dict] = []
        self.search_calls: List[dict] = []
        self.autocomplete_calls: List[str] = []

    async def compute_route(
        self,
        origin_address,
        destination_address,
        intermediate_addresses=(),
        departure_time_iso=None,
    ):
        intermediates = list(intermediate_addresses)
        self.route_calls.append(
            {
                "origin": origin_address,
                "destination": destination_address,
                "intermediates": intermediates,
                "departure": departure_time_iso,
            }
        )
        if self.reject_route is not None and self.reject_route(intermediates):
            raise RoutingError(
                "Routes API error (400): too many intermediates",
                status_code=400,
                body="too many intermediates",
            )

        legs = len(intermediates) + 1
        return RouteResult(
            encoded_polyline=self.polyline,
            leg_durations_minutes=tuple([self.leg_minutes] * legs),
            total_drive_minutes=self.leg_minutes * legs,
        )

    async def search_places_along_route(self, query, encoded_polyline, max_results=20):
        self.search_calls.append(
            {"query": query, "polyline": encoded_polyline, "max_results": max_results}
        )
        result = self.places.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def autocomplete_places(self, text):
        self.autocomplete_calls.append(text)
        return list(self.suggestions)


def make_candidate(index: int, *, lat: float = None, lng: float = None, address: str = None):
    """Candidates spaced roughly 1 km apart unless coordinates are given."""
    return PlaceCandidate(
        id=f"place-{index}",
        name=f"Store {index}",
        address=address or f"{index} Main St, Austin, TX",
        lat=lat if lat is not None else 30.0 + index * 0.01,
        lng=lng if lng is not None else -97.0,
    )


def make_request(**overrides) -> TripPlanRequest:
    payload = {
        "startAddress": "A",
        "endAddress": "B",
        "roundTrip": False,
        "dateISO": "2025-06-01",
        "startTime": "08:00",
        "endTime": "17:00",
        "mustStops": [],
        "maxOptionalStops": 0,
        "optionalServiceMinutes": 15,
        "keywords": [],
    }
    payload.update(overrides)
    return TripPlanRequest.model_validate(payload)


@pytest.fixture
def test_settings():
    return Settings(google_maps_api_key="test-key", timezone="America/Chicago")


@pytest.fixture
def places_error():
    return PlacesError("Places API error (500): backend error", status_code=500)
