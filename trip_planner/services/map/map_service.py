from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from trip_planner.models.response import AddressSuggestion
from trip_planner.models.trip import PlaceCandidate, RouteResult


class MapService(ABC):
    """Map service abstract interface"""

    @abstractmethod
    async def compute_route(
        self,
        origin_address: str,
        destination_address: str,
        intermediate_addresses: Sequence[str] = (),
        departure_time_iso: Optional[str] = None,
    ) -> RouteResult:
        """Compute a driving route through the given addresses, in order

        Raises:
            RoutingError: the provider rejected the request or returned no route
        """
        pass

    @abstractmethod
    async def search_places_along_route(
        self, query: str, encoded_polyline: str, max_results: int = 20
    ) -> List[PlaceCandidate]:
        """Free-text place search biased to the corridor of an encoded route

        Raises:
            PlacesError: the provider rejected the request
        """
        pass

    @abstractmethod
    async def autocomplete_places(self, text: str) -> List[AddressSuggestion]:
        """Address suggestions for partial free text"""
        pass
