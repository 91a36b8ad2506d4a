"""
Main trip planning service
Integrates route resolution, optional stop discovery, itinerary assembly and export
"""
import logging
from typing import List
from zoneinfo import ZoneInfoNotFoundError

from trip_planner.config import Settings
from trip_planner.exceptions import ConfigurationError, DiscoveryError
from trip_planner.models.request import TripPlanRequest
from trip_planner.models.response import AddressSuggestion, TripPlanResponse
from trip_planner.models.trip import PlaceCandidate
from trip_planner.services.map.map_service import MapService
from trip_planner.services.trip.discovery_service import DiscoveryService
from trip_planner.services.trip.itinerary_service import ItineraryService
from trip_planner.services.trip.response_builder import ResponseBuilderService
from trip_planner.utils.time_utils import (
    format_local_iso,
    parse_local_datetime,
    resolve_timezone,
)

logger = logging.getLogger(__name__)

DISCOVERY_FAILED_NOTE = (
    "Optional stop discovery failed. "
    "Planned route will include must-stop locations only."
)


class TripPlannerService:
    """
    Main trip planning service

    Architecture: Base route → Optional stop discovery → Itinerary assembly → Response building
    """

    def __init__(self, map_service: MapService, config: Settings):
        self.map_service = map_service
        self.config = config

        try:
            tz = resolve_timezone(config.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone {config.timezone!r}") from e
        self.tz = tz

        self.discovery_service = DiscoveryService(
            map_service, max_candidates=config.max_optional_candidates
        )
        self.itinerary_service = ItineraryService(map_service, tz=tz)
        self.response_builder = ResponseBuilderService(
            max_url_length=config.max_map_url_length
        )

    async def plan_trip(self, request: TripPlanRequest) -> TripPlanResponse:
        """
        Plan a one-day trip for a validated request

        Raises:
            RoutingError: the base route, or the final route without optional stops, failed
        """
        start_address = request.start_address.strip()
        end_address = (
            start_address if request.round_trip else request.end_address.strip()
        )
        must_stops = [
            stop.model_copy(update={"address": stop.address.strip()})
            for stop in request.must_stops
            if stop.address.strip()
        ]
        request = request.model_copy(
            update={
                "start_address": start_address,
                "end_address": end_address,
                "must_stops": must_stops,
            }
        )

        logger.info(
            "Planning trip on %s from %r to %r with %d must stops",
            request.date_iso,
            start_address,
            end_address,
            len(must_stops),
        )

        departure = parse_local_datetime(request.date_iso, request.start_time, self.tz)

        # Step 1: Base route through the must stops only
        base_route = await self.map_service.compute_route(
            origin_address=start_address,
            destination_address=end_address,
            intermediate_addresses=[stop.address for stop in must_stops],
            departure_time_iso=format_local_iso(departure),
        )

        # Step 2: Discover optional stops along the base route
        notes: List[str] = []
        candidates: List[PlaceCandidate] = []
        if (
            request.max_optional_stops > 0
            and request.keywords
            and base_route.encoded_polyline
        ):
            try:
                candidates = await self.discovery_service.discover_candidates(
                    keywords=request.keywords,
                    encoded_polyline=base_route.encoded_polyline,
                    must_addresses=[stop.address for stop in must_stops],
                    max_results_per_keyword=self.config.places_max_results,
                )
            except DiscoveryError as e:
                logger.warning("Optional stop discovery failed: %s", e)
                notes.append(DISCOVERY_FAILED_NOTE)
            else:
                logger.info("Found %d optional stop candidates", len(candidates))

        # Step 3: Assemble the itinerary, shedding optional stops if needed
        itinerary = await self.itinerary_service.assemble_itinerary(
            request, must_stops, candidates, base_route=base_route
        )

        # Step 4: Build response with CSV and map links
        return self.response_builder.build_response(
            itinerary,
            export_waypoint_limit=request.export_waypoint_limit,
            notes=notes,
        )

    async def suggest_addresses(self, query: str) -> List[AddressSuggestion]:
        """Address autocomplete for the planner form; short queries return nothing"""
        text = query.strip()
        if len(text) < self.config.autocomplete_min_chars:
            return []
        return await self.map_service.autocomplete_places(text)
