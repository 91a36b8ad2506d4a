"""
Itinerary assembly - selects optional stops, computes the final route
and builds the stop timeline
"""
import dataclasses
import logging
from datetime import datetime, tzinfo
from typing import List, NamedTuple, Optional, Sequence, Tuple

from trip_planner.exceptions import RoutingError
from trip_planner.models.request import MustStop, TripPlanRequest
from trip_planner.models.trip import (
    Itinerary,
    LatLng,
    PlaceCandidate,
    PlannedStop,
    RouteResult,
    StopTiming,
    StopType,
)
from trip_planner.services.map.map_service import MapService
from trip_planner.utils.geo import decode_polyline
from trip_planner.utils.time_utils import (
    add_minutes,
    diff_minutes,
    format_local_iso,
    parse_local_datetime,
)

logger = logging.getLogger(__name__)

SHED_NOTE = (
    "Dropped an optional stop to satisfy routing limits. "
    "Reduce optional stops if you want to keep all candidates."
)


class RoutedStops(NamedTuple):
    route: RouteResult
    optional_stops: Tuple[PlannedStop, ...]
    notes: List[str]
    attempts: int


def build_timeline(
    stops: Sequence[PlannedStop],
    leg_durations_minutes: Sequence[int],
    departure: datetime,
) -> Tuple[StopTiming, ...]:
    """
    Arrival and departure times for each stop.

    Leg i connects stop i to stop i + 1; a missing leg counts as zero minutes.
    """
    timings = []
    cursor = departure

    for index, stop in enumerate(stops):
        if index > 0:
            leg_index = index - 1
            if leg_index < len(leg_durations_minutes):
                cursor = add_minutes(cursor, leg_durations_minutes[leg_index])
        eta = cursor
        cursor = add_minutes(cursor, stop.service_minutes)
        timings.append(
            StopTiming(eta=format_local_iso(eta), depart=format_local_iso(cursor))
        )

    return tuple(timings)


def backfill_coordinates(
    stops: Sequence[PlannedStop], route: RouteResult
) -> Tuple[PlannedStop, ...]:
    """Give stops without coordinates the matching leg endpoint from the route."""
    locations = route.leg_locations
    last_index = len(stops) - 1
    path: Optional[List[LatLng]] = None
    filled = []

    for index, stop in enumerate(stops):
        if stop.lat is not None and stop.lng is not None:
            filled.append(stop)
            continue

        point = None
        if index < len(locations):
            point = locations[index].start
        elif 0 < index <= len(locations):
            point = locations[index - 1].end

        if point is None and index in (0, last_index) and route.encoded_polyline:
            if path is None:
                try:
                    path = decode_polyline(route.encoded_polyline)
                except ValueError:
                    logger.debug("Ignoring undecodable route polyline")
                    path = []
            if path:
                point = path[0] if index == 0 else path[-1]

        if point is None:
            filled.append(stop)
        else:
            filled.append(dataclasses.replace(stop, lat=point.lat, lng=point.lng))

    return tuple(filled)


class ItineraryService:
    """
    Builds the final itinerary: START, MUST stops in caller order, as many
    OPTIONAL stops as the routing provider accepts, then END.
    """

    def __init__(self, map_service: MapService, tz: Optional[tzinfo] = None):
        self.map_service = map_service
        self.tz = tz

    async def assemble_itinerary(
        self,
        request: TripPlanRequest,
        must_stops: Sequence[MustStop],
        candidates: Sequence[PlaceCandidate],
        base_route: Optional[RouteResult] = None,
    ) -> Itinerary:
        """
        Route the trip, shedding optional stops until the provider accepts it.

        base_route is the already computed START -> MUST -> END route; it is
        reused instead of a provider call once no optional stop is selected.

        Raises:
            RoutingError: the route fails even without optional stops
        """
        departure = parse_local_datetime(request.date_iso, request.start_time, self.tz)
        window_end = parse_local_datetime(request.date_iso, request.end_time, self.tz)

        start = PlannedStop(
            type=StopType.START, address=request.start_address, service_minutes=0
        )
        end = PlannedStop(
            type=StopType.END, address=request.end_address, service_minutes=0
        )
        mandatory = tuple(
            PlannedStop(
                type=StopType.MUST,
                address=stop.address,
                name=stop.name,
                service_minutes=stop.service_minutes,
            )
            for stop in must_stops
        )
        optional = tuple(
            PlannedStop(
                type=StopType.OPTIONAL,
                address=candidate.address,
                name=candidate.name or None,
                lat=candidate.lat,
                lng=candidate.lng,
                service_minutes=request.optional_service_minutes,
            )
            for candidate in candidates[: request.max_optional_stops]
        )

        routed = await self._route_with_shedding(
            start, end, mandatory, optional, format_local_iso(departure), base_route
        )
        route = routed.route

        stops = backfill_coordinates(
            (start, *mandatory, *routed.optional_stops, end), route
        )
        timeline = build_timeline(stops, route.leg_durations_minutes, departure)

        total_service = sum(stop.service_minutes for stop in stops)
        window_minutes = diff_minutes(departure, window_end)
        fits = route.total_drive_minutes + total_service <= window_minutes

        logger.info(
            "Itinerary with %d stops (%d optional) after %d route attempts: "
            "%d drive + %d service minutes in a %d minute window",
            len(stops),
            len(routed.optional_stops),
            routed.attempts,
            route.total_drive_minutes,
            total_service,
            window_minutes,
        )

        return Itinerary(
            stops=stops,
            timeline=timeline,
            leg_durations_minutes=route.leg_durations_minutes,
            total_drive_minutes=route.total_drive_minutes,
            total_service_minutes=total_service,
            fits_in_window=fits,
            notes=routed.notes,
            route_attempts=routed.attempts,
        )

    async def _route_with_shedding(
        self,
        start: PlannedStop,
        end: PlannedStop,
        mandatory: Tuple[PlannedStop, ...],
        optional: Tuple[PlannedStop, ...],
        departure_iso: str,
        base_route: Optional[RouteResult] = None,
    ) -> RoutedStops:
        """Try the route with all optional stops, dropping one from the tail per rejection."""
        selected = optional
        notes: List[str] = []
        attempts = 0

        while True:
            if not selected and base_route is not None:
                return RoutedStops(
                    route=base_route, optional_stops=(), notes=notes, attempts=attempts
                )

            attempts += 1
            intermediates = [stop.address for stop in (*mandatory, *selected)]
            try:
                route = await self.map_service.compute_route(
                    origin_address=start.address,
                    destination_address=end.address,
                    intermediate_addresses=intermediates,
                    departure_time_iso=departure_iso,
                )
            except RoutingError as e:
                if not selected:
                    raise
                logger.warning(
                    "Route with %d optional stops rejected, retrying with %d: %s",
                    len(selected),
                    len(selected) - 1,
                    e,
                )
                selected = selected[:-1]
                notes.append(SHED_NOTE)
                continue

            return RoutedStops(
                route=route, optional_stops=selected, notes=notes, attempts=attempts
            )
