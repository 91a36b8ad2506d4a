"""
Response builder service - converts an assembled itinerary to the API response
Includes the timed stop list, summary, CSV export and map links
"""
from typing import List, Sequence

from trip_planner.models.response import TimedStop, TripPlanResponse, TripSummary
from trip_planner.models.trip import Itinerary, StopType
from trip_planner.services.trip.export_service import (
    CSV_HEADERS,
    MAX_URL_LENGTH,
    build_csv,
    build_maps_segments,
)


class ResponseBuilderService:
    """Response builder service - converts internal data to API response format"""

    def __init__(self, max_url_length: int = MAX_URL_LENGTH):
        self.max_url_length = max_url_length

    def build_response(
        self,
        itinerary: Itinerary,
        export_waypoint_limit: int,
        notes: Sequence[str] = (),
    ) -> TripPlanResponse:
        """
        Build API response from an assembled itinerary

        Args:
            itinerary: Output of the itinerary service
            export_waypoint_limit: Max waypoints per map link
            notes: Advisory notes raised before assembly (e.g. discovery failures)
        """
        stops = self._build_timed_stops(itinerary)

        summary = TripSummary(
            total_stops=len(stops),
            must_stops=self._count(stops, StopType.MUST),
            optional_stops=self._count(stops, StopType.OPTIONAL),
            total_drive_minutes_estimate=itinerary.total_drive_minutes,
            total_service_minutes=itinerary.total_service_minutes,
            fits_in_window=itinerary.fits_in_window,
            notes=[*notes, *itinerary.notes],
        )

        segments = build_maps_segments(
            [stop.address for stop in stops],
            export_waypoint_limit,
            max_url_length=self.max_url_length,
        )

        csv = build_csv(
            CSV_HEADERS,
            [
                [
                    stop.order,
                    stop.type.value,
                    stop.name or "",
                    stop.address,
                    stop.eta_iso,
                    stop.depart_iso,
                    stop.service_minutes,
                ]
                for stop in stops
            ],
        )

        return TripPlanResponse(
            summary=summary,
            stops=stops,
            google_maps_segments=segments,
            csv=csv,
        )

    @staticmethod
    def _build_timed_stops(itinerary: Itinerary) -> List[TimedStop]:
        return [
            TimedStop(
                order=index + 1,
                type=stop.type,
                name=stop.name,
                address=stop.address,
                lat=stop.lat,
                lng=stop.lng,
                eta_iso=timing.eta,
                depart_iso=timing.depart,
                service_minutes=stop.service_minutes,
            )
            for index, (stop, timing) in enumerate(
                zip(itinerary.stops, itinerary.timeline)
            )
        ]

    @staticmethod
    def _count(stops: Sequence[TimedStop], stop_type: StopType) -> int:
        return sum(1 for stop in stops if stop.type == stop_type)
