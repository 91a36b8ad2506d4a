"""
Response models for the trip planner API
Field names are serialized in camelCase for the admin UI
"""
from typing import List, Optional

from pydantic import Field

from trip_planner.models.request import CamelModel
from trip_planner.models.trip import StopType


class TimedStop(CamelModel):
    """A planned stop with its estimated arrival and departure"""
    order: int
    type: StopType
    name: Optional[str] = None
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    eta_iso: str = Field(alias="etaISO")
    depart_iso: str = Field(alias="departISO")
    service_minutes: int


class TripSummary(CamelModel):
    """Counts, time totals and advisory notes for a planned trip"""
    total_stops: int
    must_stops: int
    optional_stops: int
    total_drive_minutes_estimate: int
    total_service_minutes: int
    fits_in_window: bool
    notes: List[str] = []


class MapsSegment(CamelModel):
    """One shareable driving-directions link"""
    label: str
    url: str
    stop_count: int


class TripPlanResponse(CamelModel):
    """Trip plan response model"""
    summary: TripSummary
    stops: List[TimedStop] = []
    google_maps_segments: List[MapsSegment] = []
    csv: str = ""


class AddressSuggestion(CamelModel):
    place_id: str
    text: str


class SuggestResponse(CamelModel):
    suggestions: List[AddressSuggestion] = []
