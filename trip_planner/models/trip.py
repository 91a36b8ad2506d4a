"""
Internal records shared by the planning steps.
They live for a single planning call and are never mutated.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class StopType(str, Enum):
    START = "START"
    MUST = "MUST"
    OPTIONAL = "OPTIONAL"
    END = "END"


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class LegLocation:
    start: Optional[LatLng] = None
    end: Optional[LatLng] = None


@dataclass(frozen=True)
class PlaceCandidate:
    """A place returned by a keyword search along the route."""

    id: str
    name: str
    address: str
    lat: float
    lng: float


@dataclass(frozen=True)
class PlannedStop:
    type: StopType
    address: str
    service_minutes: int
    name: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(frozen=True)
class RouteResult:
    """Parsed Routes API answer: durations are whole minutes, rounded up."""

    encoded_polyline: Optional[str]
    leg_durations_minutes: Tuple[int, ...]
    total_drive_minutes: int
    leg_locations: Tuple[LegLocation, ...] = ()


@dataclass(frozen=True)
class StopTiming:
    eta: str
    depart: str


@dataclass(frozen=True)
class Itinerary:
    stops: Tuple[PlannedStop, ...]
    timeline: Tuple[StopTiming, ...]
    leg_durations_minutes: Tuple[int, ...]
    total_drive_minutes: int
    total_service_minutes: int
    fits_in_window: bool
    notes: List[str] = field(default_factory=list)
    route_attempts: int = 1
