# Trip planning service package
from .discovery_service import DiscoveryService
from .itinerary_service import ItineraryService
from .response_builder import ResponseBuilderService

__all__ = [
    "DiscoveryService",
    "ItineraryService",
    "ResponseBuilderService",
]
