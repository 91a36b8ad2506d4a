from .google_map_service import GoogleMapService
from .map_service import MapService

__all__ = ["GoogleMapService", "MapService"]
