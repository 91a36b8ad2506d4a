import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Type

import httpx

from trip_planner.config import Settings
from trip_planner.exceptions import (
    ConfigurationError,
    PlacesError,
    ProviderError,
    RoutingError,
)
from trip_planner.models.response import AddressSuggestion
from trip_planner.models.trip import LatLng, LegLocation, PlaceCandidate, RouteResult
from trip_planner.services.map.map_service import MapService

logger = logging.getLogger(__name__)

ROUTES_FIELD_MASK = (
    "routes.duration,routes.legs.duration,routes.legs.startLocation,"
    "routes.legs.endLocation,routes.polyline.encodedPolyline"
)
PLACES_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,places.location"
)
AUTOCOMPLETE_FIELD_MASK = (
    "suggestions.placePrediction.placeId,suggestions.placePrediction.text"
)


class GoogleMapService(MapService):
    """Google Maps API service implementation (Routes v2 and Places v1)"""

    def __init__(self, config: Settings, client: Optional[httpx.AsyncClient] = None):
        self.api_key = config.google_maps_api_key
        self.routes_url = config.routes_url
        self.places_search_url = config.places_search_url
        self.places_autocomplete_url = config.places_autocomplete_url
        self.timeout = config.request_timeout_s
        self._client = client

        if not self.api_key:
            raise ConfigurationError(
                "Missing GOOGLE_MAPS_API_KEY. Configure it in the environment."
            )

    async def compute_route(
        self,
        origin_address: str,
        destination_address: str,
        intermediate_addresses: Sequence[str] = (),
        departure_time_iso: Optional[str] = None,
    ) -> RouteResult:
        """Compute a driving route using Google Routes API"""
        body: Dict[str, Any] = {
            "origin": {"address": origin_address},
            "destination": {"address": destination_address},
            "intermediates": [{"address": address} for address in intermediate_addresses],
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE",
            "polylineQuality": "OVERVIEW",
            "polylineEncoding": "ENCODED_POLYLINE",
        }
        if departure_time_iso:
            body["departureTime"] = departure_time_iso

        logger.debug(
            "Computing route %s -> %s via %d stops",
            origin_address,
            destination_address,
            len(intermediate_addresses),
        )
        data = await self._post(
            self.routes_url, ROUTES_FIELD_MASK, body, RoutingError, "Routes"
        )

        routes = data.get("routes") or []
        if not routes:
            raise RoutingError("Routes API error: no routes returned.")

        return self._convert_routes_response(routes[0])

    async def search_places_along_route(
        self, query: str, encoded_polyline: str, max_results: int = 20
    ) -> List[PlaceCandidate]:
        """Search places matching a text query along a route using Places API (New) v1"""
        body = {
            "textQuery": query,
            "maxResultCount": max_results,
            "searchAlongRouteParameters": {
                "polyline": {"encodedPolyline": encoded_polyline}
            },
        }

        logger.debug("Searching places along route for %r", query)
        data = await self._post(
            self.places_search_url, PLACES_FIELD_MASK, body, PlacesError, "Places"
        )
        return self._convert_places_to_candidates(data.get("places") or [])

    async def autocomplete_places(self, text: str) -> List[AddressSuggestion]:
        """Address suggestions using Places API (New) v1 autocomplete"""
        data = await self._post(
            self.places_autocomplete_url,
            AUTOCOMPLETE_FIELD_MASK,
            {"input": text},
            PlacesError,
            "Places",
        )

        suggestions = []
        for suggestion in data.get("suggestions") or []:
            prediction = (suggestion or {}).get("placePrediction") or {}
            place_id = prediction.get("placeId") or ""
            label = (prediction.get("text") or {}).get("text") or ""
            if not place_id or not label:
                continue
            suggestions.append(AddressSuggestion(place_id=place_id, text=label))
        return suggestions

    async def _post(
        self,
        url: str,
        field_mask: str,
        body: Dict[str, Any],
        error_cls: Type[ProviderError],
        api_name: str,
    ) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
        }

        try:
            if self._client is not None:
                response = await self._client.post(
                    url, headers=headers, json=body, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        url, headers=headers, json=body, timeout=self.timeout
                    )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_text = e.response.text or e.response.reason_phrase
            raise error_cls(
                f"{api_name} API error ({e.response.status_code}): {error_text}",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise error_cls(f"{api_name} API request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise error_cls(f"{api_name} API returned invalid JSON") from e

        if not isinstance(data, dict):
            raise error_cls(f"{api_name} API response must be a JSON object")
        return data

    def _convert_routes_response(self, route: Dict[str, Any]) -> RouteResult:
        """Convert the first Routes API route to a RouteResult"""
        legs = [leg for leg in route.get("legs") or [] if isinstance(leg, dict)]
        leg_minutes = tuple(_duration_to_minutes(leg.get("duration")) for leg in legs)
        leg_locations = tuple(
            LegLocation(
                start=_parse_lat_lng((leg.get("startLocation") or {}).get("latLng")),
                end=_parse_lat_lng((leg.get("endLocation") or {}).get("latLng")),
            )
            for leg in legs
        )

        # Single-leg degenerate routes may come back without legs
        total_minutes = sum(leg_minutes) or _duration_to_minutes(route.get("duration"))

        return RouteResult(
            encoded_polyline=(route.get("polyline") or {}).get("encodedPolyline") or None,
            leg_durations_minutes=leg_minutes,
            total_drive_minutes=total_minutes,
            leg_locations=leg_locations,
        )

    def _convert_places_to_candidates(
        self, places: List[Dict[str, Any]]
    ) -> List[PlaceCandidate]:
        """Keep only places with an id, a formatted address and numeric coordinates"""
        candidates = []
        for place in places:
            if not isinstance(place, dict):
                continue
            place_id = place.get("id") or ""
            address = place.get("formattedAddress") or ""
            location = _parse_lat_lng(place.get("location"))
            if not place_id or not address or location is None:
                continue

            candidates.append(
                PlaceCandidate(
                    id=place_id,
                    name=(place.get("displayName") or {}).get("text") or "",
                    address=address,
                    lat=location.lat,
                    lng=location.lng,
                )
            )
        return candidates


def _duration_to_minutes(duration: Any) -> int:
    """Convert "123s" or {"seconds": 123} to whole minutes, rounding up"""
    if not duration:
        return 0

    if isinstance(duration, str):
        raw = duration[:-1] if duration.endswith("s") else duration
    elif isinstance(duration, dict):
        raw = duration.get("seconds")
    else:
        return 0

    try:
        seconds = float(raw)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(seconds):
        return 0
    return math.ceil(seconds / 60)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_lat_lng(location: Any) -> Optional[LatLng]:
    if not isinstance(location, dict):
        return None
    lat = location.get("latitude")
    lng = location.get("longitude")
    if not _is_number(lat) or not _is_number(lng):
        return None
    return LatLng(lat=float(lat), lng=float(lng))
