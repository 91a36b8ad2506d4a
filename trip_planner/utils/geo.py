"""Geometry and address helpers."""
from __future__ import annotations

import math
from typing import List

from trip_planner.models.trip import LatLng

EARTH_RADIUS_M = 6371000


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points (Haversine formula)"""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def normalize_address(address: str) -> str:
    return " ".join(address.strip().lower().split())


def decode_polyline(encoded: str) -> List[LatLng]:
    """Decode a Google encoded polyline into coordinates (1e-5 precision)."""
    coordinates: List[LatLng] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        deltas = []
        for _ in range(2):
            result = 0
            shift = 0
            while True:
                if index >= len(encoded):
                    raise ValueError("Truncated encoded polyline")
                byte = ord(encoded[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)

        lat += deltas[0]
        lng += deltas[1]
        coordinates.append(LatLng(lat=lat / 1e5, lng=lng / 1e5))

    return coordinates
