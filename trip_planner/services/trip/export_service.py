"""
Export helpers - CSV report and shareable Google Maps direction links
"""
from typing import Any, Iterable, List, Sequence
from urllib.parse import urlencode

from trip_planner.models.response import MapsSegment

MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"
MAX_URL_LENGTH = 2000

CSV_HEADERS = [
    "Stop #",
    "Type",
    "Name",
    "Address",
    "ETA",
    "Depart",
    "Service Minutes",
]


def _escape_csv_value(value: Any) -> str:
    text = "" if value is None else str(value)
    escaped = text.replace('"', '""')
    if any(char in text for char in ',"\r\n'):
        return f'"{escaped}"'
    return escaped


def build_csv(headers: Sequence[Any], rows: Iterable[Sequence[Any]]) -> str:
    """Render a header row and data rows as CSV text, quoting only where needed."""
    lines = [",".join(_escape_csv_value(value) for value in headers)]
    lines.extend(",".join(_escape_csv_value(value) for value in row) for row in rows)
    return "\n".join(lines)


def build_maps_url(origin: str, destination: str, waypoints: Sequence[str]) -> str:
    params = {
        "api": "1",
        "origin": origin,
        "destination": destination,
        "travelmode": "driving",
    }
    if waypoints:
        params["waypoints"] = "|".join(waypoints)
    return f"{MAPS_DIRECTIONS_URL}?{urlencode(params)}"


def build_maps_segments(
    addresses: Sequence[str],
    waypoint_limit: int,
    max_url_length: int = MAX_URL_LENGTH,
) -> List[MapsSegment]:
    """
    Split an ordered stop list into consecutive driving-direction links.

    Each link holds at most waypoint_limit waypoints and stays within
    max_url_length characters. Consecutive links share their boundary stop,
    so following them in order drives the whole route.
    """
    if len(addresses) < 2:
        return []

    last = len(addresses) - 1
    segments: List[MapsSegment] = []
    cursor = 0

    while cursor < last:
        end = min(cursor + max(waypoint_limit, 0) + 1, last)
        url = build_maps_url(addresses[cursor], addresses[end], addresses[cursor + 1 : end])

        # A single hop is kept even if its URL is too long
        while len(url) > max_url_length and end > cursor + 1:
            end -= 1
            url = build_maps_url(
                addresses[cursor], addresses[end], addresses[cursor + 1 : end]
            )

        segments.append(
            MapsSegment(
                label=f"Segment {len(segments) + 1}",
                url=url,
                stop_count=end - cursor + 1,
            )
        )
        cursor = end

    return segments
