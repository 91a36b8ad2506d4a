import csv
import io
from urllib.parse import parse_qs, urlparse

from trip_planner.services.trip.export_service import (
    CSV_HEADERS,
    build_csv,
    build_maps_segments,
    build_maps_url,
)


def _query(url):
    return {key: values[0] for key, values in parse_qs(urlparse(url).query).items()}


def _stops(count):
    return ["Start"] + [f"Stop {i}" for i in range(1, count - 1)] + ["End"]


def test_build_csv_plain_values():
    text = build_csv(["a", "b"], [[1, "x"], [2, None]])
    assert text == "a,b\n1,x\n2,"


def test_build_csv_quotes_special_characters():
    text = build_csv(["name"], [['Joe\'s "Best", Shop'], ["line\nbreak"]])
    assert text == 'name\n"Joe\'s ""Best"", Shop"\n"line\nbreak"'


def test_build_csv_quotes_lone_carriage_return():
    assert build_csv(["n", "addr"], [["1", "Suite 4\rBldg B"]]) == 'n,addr\n1,"Suite 4\rBldg B"'


def test_build_csv_parses_back_with_csv_module():
    rows = [
        ["1", "START", "", "100 Congress Ave, Austin, TX", "2025-06-01T08:00:00-05:00", "2025-06-01T08:00:00-05:00", "0"],
        ["2", "MUST", 'The "Green" Leaf', "5 Elm St,\nSuite 2", "", "", "30"],
        ["3", "MUST", "", "Suite 4\rBldg B", "", "", "10"],
    ]
    text = build_csv(CSV_HEADERS, rows)

    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[0] == CSV_HEADERS
    assert parsed[1:] == rows


def test_build_maps_url_encodes_waypoints():
    url = build_maps_url("Start Here", "End", ["A, TX", "B"])
    assert url.startswith("https://www.google.com/maps/dir/?")
    params = _query(url)
    assert params == {
        "api": "1",
        "origin": "Start Here",
        "destination": "End",
        "travelmode": "driving",
        "waypoints": "A, TX|B",
    }


def test_build_maps_url_without_waypoints():
    assert "waypoints" not in _query(build_maps_url("A", "B", []))


def test_single_segment_when_under_waypoint_limit():
    segments = build_maps_segments(["Start", "Stop A", "Stop B", "End"], 5)

    assert len(segments) == 1
    assert segments[0].label == "Segment 1"
    assert segments[0].stop_count == 4
    assert "google.com/maps/dir" in segments[0].url


def test_splits_segments_when_exceeding_waypoint_limit():
    segments = build_maps_segments(_stops(6), 2)

    assert [s.label for s in segments] == ["Segment 1", "Segment 2"]
    assert [s.stop_count for s in segments] == [4, 3]
    assert all(s.stop_count <= 4 for s in segments)

    # Consecutive segments share their boundary stop
    first, second = (_query(s.url) for s in segments)
    assert first["origin"] == "Start"
    assert first["destination"] == "Stop 3"
    assert second["origin"] == "Stop 3"
    assert second["destination"] == "End"


def test_returns_empty_for_less_than_two_stops():
    assert build_maps_segments([], 3) == []
    assert build_maps_segments(["Only"], 3) == []


def test_segments_cover_every_stop_for_any_limit():
    addresses = _stops(12)
    for limit in range(1, 26):
        segments = build_maps_segments(addresses, limit)
        covered = []
        for segment in segments:
            params = _query(segment.url)
            waypoints = params["waypoints"].split("|") if "waypoints" in params else []
            chunk = [params["origin"], *waypoints, params["destination"]]
            assert len(chunk) == segment.stop_count
            assert len(waypoints) <= limit
            if covered:
                assert covered[-1] == chunk[0]
                chunk = chunk[1:]
            covered.extend(chunk)
        assert covered == addresses


def test_url_length_ceiling_closes_segment_early():
    addresses = [f"{i} " + "Very Long Boulevard Name " * 6 for i in range(10)]
    segments = build_maps_segments(addresses, 25, max_url_length=600)

    assert len(segments) > 1
    assert all(len(s.url) <= 600 for s in segments)
    assert sum(s.stop_count - 1 for s in segments) == len(addresses) - 1


def test_single_hop_kept_when_url_is_too_long():
    addresses = ["x" * 300, "y" * 300, "z" * 300]
    segments = build_maps_segments(addresses, 25, max_url_length=100)

    assert [s.stop_count for s in segments] == [2, 2]
