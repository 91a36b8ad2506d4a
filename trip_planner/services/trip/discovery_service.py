"""
Optional stop discovery - keyword searches along the base route,
merged, deduplicated and filtered against the must-stop addresses
"""
import asyncio
import logging
from typing import Iterable, List, Sequence

from trip_planner.exceptions import DiscoveryError
from trip_planner.models.trip import PlaceCandidate
from trip_planner.services.map.map_service import MapService
from trip_planner.utils.geo import haversine_meters, normalize_address

logger = logging.getLogger(__name__)

DUPLICATE_RADIUS_M = 30


def dedupe_candidates(
    candidates: Iterable[PlaceCandidate], radius_m: float = DUPLICATE_RADIUS_M
) -> List[PlaceCandidate]:
    """Drop candidates sharing an id with, or lying within radius_m of, an earlier one."""
    seen_ids = set()
    deduped: List[PlaceCandidate] = []

    for candidate in candidates:
        if candidate.id in seen_ids:
            continue

        near_match = any(
            haversine_meters(existing.lat, existing.lng, candidate.lat, candidate.lng)
            < radius_m
            for existing in deduped
        )
        if near_match:
            continue

        seen_ids.add(candidate.id)
        deduped.append(candidate)

    return deduped


def exclude_must_stop_addresses(
    candidates: Iterable[PlaceCandidate], must_addresses: Iterable[str]
) -> List[PlaceCandidate]:
    """Drop candidates whose normalized address contains a must-stop address."""
    normalized_must = [
        normalize_address(address) for address in must_addresses if address.strip()
    ]
    return [
        candidate
        for candidate in candidates
        if not any(
            must in normalize_address(candidate.address) for must in normalized_must
        )
    ]


class DiscoveryService:
    """Find optional stop candidates along a route with one search per keyword"""

    def __init__(self, map_service: MapService, max_candidates: int = 40):
        self.map_service = map_service
        self.max_candidates = max_candidates

    async def discover_candidates(
        self,
        keywords: Sequence[str],
        encoded_polyline: str,
        must_addresses: Sequence[str] = (),
        max_results_per_keyword: int = 20,
    ) -> List[PlaceCandidate]:
        """
        Search every keyword concurrently and merge the results.

        All searches run to completion; if any of them failed a DiscoveryError
        is raised once they have all settled.

        Returns:
            At most max_candidates places, in keyword order
        """
        if not keywords:
            return []

        results = await asyncio.gather(
            *(
                self.map_service.search_places_along_route(
                    query=keyword,
                    encoded_polyline=encoded_polyline,
                    max_results=max_results_per_keyword,
                )
                for keyword in keywords
            ),
            return_exceptions=True,
        )

        merged: List[PlaceCandidate] = []
        failures = []
        for keyword, result in zip(keywords, results):
            if isinstance(result, BaseException):
                logger.warning("Place search for %r failed: %s", keyword, result)
                failures.append(result)
                continue
            logger.debug("Found %d places for %r", len(result), keyword)
            merged.extend(result)

        if failures:
            raise DiscoveryError(
                f"{len(failures)} of {len(keywords)} place searches failed"
            ) from failures[0]

        candidates = dedupe_candidates(merged)
        candidates = exclude_must_stop_addresses(candidates, must_addresses)
        return candidates[: self.max_candidates]
