"""Blocked-route avoidance: pick the shortest route alternative that stays clear of blockages."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from ...models.domain import CandidateRoute, Coordinate
from ..geospatial import point_to_segment_m
from .osrm_client import decode_polyline

DEFAULT_THRESHOLD_M = 60.0

logger = logging.getLogger(__name__)


def route_passes_near_blocked(
    coordinates: Sequence[Coordinate],
    blocked_points: Sequence[Coordinate],
    threshold_m: float = DEFAULT_THRESHOLD_M,
) -> bool:
    """Return True if any leg of the route comes within ``threshold_m`` of a blocked point.

    A non-finite distance (corrupted coordinate) never counts as a match.
    """
    if not blocked_points or len(coordinates) < 2:
        return False
    for start, end in zip(coordinates, coordinates[1:]):
        for point in blocked_points:
            distance = point_to_segment_m(point, start, end)
            if math.isfinite(distance) and distance <= threshold_m:
                return True
    return False


def select_unblocked_route(
    candidates: Iterable[CandidateRoute],
    blocked_points: Sequence[Coordinate],
    threshold_m: float = DEFAULT_THRESHOLD_M,
) -> CandidateRoute | None:
    """Return the shortest candidate not passing near a blocked point, or None.

    Equal-length candidates keep their input order. An empty candidate list
    yields None.
    """
    for candidate in sorted(candidates, key=lambda item: item.distance_m):
        if not route_passes_near_blocked(candidate.coordinates, blocked_points, threshold_m):
            return candidate
    return None


def _route_coordinates(geometry) -> list[Coordinate]:
    if isinstance(geometry, str):
        return decode_polyline(geometry)
    if isinstance(geometry, dict):
        # GeoJSON LineString positions are [lon, lat].
        return [(float(lat), float(lon)) for lon, lat, *_ in geometry.get("coordinates", [])]
    return []


def build_candidates(payload: dict) -> list[CandidateRoute]:
    """Convert an OSRM route response into candidates in response order.

    Routes with missing or non-finite geometry, distance or duration are dropped.
    """
    candidates: list[CandidateRoute] = []
    for index, route in enumerate(payload.get("routes") or []):
        try:
            distance = float(route["distance"])
            duration = float(route["duration"])
            coordinates = _route_coordinates(route.get("geometry"))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed OSRM route #{index}: {e}")
            continue

        finite = math.isfinite(distance) and math.isfinite(duration) and all(
            math.isfinite(lat) and math.isfinite(lon) for lat, lon in coordinates
        )
        if not finite or len(coordinates) < 2:
            logger.warning(f"Skipping OSRM route #{index}: incomplete or non-finite geometry")
            continue

        candidates.append(
            CandidateRoute(
                index=index,
                distance_m=distance,
                duration_s=duration,
                coordinates=coordinates,
            )
        )
    return candidates
