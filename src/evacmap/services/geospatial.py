"""Geospatial helper functions."""

from __future__ import annotations

import math

from shapely.geometry import Point, Polygon
from shapely.ops import transform

from ..models.domain import Coordinate

EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE_LAT = math.pi / 180.0 * EARTH_RADIUS_M
# Longitude scale is taken no closer to a pole than this.
MAX_REFERENCE_LATITUDE = 89.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


def point_to_segment_m(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Approximate distance in meters from ``point`` to the segment ``start``-``end``.

    The three coordinates are projected onto a local tangent plane anchored at
    ``start``; longitudes are scaled by the cosine of the mean latitude of the
    segment endpoints. This is only accurate for routing-leg scale segments
    (tens to a few hundred meters), not for segments spanning a large part of
    the globe.
    """

    ref_lat = (start[0] + end[0]) / 2
    meters_per_degree_lon = METERS_PER_DEGREE_LAT * math.cos(math.radians(ref_lat))

    bx = (end[1] - start[1]) * meters_per_degree_lon
    by = (end[0] - start[0]) * METERS_PER_DEGREE_LAT
    px = (point[1] - start[1]) * meters_per_degree_lon
    py = (point[0] - start[0]) * METERS_PER_DEGREE_LAT

    length_sq = bx * bx + by * by
    # Zero-length segment collapses to the start point.
    t = 0.0 if length_sq == 0 else max(0.0, min(1.0, (bx * px + by * py) / length_sq))
    dx = t * bx - px
    dy = t * by - py
    return math.sqrt(dx * dx + dy * dy)


def circle_polygon(center: Coordinate, radius_m: float, quad_segs: int = 16) -> Polygon:
    """Return a circle of ``radius_m`` around ``center`` as a lon/lat polygon.

    Near the poles the circle is widened in longitude using a latitude of at most
    ``MAX_REFERENCE_LATITUDE``; vertices are clamped to valid lon/lat ranges.
    """

    lat0, lon0 = center
    ref_lat = max(-MAX_REFERENCE_LATITUDE, min(MAX_REFERENCE_LATITUDE, lat0))
    meters_per_degree_lon = METERS_PER_DEGREE_LAT * math.cos(math.radians(ref_lat))

    def _to_degrees(x, y, z=None):
        lon = lon0 + x / meters_per_degree_lon
        lat = lat0 + y / METERS_PER_DEGREE_LAT
        return max(-180.0, min(180.0, lon)), max(-90.0, min(90.0, lat))

    disc = Point(0.0, 0.0).buffer(radius_m, quad_segs)
    return transform(_to_degrees, disc)
