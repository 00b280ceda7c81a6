"""GeoJSON export of an evacuation session."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ..geospatial import circle_polygon
from ..session import EvacuationSession


def _feature(geometry, properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "Feature", "geometry": mapping(geometry), "properties": properties}


def session_to_geojson(session: EvacuationSession) -> Dict[str, Any]:
    """Convert a session snapshot to a GeoJSON FeatureCollection.

    Includes start/end markers, the selected route and one circular polygon per
    blockage sized by its impact radius. GeoJSON positions are [lon, lat].
    """
    features: List[Dict[str, Any]] = []

    for role, position in (("start", session.start), ("end", session.end)):
        if position is not None:
            features.append(_feature(Point(position[1], position[0]), {"role": role}))

    if len(session.route) > 1:
        features.append(
            _feature(
                LineString([(lon, lat) for lat, lon in session.route]),
                {
                    "role": "route",
                    "distance_km": session.distance_km,
                    "duration_min": session.duration_min,
                },
            )
        )

    for index, blockage in enumerate(session.blockages):
        features.append(
            _feature(
                circle_polygon(blockage.point, blockage.radius_m),
                {
                    "role": "blockage",
                    "index": index,
                    "type": blockage.kind,
                    "severity": blockage.severity,
                    "radius_m": blockage.radius_m,
                    "center": [blockage.latitude, blockage.longitude],
                },
            )
        )

    return {
        "type": "FeatureCollection",
        "features": features,
        "properties": {"session_id": session.session_id},
    }
