"""Heatmap point generation and layer preparation."""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from ..models.domain import Coordinate, HeatPoint

DEFAULT_INTENSITY = 0.6
HOTSPOT_INTENSITY = 0.9

LAYER_OPTIONS = {
    "radius": 25,
    "blur": 15,
    "maxZoom": 17,
    "gradient": {"0": "#22c55e", "0.5": "#fde047", "1": "#ef4444"},
}


def generate_regional_heat(
    center: Coordinate,
    half_box: float = 0.25,
    step: float = 0.02,
    rng: np.random.Generator | None = None,
) -> list[HeatPoint]:
    """Synthesize a jittered grid of heat points covering ``center ± half_box`` degrees.

    Each point is moved by up to 30% of ``step`` in both axes and gets an
    intensity drawn uniformly from [0.3, 0.9].
    """
    if step <= 0:
        raise ValueError("step must be > 0")
    rng = rng or np.random.default_rng()

    count = int(math.floor(2 * half_box / step + 1e-9)) + 1
    offsets = np.arange(count) * step - half_box
    lat_grid, lng_grid = np.meshgrid(center[0] + offsets, center[1] + offsets, indexing="ij")
    lats = lat_grid.ravel() + (rng.random(lat_grid.size) - 0.5) * step * 0.6
    lngs = lng_grid.ravel() + (rng.random(lng_grid.size) - 0.5) * step * 0.6
    intensities = 0.3 + rng.random(lat_grid.size) * 0.6

    return [
        HeatPoint(lat=float(lat), lng=float(lng), intensity=float(intensity))
        for lat, lng, intensity in zip(lats, lngs, intensities)
    ]


def normalize_heat_point(point: HeatPoint | Mapping[str, Any] | Sequence[float]) -> tuple[float, float, float]:
    """Accept a HeatPoint, a ``{lat, lng, intensity?}`` mapping or a ``(lat, lng[, intensity])`` tuple."""
    if isinstance(point, HeatPoint):
        return (point.lat, point.lng, point.intensity)
    if isinstance(point, Mapping):
        intensity = point.get("intensity")
        return (float(point["lat"]), float(point["lng"]), DEFAULT_INTENSITY if intensity is None else float(intensity))
    if len(point) < 2:
        raise ValueError("Heat point tuples need at least latitude and longitude")
    intensity = point[2] if len(point) > 2 and point[2] is not None else DEFAULT_INTENSITY
    return (float(point[0]), float(point[1]), float(intensity))


def build_heat_layer(points: Iterable, enabled: bool = True) -> dict:
    """Return the finite ``[lat, lng, intensity]`` triples plus layer rendering options."""
    triples: list[list[float]] = []
    if enabled:
        for point in points:
            lat, lng, intensity = normalize_heat_point(point)
            if math.isfinite(lat) and math.isfinite(lng):
                triples.append([lat, lng, intensity])
    return {"enabled": enabled, "points": triples, "options": LAYER_OPTIONS}
