"""Emergency service registry and nearest-service lookup."""

from __future__ import annotations

from typing import Sequence
from urllib.parse import quote

from ...models.domain import Coordinate, EmergencyService
from ..geospatial import haversine_m

SERVICES: tuple[EmergencyService, ...] = (
    EmergencyService("Hazratganj Police Station", "police", "112", 26.8537, 80.9458),
    EmergencyService("Alambagh Police Station", "police", "112", 26.8151, 80.8934),
    EmergencyService("Gomti Nagar Police Station", "police", "112", 26.8678, 81.0227),
    EmergencyService("Charbagh Fire Station", "fire", "101", 26.8309, 80.9214),
    EmergencyService("Gomti Nagar Fire Station", "fire", "101", 26.8624, 81.0232),
    EmergencyService("Civil Hospital (Hazratganj)", "hospital", "108", 26.8615, 80.9436),
    EmergencyService("KGMU Trauma Center", "hospital", "108", 26.8787, 80.918),
    EmergencyService("SGPGI Hospital", "hospital", "108", 26.7489, 80.9433),
)

# Characters left unescaped by encodeURIComponent.
_URI_COMPONENT_SAFE = "!~*'()"

HOTLINES = (
    {"label": "Call 112", "phone": "112"},
    {"label": "Fire 101", "phone": "101"},
    {"label": "Ambulance 108", "phone": "108"},
)


def nearest_services_with_distance(
    origin: Coordinate,
    count: int = 5,
    registry: Sequence[EmergencyService] = SERVICES,
) -> list[tuple[EmergencyService, float]]:
    """Return up to ``count`` (service, distance_m) pairs, nearest first, ties in registry order."""
    ranked = sorted(
        ((service, haversine_m(origin[0], origin[1], service.latitude, service.longitude)) for service in registry),
        key=lambda pair: pair[1],
    )
    return ranked[: max(count, 0)]


def nearest_services(
    origin: Coordinate,
    count: int = 5,
    registry: Sequence[EmergencyService] = SERVICES,
) -> list[EmergencyService]:
    return [service for service, _ in nearest_services_with_distance(origin, count, registry)]


def share_location(position: Coordinate) -> dict[str, str]:
    """Build the shareable emergency message for a position."""
    lat, lng = position
    link = f"https://maps.google.com/?q={lat},{lng}"
    text = f"Emergency at {lat:.5f}, {lng:.5f}. Need rescue."
    body = f"{text}\n{link}"
    return {
        "title": "Emergency",
        "text": text,
        "url": link,
        "mailto": f"mailto:?subject=Emergency&body={quote(body, safe=_URI_COMPONENT_SAFE)}",
    }
