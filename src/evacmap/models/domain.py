"""Domain models for routes, blockages, emergency services and heat points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Tuple

# (latitude, longitude) in decimal degrees, WGS84.
Coordinate = Tuple[float, float]

BlockageType = Literal["Earthquake", "Crashed building", "Road accident", "Fire", "Flood"]
Severity = Literal["minor", "major"]
ServiceType = Literal["police", "fire", "hospital"]
PickingMode = Literal["start", "end", "blockage"]


@dataclass(slots=True, frozen=True)
class CandidateRoute:
    """One alternative returned by the routing provider."""

    index: int
    distance_m: float
    duration_s: float
    coordinates: List[Coordinate]


@dataclass(slots=True)
class Blockage:
    """A user-reported obstruction; its centre is the blocked point."""

    latitude: float
    longitude: float
    radius_m: float = 70.0
    kind: BlockageType = "Road accident"
    severity: Severity = "minor"

    @property
    def point(self) -> Coordinate:
        return (self.latitude, self.longitude)


@dataclass(slots=True, frozen=True)
class EmergencyService:
    name: str
    type: ServiceType
    phone: str
    latitude: float
    longitude: float


@dataclass(slots=True)
class HeatPoint:
    lat: float
    lng: float
    intensity: float = 0.6
