"""In-memory evacuation sessions.

A session holds what a map client has picked so far: start and end points,
reported blockages, the heat layer and the currently selected route. Service
functions receive the session explicitly; nothing here is global except the
``SessionStore`` used by the HTTP layer.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ..config import settings
from ..models.domain import Blockage, CandidateRoute, Coordinate, HeatPoint, PickingMode
from .heatmap import HOTSPOT_INTENSITY, generate_regional_heat

PICKING_MODES: tuple[str, ...] = ("start", "end", "blockage")


class LocationUnavailableError(Exception):
    """Raised when the client could not resolve a device location."""


class SessionNotFoundError(KeyError):
    pass


@dataclass
class EvacuationSession:
    center: Coordinate
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    start: Optional[Coordinate] = None
    end: Optional[Coordinate] = None
    picking: PickingMode = "start"
    blockages: List[Blockage] = field(default_factory=list)
    blocked_points: List[Coordinate] = field(default_factory=list)
    heat_enabled: bool = True
    heat_points: List[HeatPoint] = field(default_factory=list)
    route: List[Coordinate] = field(default_factory=list)
    distance_km: Optional[float] = None
    duration_min: Optional[float] = None
    # Serialises mutations and route computation on one session across request threads.
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    @classmethod
    def create(cls, center: Coordinate | None = None, rng: np.random.Generator | None = None) -> "EvacuationSession":
        session = cls(center=center or settings.map_center)
        session.reseed_heat(rng)
        return session

    @property
    def blockage_mode(self) -> bool:
        return self.picking == "blockage"

    def set_picking(self, mode: str) -> None:
        if mode not in PICKING_MODES:
            raise ValueError(f"Unknown picking mode '{mode}'. Expected one of {', '.join(PICKING_MODES)}.")
        self.picking = mode

    def toggle_blockage_mode(self) -> None:
        self.picking = "start" if self.blockage_mode else "blockage"

    def pick(self, position: Coordinate) -> None:
        """Apply a map click according to the current picking mode."""
        if self.picking == "blockage":
            self.add_blockage(position)
        elif self.picking == "start":
            self.start = position
        else:
            self.end = position

    def add_blockage(self, position: Coordinate, radius_m: float | None = None) -> Blockage:
        """Record a blockage at ``position``; newest entries come first."""
        lat, lng = position
        blockage = Blockage(
            latitude=lat,
            longitude=lng,
            radius_m=radius_m if radius_m is not None else settings.default_blockage_radius_m,
        )
        self.blockages.insert(0, blockage)
        self.blocked_points.insert(0, (lat, lng))
        self.heat_points.insert(0, HeatPoint(lat=lat, lng=lng, intensity=HOTSPOT_INTENSITY))
        return blockage

    def use_location_as_start(self, position: Coordinate | None) -> None:
        if position is None:
            raise LocationUnavailableError("Location unavailable")
        self.start = position

    def clear_route(self) -> None:
        self.route = []
        self.distance_km = None
        self.duration_min = None

    def apply_route(self, candidate: CandidateRoute) -> None:
        self.route = list(candidate.coordinates)
        self.distance_km = round(candidate.distance_m / 1000, 1)
        self.duration_min = round(candidate.duration_s / 60, 1)

    def reset(self) -> None:
        """Forget start, end and route; blockages and heat stay."""
        self.start = None
        self.end = None
        self.clear_route()
        self.picking = "start"

    def reseed_heat(self, rng: np.random.Generator | None = None) -> None:
        self.heat_points = generate_regional_heat(
            self.center,
            half_box=settings.heat_half_box_degrees,
            step=settings.heat_step_degrees,
            rng=rng,
        )

    def toggle_heat(self) -> None:
        self.heat_enabled = not self.heat_enabled


class SessionStore:
    """Thread-safe registry of live sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, EvacuationSession] = {}
        self._lock = threading.Lock()

    def create(self, center: Coordinate | None = None) -> EvacuationSession:
        session = EvacuationSession.create(center)
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> EvacuationSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


store = SessionStore()
