"""Evacuation session request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate
from ..services.routing.service import RouteOutcome
from ..services.session import EvacuationSession


class LatLngModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def as_coordinate(self) -> Coordinate:
        return (self.lat, self.lng)


class CreateSessionRequest(BaseModel):
    center: Optional[LatLngModel] = Field(default=None, description="Map centre; defaults to the configured one.")


class PickingRequest(BaseModel):
    mode: Literal["start", "end", "blockage"]


class LocationRequest(BaseModel):
    position: Optional[LatLngModel] = Field(
        default=None,
        description="Device location; omitted when the browser could not provide one.",
    )


class BlockageModel(BaseModel):
    lat: float
    lng: float
    radius_m: float
    type: str
    severity: str


class SessionStateResponse(BaseModel):
    session_id: str
    center: LatLngModel
    start: Optional[LatLngModel] = None
    end: Optional[LatLngModel] = None
    picking: str
    blockage_mode: bool
    blockages: List[BlockageModel]
    blockage_count: int
    heat_enabled: bool
    heat_point_count: int
    route: List[List[float]]
    distance_km: Optional[float] = None
    duration_min: Optional[float] = None

    @classmethod
    def from_session(cls, session: EvacuationSession) -> "SessionStateResponse":
        def _point(value: Coordinate | None) -> LatLngModel | None:
            return LatLngModel(lat=value[0], lng=value[1]) if value is not None else None

        return cls(
            session_id=session.session_id,
            center=_point(session.center),
            start=_point(session.start),
            end=_point(session.end),
            picking=session.picking,
            blockage_mode=session.blockage_mode,
            blockages=[
                BlockageModel(
                    lat=blockage.latitude,
                    lng=blockage.longitude,
                    radius_m=blockage.radius_m,
                    type=blockage.kind,
                    severity=blockage.severity,
                )
                for blockage in session.blockages
            ],
            blockage_count=len(session.blockages),
            heat_enabled=session.heat_enabled,
            heat_point_count=len(session.heat_points),
            route=[[lat, lng] for lat, lng in session.route],
            distance_km=session.distance_km,
            duration_min=session.duration_min,
        )


class RouteResponse(BaseModel):
    status: Literal["ok", "no_route", "all_blocked", "failed"]
    message: str
    candidates_considered: int
    selected_alternative: Optional[int] = None
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None
    session: SessionStateResponse

    @classmethod
    def from_outcome(cls, outcome: RouteOutcome, session: EvacuationSession) -> "RouteResponse":
        selected = outcome.selected
        return cls(
            status=outcome.status,
            message=outcome.message,
            candidates_considered=outcome.candidates_considered,
            selected_alternative=selected.index if selected else None,
            distance_m=selected.distance_m if selected else None,
            duration_s=selected.duration_s if selected else None,
            session=SessionStateResponse.from_session(session),
        )


class HeatLayerResponse(BaseModel):
    enabled: bool
    points: List[List[float]]
    options: dict
