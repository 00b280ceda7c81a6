"""Evacuation session endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.evacuation import (
    CreateSessionRequest,
    HeatLayerResponse,
    LatLngModel,
    LocationRequest,
    PickingRequest,
    RouteResponse,
    SessionStateResponse,
)
from ...services.export.geojson import session_to_geojson
from ...services.heatmap import build_heat_layer
from ...services.routing import service as routing_service
from ...services.session import EvacuationSession, LocationUnavailableError, SessionNotFoundError, store

router = APIRouter(prefix="/sessions", tags=["evacuation"])

logger = logging.getLogger(__name__)


def _session_or_404(session_id: str) -> EvacuationSession:
    try:
        return store.get(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found",
        ) from exc


@router.post("", response_model=SessionStateResponse, status_code=status.HTTP_201_CREATED)
def create_session(payload: CreateSessionRequest | None = None) -> SessionStateResponse:
    center = payload.center.as_coordinate() if payload and payload.center else None
    session = store.create(center)
    logger.info(f"Created evacuation session {session.session_id}")
    return SessionStateResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionStateResponse)
def get_session(session_id: str) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        return SessionStateResponse.from_session(session)


@router.delete("/{session_id}", status_code=status.HTTP_200_OK)
def delete_session(session_id: str) -> dict:
    try:
        store.delete(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found",
        ) from exc
    return {"success": True, "message": f"Session {session_id} deleted"}


@router.post("/{session_id}/pick", response_model=SessionStateResponse)
def pick(session_id: str, payload: LatLngModel) -> SessionStateResponse:
    """Apply a map click using the session's current picking mode."""
    session = _session_or_404(session_id)
    with session.lock:
        session.pick(payload.as_coordinate())
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/context", response_model=SessionStateResponse)
def context_click(session_id: str, payload: LatLngModel) -> SessionStateResponse:
    """Right-click shortcut: always adds a blockage."""
    session = _session_or_404(session_id)
    with session.lock:
        session.add_blockage(payload.as_coordinate())
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/picking", response_model=SessionStateResponse)
def set_picking(session_id: str, payload: PickingRequest) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        session.set_picking(payload.mode)
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/blockage-mode/toggle", response_model=SessionStateResponse)
def toggle_blockage_mode(session_id: str) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        session.toggle_blockage_mode()
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/location", response_model=SessionStateResponse)
def use_location_as_start(session_id: str, payload: LocationRequest) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        try:
            session.use_location_as_start(payload.position.as_coordinate() if payload.position else None)
        except LocationUnavailableError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/reset", response_model=SessionStateResponse)
def reset(session_id: str) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        session.reset()
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/route", response_model=RouteResponse)
def start_evacuation(session_id: str) -> RouteResponse:
    """Compute the shortest route alternative that avoids the session's blockages."""
    session = _session_or_404(session_id)
    with session.lock:
        try:
            outcome = routing_service.compute_evacuation_route(session)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception(f"Error computing evacuation route: {exc}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to compute route: {str(exc)}",
            ) from exc
        return RouteResponse.from_outcome(outcome, session)


@router.get("/{session_id}/heat", response_model=HeatLayerResponse)
def heat_layer(session_id: str) -> HeatLayerResponse:
    session = _session_or_404(session_id)
    with session.lock:
        return HeatLayerResponse(**build_heat_layer(session.heat_points, session.heat_enabled))


@router.post("/{session_id}/heat/reseed", response_model=SessionStateResponse)
def reseed_heat(session_id: str) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        session.reseed_heat()
        return SessionStateResponse.from_session(session)


@router.post("/{session_id}/heat/toggle", response_model=SessionStateResponse)
def toggle_heat(session_id: str) -> SessionStateResponse:
    session = _session_or_404(session_id)
    with session.lock:
        session.toggle_heat()
        return SessionStateResponse.from_session(session)


@router.get("/{session_id}/export", status_code=status.HTTP_200_OK)
def export_geojson(session_id: str) -> dict:
    """Export start/end, the selected route and blockage zones as GeoJSON."""
    session = _session_or_404(session_id)
    with session.lock:
        return session_to_geojson(session)
