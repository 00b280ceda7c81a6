"""Evacuation routing orchestration service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

import httpx

from ...config import settings
from ...models.domain import CandidateRoute
from ..session import EvacuationSession
from .avoidance import build_candidates, select_unblocked_route
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)

RouteStatus = Literal["ok", "no_route", "all_blocked", "failed"]

NO_ROUTE_MESSAGE = "No route found"
ALL_BLOCKED_MESSAGE = "All routes are blocked nearby. Remove a blockage or adjust points."
FAILED_MESSAGE = "Failed to compute route"


@dataclass(slots=True)
class RouteOutcome:
    status: RouteStatus
    message: str
    candidates_considered: int = 0
    selected: Optional[CandidateRoute] = None


def compute_evacuation_route(
    session: EvacuationSession,
    client: OSRMClient | None = None,
    threshold_m: float | None = None,
) -> RouteOutcome:
    """Request driving alternatives from OSRM and keep the shortest one clear of blockages.

    Network and provider failures are reported as a ``failed`` outcome and leave
    the session's current route untouched; they are not retried here. The
    session lock is held for the whole computation, so concurrent edits to the
    same session wait until the outcome has been applied.
    """
    with session.lock:
        return _compute_locked(session, client, threshold_m)


def _compute_locked(
    session: EvacuationSession,
    client: OSRMClient | None,
    threshold_m: float | None,
) -> RouteOutcome:
    if session.start is None or session.end is None:
        raise ValueError("Both start and end points must be set before starting an evacuation.")

    threshold = threshold_m if threshold_m is not None else settings.blockage_threshold_m

    try:
        osrm_client = client or OSRMClient()
        payload = osrm_client.route([session.start, session.end], alternatives=True)
    except (ConnectionError, ValueError, httpx.HTTPError) as e:
        logger.exception(f"Evacuation route request failed for session {session.session_id}: {e}")
        return RouteOutcome(status="failed", message=FAILED_MESSAGE)

    candidates = build_candidates(payload)
    if not candidates:
        session.clear_route()
        return RouteOutcome(status="no_route", message=NO_ROUTE_MESSAGE)

    selected = select_unblocked_route(candidates, session.blocked_points, threshold)
    if selected is None:
        logger.info(
            f"All {len(candidates)} route alternatives blocked for session {session.session_id} "
            f"({len(session.blocked_points)} blocked points, threshold {threshold:.0f} m)"
        )
        session.clear_route()
        return RouteOutcome(
            status="all_blocked",
            message=ALL_BLOCKED_MESSAGE,
            candidates_considered=len(candidates),
        )

    session.apply_route(selected)
    logger.info(
        f"Selected route alternative #{selected.index} for session {session.session_id}: "
        f"{session.distance_km} km, {session.duration_min} min"
    )
    return RouteOutcome(
        status="ok",
        message="Route ready",
        candidates_considered=len(candidates),
        selected=selected,
    )
