"""Emergency contact endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from ...config import settings
from ...models.domain import Coordinate
from ...schemas.emergency import (
    EmergencyPanelResponse,
    EmergencyServiceModel,
    HotlineModel,
    NearestServicesResponse,
    ShareLocationModel,
)
from ...services.emergency.registry import HOTLINES, nearest_services_with_distance, share_location

router = APIRouter(prefix="/emergency", tags=["emergency"])


def _ranked(origin: Coordinate, count: int) -> list[EmergencyServiceModel]:
    return [
        EmergencyServiceModel(
            name=service.name,
            type=service.type,
            phone=service.phone,
            lat=service.latitude,
            lng=service.longitude,
            distance_m=distance,
            distance_km=round(distance / 1000, 1),
        )
        for service, distance in nearest_services_with_distance(origin, count)
    ]


@router.get("/services/nearest", response_model=NearestServicesResponse)
def nearest(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    count: int | None = Query(default=None, ge=0, description="Number of services to return"),
) -> NearestServicesResponse:
    limit = count if count is not None else settings.nearest_services_count
    return NearestServicesResponse(origin=[lat, lng], services=_ranked((lat, lng), limit))


@router.get("/panel", response_model=EmergencyPanelResponse)
def panel(
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
) -> EmergencyPanelResponse:
    """Nearest rescue teams, hotlines and a share message; defaults to the map centre."""
    origin = (lat, lng) if lat is not None and lng is not None else settings.map_center
    return EmergencyPanelResponse(
        origin=list(origin),
        services=_ranked(origin, settings.nearest_services_count),
        hotlines=[HotlineModel(**hotline) for hotline in HOTLINES],
        share=ShareLocationModel(**share_location(origin)),
    )


@router.get("/share", response_model=ShareLocationModel)
def share(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
) -> ShareLocationModel:
    return ShareLocationModel(**share_location((lat, lng)))
