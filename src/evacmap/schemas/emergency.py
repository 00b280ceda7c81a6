"""Emergency service schemas."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel


class EmergencyServiceModel(BaseModel):
    name: str
    type: str
    phone: str
    lat: float
    lng: float
    distance_m: float
    distance_km: float


class HotlineModel(BaseModel):
    label: str
    phone: str


class ShareLocationModel(BaseModel):
    title: str
    text: str
    url: str
    mailto: str


class NearestServicesResponse(BaseModel):
    origin: List[float]
    services: List[EmergencyServiceModel]


class EmergencyPanelResponse(NearestServicesResponse):
    hotlines: List[HotlineModel]
    share: ShareLocationModel
