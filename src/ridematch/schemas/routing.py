"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from .common import CoordinateModel


class RouteRequest(BaseModel):
    start: CoordinateModel
    end: CoordinateModel


class FallbackRouteRequest(BaseModel):
    start: CoordinateModel
    end: CoordinateModel
    waypoints: List[CoordinateModel] = Field(default_factory=list, description="Intermediate stops, in travel order.")


class RouteResponse(BaseModel):
    path: List[CoordinateModel]
    distance_km: float
    duration_min: int
    instructions: List[str] = Field(default_factory=list)
    source: Literal["osrm", "fallback"]


class PriceRequest(BaseModel):
    distance_km: float = Field(..., ge=0)
    vehicle_class: str


class PriceResponse(BaseModel):
    distance_km: float
    vehicle_class: str
    price: float
