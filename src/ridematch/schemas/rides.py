"""Ride request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..models.domain import RideRequest, RideRequestStatus, RideStatus
from .common import CoordinateModel, RideModel


class CreateRideRequest(BaseModel):
    driver_id: str
    pickup: CoordinateModel
    dropoff: CoordinateModel
    pickup_address: str = ""
    dropoff_address: str = ""
    vehicle_class: str = "economy"
    seats_available: int = Field(default=1, ge=1)


class CreateRideResponse(BaseModel):
    ride: RideModel
    path: List[CoordinateModel]
    route_source: Literal["osrm", "fallback"]


class MatchRequest(BaseModel):
    pickup: CoordinateModel
    destination: CoordinateModel
    max_distance_km: Optional[float] = Field(default=None, ge=0)


class MatchModel(BaseModel):
    ride: RideModel
    pickup_distance_km: float
    dropoff_distance_km: float
    route_deviation_km: float
    score: float


class AcceptRideRequest(BaseModel):
    rider_id: str


class StatusUpdateRequest(BaseModel):
    status: RideStatus
    current_location: Optional[CoordinateModel] = None


class FeedbackRequest(BaseModel):
    rider_id: str
    rating: float = Field(..., ge=1, le=5)
    accepted: bool = True


class FeedbackResponse(BaseModel):
    rider_id: str
    history_length: int
    preferred_vehicle_classes: List[str]


class RideRequestCreate(BaseModel):
    passenger_id: str
    pickup: CoordinateModel
    dropoff: CoordinateModel
    pickup_address: str = ""
    dropoff_address: str = ""
    max_price: float = Field(..., ge=0)


class RideRequestModel(BaseModel):
    id: str
    passenger_id: str
    pickup: CoordinateModel
    dropoff: CoordinateModel
    pickup_address: Optional[str] = None
    dropoff_address: Optional[str] = None
    max_price: float
    status: RideRequestStatus

    @classmethod
    def from_domain(cls, request: RideRequest) -> "RideRequestModel":
        return cls(
            id=request.id,
            passenger_id=request.passenger_id,
            pickup=CoordinateModel.from_domain(request.pickup),
            dropoff=CoordinateModel.from_domain(request.dropoff),
            pickup_address=request.pickup_address,
            dropoff_address=request.dropoff_address,
            max_price=request.max_price,
            status=request.status,
        )
