"""Shared request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Coordinate, Ride, RideStatus


class CoordinateModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)

    @classmethod
    def from_domain(cls, coordinate: Coordinate) -> "CoordinateModel":
        return cls(lat=coordinate.lat, lng=coordinate.lng)


class RideModel(BaseModel):
    id: str
    driver_id: str
    driver_rating: float
    pickup: CoordinateModel
    dropoff: CoordinateModel
    pickup_address: Optional[str] = None
    dropoff_address: Optional[str] = None
    price: float
    vehicle_class: str
    distance_km: float
    duration_min: int
    seats_available: int
    status: RideStatus
    rider_id: Optional[str] = None

    @classmethod
    def from_domain(cls, ride: Ride) -> "RideModel":
        return cls(
            id=ride.id,
            driver_id=ride.driver.id,
            driver_rating=ride.driver.rating,
            pickup=CoordinateModel.from_domain(ride.pickup),
            dropoff=CoordinateModel.from_domain(ride.dropoff),
            pickup_address=ride.pickup_address,
            dropoff_address=ride.dropoff_address,
            price=ride.price,
            vehicle_class=ride.vehicle_class,
            distance_km=ride.distance_km,
            duration_min=ride.duration_min,
            seats_available=ride.seats_available,
            status=ride.status,
            rider_id=ride.rider_id,
        )


def coordinates_to_models(path: List[Coordinate]) -> List[CoordinateModel]:
    return [CoordinateModel.from_domain(point) for point in path]
