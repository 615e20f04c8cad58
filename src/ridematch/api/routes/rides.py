"""Ride endpoints."""

from __future__ import annotations

import logging
from typing import List, NoReturn

from fastapi import APIRouter, HTTPException, status

from ...persistence.rides import RideStoreError
from ...schemas.common import RideModel, coordinates_to_models
from ...schemas.rides import (
    AcceptRideRequest,
    CreateRideRequest,
    CreateRideResponse,
    FeedbackRequest,
    FeedbackResponse,
    MatchModel,
    MatchRequest,
    RideRequestCreate,
    RideRequestModel,
    StatusUpdateRequest,
)
from ...services.rides import service as ride_service

router = APIRouter(prefix="/rides", tags=["rides"])


def _raise_http(exc: Exception, action: str) -> NoReturn:
    if isinstance(exc, HTTPException):
        raise exc
    if isinstance(exc, ride_service.RideNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if isinstance(exc, ride_service.InvalidStatusTransition):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if isinstance(exc, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if isinstance(exc, RideStoreError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    logging.exception(f"Error while trying to {action}: {exc}")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}: {str(exc)}"
    ) from exc


@router.get("/available", response_model=List[RideModel], status_code=status.HTTP_200_OK)
def list_available() -> List[RideModel]:
    try:
        rides = ride_service.get_available_rides()
    except Exception as exc:
        _raise_http(exc, "list available rides")
    return [RideModel.from_domain(ride) for ride in rides]


@router.get("/rider/{rider_id}", response_model=List[RideModel], status_code=status.HTTP_200_OK)
def list_for_rider(rider_id: str) -> List[RideModel]:
    try:
        rides = ride_service.get_rider_rides(rider_id)
    except Exception as exc:
        _raise_http(exc, "list rider rides")
    return [RideModel.from_domain(ride) for ride in rides]


@router.post("", response_model=CreateRideResponse, status_code=status.HTTP_201_CREATED)
def create(payload: CreateRideRequest) -> CreateRideResponse:
    params = ride_service.CreateRideParams(
        driver_id=payload.driver_id,
        pickup=payload.pickup.to_domain(),
        dropoff=payload.dropoff.to_domain(),
        vehicle_class=payload.vehicle_class,
        seats_available=payload.seats_available,
        pickup_address=payload.pickup_address,
        dropoff_address=payload.dropoff_address,
    )
    try:
        created = ride_service.create_ride(params)
    except Exception as exc:
        _raise_http(exc, "create ride")
    return CreateRideResponse(
        ride=RideModel.from_domain(created.ride),
        path=coordinates_to_models(created.path),
        route_source=created.route_source,
    )


@router.post("/requests", response_model=RideRequestModel, status_code=status.HTTP_201_CREATED)
def create_request(payload: RideRequestCreate) -> RideRequestModel:
    """Post a passenger trip for drivers to pick up."""
    params = ride_service.CreateRideRequestParams(
        passenger_id=payload.passenger_id,
        pickup=payload.pickup.to_domain(),
        dropoff=payload.dropoff.to_domain(),
        max_price=payload.max_price,
        pickup_address=payload.pickup_address,
        dropoff_address=payload.dropoff_address,
    )
    try:
        request = ride_service.create_ride_request(params)
    except Exception as exc:
        _raise_http(exc, "create ride request")
    return RideRequestModel.from_domain(request)

@router.post("/match", response_model=List[MatchModel], status_code=status.HTTP_200_OK)
def match(payload: MatchRequest) -> List[MatchModel]:
    try:
        matches = ride_service.find_matching_rides(
            payload.pickup.to_domain(),
            payload.destination.to_domain(),
            max_distance_km=payload.max_distance_km,
        )
    except Exception as exc:
        _raise_http(exc, "match rides")
    return [
        MatchModel(
            ride=RideModel.from_domain(item.ride),
            pickup_distance_km=item.pickup_distance_km,
            dropoff_distance_km=item.dropoff_distance_km,
            route_deviation_km=item.route_deviation_km,
            score=item.score,
        )
        for item in matches
    ]


@router.post("/{ride_id}/accept", response_model=RideModel, status_code=status.HTTP_200_OK)
def accept(ride_id: str, payload: AcceptRideRequest) -> RideModel:
    try:
        ride = ride_service.accept_ride(ride_id, payload.rider_id)
    except Exception as exc:
        _raise_http(exc, "accept ride")
    return RideModel.from_domain(ride)


@router.patch("/{ride_id}/status", response_model=RideModel, status_code=status.HTTP_200_OK)
def update_status(ride_id: str, payload: StatusUpdateRequest) -> RideModel:
    location = payload.current_location.to_domain() if payload.current_location else None
    try:
        ride = ride_service.update_ride_status(ride_id, payload.status, location)
    except Exception as exc:
        _raise_http(exc, "update ride status")
    return RideModel.from_domain(ride)


@router.post("/{ride_id}/feedback", response_model=FeedbackResponse, status_code=status.HTTP_200_OK)
def feedback(ride_id: str, payload: FeedbackRequest) -> FeedbackResponse:
    try:
        ride = ride_service.get_ride(ride_id)
        profile = ride_service.record_feedback(payload.rider_id, ride, payload.rating, payload.accepted)
    except Exception as exc:
        _raise_http(exc, "record feedback")
    return FeedbackResponse(
        rider_id=profile.id,
        history_length=len(profile.ride_history),
        preferred_vehicle_classes=list(profile.preferences.preferred_vehicle_classes),
    )
