"""Ride lifecycle orchestration service.

Glue between the store adapters and the pure matching, pricing and
recommendation functions. Store failures on the recommendation path degrade
to defaults; everything else propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Sequence

from ...config import settings
from ...models.domain import (
    Coordinate,
    MatchResult,
    RecommendationResult,
    Ride,
    RideRequest,
    RideRequestStatus,
    RideStatus,
    RiderProfile,
)
from ...persistence import profiles as profile_store
from ...persistence import rides as ride_store
from ..matching.proximity import rank_matches
from ..pricing import calculate_price
from ..profiles.learner import apply_feedback, default_rider_profile
from ..profiles.peers import fetch_peer_profiles
from ..recommendations.hybrid import recommend
from ..routing.astar import find_path
from ..routing.service import get_shortest_route

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[RideStatus, frozenset[RideStatus]] = {
    RideStatus.AVAILABLE: frozenset({RideStatus.ACCEPTED, RideStatus.CANCELLED}),
    RideStatus.ACCEPTED: frozenset({RideStatus.IN_PROGRESS, RideStatus.CANCELLED}),
    RideStatus.IN_PROGRESS: frozenset({RideStatus.COMPLETED, RideStatus.CANCELLED}),
    RideStatus.COMPLETED: frozenset(),
    RideStatus.CANCELLED: frozenset(),
}


class InvalidStatusTransition(ValueError):
    pass


class RideNotFoundError(LookupError):
    pass


@dataclass(slots=True)
class CreateRideParams:
    driver_id: str
    pickup: Coordinate
    dropoff: Coordinate
    vehicle_class: str
    seats_available: int = 1
    pickup_address: str = ""
    dropoff_address: str = ""


@dataclass(slots=True)
class CreateRideRequestParams:
    passenger_id: str
    pickup: Coordinate
    dropoff: Coordinate
    max_price: float
    pickup_address: str = ""
    dropoff_address: str = ""


@dataclass(slots=True)
class CreatedRide:
    ride: Ride
    path: list[Coordinate]
    route_source: str


def transition_status(ride: Ride, new_status: RideStatus) -> Ride:
    """Return a copy of ``ride`` in ``new_status`` if the lifecycle allows it."""

    if new_status not in ALLOWED_TRANSITIONS[ride.status]:
        raise InvalidStatusTransition(f"Ride {ride.id} cannot move from '{ride.status.value}' to '{new_status.value}'.")
    return replace(ride, status=new_status)


def create_ride(params: CreateRideParams) -> CreatedRide:
    route = get_shortest_route(params.pickup, params.dropoff)
    price = calculate_price(route.distance_km, params.vehicle_class)

    ride = ride_store.insert_ride(
        {
            "driver_id": params.driver_id,
            "pickup_lat": params.pickup.lat,
            "pickup_lng": params.pickup.lng,
            "pickup_address": params.pickup_address,
            "dropoff_lat": params.dropoff.lat,
            "dropoff_lng": params.dropoff.lng,
            "dropoff_address": params.dropoff_address,
            "distance_km": route.distance_km,
            "estimated_duration_min": route.duration_min,
            "price": price,
            "vehicle_type": params.vehicle_class,
            "seats_available": params.seats_available,
            "status": RideStatus.AVAILABLE.value,
        }
    )
    logger.info(f"Created ride {ride.id}: {route.distance_km:.2f} km via {route.source}, price {price:.2f}")
    return CreatedRide(ride=ride, path=route.path, route_source=route.source)


def create_ride_request(params: CreateRideRequestParams) -> RideRequest:
    """Post a passenger trip as a pending request."""

    if params.max_price < 0:
        raise ValueError(f"Maximum price must be non-negative, got {params.max_price}.")

    request = ride_store.insert_ride_request(
        {
            "passenger_id": params.passenger_id,
            "pickup_lat": params.pickup.lat,
            "pickup_lng": params.pickup.lng,
            "pickup_address": params.pickup_address,
            "dropoff_lat": params.dropoff.lat,
            "dropoff_lng": params.dropoff.lng,
            "dropoff_address": params.dropoff_address,
            "max_price": params.max_price,
            "status": RideRequestStatus.PENDING.value,
        }
    )
    logger.info(f"Created ride request {request.id} for passenger {params.passenger_id}")
    return request


def get_available_rides() -> list[Ride]:
    return ride_store.fetch_available_rides()


def get_ride(ride_id: str) -> Ride:
    ride = ride_store.fetch_ride(ride_id)
    if ride is None:
        raise RideNotFoundError(f"Ride {ride_id} not found.")
    return ride


def get_rider_rides(rider_id: str) -> list[Ride]:
    return ride_store.fetch_rider_rides(rider_id)


def find_matching_rides(
    pickup: Coordinate,
    destination: Coordinate,
    rides: Sequence[Ride] | None = None,
    max_distance_km: float | None = None,
) -> list[MatchResult]:
    """Distance-based ranking; works offline when ``rides`` is supplied."""

    candidates = get_available_rides() if rides is None else rides
    if not candidates:
        return []
    estimated_trip_km = find_path(pickup, destination).total_distance_km
    return rank_matches(pickup, destination, candidates, estimated_trip_km, max_distance_km)


def load_profile_or_default(rider_id: str) -> RiderProfile:
    try:
        return profile_store.load_rider_profile(rider_id)
    except Exception as e:
        logger.warning(f"Error loading profile for rider {rider_id}: {e}. Using default profile.")
        return default_rider_profile(rider_id)


def load_peer_profiles(rider_id: str) -> list[RiderProfile]:
    if settings.peer_profile_limit <= 0:
        return []
    try:
        peer_ids = profile_store.list_profile_ids(settings.peer_profile_limit, exclude=rider_id)
    except Exception as e:
        logger.warning(f"Failed to list peer profiles: {e}. Collaborative scores will be neutral.")
        return []
    return fetch_peer_profiles(profile_store.load_rider_profile, peer_ids)


def _matches_as_recommendations(matches: Sequence[MatchResult]) -> list[RecommendationResult]:
    return [
        RecommendationResult(
            ride=match.ride,
            score=match.score,
            reasoning=(
                f"Distance Match: {match.score:.0f}/100",
                f"{match.pickup_distance_km:.1f} km from your location",
                "Using basic matching (recommendations unavailable)",
            ),
        )
        for match in matches
    ]


def get_recommended_rides(
    pickup: Coordinate,
    destination: Coordinate,
    rider_id: str,
    now: datetime | None = None,
) -> list[RecommendationResult]:
    """Hybrid recommendations, falling back to proximity matching if the pipeline fails."""

    rides = get_available_rides()
    if not rides:
        return []

    try:
        profile = load_profile_or_default(rider_id)
        peers = load_peer_profiles(rider_id)
        return recommend(rides, profile, pickup, destination, peers, now=now)
    except Exception as e:
        logger.warning(f"Recommendation error for rider {rider_id}: {e}. Falling back to proximity matching.")
        matches = find_matching_rides(pickup, destination, rides=rides)
        return _matches_as_recommendations(matches)


def accept_ride(ride_id: str, rider_id: str) -> Ride:
    ride = ride_store.update_ride(
        ride_id,
        {"passenger_id": rider_id, "status": RideStatus.ACCEPTED.value},
        expected_status=RideStatus.AVAILABLE.value,
    )
    if ride is None:
        raise RideNotFoundError(f"Ride {ride_id} not found or no longer available.")
    return ride


def update_ride_status(
    ride_id: str,
    status: RideStatus,
    current_location: Coordinate | None = None,
) -> Ride:
    ride = get_ride(ride_id)
    transition_status(ride, status)

    fields: dict[str, object] = {"status": status.value}
    if current_location is not None:
        fields["current_lat"] = current_location.lat
        fields["current_lng"] = current_location.lng
    updated = ride_store.update_ride(ride_id, fields, expected_status=ride.status.value)
    if updated is None:
        raise RideNotFoundError(f"Ride {ride_id} changed status concurrently.")
    return updated


def record_feedback(
    rider_id: str,
    ride: Ride,
    rating: float,
    accepted: bool,
    timestamp: datetime | None = None,
) -> RiderProfile:
    """Fold a ride outcome into the rider's profile and persist the result."""

    # The stored profile is the base of the update, never the default profile.
    profile = profile_store.load_rider_profile(rider_id)
    updated = apply_feedback(profile, ride, rating, accepted, timestamp=timestamp)
    profile_store.save_rider_profile(updated, ride_id=ride.id, accepted=accepted)
    return updated
