"""Pattern scoring learned from the rider's own ride history."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ...models.domain import Coordinate, Driver, RideHistoryEntry, Ride, RiderProfile
from ..geospatial import distance, time_of_day, utc_hour

ROUTE_SIMILARITY_WEIGHT = 30.0
TIME_PREFERENCE_WEIGHT = 20.0
PRICE_SENSITIVITY_WEIGHT = 15.0
DRIVER_COMPATIBILITY_WEIGHT = 25.0
PROXIMITY_WEIGHT = 10.0

SIMILAR_ROUTE_RADIUS_KM = 1.0
PROXIMITY_SCALE_KM = 5.0
NEUTRAL = 0.5


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def route_similarity(pickup: Coordinate, dropoff: Coordinate, history: Sequence[RideHistoryEntry]) -> float:
    """Share of past rides on a nearby route, weighted by how well they were rated."""

    if not history:
        return 0.0
    similar = [
        entry
        for entry in history
        if distance(pickup, entry.pickup) < SIMILAR_ROUTE_RADIUS_KM
        and distance(dropoff, entry.dropoff) < SIMILAR_ROUTE_RADIUS_KM
    ]
    if not similar:
        return 0.0
    average_rating = _mean([entry.rider_rating for entry in similar])
    return (len(similar) / len(history)) * (average_rating / 5.0)


def time_preference(hour: int, vehicle_class: str, history: Sequence[RideHistoryEntry]) -> float:
    bucket = time_of_day(hour)
    relevant = [
        entry.rider_rating
        for entry in history
        if entry.time_of_day == bucket and entry.vehicle_class == vehicle_class
    ]
    if not relevant:
        return NEUTRAL
    return _mean(relevant) / 5.0


def price_sensitivity(price: float, history: Sequence[RideHistoryEntry]) -> float:
    if not history:
        return NEUTRAL
    average_price = _mean([entry.price for entry in history])
    if average_price <= 0:
        return NEUTRAL
    return max(0.0, 1.0 - abs(price - average_price) / average_price)


def driver_compatibility(driver: Driver, profile: RiderProfile) -> float:
    """Driver fit on a 0-100 scale.

    Unlike the sibling sub-scores this one is not normalised to [0, 1]
    before weighting, so it dominates the weighted sum.
    """
    # TODO: rescale to [0, 1] once product confirms the intended weighting.
    score = (driver.rating / 5.0) * 40.0
    score += min(1.0, driver.total_rides / 100.0) * 30.0
    if driver.cabin.conversation_level == profile.preferences.conversation_style:
        score += 30.0
    else:
        score += 15.0
    return score


def proximity_preference(
    current_location: Coordinate,
    ride_pickup: Coordinate,
    history: Sequence[RideHistoryEntry],
) -> float:
    pickup_distance = distance(current_location, ride_pickup)
    if not history:
        return max(0.0, 1.0 - pickup_distance / PROXIMITY_SCALE_KM)
    average_pickup_distance = _mean([distance(entry.pickup, current_location) for entry in history])
    return max(0.0, 1.0 - abs(pickup_distance - average_pickup_distance) / PROXIMITY_SCALE_KM)


def inductive_score(
    ride: Ride,
    profile: RiderProfile,
    pickup: Coordinate,
    destination: Coordinate | None = None,
    now: datetime | None = None,
) -> float:
    history = profile.ride_history
    hour = utc_hour(now)

    score = route_similarity(ride.pickup, ride.dropoff, history) * ROUTE_SIMILARITY_WEIGHT
    score += time_preference(hour, ride.vehicle_class, history) * TIME_PREFERENCE_WEIGHT
    score += price_sensitivity(ride.price, history) * PRICE_SENSITIVITY_WEIGHT
    score += driver_compatibility(ride.driver, profile) * DRIVER_COMPATIBILITY_WEIGHT
    score += proximity_preference(pickup, ride.pickup, history) * PROXIMITY_WEIGHT
    return min(100.0, max(0.0, score))
