"""Content-based scoring against the rider's own history averages."""

from __future__ import annotations

from ...models.domain import Ride, RiderProfile
from ..geospatial import distance

VEHICLE_WEIGHT = 0.3
PRICE_WEIGHT = 0.25
DISTANCE_WEIGHT = 0.2
RATING_WEIGHT = 0.25

NEUTRAL_SCORE = 50.0
DEFAULT_RATING = 4.0
LIKED_RATING = 4.0


def _closeness(value: float, reference: float) -> float:
    """0-100 closeness of ``value`` to a positive ``reference``; neutral when there is none."""
    if reference <= 0:
        return NEUTRAL_SCORE
    return max(0.0, (1.0 - abs(value - reference) / reference) * 100.0)


def content_based_score(ride: Ride, profile: RiderProfile) -> float:
    history = profile.ride_history
    if not history:
        return NEUTRAL_SCORE

    count = len(history)
    liked_same_class = sum(
        1 for entry in history if entry.vehicle_class == ride.vehicle_class and entry.rider_rating >= LIKED_RATING
    )
    score = (liked_same_class / count) * 100.0 * VEHICLE_WEIGHT

    average_price = sum(entry.price for entry in history) / count
    score += _closeness(ride.price, average_price) * PRICE_WEIGHT

    average_distance = sum(distance(entry.pickup, entry.dropoff) for entry in history) / count
    score += _closeness(ride.distance_km, average_distance) * DISTANCE_WEIGHT

    ratings = profile.ratings_given
    average_rating = sum(ratings) / len(ratings) if ratings else DEFAULT_RATING
    if average_rating <= 0:
        average_rating = DEFAULT_RATING
    score += min(100.0, ride.driver.rating / average_rating * 100.0) * RATING_WEIGHT

    return min(100.0, max(0.0, score))
