"""Hard eligibility rules applied before any scoring."""

from __future__ import annotations

import logging
from typing import Sequence

from ...models.domain import Coordinate, Ride, RiderPreferences, RiderProfile
from ..geospatial import distance

logger = logging.getLogger(__name__)

MAX_PICKUP_DISTANCE_KM = 5.0


def rejection_reasons(ride: Ride, preferences: RiderPreferences, pickup: Coordinate) -> list[str]:
    """Every rule the ride breaks for this rider; empty when the ride is eligible."""

    reasons: list[str] = []
    if ride.price > preferences.max_price:
        reasons.append(f"price {ride.price:.2f} exceeds maximum {preferences.max_price:.2f}")
    if ride.driver.rating < preferences.min_driver_rating:
        reasons.append(f"driver rating {ride.driver.rating:.1f} below minimum {preferences.min_driver_rating:.1f}")
    if preferences.preferred_vehicle_classes and ride.vehicle_class not in preferences.preferred_vehicle_classes:
        reasons.append(f"vehicle class '{ride.vehicle_class}' not preferred")
    if preferences.smoking_allowed != ride.driver.cabin.smoking_allowed:
        reasons.append("smoking preference mismatch")
    pickup_distance = distance(pickup, ride.pickup)
    if pickup_distance > MAX_PICKUP_DISTANCE_KM:
        reasons.append(f"pickup {pickup_distance:.1f} km away")
    return reasons


def is_eligible(ride: Ride, preferences: RiderPreferences, pickup: Coordinate) -> bool:
    return not rejection_reasons(ride, preferences, pickup)


def deductive_filter(
    rides: Sequence[Ride],
    profile: RiderProfile,
    pickup: Coordinate,
    destination: Coordinate | None = None,
) -> list[Ride]:
    """Keep the rides that break none of the rider's hard rules, in input order."""

    eligible = [ride for ride in rides if is_eligible(ride, profile.preferences, pickup)]
    logger.info(f"Deductive filter kept {len(eligible)}/{len(rides)} rides for rider {profile.id}")
    return eligible
