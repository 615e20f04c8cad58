"""Incremental profile learning from ride outcomes."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone

from ...models.domain import RideHistoryEntry, Ride, RiderPreferences, RiderProfile
from ..geospatial import day_of_week_for, time_of_day_for

POSITIVE_RATING = 4.0
DEFAULT_VEHICLE_CLASSES = ("economy", "comfort", "premium")


def default_rider_profile(rider_id: str) -> RiderProfile:
    """Profile used when the stored profile cannot be loaded."""

    return RiderProfile(
        id=rider_id,
        ride_history=(),
        preferences=RiderPreferences(
            preferred_vehicle_classes=DEFAULT_VEHICLE_CLASSES,
            max_price=1000.0,
            min_driver_rating=4.0,
            smoking_allowed=False,
            music_preferred=True,
            conversation_style="moderate",
        ),
        ratings_given=(),
    )


def history_entry_for(ride: Ride, rider_rating: float, timestamp: datetime) -> RideHistoryEntry:
    return RideHistoryEntry(
        pickup=ride.pickup,
        dropoff=ride.dropoff,
        timestamp=timestamp,
        price=ride.price,
        vehicle_class=ride.vehicle_class,
        rider_rating=rider_rating,
        time_of_day=time_of_day_for(timestamp),
        day_of_week=day_of_week_for(timestamp),
    )


def apply_feedback(
    profile: RiderProfile,
    ride: Ride,
    rider_rating: float,
    accepted: bool,
    timestamp: datetime | None = None,
) -> RiderProfile:
    """Return a new profile with the ride appended to history.

    A well-rated accepted ride also adds its vehicle class to the preferred
    classes, once. The input profile is left untouched.
    """
    if not 1.0 <= rider_rating <= 5.0:
        raise ValueError(f"Rider rating must be within [1, 5], got {rider_rating}.")

    moment = timestamp or datetime.now(timezone.utc)
    entry = history_entry_for(ride, rider_rating, moment)

    preferences = profile.preferences
    preferred = preferences.preferred_vehicle_classes
    if accepted and rider_rating >= POSITIVE_RATING and ride.vehicle_class not in preferred:
        preferences = replace(preferences, preferred_vehicle_classes=(*preferred, ride.vehicle_class))

    return replace(
        profile,
        ride_history=(*profile.ride_history, entry),
        preferences=preferences,
        ratings_given=(*profile.ratings_given, rider_rating),
    )
