"""Distance-based ride matching.

A linear penalty model used both as a standalone matcher and as the fallback
when the recommendation pipeline cannot run. It needs nothing beyond the
coordinates and rides already in hand.
"""

from __future__ import annotations

from typing import Sequence

from ...config import settings
from ...models.domain import Coordinate, MatchResult, Ride
from ..geospatial import distance

PICKUP_PENALTY_PER_KM = 10.0
DROPOFF_PENALTY_PER_KM = 5.0
DEVIATION_PENALTY_PER_KM = 3.0


def find_nearby_rides(
    point: Coordinate,
    rides: Sequence[Ride],
    max_distance_km: float | None = None,
) -> list[tuple[Ride, float]]:
    """Rides whose pickup lies within ``max_distance_km`` of ``point``, nearest first."""

    radius = settings.nearby_radius_km if max_distance_km is None else max_distance_km
    if radius < 0:
        raise ValueError(f"Search radius must be non-negative, got {radius}.")

    nearby = [(ride, distance(point, ride.pickup)) for ride in rides]
    nearby = [item for item in nearby if item[1] <= radius]
    nearby.sort(key=lambda item: item[1])
    return nearby


def match_score(pickup_distance_km: float, dropoff_distance_km: float, route_deviation_km: float) -> float:
    for name, value in (
        ("pickup distance", pickup_distance_km),
        ("dropoff distance", dropoff_distance_km),
        ("route deviation", route_deviation_km),
    ):
        if value < 0:
            raise ValueError(f"{name.capitalize()} must be non-negative, got {value}.")

    penalty = (
        pickup_distance_km * PICKUP_PENALTY_PER_KM
        + dropoff_distance_km * DROPOFF_PENALTY_PER_KM
        + route_deviation_km * DEVIATION_PENALTY_PER_KM
    )
    return max(0.0, 100.0 - penalty)


def rank_matches(
    pickup: Coordinate,
    destination: Coordinate,
    rides: Sequence[Ride],
    estimated_trip_km: float,
    max_distance_km: float | None = None,
    min_score: float | None = None,
) -> list[MatchResult]:
    """Score nearby rides against the requested trip and keep the good ones, best first."""

    threshold = settings.match_score_threshold if min_score is None else min_score
    matches: list[MatchResult] = []
    for ride, pickup_distance in find_nearby_rides(pickup, rides, max_distance_km):
        dropoff_distance = distance(destination, ride.dropoff)
        deviation = abs(estimated_trip_km - ride.distance_km)
        score = match_score(pickup_distance, dropoff_distance, deviation)
        if score > threshold:
            matches.append(
                MatchResult(
                    ride=ride,
                    pickup_distance_km=pickup_distance,
                    dropoff_distance_km=dropoff_distance,
                    route_deviation_km=deviation,
                    score=score,
                )
            )

    matches.sort(key=lambda match: match.score, reverse=True)
    return matches
