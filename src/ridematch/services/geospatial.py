"""Geospatial helper functions."""

from __future__ import annotations

import math
from datetime import datetime, timezone

from ..models.domain import Coordinate, TimeOfDay

EARTH_RADIUS_KM = 6371.0


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180.0)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = to_radians(lat1), to_radians(lat2)
    d_phi = to_radians(lat2 - lat1)
    d_lambda = to_radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push ``a`` a hair outside [0, 1] near antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in kilometres between two coordinates."""

    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def estimate_duration_min(distance_km: float, average_speed_kmh: float = 40.0) -> int:
    """Whole minutes needed to cover ``distance_km`` at a constant average speed."""

    if distance_km < 0:
        raise ValueError(f"Distance must be non-negative, got {distance_km}.")
    if average_speed_kmh <= 0:
        raise ValueError(f"Average speed must be positive, got {average_speed_kmh}.")
    return math.ceil(distance_km / average_speed_kmh * 60.0)


def time_of_day(hour: int) -> TimeOfDay:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def utc_hour(moment: datetime | None = None) -> int:
    """Hour of ``moment`` on the UTC clock; naive values are taken as UTC already."""
    if moment is None:
        return datetime.now(timezone.utc).hour
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.hour


def time_of_day_for(moment: datetime) -> TimeOfDay:
    return time_of_day(utc_hour(moment))


def day_of_week_for(moment: datetime) -> int:
    """UTC day of week with Sunday as 0."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.isoweekday() % 7
