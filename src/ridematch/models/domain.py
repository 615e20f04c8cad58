"""Domain models for rides, drivers and rider profiles."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal, Optional

ConversationStyle = Literal["quiet", "moderate", "chatty"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]


class RideStatus(str, Enum):
    AVAILABLE = "available"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RideRequestStatus(str, Enum):
    PENDING = "pending"
    MATCHED = "matched"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Latitude/longitude pair in degrees."""

    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"Coordinate components must be finite, got ({self.lat}, {self.lng}).")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"Latitude {self.lat} is outside [-90, 90].")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"Longitude {self.lng} is outside [-180, 180].")


@dataclass(frozen=True, slots=True)
class CabinPreferences:
    smoking_allowed: bool = False
    music_playing: bool = False
    conversation_level: ConversationStyle = "moderate"


@dataclass(frozen=True, slots=True)
class Driver:
    """Driver attributes used by the filters and scorers."""

    id: str
    rating: float = 5.0
    total_rides: int = 0
    vehicle_class: str = "economy"
    cabin: CabinPreferences = field(default_factory=CabinPreferences)


@dataclass(frozen=True, slots=True)
class Ride:
    """A ride offer as stored in the ride store."""

    id: str
    driver: Driver
    pickup: Coordinate
    dropoff: Coordinate
    price: float
    vehicle_class: str
    distance_km: float
    duration_min: int
    status: RideStatus = RideStatus.AVAILABLE
    pickup_address: Optional[str] = None
    dropoff_address: Optional[str] = None
    seats_available: int = 1
    rider_id: Optional[str] = None
    current_location: Optional[Coordinate] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class RideRequest:
    """A passenger's posted trip, waiting to be matched to a ride."""

    id: str
    passenger_id: str
    pickup: Coordinate
    dropoff: Coordinate
    max_price: float
    status: RideRequestStatus = RideRequestStatus.PENDING
    pickup_address: Optional[str] = None
    dropoff_address: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class RideHistoryEntry:
    """One completed or rated ride in a rider's history."""

    pickup: Coordinate
    dropoff: Coordinate
    timestamp: datetime
    price: float
    vehicle_class: str
    rider_rating: float
    time_of_day: TimeOfDay
    day_of_week: int


@dataclass(frozen=True, slots=True)
class RiderPreferences:
    preferred_vehicle_classes: tuple[str, ...] = ()
    max_price: float = 1000.0
    min_driver_rating: float = 4.0
    smoking_allowed: bool = False
    music_preferred: bool = True
    conversation_style: ConversationStyle = "moderate"


@dataclass(frozen=True, slots=True)
class RiderProfile:
    """Rider preferences plus the append-only ride history."""

    id: str
    ride_history: tuple[RideHistoryEntry, ...] = ()
    preferences: RiderPreferences = field(default_factory=RiderPreferences)
    ratings_given: tuple[float, ...] = ()


@dataclass(frozen=True, slots=True)
class RecommendationResult:
    ride: Ride
    score: float
    reasoning: tuple[str, ...]
    inductive_score: float = 0.0
    content_score: float = 0.0
    collaborative_score: float = 50.0


@dataclass(frozen=True, slots=True)
class MatchResult:
    ride: Ride
    pickup_distance_km: float
    dropoff_distance_km: float
    route_deviation_km: float
    score: float
