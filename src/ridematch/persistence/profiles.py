"""Rider profile persistence on top of the Supabase ``profiles`` and ``ride_history`` tables.

They sit alongside the base rides schema (``profiles``, ``rides``,
``ride_requests``). The columns read and written here are:

``profiles`` (rider preference columns, all nullable):
    preferred_vehicle_types text[], max_price numeric,
    min_driver_rating numeric, smoking_preference boolean,
    music_preference boolean, conversation_preference text
    (quiet | moderate | chatty). Driver columns read when a ride is joined:
    vehicle_type text, smoking_allowed boolean, music_playing boolean,
    conversation_level text, plus the base rating and total_rides.

``ride_history`` (append-only, one row per rated ride):
    id uuid primary key, rider_id uuid references profiles(id),
    ride_id uuid references rides(id) nullable, pickup_lat, pickup_lng,
    dropoff_lat, dropoff_lng numeric not null, price numeric,
    vehicle_type text, rating numeric check (rating between 1 and 5),
    accepted boolean, created_at timestamptz default now().
    Loaded newest first, so an index on (rider_id, created_at desc) helps.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..config import settings
from ..models.domain import Coordinate, RideHistoryEntry, RiderPreferences, RiderProfile
from ..services.geospatial import day_of_week_for, time_of_day_for
from .rides import DEFAULT_PRICE, DEFAULT_VEHICLE_CLASS, _float, conversation_level, parse_timestamp, require_client

DEFAULT_RIDER_RATING = 4.0
DEFAULT_PREFERRED_CLASSES = ("economy", "comfort")


def row_to_preferences(row: dict[str, Any] | None) -> RiderPreferences:
    row = row or {}
    classes = row.get("preferred_vehicle_types")
    if not classes:
        classes = DEFAULT_PREFERRED_CLASSES
    return RiderPreferences(
        preferred_vehicle_classes=tuple(dict.fromkeys(str(value) for value in classes)),
        max_price=_float(row.get("max_price"), 1000.0),
        min_driver_rating=_float(row.get("min_driver_rating"), 4.0),
        smoking_allowed=bool(row.get("smoking_preference") or False),
        music_preferred=bool(row.get("music_preference", True)),
        conversation_style=conversation_level(row.get("conversation_preference")),
    )


def row_to_history_entry(row: dict[str, Any]) -> RideHistoryEntry:
    timestamp = parse_timestamp(row.get("created_at")) or datetime.now(timezone.utc)
    rating = _float(row.get("rating"), DEFAULT_RIDER_RATING)
    if not 1.0 <= rating <= 5.0:
        rating = DEFAULT_RIDER_RATING
    return RideHistoryEntry(
        pickup=Coordinate(float(row["pickup_lat"]), float(row["pickup_lng"])),
        dropoff=Coordinate(float(row["dropoff_lat"]), float(row["dropoff_lng"])),
        timestamp=timestamp,
        price=_float(row.get("price"), DEFAULT_PRICE),
        vehicle_class=row.get("vehicle_type") or DEFAULT_VEHICLE_CLASS,
        rider_rating=rating,
        time_of_day=time_of_day_for(timestamp),
        day_of_week=day_of_week_for(timestamp),
    )


def history_entry_to_row(rider_id: str, entry: RideHistoryEntry, ride_id: str | None, accepted: bool) -> dict[str, Any]:
    return {
        "rider_id": rider_id,
        "ride_id": ride_id,
        "pickup_lat": entry.pickup.lat,
        "pickup_lng": entry.pickup.lng,
        "dropoff_lat": entry.dropoff.lat,
        "dropoff_lng": entry.dropoff.lng,
        "price": entry.price,
        "vehicle_type": entry.vehicle_class,
        "rating": entry.rider_rating,
        "accepted": accepted,
        "created_at": entry.timestamp.isoformat(),
    }


def load_rider_profile(rider_id: str, history_limit: int | None = None) -> RiderProfile:
    """Load preferences and recent history for a rider, newest history first."""

    supabase = require_client()
    limit = history_limit or settings.history_limit

    profile_response = supabase.table("profiles").select("*").eq("id", rider_id).limit(1).execute()
    profile_row = profile_response.data[0] if profile_response.data else None

    history_response = (
        supabase.table("ride_history")
        .select("*")
        .eq("rider_id", rider_id)
        .order("created_at", desc=True)
        .limit(limit)
        .execute()
    )
    history: list[RideHistoryEntry] = []
    for row in history_response.data or []:
        try:
            history.append(row_to_history_entry(row))
        except (KeyError, TypeError, ValueError) as e:
            logging.warning(f"Skipping malformed history row for rider {rider_id}: {e}")

    return RiderProfile(
        id=rider_id,
        ride_history=tuple(history),
        preferences=row_to_preferences(profile_row),
        ratings_given=tuple(entry.rider_rating for entry in history),
    )


def list_profile_ids(limit: int, exclude: str | None = None) -> list[str]:
    supabase = require_client()
    response = supabase.table("profiles").select("id").limit(limit + 1).execute()
    ids = [str(row["id"]) for row in response.data or [] if row.get("id")]
    return [rider_id for rider_id in ids if rider_id != exclude][:limit]


def save_rider_profile(
    profile: RiderProfile,
    ride_id: str | None = None,
    accepted: bool = False,
) -> None:
    """Persist preferences and append the newest history entry.

    History rows are only ever inserted; existing rows are never rewritten.
    """
    supabase = require_client()
    preferences = profile.preferences
    supabase.table("profiles").update(
        {
            "preferred_vehicle_types": list(preferences.preferred_vehicle_classes),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
    ).eq("id", profile.id).execute()

    if profile.ride_history:
        latest = max(profile.ride_history, key=lambda entry: entry.timestamp)
        supabase.table("ride_history").insert(history_entry_to_row(profile.id, latest, ride_id, accepted)).execute()
