"""Ride persistence on top of the Supabase ``rides`` table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from ..db.supabase import get_supabase_client
from ..models.domain import CabinPreferences, Coordinate, Driver, Ride, RideRequest, RideRequestStatus, RideStatus

RIDE_COLUMNS = "*, driver:profiles!driver_id(*)"

DEFAULT_PRICE = 0.0
DEFAULT_VEHICLE_CLASS = "economy"
DEFAULT_DRIVER_RATING = 5.0
CONVERSATION_LEVELS = ("quiet", "moderate", "chatty")


class RideStoreError(RuntimeError):
    """The ride store is not configured or rejected the operation."""


def require_client():
    supabase = get_supabase_client()
    if not supabase:
        raise RideStoreError(
            "Supabase not configured. Set RIDEMATCH_SUPABASE_URL and RIDEMATCH_SUPABASE_KEY environment variables."
        )
    return supabase


def _float(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logging.warning(f"Unparseable timestamp from store: {value!r}")
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def conversation_level(value: Any) -> str:
    return value if value in CONVERSATION_LEVELS else "moderate"


def row_to_driver(row: dict[str, Any] | None, driver_id: str | None = None) -> Driver:
    """Build a ``Driver`` from a joined ``profiles`` row, filling gaps with defaults."""

    row = row or {}
    return Driver(
        id=str(row.get("id") or driver_id or ""),
        rating=_float(row.get("rating"), DEFAULT_DRIVER_RATING),
        total_rides=_int(row.get("total_rides"), 0),
        vehicle_class=row.get("vehicle_type") or DEFAULT_VEHICLE_CLASS,
        cabin=CabinPreferences(
            smoking_allowed=bool(row.get("smoking_allowed") or False),
            music_playing=bool(row.get("music_playing") or False),
            conversation_level=conversation_level(row.get("conversation_level")),
        ),
    )


def row_to_ride(row: dict[str, Any]) -> Ride:
    """Map a ``rides`` row (optionally joined with its driver) to a ``Ride``."""

    current = None
    if row.get("current_lat") is not None and row.get("current_lng") is not None:
        current = Coordinate(float(row["current_lat"]), float(row["current_lng"]))

    vehicle_class = row.get("vehicle_type") or DEFAULT_VEHICLE_CLASS
    return Ride(
        id=str(row["id"]),
        driver=row_to_driver(row.get("driver"), row.get("driver_id")),
        pickup=Coordinate(float(row["pickup_lat"]), float(row["pickup_lng"])),
        dropoff=Coordinate(float(row["dropoff_lat"]), float(row["dropoff_lng"])),
        price=_float(row.get("price"), DEFAULT_PRICE),
        vehicle_class=vehicle_class,
        distance_km=_float(row.get("distance_km"), 0.0),
        duration_min=_int(row.get("estimated_duration_min"), 0),
        status=RideStatus(row.get("status") or RideStatus.AVAILABLE.value),
        pickup_address=row.get("pickup_address"),
        dropoff_address=row.get("dropoff_address"),
        seats_available=_int(row.get("seats_available"), 1),
        rider_id=row.get("passenger_id"),
        current_location=current,
        created_at=parse_timestamp(row.get("created_at")),
    )


def _rows_to_rides(rows: list[dict[str, Any]] | None) -> list[Ride]:
    rides: list[Ride] = []
    for row in rows or []:
        try:
            rides.append(row_to_ride(row))
        except (KeyError, TypeError, ValueError) as e:
            logging.warning(f"Skipping malformed ride row {row.get('id')!r}: {e}")
    return rides


def insert_ride(record: dict[str, Any]) -> Ride:
    supabase = require_client()
    response = supabase.table("rides").insert(record).execute()
    if not response.data:
        raise RideStoreError("Ride insert returned no data.")
    return row_to_ride(response.data[0])


def fetch_ride(ride_id: str) -> Ride | None:
    supabase = require_client()
    response = supabase.table("rides").select(RIDE_COLUMNS).eq("id", ride_id).limit(1).execute()
    rides = _rows_to_rides(response.data)
    return rides[0] if rides else None


def fetch_available_rides() -> list[Ride]:
    supabase = require_client()
    response = (
        supabase.table("rides")
        .select(RIDE_COLUMNS)
        .eq("status", RideStatus.AVAILABLE.value)
        .order("created_at", desc=True)
        .execute()
    )
    return _rows_to_rides(response.data)


def fetch_rider_rides(rider_id: str) -> list[Ride]:
    supabase = require_client()
    response = (
        supabase.table("rides")
        .select(RIDE_COLUMNS)
        .or_(f"driver_id.eq.{rider_id},passenger_id.eq.{rider_id}")
        .order("created_at", desc=True)
        .execute()
    )
    return _rows_to_rides(response.data)


def update_ride(ride_id: str, fields: dict[str, Any], expected_status: str | None = None) -> Ride | None:
    """Update a ride; with ``expected_status`` the update only applies if the ride is still in it."""

    supabase = require_client()
    payload = {**fields, "updated_at": datetime.now(timezone.utc).isoformat()}
    query = supabase.table("rides").update(payload).eq("id", ride_id)
    if expected_status is not None:
        query = query.eq("status", expected_status)
    response = query.execute()
    rides = _rows_to_rides(response.data)
    return rides[0] if rides else None


def row_to_ride_request(row: dict[str, Any]) -> RideRequest:
    return RideRequest(
        id=str(row["id"]),
        passenger_id=str(row["passenger_id"]),
        pickup=Coordinate(float(row["pickup_lat"]), float(row["pickup_lng"])),
        dropoff=Coordinate(float(row["dropoff_lat"]), float(row["dropoff_lng"])),
        max_price=_float(row.get("max_price"), 0.0),
        status=RideRequestStatus(row.get("status") or RideRequestStatus.PENDING.value),
        pickup_address=row.get("pickup_address"),
        dropoff_address=row.get("dropoff_address"),
        created_at=parse_timestamp(row.get("created_at")),
    )


def insert_ride_request(record: dict[str, Any]) -> RideRequest:
    supabase = require_client()
    response = supabase.table("ride_requests").insert(record).execute()
    if not response.data:
        raise RideStoreError("Ride request insert returned no data.")
    return row_to_ride_request(response.data[0])
