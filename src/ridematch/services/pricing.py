"""Fare calculation."""

from __future__ import annotations

from ..config import settings

PER_KM_RATES: dict[str, float] = {
    "economy": 1.0,
    "comfort": 1.5,
    "premium": 2.5,
}


def per_km_rate(vehicle_class: str) -> float:
    return PER_KM_RATES.get(vehicle_class, settings.pricing_default_rate)


def calculate_price(distance_km: float, vehicle_class: str) -> float:
    """Fare = base fare + distance x per-km rate for the vehicle class, rounded to cents.

    Unknown vehicle classes use the default rate.
    """
    if distance_km < 0:
        raise ValueError(f"Distance must be non-negative, got {distance_km}.")
    raw = settings.pricing_base_fare + distance_km * per_km_rate(vehicle_class)
    return round(raw, 2)
