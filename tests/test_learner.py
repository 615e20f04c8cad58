import time
from datetime import datetime, timedelta, timezone

import pytest

from ridematch.models.domain import Coordinate, Driver, Ride, RiderPreferences, RiderProfile
from ridematch.services.geospatial import time_of_day, utc_hour
from ridematch.services.profiles import apply_feedback, default_rider_profile

MONDAY_MORNING = datetime(2025, 1, 6, 8, 30, tzinfo=timezone.utc)


def _ride(vehicle_class: str = "premium", price: float = 40.0) -> Ride:
    return Ride(
        id="ride-1",
        driver=Driver(id="driver-1", rating=4.9),
        pickup=Coordinate(40.0, -73.0),
        dropoff=Coordinate(40.05, -73.0),
        price=price,
        vehicle_class=vehicle_class,
        distance_km=5.6,
        duration_min=9,
    )


def _profile(classes: tuple[str, ...] = ("economy",)) -> RiderProfile:
    return RiderProfile(id="rider-1", preferences=RiderPreferences(preferred_vehicle_classes=classes))


def test_feedback_appends_history_without_touching_input():
    profile = _profile()
    updated = apply_feedback(profile, _ride(), 5, accepted=True, timestamp=MONDAY_MORNING)

    assert profile.ride_history == ()
    assert profile.ratings_given == ()
    assert profile.preferences.preferred_vehicle_classes == ("economy",)

    assert len(updated.ride_history) == 1
    entry = updated.ride_history[0]
    assert entry.price == 40.0
    assert entry.vehicle_class == "premium"
    assert entry.rider_rating == 5
    assert entry.timestamp == MONDAY_MORNING
    assert updated.ratings_given == (5,)


def test_positive_feedback_adds_vehicle_class_once():
    profile = _profile()
    once = apply_feedback(profile, _ride(), 4, accepted=True, timestamp=MONDAY_MORNING)
    twice = apply_feedback(once, _ride(), 5, accepted=True, timestamp=MONDAY_MORNING)

    assert once.preferences.preferred_vehicle_classes == ("economy", "premium")
    assert twice.preferences.preferred_vehicle_classes == ("economy", "premium")
    assert len(twice.ride_history) == 2


@pytest.mark.parametrize("rating, accepted", [(3, True), (5, False), (1, False)])
def test_lukewarm_or_declined_ride_does_not_change_preferences(rating: float, accepted: bool):
    updated = apply_feedback(_profile(), _ride(), rating, accepted=accepted, timestamp=MONDAY_MORNING)

    assert updated.preferences.preferred_vehicle_classes == ("economy",)
    assert len(updated.ride_history) == 1


def test_history_entry_time_fields():
    updated = apply_feedback(_profile(), _ride(), 5, accepted=True, timestamp=MONDAY_MORNING)
    entry = updated.ride_history[0]

    assert entry.time_of_day == "morning"
    # Sunday is 0.
    assert entry.day_of_week == 1


@pytest.mark.parametrize("rating", [0, 5.5, -1])
def test_rating_outside_range_is_rejected(rating: float):
    with pytest.raises(ValueError):
        apply_feedback(_profile(), _ride(), rating, accepted=True, timestamp=MONDAY_MORNING)


def test_missing_timestamp_defaults_to_now():
    before = datetime.now(timezone.utc)
    updated = apply_feedback(_profile(), _ride(), 4, accepted=False)

    assert updated.ride_history[0].timestamp >= before


def test_default_profile():
    profile = default_rider_profile("rider-9")

    assert profile.id == "rider-9"
    assert profile.ride_history == ()
    assert profile.preferences.preferred_vehicle_classes == ("economy", "comfort", "premium")
    assert profile.preferences.max_price == 1000
    assert profile.preferences.min_driver_rating == 4


@pytest.fixture
def far_east_local_time(monkeypatch: pytest.MonkeyPatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "Pacific/Kiritimati")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_feedback_bucket_matches_scoring_clock(far_east_local_time):
    entry = apply_feedback(_profile(), _ride(), 5, accepted=True).ride_history[0]

    assert entry.time_of_day == time_of_day(utc_hour())


def test_offset_timestamps_are_bucketed_in_utc():
    kiritimati_morning = datetime(2025, 1, 6, 9, 0, tzinfo=timezone(timedelta(hours=14)))
    entry = apply_feedback(_profile(), _ride(), 5, accepted=True, timestamp=kiritimati_morning).ride_history[0]

    # 09:00 at UTC+14 is 19:00 UTC on the previous day.
    assert entry.time_of_day == "evening"
    assert entry.day_of_week == 0
    assert utc_hour(kiritimati_morning) == 19
