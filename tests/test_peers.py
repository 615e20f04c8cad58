import threading

from ridematch.models.domain import RiderProfile
from ridematch.services.profiles import fetch_peer_profiles


def _loader(fail: set[str] = frozenset(), block: set[str] = frozenset(), release: threading.Event | None = None):
    def load(rider_id: str) -> RiderProfile:
        if rider_id in fail:
            raise RuntimeError(f"no profile for {rider_id}")
        if rider_id in block and release is not None:
            release.wait(5)
        return RiderProfile(id=rider_id)

    return load


def test_failed_loads_are_skipped_and_order_is_kept():
    profiles = fetch_peer_profiles(_loader(fail={"b"}), ["a", "b", "c", "d"], limit=10, timeout=5)

    assert [profile.id for profile in profiles] == ["a", "c", "d"]


def test_slow_loads_are_dropped_after_timeout():
    release = threading.Event()
    try:
        profiles = fetch_peer_profiles(
            _loader(block={"slow"}, release=release),
            ["fast-1", "slow", "fast-2"],
            limit=10,
            timeout=0.5,
        )
    finally:
        release.set()

    assert [profile.id for profile in profiles] == ["fast-1", "fast-2"]


def test_limit_and_duplicates():
    calls: list[str] = []

    def load(rider_id: str) -> RiderProfile:
        calls.append(rider_id)
        return RiderProfile(id=rider_id)

    profiles = fetch_peer_profiles(load, ["a", "a", "b", "c", "d"], limit=2, timeout=5)

    assert [profile.id for profile in profiles] == ["a", "b"]
    assert sorted(calls) == ["a", "b"]


def test_no_ids_returns_empty_list():
    assert fetch_peer_profiles(_loader(), [], timeout=1) == []
