"""Concurrent loading of peer profiles for collaborative filtering."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Sequence

from ...config import settings
from ...models.domain import RiderProfile

logger = logging.getLogger(__name__)

DEFAULT_MAX_PARALLEL_REQUESTS = 8

ProfileLoader = Callable[[str], RiderProfile]


def fetch_peer_profiles(
    load_profile: ProfileLoader,
    rider_ids: Sequence[str],
    *,
    limit: int | None = None,
    timeout: float | None = None,
    max_parallel_requests: int = DEFAULT_MAX_PARALLEL_REQUESTS,
) -> list[RiderProfile]:
    """Load up to ``limit`` profiles in parallel, keeping whatever arrives in time.

    Individual failures and timeouts are logged and skipped; the caller gets
    the profiles that loaded, in the order of ``rider_ids``.
    """
    limit = settings.peer_profile_limit if limit is None else limit
    timeout = settings.peer_fetch_timeout_seconds if timeout is None else timeout
    rider_ids = list(dict.fromkeys(rider_ids))[:limit]
    if not rider_ids:
        return []

    executor = ThreadPoolExecutor(max_workers=max(1, min(max_parallel_requests, len(rider_ids))))
    try:
        futures = {executor.submit(load_profile, rider_id): rider_id for rider_id in rider_ids}
        done, not_done = wait(futures, timeout=timeout)
        if not_done:
            logger.warning(f"Peer profile fetch timed out for {len(not_done)}/{len(rider_ids)} riders after {timeout:.1f}s")

        loaded: dict[str, RiderProfile] = {}
        for future in done:
            rider_id = futures[future]
            try:
                loaded[rider_id] = future.result()
            except Exception as e:
                logger.warning(f"Failed to load peer profile {rider_id}: {e}")
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return [loaded[rider_id] for rider_id in rider_ids if rider_id in loaded]
