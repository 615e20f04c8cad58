"""Hybrid recommendation pipeline.

Stages run in a fixed order: the deductive filter removes ineligible rides,
then every survivor is scored by the inductive, content-based and
collaborative scorers, and the three scores are blended with fixed weights.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from ...models.domain import Coordinate, RecommendationResult, Ride, RiderProfile
from .collaborative import collaborative_score
from .content import content_based_score
from .deductive import deductive_filter
from .inductive import inductive_score

logger = logging.getLogger(__name__)

INDUCTIVE_WEIGHT = 0.4
CONTENT_WEIGHT = 0.35
COLLABORATIVE_WEIGHT = 0.25


def combine_scores(inductive: float, content: float, collaborative: float) -> float:
    final = inductive * INDUCTIVE_WEIGHT + content * CONTENT_WEIGHT + collaborative * COLLABORATIVE_WEIGHT
    return min(100.0, max(0.0, final))


def recommendation_label(score: float) -> str:
    if score >= 80:
        return "Highly recommended"
    if score >= 60:
        return "Good match"
    return "Average match"


def _by_recency(profile: RiderProfile) -> RiderProfile:
    history = tuple(sorted(profile.ride_history, key=lambda entry: entry.timestamp, reverse=True))
    if history == profile.ride_history:
        return profile
    return replace(profile, ride_history=history)


def score_ride(
    ride: Ride,
    profile: RiderProfile,
    pickup: Coordinate,
    destination: Coordinate,
    peer_profiles: Sequence[RiderProfile] = (),
    now: datetime | None = None,
) -> RecommendationResult:
    inductive = inductive_score(ride, profile, pickup, destination, now=now)
    content = content_based_score(ride, profile)
    collaborative = collaborative_score(ride, profile, peer_profiles)
    final = combine_scores(inductive, content, collaborative)

    reasoning = (
        f"Pattern Analysis: {inductive:.1f}/100",
        f"Personal History Match: {content:.1f}/100",
        f"Similar Users Preference: {collaborative:.1f}/100",
        f"Weighted Score: {final:.1f}/100",
        recommendation_label(final),
    )
    return RecommendationResult(
        ride=ride,
        score=final,
        reasoning=reasoning,
        inductive_score=inductive,
        content_score=content,
        collaborative_score=collaborative,
    )


def recommend(
    rides: Sequence[Ride],
    profile: RiderProfile,
    pickup: Coordinate,
    destination: Coordinate,
    peer_profiles: Sequence[RiderProfile] = (),
    now: datetime | None = None,
) -> list[RecommendationResult]:
    """Rank ``rides`` for the rider, best first; ties keep input order."""

    profile = _by_recency(profile)
    peers = [_by_recency(peer) for peer in peer_profiles]
    eligible = deductive_filter(rides, profile, pickup, destination)

    results = [score_ride(ride, profile, pickup, destination, peers, now=now) for ride in eligible]
    results.sort(key=lambda result: result.score, reverse=True)
    logger.debug(f"Scored {len(results)} rides for rider {profile.id}")
    return results
