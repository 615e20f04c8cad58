"""Collaborative filtering over similar riders."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import Ride, RiderProfile

NEUTRAL_SCORE = 50.0
SIMILARITY_THRESHOLD = 0.5
MAX_SIMILAR_RIDERS = 10
LIKED_RATING = 4.0
PRICE_TOLERANCE = 0.2


def rider_similarity(rider: RiderProfile, peer: RiderProfile) -> float:
    """Preference overlap between two riders in [0, 1]."""

    own = rider.preferences
    other = peer.preferences

    own_classes = set(own.preferred_vehicle_classes)
    shared = len(own_classes & set(other.preferred_vehicle_classes))
    score = (shared / max(len(own_classes), 1)) * 0.3

    if own.max_price > 0:
        closeness = max(0.0, 1.0 - abs(own.max_price - other.max_price) / own.max_price)
    else:
        closeness = 1.0 if other.max_price == own.max_price else 0.0
    score += closeness * 0.3

    if own.smoking_allowed == other.smoking_allowed:
        score += 0.2
    if own.conversation_style == other.conversation_style:
        score += 0.2
    return score


def find_similar_riders(
    rider: RiderProfile,
    peers: Sequence[RiderProfile],
    limit: int = MAX_SIMILAR_RIDERS,
) -> list[tuple[RiderProfile, float]]:
    candidates = [
        (peer, rider_similarity(rider, peer))
        for peer in peers
        if peer.id != rider.id and peer.ride_history
    ]
    similar = [item for item in candidates if item[1] > SIMILARITY_THRESHOLD]
    similar.sort(key=lambda item: item[1], reverse=True)
    return similar[:limit]


def _liked_fraction(ride: Ride, peer: RiderProfile) -> float:
    liked = sum(
        1
        for entry in peer.ride_history
        if entry.vehicle_class == ride.vehicle_class
        and entry.rider_rating >= LIKED_RATING
        and abs(entry.price - ride.price) < ride.price * PRICE_TOLERANCE
    )
    return liked / len(peer.ride_history)


def collaborative_score(ride: Ride, rider: RiderProfile, peers: Sequence[RiderProfile]) -> float:
    """Similarity-weighted share of similar riders' history that resembles ``ride`` (0-100)."""

    if not peers:
        return NEUTRAL_SCORE
    similar = find_similar_riders(rider, peers)
    if not similar:
        return NEUTRAL_SCORE

    total = 0.0
    weight_sum = 0.0
    for peer, similarity in similar:
        total += _liked_fraction(ride, peer) * 100.0 * similarity
        weight_sum += similarity
    if weight_sum <= 0:
        return NEUTRAL_SCORE
    return min(100.0, max(0.0, total / weight_sum))
