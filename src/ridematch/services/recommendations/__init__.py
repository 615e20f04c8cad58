"""Ride recommendation pipeline."""

from .collaborative import collaborative_score, find_similar_riders, rider_similarity
from .content import content_based_score
from .deductive import deductive_filter, is_eligible, rejection_reasons
from .hybrid import combine_scores, recommend, recommendation_label, score_ride
from .inductive import inductive_score

__all__ = [
    "collaborative_score",
    "combine_scores",
    "content_based_score",
    "deductive_filter",
    "find_similar_riders",
    "inductive_score",
    "is_eligible",
    "recommend",
    "recommendation_label",
    "rejection_reasons",
    "rider_similarity",
    "score_ride",
]
