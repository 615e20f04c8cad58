"""Proximity-based ride matching."""

from .proximity import find_nearby_rides, match_score, rank_matches

__all__ = ["find_nearby_rides", "match_score", "rank_matches"]
