"""Rider profile learning and loading."""

from .learner import apply_feedback, default_rider_profile
from .peers import fetch_peer_profiles

__all__ = ["apply_feedback", "default_rider_profile", "fetch_peer_profiles"]
