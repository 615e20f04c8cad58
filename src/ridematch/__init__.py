"""Ride matching: fallback pathfinding, pricing and hybrid ride recommendations."""

__version__ = "0.1.0"
