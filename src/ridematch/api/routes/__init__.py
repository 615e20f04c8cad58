"""Route group exports."""

from . import health, recommendations, rides, routing

__all__ = ["health", "routing", "rides", "recommendations"]
