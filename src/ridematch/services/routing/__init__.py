"""Routing: authoritative provider client and local fallback search."""

from .astar import PathResult, find_path
from .models import RouteResult
from .service import fallback_route, get_shortest_route

__all__ = ["PathResult", "RouteResult", "fallback_route", "find_path", "get_shortest_route"]
