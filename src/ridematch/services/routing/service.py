"""Routing orchestration service."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...models.domain import Coordinate
from ..geospatial import estimate_duration_min
from .astar import find_path
from .models import RouteResult
from .osrm_client import OSRMClient, RoutingUnavailableError


def fallback_route(
    start: Coordinate,
    end: Coordinate,
    waypoints: Sequence[Coordinate] = (),
) -> RouteResult:
    """Estimate a route locally with the grid-stepping search."""

    result = find_path(start, end, waypoints)
    duration = estimate_duration_min(result.total_distance_km, settings.fallback_average_speed_kmh)
    logging.info(
        f"Fallback route computed: {result.total_distance_km:.2f} km, {len(result.path)} points, "
        f"{result.degenerate_segments} straight-line segments"
    )
    return RouteResult(
        path=result.path,
        distance_km=result.total_distance_km,
        duration_min=duration,
        instructions=[],
        source="fallback",
    )


def get_shortest_route(start: Coordinate, end: Coordinate) -> RouteResult:
    """Return the shortest provider route, or a local estimate if the provider fails."""

    try:
        client = OSRMClient()
    except ValueError as e:
        logging.warning(f"OSRM client unavailable: {e}. Using fallback pathfinder.")
        return fallback_route(start, end)

    try:
        alternatives = client.route(start, end, alternatives=True)
    except (RoutingUnavailableError, ConnectionError, ValueError) as e:
        logging.warning(f"OSRM route request failed: {e}. Using fallback pathfinder.")
        return fallback_route(start, end)

    shortest = alternatives[0]
    for candidate in alternatives[1:]:
        if candidate.distance_km < shortest.distance_km:
            shortest = candidate
    if not shortest.path:
        shortest.path = [start, end]
    return shortest
