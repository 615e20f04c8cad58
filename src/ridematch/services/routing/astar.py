"""Grid-stepping A* search used when the routing provider is unreachable.

The search runs on a synthetic lattice: every expansion offers exactly three
neighbours one fixed step away, each moving toward the segment end (purely
north/south, purely east/west, and diagonally). There is no road graph, so
the result is an approximate path and distance, not a real shortest route.

Each segment is bounded: it ends when a node gets within the goal tolerance,
when the open frontier empties, or when the expansion budget is spent. The
last two cases fall back to a straight two-point segment.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from typing import Sequence

from ...config import settings
from ...models.domain import Coordinate
from ..geospatial import distance

logger = logging.getLogger(__name__)

NodeKey = tuple[int, int]


@dataclass(slots=True)
class PathfinderOptions:
    step_degrees: float = settings.pathfinder_step_degrees
    node_tolerance_degrees: float = settings.pathfinder_node_tolerance_degrees
    goal_tolerance_km: float = settings.pathfinder_goal_tolerance_km
    max_expansions: int = settings.pathfinder_max_expansions


@dataclass(slots=True)
class PathNode:
    """Frontier record; ``parent`` is an index into the segment's node arena."""

    coordinate: Coordinate
    g: float
    h: float
    parent: int | None = None

    @property
    def f(self) -> float:
        return self.g + self.h


@dataclass(slots=True)
class PathResult:
    path: list[Coordinate]
    total_distance_km: float
    degenerate_segments: int = 0


def _node_key(coordinate: Coordinate, tolerance: float) -> NodeKey:
    return (round(coordinate.lat / tolerance), round(coordinate.lng / tolerance))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _neighbors(current: Coordinate, goal: Coordinate, step: float) -> list[Coordinate]:
    direction_lat = 1 if goal.lat > current.lat else -1
    direction_lng = 1 if goal.lng > current.lng else -1

    lat = _clamp(current.lat + step * direction_lat, -90.0, 90.0)
    lng = _clamp(current.lng + step * direction_lng, -180.0, 180.0)

    candidates = [
        Coordinate(lat, current.lng),
        Coordinate(current.lat, lng),
        Coordinate(lat, lng),
    ]
    # Clamping at the poles or the antimeridian can collapse a step onto the current node.
    return [candidate for candidate in candidates if candidate != current]


def _reconstruct(nodes: Sequence[PathNode], index: int) -> list[Coordinate]:
    path: list[Coordinate] = []
    cursor: int | None = index
    while cursor is not None:
        node = nodes[cursor]
        path.append(node.coordinate)
        cursor = node.parent
    path.reverse()
    return path


def _search_segment(
    start: Coordinate,
    end: Coordinate,
    options: PathfinderOptions,
) -> tuple[list[Coordinate], float, bool]:
    """Search one segment; returns ``(path, distance_km, degenerate)``."""

    tolerance = options.node_tolerance_degrees
    nodes: list[PathNode] = [PathNode(start, 0.0, distance(start, end))]

    # Heap entries are (f, insertion order, node index). A replaced node keeps
    # its insertion order, and superseded entries are skipped when popped.
    open_heap: list[tuple[float, int, int]] = [(nodes[0].f, 0, 0)]
    open_index: dict[NodeKey, int] = {_node_key(start, tolerance): 0}
    open_order: dict[NodeKey, int] = {_node_key(start, tolerance): 0}
    closed: set[NodeKey] = set()
    next_order = 1
    expansions = 0

    while open_heap:
        _, _, index = heapq.heappop(open_heap)
        current = nodes[index]
        key = _node_key(current.coordinate, tolerance)
        if open_index.get(key) != index:
            continue
        del open_index[key]

        if distance(current.coordinate, end) < options.goal_tolerance_km:
            logger.debug(f"Segment reached goal after {expansions} expansions")
            return _reconstruct(nodes, index), current.g, False

        if expansions >= options.max_expansions:
            logger.debug(f"Segment exhausted expansion budget ({options.max_expansions})")
            break
        expansions += 1
        closed.add(key)

        for neighbor in _neighbors(current.coordinate, end, options.step_degrees):
            neighbor_key = _node_key(neighbor, tolerance)
            if neighbor_key in closed:
                continue

            g_score = current.g + distance(current.coordinate, neighbor)
            existing = open_index.get(neighbor_key)
            if existing is not None and g_score >= nodes[existing].g:
                continue

            nodes.append(PathNode(neighbor, g_score, distance(neighbor, end), parent=index))
            node_index = len(nodes) - 1
            if existing is None:
                open_order[neighbor_key] = next_order
                next_order += 1
            open_index[neighbor_key] = node_index
            heapq.heappush(open_heap, (nodes[node_index].f, open_order[neighbor_key], node_index))
    else:
        logger.debug(f"Segment frontier emptied after {expansions} expansions")

    return [start, end], distance(start, end), True


def find_path(
    start: Coordinate,
    goal: Coordinate,
    waypoints: Sequence[Coordinate] = (),
    options: PathfinderOptions | None = None,
) -> PathResult:
    """Approximate a path from ``start`` to ``goal`` through ``waypoints``.

    Every leg between consecutive points is searched independently and the
    legs are joined in travel order. Always returns a non-empty path.
    """

    options = options or PathfinderOptions()
    points = [start, *waypoints, goal]

    path: list[Coordinate] = []
    total_distance = 0.0
    degenerate = 0
    for segment_start, segment_end in zip(points, points[1:]):
        segment_path, segment_distance, fell_back = _search_segment(segment_start, segment_end, options)
        if path and segment_path and path[-1] == segment_path[0]:
            segment_path = segment_path[1:]
        path.extend(segment_path)
        total_distance += segment_distance
        degenerate += int(fell_back)

    return PathResult(path=path, total_distance_km=total_distance, degenerate_segments=degenerate)
