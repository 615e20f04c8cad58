import math
import random

import pytest

from ridematch.models.domain import Coordinate
from ridematch.services.geospatial import distance
from ridematch.services.routing.astar import PathfinderOptions, find_path


def test_identical_start_and_goal():
    start = Coordinate(0, 0)
    result = find_path(start, Coordinate(0, 0))

    assert len(result.path) >= 1
    assert result.path[0] == start
    assert result.total_distance_km == 0
    assert result.degenerate_segments == 0


def test_reaches_goal_on_lattice():
    start = Coordinate(0, 0)
    goal = Coordinate(0.05, 0.05)
    result = find_path(start, goal)

    assert result.degenerate_segments == 0
    assert result.path[0] == start
    assert distance(result.path[-1], goal) < 0.1
    # Five diagonal steps toward the goal.
    assert len(result.path) == 6
    assert result.total_distance_km == pytest.approx(distance(start, goal), rel=1e-3)


def test_falls_back_to_straight_segment_when_lattice_misses_goal():
    start = Coordinate(0, 0)
    goal = Coordinate(0.035, 0)
    result = find_path(start, goal)

    assert result.degenerate_segments == 1
    assert result.path == [start, goal]
    assert result.total_distance_km == pytest.approx(distance(start, goal))


def test_expansion_budget_forces_straight_segment():
    start = Coordinate(10, 20)
    goal = Coordinate(-10, -160)
    result = find_path(start, goal, options=PathfinderOptions(max_expansions=50))

    assert result.degenerate_segments == 1
    assert result.path == [start, goal]
    assert result.total_distance_km == pytest.approx(distance(start, goal))


def test_waypoints_are_visited_in_order():
    start = Coordinate(0, 0)
    waypoint = Coordinate(0.05, 0.05)
    goal = Coordinate(0.1, 0.1)
    result = find_path(start, goal, [waypoint])

    assert result.path[0] == start
    assert distance(result.path[-1], goal) < 0.1
    near_waypoint = [index for index, point in enumerate(result.path) if distance(point, waypoint) < 0.1]
    assert near_waypoint
    assert 0 < near_waypoint[0] < len(result.path) - 1
    assert result.total_distance_km == pytest.approx(distance(start, goal), rel=1e-2)


def test_path_near_pole_clamps_latitude():
    start = Coordinate(89.995, 0)
    goal = Coordinate(90, 0)
    result = find_path(start, goal)

    assert result.degenerate_segments == 0
    assert all(-90 <= point.lat <= 90 for point in result.path)
    assert distance(result.path[-1], goal) < 0.1


def test_random_pairs_always_terminate_with_a_path():
    rng = random.Random(20240611)
    options = PathfinderOptions(max_expansions=300)
    pairs = [
        (Coordinate(rng.uniform(-89, 89), rng.uniform(-179, 179)), Coordinate(rng.uniform(-89, 89), rng.uniform(-179, 179)))
        for _ in range(25)
    ]
    pairs += [
        (Coordinate(0, 0), Coordinate(0, 180)),
        (Coordinate(45, -179.99), Coordinate(-45, 0.01)),
        (Coordinate(89.99, 0), Coordinate(-89.99, 179.99)),
        (Coordinate(-90, -180), Coordinate(90, 180)),
    ]

    for start, goal in pairs:
        result = find_path(start, goal, options=options)
        assert result.path
        assert result.path[0] == start
        assert math.isfinite(result.total_distance_km)
        assert result.total_distance_km >= distance(start, goal) - 0.1
