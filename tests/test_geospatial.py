import math

import pytest

from ridematch.models.domain import Coordinate
from ridematch.services.geospatial import distance, estimate_duration_min, time_of_day, to_radians


def test_distance_to_self_is_zero():
    for point in [Coordinate(0, 0), Coordinate(40.7128, -74.006), Coordinate(-89.9, 179.9), Coordinate(90, 0)]:
        assert distance(point, point) == 0


@pytest.mark.parametrize(
    "a, b",
    [
        (Coordinate(40.7128, -74.006), Coordinate(34.0522, -118.2437)),
        (Coordinate(0, 0), Coordinate(0, 180)),
        (Coordinate(89.99, 10), Coordinate(-89.99, -170)),
        (Coordinate(-33.8688, 151.2093), Coordinate(51.5074, -0.1278)),
    ],
)
def test_distance_is_symmetric(a: Coordinate, b: Coordinate):
    assert distance(a, b) == pytest.approx(distance(b, a), rel=1e-12)


def test_distance_one_degree_on_equator():
    assert distance(Coordinate(0, 0), Coordinate(0, 1)) == pytest.approx(111.195, abs=1e-3)


def test_distance_antipodal_is_half_circumference():
    assert distance(Coordinate(0, 0), Coordinate(0, 180)) == pytest.approx(math.pi * 6371.0, rel=1e-9)
    assert distance(Coordinate(90, 0), Coordinate(-90, 0)) == pytest.approx(math.pi * 6371.0, rel=1e-9)


def test_to_radians():
    assert to_radians(180) == pytest.approx(math.pi)


@pytest.mark.parametrize("lat, lng", [(91, 0), (-90.5, 0), (0, 180.1), (0, -181), (float("nan"), 0)])
def test_coordinate_rejects_out_of_range(lat: float, lng: float):
    with pytest.raises(ValueError):
        Coordinate(lat, lng)


@pytest.mark.parametrize(
    "hour, bucket",
    [(4, "night"), (5, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"), (17, "evening"), (21, "evening"), (22, "night"), (0, "night")],
)
def test_time_of_day_buckets(hour: int, bucket: str):
    assert time_of_day(hour) == bucket


def test_estimate_duration_rounds_up():
    assert estimate_duration_min(10.0) == 15
    assert estimate_duration_min(10.1) == 16
    assert estimate_duration_min(0.0) == 0


def test_estimate_duration_rejects_negative_distance():
    with pytest.raises(ValueError):
        estimate_duration_min(-1.0)
