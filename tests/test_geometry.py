import random

import pytest

from coordkit import geometry
from coordkit.geometry import InsufficientPointsError, InsufficientVerticesError

PARIS = (48.8566, 2.3522)
LONDON = (51.5074, -0.1278)


def test_distance_paris_london():
    assert geometry.distance(PARIS, LONDON) == pytest.approx(343_500, rel=0.01)
    assert geometry.distance(PARIS, PARIS) == 0


def test_distance_rejects_out_of_range():
    with pytest.raises(ValueError):
        geometry.distance((0, 0), (0, 181))


def test_bearing_cardinal_directions():
    assert geometry.bearing((0, 0), (1, 0)) == pytest.approx(0, abs=1e-9)
    assert geometry.bearing((0, 0), (0, 1)) == pytest.approx(90)
    assert geometry.bearing((0, 0), (-1, 0)) == pytest.approx(180)
    assert geometry.bearing((0, 0), (0, -1)) == pytest.approx(270)


def test_compass_direction():
    assert geometry.compass_direction((0, 0), (1, 1)) == "NE"
    assert geometry.compass_direction((0, 0), (-1, 0)) == "S"
    assert geometry.compass_direction((0, 0), (0, -1)) == "W"


def test_polygon_area_one_degree_square():
    square = [(0, 0), (0, 1), (1, 1), (1, 0)]
    area = geometry.polygon_area(square)
    assert area == pytest.approx(1.2364e10, rel=1e-3)
    assert geometry.polygon_area(list(reversed(square))) == pytest.approx(area)


def test_polygon_needs_three_vertices():
    with pytest.raises(InsufficientVerticesError):
        geometry.polygon_area([(0, 0), (1, 1)])
    with pytest.raises(InsufficientVerticesError):
        geometry.polygon_perimeter([(0, 0)])


def test_perimeter_is_sum_of_edges():
    a, b, c = (0, 0), (0, 1), (1, 0)
    expected = geometry.distance(a, b) + geometry.distance(b, c) + geometry.distance(c, a)
    assert geometry.polygon_perimeter([a, b, c]) == pytest.approx(expected)


def test_center_and_center_of_bounds_differ():
    pts = [(0, 0), (10, 0), (0, 10)]
    assert geometry.center_of_bounds(pts) == (5.0, 5.0)
    lat, lon = geometry.center(pts)
    assert 3 < lat < 4
    assert 3 < lon < 4


def test_center_of_two_points_on_equator():
    lat, lon = geometry.center([(0, 0), (0, 10)])
    assert lat == pytest.approx(0, abs=1e-9)
    assert lon == pytest.approx(5)


def test_center_needs_two_points():
    with pytest.raises(InsufficientPointsError):
        geometry.center([(0, 0)])
    with pytest.raises(InsufficientPointsError):
        geometry.center_of_bounds([])


@pytest.mark.parametrize("region", sorted(geometry.REGIONS))
def test_random_coordinate_inside_region(region):
    south, north, west, east = geometry.REGIONS[region]
    rng = random.Random(42)
    for _ in range(50):
        lat, lon = geometry.random_coordinate(region, rng)
        assert south <= lat <= north
        assert west <= lon <= east


def test_random_coordinate_unknown_region():
    with pytest.raises(ValueError):
        geometry.random_coordinate("atlantis")


@pytest.mark.parametrize("degrees,label", [
    (11.25, "NNE"), (33.75, "NE"), (56.25, "ENE"), (348.75, "N"), (359.9, "N"), (180, "S"),
])
def test_compass_point_boundaries_go_clockwise(degrees, label):
    assert geometry.compass_point(degrees) == label
