"""Plane/sphere helpers on (lat, lon) pairs in decimal degrees.

Everything here assumes a spherical Earth with geopy's mean radius so that
distance, bearing and area agree with each other.
"""
from __future__ import annotations

import math
import random
from typing import Dict, Optional, Sequence, Tuple

from geographiclib.geodesic import Geodesic
from geopy.distance import EARTH_RADIUS, great_circle

from .geocoding_base import CoordkitError, validate_coordinates

Point = Tuple[float, float]

EARTH_RADIUS_M = EARTH_RADIUS * 1000.0
SPHERE = Geodesic(EARTH_RADIUS_M, 0)

COMPASS_POINTS = [
    'N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE',
    'S', 'SSW', 'SW', 'WSW', 'W', 'WNW', 'NW', 'NNW',
]

# south, north, west, east
REGIONS: Dict[str, Tuple[float, float, float, float]] = {
    'global': (-90.0, 90.0, -180.0, 180.0),
    'indonesia': (-11.0, 6.0, 95.0, 141.0),
    'jakarta': (-6.35, -6.08, 106.68, 106.98),
    'bali': (-8.85, -8.05, 114.4, 115.7),
}


class InsufficientVerticesError(CoordkitError, ValueError):
    pass


class InsufficientPointsError(CoordkitError, ValueError):
    pass


def _check(points: Sequence[Point]) -> None:
    for lat, lon in points:
        validate_coordinates(lat, lon)


def distance(p1: Point, p2: Point) -> float:
    """Great-circle distance in meters."""
    _check((p1, p2))
    return great_circle(p1, p2).meters


def bearing(p1: Point, p2: Point) -> float:
    """Initial great-circle heading from p1 toward p2, in [0, 360)."""
    _check((p1, p2))
    azi = SPHERE.Inverse(p1[0], p1[1], p2[0], p2[1], Geodesic.AZIMUTH)['azi1']
    return azi % 360.0


def compass_point(degrees: float) -> str:
    """16-point label; a heading on a sector boundary goes to the next label clockwise."""
    index = int(math.floor(degrees / 22.5 + 0.5)) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def compass_direction(p1: Point, p2: Point) -> str:
    return compass_point(bearing(p1, p2))


def polygon_area(vertices: Sequence[Point]) -> float:
    """Spherical polygon area in square meters, independent of winding."""
    if len(vertices) < 3:
        raise InsufficientVerticesError(f"Need at least 3 vertices, got {len(vertices)}")
    _check(vertices)
    poly = SPHERE.Polygon()
    for lat, lon in vertices:
        poly.AddPoint(lat, lon)
    _num, _perimeter, area = poly.Compute(False, True)
    return abs(area)


def polygon_perimeter(vertices: Sequence[Point]) -> float:
    """Sum of edge distances, closing edge included."""
    if len(vertices) < 3:
        raise InsufficientVerticesError(f"Need at least 3 vertices, got {len(vertices)}")
    n = len(vertices)
    return sum(distance(vertices[i], vertices[(i + 1) % n]) for i in range(n))


def center(points: Sequence[Point]) -> Point:
    """Spherical mean: average of the unit vectors, projected back."""
    if len(points) < 2:
        raise InsufficientPointsError(f"Need at least 2 points, got {len(points)}")
    _check(points)
    x = y = z = 0.0
    for lat, lon in points:
        phi, lam = math.radians(lat), math.radians(lon)
        x += math.cos(phi) * math.cos(lam)
        y += math.cos(phi) * math.sin(lam)
        z += math.sin(phi)
    n = len(points)
    x, y, z = x / n, y / n, z / n
    lon = math.degrees(math.atan2(y, x))
    lat = math.degrees(math.atan2(z, math.hypot(x, y)))
    return (lat, lon)


def center_of_bounds(points: Sequence[Point]) -> Point:
    """Midpoint of the bounding box of the points."""
    if len(points) < 2:
        raise InsufficientPointsError(f"Need at least 2 points, got {len(points)}")
    _check(points)
    lats = [p[0] for p in points]
    lons = [p[1] for p in points]
    return ((min(lats) + max(lats)) / 2.0, (min(lons) + max(lons)) / 2.0)


def random_coordinate(region: str = 'global', rng: Optional[random.Random] = None) -> Point:
    if region not in REGIONS:
        raise ValueError(f"Unknown region: {region}")
    rng = rng or random.Random()
    south, north, west, east = REGIONS[region]
    return (round(rng.uniform(south, north), 6), round(rng.uniform(west, east), 6))
