import math

import pytest

from clinic_targeting.models.domain import GeoPoint
from clinic_targeting.services.geospatial import (
    bounding_box,
    distance_miles,
    perpendicular_distance,
    point_in_polygon,
    simplify,
    simplify_to_target,
    territory_dimensions,
)


def _square(min_lat=40.0, min_lon=-75.2, size=0.2) -> list[GeoPoint]:
    return [
        GeoPoint(min_lat, min_lon),
        GeoPoint(min_lat, min_lon + size),
        GeoPoint(min_lat + size, min_lon + size),
        GeoPoint(min_lat + size, min_lon),
        GeoPoint(min_lat, min_lon),
    ]


def _circle(points: int, radius: float = 0.1) -> list[GeoPoint]:
    ring = [
        GeoPoint(40.0 + radius * math.sin(2 * math.pi * i / points), -75.0 + radius * math.cos(2 * math.pi * i / points))
        for i in range(points)
    ]
    return ring + [ring[0]]


def test_distance_is_symmetric_and_zero_for_same_point():
    a = GeoPoint(40.7128, -74.0060)
    b = GeoPoint(34.0522, -118.2437)

    assert distance_miles(a, b) == pytest.approx(distance_miles(b, a))
    assert distance_miles(a, a) == 0.0
    assert distance_miles(a, b) > 0


def test_distance_one_degree_latitude():
    assert distance_miles(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0)) == pytest.approx(69.097, rel=1e-3)


def test_geopoint_rejects_invalid_coordinates():
    with pytest.raises(ValueError):
        GeoPoint(91.0, 0.0)
    with pytest.raises(ValueError):
        GeoPoint(0.0, -181.0)
    with pytest.raises(ValueError):
        GeoPoint(float("nan"), 0.0)


def test_point_in_polygon_square():
    square = _square()

    assert point_in_polygon(GeoPoint(40.1, -75.1), square)
    assert not point_in_polygon(GeoPoint(45.0, -80.0), square)
    assert not point_in_polygon(GeoPoint(40.1, -74.9), square)


def test_point_in_polygon_concave_notch():
    # U shape open to the north between lon -74.9 and -74.8
    ring = [
        GeoPoint(0.0, -75.0),
        GeoPoint(0.0, -74.7),
        GeoPoint(1.0, -74.7),
        GeoPoint(1.0, -74.8),
        GeoPoint(0.3, -74.8),
        GeoPoint(0.3, -74.9),
        GeoPoint(1.0, -74.9),
        GeoPoint(1.0, -75.0),
    ]

    assert point_in_polygon(GeoPoint(0.5, -74.95), ring)
    assert point_in_polygon(GeoPoint(0.1, -74.85), ring)
    assert not point_in_polygon(GeoPoint(0.5, -74.85), ring)


def test_point_in_polygon_needs_three_points():
    assert not point_in_polygon(GeoPoint(0.0, 0.0), [GeoPoint(0.0, -1.0), GeoPoint(0.0, 1.0)])


def test_perpendicular_distance_projects_and_clamps():
    start = GeoPoint(0.0, 0.0)
    end = GeoPoint(0.0, 1.0)

    assert perpendicular_distance(GeoPoint(1.0, 0.5), start, end) == pytest.approx(1.0)
    assert perpendicular_distance(GeoPoint(0.0, 2.0), start, end) == pytest.approx(1.0)
    assert perpendicular_distance(GeoPoint(0.0, -1.0), start, end) == pytest.approx(1.0)
    assert perpendicular_distance(GeoPoint(3.0, 4.0), start, start) == pytest.approx(5.0)


def test_simplify_zero_tolerance_keeps_ring():
    ring = _circle(12)

    assert simplify(ring, 0.0) == ring


def test_simplify_short_input_is_noop():
    pair = [GeoPoint(0.0, 0.0), GeoPoint(1.0, 1.0)]

    assert simplify(pair, 5.0) == pair
    assert simplify([], 1.0) == []


def test_simplify_drops_collinear_points_and_collapses_with_large_tolerance():
    line = [GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.5), GeoPoint(0.0, 1.0)]
    square = _square()

    assert simplify(line, 0.0) == [line[0], line[-1]]
    assert simplify(square, 10.0) == [square[0], square[-1]]


def test_simplify_handles_large_rings_without_recursion_limit():
    ring = _circle(5000, radius=1.0)

    simplified = simplify(ring, 0.0)

    assert simplified[0] == ring[0]
    assert simplified[-1] == ring[-1]
    assert len(simplified) > 100


def test_simplify_to_target_reduces_vertex_count():
    ring = _circle(200)

    simplified = simplify_to_target(ring, 20)

    assert 2 <= len(simplified) < len(ring)
    assert simplified[0] == ring[0]
    assert simplified[-1] == ring[-1]


def test_simplify_to_target_returns_small_rings_unchanged():
    ring = _square()

    assert simplify_to_target(ring, 10) == ring


def test_simplify_to_target_terminates_on_unreachable_target():
    ring = _circle(300)

    simplified = simplify_to_target(ring, 1)

    assert len(simplified) >= 2


def test_territory_dimensions_of_square():
    square = _square()
    box = bounding_box(square)

    width, height = territory_dimensions(box, GeoPoint(40.1, -75.1))

    assert box.min_lat == 40.0 and box.max_lat == pytest.approx(40.2)
    assert height == pytest.approx(13.82, abs=0.05)
    assert width == pytest.approx(10.57, abs=0.05)
