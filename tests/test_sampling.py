import itertools

import numpy as np

from clinic_targeting.models.domain import GeoPoint
from clinic_targeting.services.geospatial import distance_miles, point_in_polygon
from clinic_targeting.services.targeting.sampling import (
    sample_exclusion_points,
    sample_inclusion_points,
    vertex_exclusion_circles,
)

CENTER = GeoPoint(40.1, -75.1)


def _square(min_lat=40.0, min_lon=-75.2, size=0.2) -> list[GeoPoint]:
    return [
        GeoPoint(min_lat, min_lon),
        GeoPoint(min_lat, min_lon + size),
        GeoPoint(min_lat + size, min_lon + size),
        GeoPoint(min_lat + size, min_lon),
        GeoPoint(min_lat, min_lon),
    ]


def _triangle() -> list[GeoPoint]:
    return [GeoPoint(40.0, -75.2), GeoPoint(40.0, -75.0), GeoPoint(40.2, -75.2), GeoPoint(40.0, -75.2)]


def test_inclusion_points_are_inside_spaced_and_ordered():
    ring = _triangle()
    size = 13.8

    samples = sample_inclusion_points(ring, CENTER, size, rng=np.random.default_rng(7))

    assert 1 <= len(samples) <= 10
    assert all(point_in_polygon(sample.point, ring) for sample in samples)
    scores = [sample.score for sample in samples]
    assert scores == sorted(scores)
    for first, second in itertools.combinations(samples, 2):
        assert distance_miles(first.point, second.point) >= size * 0.15


def test_inclusion_spacing_filter_keeps_only_first_when_spacing_is_huge():
    samples = sample_inclusion_points(_square(), CENTER, 10_000.0, rng=np.random.default_rng(1))

    assert len(samples) == 1


def test_inclusion_without_spacing_keeps_every_candidate():
    samples = sample_inclusion_points(
        _square(), CENTER, 13.8, rng=np.random.default_rng(3), spacing_factor=0.0
    )

    # The square fills its bounding box, so every draw is accepted.
    assert len(samples) == 10


def test_inclusion_respects_attempt_cap():
    samples = sample_inclusion_points(
        _square(), CENTER, 13.8, rng=np.random.default_rng(3), max_attempts=4, spacing_factor=0.0
    )

    assert len(samples) == 4


def test_inclusion_sampling_is_reproducible_with_seed():
    first = sample_inclusion_points(_triangle(), CENTER, 13.8, rng=np.random.default_rng(11))
    second = sample_inclusion_points(_triangle(), CENTER, 13.8, rng=np.random.default_rng(11))

    assert first == second


def test_exclusion_points_are_outside_and_nearest_first():
    ring = _square()

    samples = sample_exclusion_points(ring, rng=np.random.default_rng(5))

    assert len(samples) == 10
    assert not any(point_in_polygon(sample.point, ring) for sample in samples)
    scores = [sample.score for sample in samples]
    assert scores == sorted(scores)
    for sample in samples:
        assert sample.score == min(distance_miles(sample.point, vertex) for vertex in ring)
        assert 40.0 - 0.06 - 1e-9 <= sample.point.latitude <= 40.2 + 0.06 + 1e-9
        assert -75.2 - 0.06 - 1e-9 <= sample.point.longitude <= -75.0 + 0.06 + 1e-9


def test_exclusion_target_count_is_tunable():
    samples = sample_exclusion_points(_square(), rng=np.random.default_rng(5), target_count=3)

    assert len(samples) == 3


def test_vertex_exclusion_circles_skip_vertices_near_center():
    ring = _square()

    circles = vertex_exclusion_circles(ring, CENTER)

    # Every corner of the square is ~8.7 miles from its center.
    assert [circle.name for circle in circles] == [f"Boundary exclusion {i}" for i in range(1, 6)]
    assert all(circle.radius == 25 for circle in circles)
    assert vertex_exclusion_circles(ring, CENTER, min_distance_miles=50.0) == []


def test_vertex_exclusion_circles_are_exported_from_targeting_package():
    from clinic_targeting.services.targeting import vertex_exclusion_circles as exported

    assert exported is vertex_exclusion_circles
    assert exported(_square(), CENTER, target=1, min_distance_miles=0.0)[0].name == "Boundary exclusion 1"
