"""Rejection sampling of inclusion and boundary-exclusion points around a territory."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from ...config import settings
from ...models.domain import GeoPoint, SamplePoint
from ...schemas.targeting import TargetingLocation
from ..geospatial import BoundingBox, bounding_box, distance_miles, point_in_polygon

logger = logging.getLogger(__name__)

VERTEX_EXCLUSION_RADIUS_MILES = 25
VERTEX_EXCLUSION_MIN_DISTANCE_MILES = 5.0
VERTEX_EXCLUSION_TARGET = 20


def sample_inclusion_points(
    ring: Sequence[GeoPoint],
    center: GeoPoint,
    territory_size_miles: float,
    *,
    rng: np.random.Generator | None = None,
    max_attempts: int | None = None,
    target_count: int | None = None,
    spacing_factor: float | None = None,
) -> list[SamplePoint]:
    """Draw interior points, then greedily thin them so they are not clustered.

    Candidates are accepted from uniform draws over the bounding box until
    ``target_count`` land inside the ring or ``max_attempts`` run out. They are
    ordered by distance from ``center`` and kept only when at least
    ``territory_size_miles * spacing_factor`` away from every point kept before.
    """

    rng = rng if rng is not None else np.random.default_rng()
    max_attempts = max_attempts if max_attempts is not None else settings.sample_max_attempts
    target_count = target_count if target_count is not None else settings.sample_target_count
    spacing_factor = spacing_factor if spacing_factor is not None else settings.inclusion_spacing_factor

    box = bounding_box(ring)
    candidates: list[SamplePoint] = []
    for _ in range(max_attempts):
        if len(candidates) >= target_count:
            break
        lat = box.min_lat + box.lat_span * rng.random()
        lon = box.min_lon + box.lon_span * rng.random()
        point = GeoPoint(lat, lon)
        if point_in_polygon(point, ring):
            candidates.append(SamplePoint(point, distance_miles(center, point)))

    candidates.sort(key=lambda sample: sample.score)

    min_spacing = territory_size_miles * spacing_factor
    distributed: list[SamplePoint] = []
    for candidate in candidates:
        too_close = any(
            distance_miles(kept.point, candidate.point) < min_spacing for kept in distributed
        )
        if not too_close:
            distributed.append(candidate)
        if len(distributed) >= target_count:
            break

    logger.info(
        f"Accepted {len(candidates)} interior samples, kept {len(distributed)} after spacing filter"
    )
    return distributed


def _exterior_candidate(box: BoundingBox, rng: np.random.Generator, band_fraction: float) -> GeoPoint:
    side = rng.random()
    if side < 0.25:
        lat = box.max_lat + box.lat_span * rng.random() * band_fraction
        lon = box.min_lon + box.lon_span * rng.random()
    elif side < 0.5:
        lat = box.min_lat - box.lat_span * rng.random() * band_fraction
        lon = box.min_lon + box.lon_span * rng.random()
    elif side < 0.75:
        lat = box.min_lat + box.lat_span * rng.random()
        lon = box.max_lon + box.lon_span * rng.random() * band_fraction
    else:
        lat = box.min_lat + box.lat_span * rng.random()
        lon = box.min_lon - box.lon_span * rng.random() * band_fraction
    # Bands may spill past the poles or the antimeridian for huge boxes.
    return GeoPoint(max(-90.0, min(90.0, lat)), max(-180.0, min(180.0, lon)))


def sample_exclusion_points(
    ring: Sequence[GeoPoint],
    *,
    rng: np.random.Generator | None = None,
    max_attempts: int | None = None,
    target_count: int | None = None,
    band_fraction: float | None = None,
) -> list[SamplePoint]:
    """Draw points just outside the bounding box and keep those nearest the boundary."""

    rng = rng if rng is not None else np.random.default_rng()
    max_attempts = max_attempts if max_attempts is not None else settings.sample_max_attempts
    target_count = target_count if target_count is not None else settings.sample_target_count
    band_fraction = band_fraction if band_fraction is not None else settings.exclusion_band_fraction

    box = bounding_box(ring)
    candidates: list[SamplePoint] = []
    for _ in range(max_attempts):
        if len(candidates) >= target_count:
            break
        point = _exterior_candidate(box, rng, band_fraction)
        if not point_in_polygon(point, ring):
            nearest = min(distance_miles(point, vertex) for vertex in ring)
            candidates.append(SamplePoint(point, nearest))

    candidates.sort(key=lambda sample: sample.score)
    logger.info(f"Accepted {len(candidates)} exterior samples")
    return candidates[:target_count]


def vertex_exclusion_circles(
    ring: Sequence[GeoPoint],
    center: GeoPoint,
    *,
    target: int = VERTEX_EXCLUSION_TARGET,
    min_distance_miles: float = VERTEX_EXCLUSION_MIN_DISTANCE_MILES,
    radius: int = VERTEX_EXCLUSION_RADIUS_MILES,
) -> list[TargetingLocation]:
    """Deterministic exclusions placed on every n-th boundary vertex far enough from center.

    Library-only alternative to ``sample_exclusion_points``; ``generate_targeting``
    does not call it. Callers that want reproducible boundary exclusions without
    a random source can append these to ``excluded_geo_locations`` themselves.
    """

    circles: list[TargetingLocation] = []
    step = max(1, len(ring) // target)
    for index in range(0, len(ring), step):
        vertex = ring[index]
        if distance_miles(center, vertex) > min_distance_miles:
            circles.append(
                TargetingLocation(
                    name=f"Boundary exclusion {len(circles) + 1}",
                    latitude=vertex.latitude,
                    longitude=vertex.longitude,
                    radius=radius,
                )
            )
    return circles
