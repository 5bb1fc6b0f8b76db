"""Geospatial helper functions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..models.domain import GeoPoint

EARTH_RADIUS_MILES = 3959.0

INITIAL_TOLERANCE = 0.001
GROW_FACTOR = 1.5
SHRINK_FACTOR = 0.8
MAX_GROW_STEPS = 20
MAX_SHRINK_STEPS = 10
MIN_TOLERANCE = 0.0001
UNDERSHOOT_RATIO = 0.8


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def lat_span(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_span(self) -> float:
        return self.max_lon - self.min_lon


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance between two points using the Haversine formula."""

    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def point_in_polygon(point: GeoPoint, ring: Sequence[GeoPoint]) -> bool:
    """Ray-casting parity test with x=longitude, y=latitude.

    The result for points lying exactly on an edge is unspecified.
    """

    if len(ring) < 3:
        return False

    x, y = point.longitude, point.latitude
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i].longitude, ring[i].latitude
        xj, yj = ring[j].longitude, ring[j].latitude
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def perpendicular_distance(point: GeoPoint, segment_start: GeoPoint, segment_end: GeoPoint) -> float:
    """Planar distance (in degrees) from ``point`` to the closest point on the segment."""

    px, py = point.longitude, point.latitude
    x1, y1 = segment_start.longitude, segment_start.latitude
    x2, y2 = segment_end.longitude, segment_end.latitude

    dx_seg = x2 - x1
    dy_seg = y2 - y1
    length_sq = dx_seg * dx_seg + dy_seg * dy_seg

    param = -1.0
    if length_sq != 0:
        param = ((px - x1) * dx_seg + (py - y1) * dy_seg) / length_sq

    if param < 0:
        nearest_x, nearest_y = x1, y1
    elif param > 1:
        nearest_x, nearest_y = x2, y2
    else:
        nearest_x, nearest_y = x1 + param * dx_seg, y1 + param * dy_seg

    return math.hypot(px - nearest_x, py - nearest_y)


def simplify(ring: Sequence[GeoPoint], tolerance: float) -> list[GeoPoint]:
    """Douglas-Peucker simplification driven by an explicit work stack."""

    if len(ring) <= 2:
        return list(ring)

    keep = [False] * len(ring)
    keep[0] = keep[-1] = True
    stack: list[tuple[int, int]] = [(0, len(ring) - 1)]

    while stack:
        start, end = stack.pop()
        max_dist = 0.0
        max_index = start
        for index in range(start + 1, end):
            dist = perpendicular_distance(ring[index], ring[start], ring[end])
            if dist > max_dist:
                max_dist = dist
                max_index = index
        if max_dist > tolerance:
            keep[max_index] = True
            stack.append((max_index, end))
            stack.append((start, max_index))

    return [point for point, kept in zip(ring, keep) if kept]


def simplify_to_target(ring: Sequence[GeoPoint], target_count: int) -> list[GeoPoint]:
    """Tune the Douglas-Peucker tolerance until the ring lands near ``target_count`` vertices.

    Best effort: grows the tolerance until the result fits, then backs off while
    the result is well under target. Both phases are step-capped.
    """

    if len(ring) <= target_count:
        return list(ring)

    tolerance = INITIAL_TOLERANCE
    simplified = simplify(ring, tolerance)

    steps = 0
    while len(simplified) > target_count and steps < MAX_GROW_STEPS:
        tolerance *= GROW_FACTOR
        simplified = simplify(ring, tolerance)
        steps += 1

    steps = 0
    while (
        len(simplified) < target_count * UNDERSHOOT_RATIO
        and tolerance > MIN_TOLERANCE
        and steps < MAX_SHRINK_STEPS
    ):
        tolerance *= SHRINK_FACTOR
        simplified = simplify(ring, tolerance)
        steps += 1

    return simplified


def bounding_box(ring: Sequence[GeoPoint]) -> BoundingBox:
    if not ring:
        raise ValueError("Cannot compute bounding box of an empty ring")
    lats = [point.latitude for point in ring]
    lons = [point.longitude for point in ring]
    return BoundingBox(min(lats), max(lats), min(lons), max(lons))


def territory_dimensions(box: BoundingBox, center: GeoPoint) -> tuple[float, float]:
    """Return (width, height) in miles measured through the territory center."""

    width = distance_miles(
        GeoPoint(center.latitude, box.min_lon),
        GeoPoint(center.latitude, box.max_lon),
    )
    height = distance_miles(
        GeoPoint(box.min_lat, center.longitude),
        GeoPoint(box.max_lat, center.longitude),
    )
    return width, height
