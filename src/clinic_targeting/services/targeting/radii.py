"""Radius schedules and size labels for targeting locations."""

from __future__ import annotations

from itertools import cycle, islice

# (upper size bound in miles, cyclic radius schedule)
RADIUS_SCHEDULES: tuple[tuple[float, tuple[int, ...]], ...] = (
    (20.0, (1, 3, 5)),
    (40.0, (3, 5, 10)),
    (60.0, (5, 10, 15)),
    (float("inf"), (10, 15, 25)),
)

# (upper distance bound in miles, exclusion radius)
COMPETITOR_RADII: tuple[tuple[float, int], ...] = (
    (10.0, 5),
    (20.0, 10),
    (30.0, 15),
    (float("inf"), 25),
)

COVERAGE_LABELS: tuple[tuple[float, str], ...] = (
    (20.0, "Dense (small territory)"),
    (40.0, "Medium coverage"),
    (60.0, "Wide coverage"),
    (float("inf"), "Very wide coverage"),
)


def radius_schedule(territory_size_miles: float) -> tuple[int, ...]:
    for upper, schedule in RADIUS_SCHEDULES:
        if territory_size_miles < upper:
            return schedule
    return RADIUS_SCHEDULES[-1][1]


def select_radii(territory_size_miles: float, count: int) -> list[int]:
    """Return the first ``count`` radii of the size tier's repeating schedule."""

    if count <= 0:
        return []
    return list(islice(cycle(radius_schedule(territory_size_miles)), count))


def competitor_radius(distance_miles: float) -> int:
    for upper, radius in COMPETITOR_RADII:
        if distance_miles < upper:
            return radius
    return COMPETITOR_RADII[-1][1]


def coverage_strategy(territory_size_miles: float) -> str:
    for upper, label in COVERAGE_LABELS:
        if territory_size_miles < upper:
            return label
    return COVERAGE_LABELS[-1][1]
