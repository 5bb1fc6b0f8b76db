"""Straight-line drive time estimates by metro classification."""

from __future__ import annotations

AVERAGE_SPEED_MPH = {"urban": 25.0, "suburban": 35.0, "rural": 45.0}
DEFAULT_SPEED_MPH = 35.0


def drive_time_minutes(distance_miles: float, metro_type: str | None) -> float:
    speed = AVERAGE_SPEED_MPH.get(metro_type or "", DEFAULT_SPEED_MPH)
    return distance_miles / speed * 60.0
