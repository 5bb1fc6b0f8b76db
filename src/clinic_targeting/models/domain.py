"""Domain models for clinic territories and targeting locations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinates must be finite, got ({self.latitude}, {self.longitude})")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")


@dataclass(slots=True)
class Territory:
    """A clinic's service area as stored in the data store."""

    clinic_id: str
    clinic_name: str
    metro_type: str = "unknown"
    center: Optional[GeoPoint] = None
    boundary: Optional[tuple[GeoPoint, ...]] = None
    state: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SamplePoint:
    """Candidate point plus the scalar used to rank it during selection."""

    point: GeoPoint
    score: float
