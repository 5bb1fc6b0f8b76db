"""Assemble an ad-platform targeting document for a clinic territory.

Pipeline, in order:

1. measure the territory's bounding box and size class
2. exclude sibling clinics reachable within the drive-time threshold
3. sample spaced interior points as inclusions
4. sample points hugging the outside of the boundary as exclusions
5. resolve an address for every emitted location, one call at a time

Sampling and measurement are pure. Address resolution and the sibling lookup
are the only awaits, so the run can be cancelled between any two calls and
never yields a partial document.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np

from ...config import settings
from ...models.domain import GeoPoint, SamplePoint, Territory
from ...schemas.targeting import (
    CustomLocations,
    TargetingDocument,
    TargetingLocation,
    TargetingSummary,
    TerritoryInfo,
)
from ..geojson import boundary_centroid, has_distinct_vertices
from ..geospatial import bounding_box, distance_miles, territory_dimensions
from .collaborators import AddressResolver, RequestThrottle, TerritorySource
from .drive_time import drive_time_minutes
from .radii import competitor_radius, coverage_strategy, select_radii
from .sampling import sample_exclusion_points, sample_inclusion_points

logger = logging.getLogger(__name__)

ADDRESS_NOT_FOUND = "Address not found"


class NoBoundaryError(ValueError):
    """Raised when a territory has no usable boundary polygon."""

    def __init__(self, clinic_id: str) -> None:
        super().__init__(f"No boundary geometry found for clinic '{clinic_id}'.")
        self.clinic_id = clinic_id


async def _resolve_address(
    resolver: AddressResolver,
    throttle: RequestThrottle,
    point: GeoPoint,
) -> Optional[str]:
    await throttle.wait()
    try:
        address = await resolver.resolve(point.latitude, point.longitude)
    except Exception as exc:
        logger.warning(f"Address resolution failed for ({point.latitude}, {point.longitude}): {exc}")
        return None
    return address or None


async def _competitor_exclusions(
    territory: Territory,
    center: GeoPoint,
    siblings: Sequence[Territory],
    resolver: AddressResolver,
    throttle: RequestThrottle,
    max_drive_minutes: float,
) -> list[TargetingLocation]:
    exclusions: list[TargetingLocation] = []
    for sibling in siblings:
        if sibling.clinic_id == territory.clinic_id:
            continue
        sibling_center = sibling.center
        if sibling_center is None:
            continue

        miles = distance_miles(center, sibling_center)
        minutes = drive_time_minutes(miles, territory.metro_type)
        if minutes > max_drive_minutes:
            continue

        address = await _resolve_address(resolver, throttle, sibling_center)
        exclusions.append(
            TargetingLocation(
                name=f"Competing Clinic: {sibling.clinic_name}",
                address=address or f"{sibling.clinic_name}, {sibling.state}",
                latitude=sibling_center.latitude,
                longitude=sibling_center.longitude,
                radius=competitor_radius(miles),
                distance_miles=_round_half_up(miles, 1),
                estimated_drive_time_min=int(_round_half_up(minutes)),
            )
        )
    return exclusions


async def _sampled_locations(
    samples: Sequence[SamplePoint],
    radii: Sequence[int],
    label: str,
    resolver: AddressResolver,
    throttle: RequestThrottle,
) -> list[TargetingLocation]:
    locations: list[TargetingLocation] = []
    for index, (sample, radius) in enumerate(zip(samples, radii), start=1):
        address = await _resolve_address(resolver, throttle, sample.point)
        locations.append(
            TargetingLocation(
                name=f"{label} {index}",
                address=address or ADDRESS_NOT_FOUND,
                latitude=sample.point.latitude,
                longitude=sample.point.longitude,
                radius=radius,
            )
        )
    return locations


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def generate_targeting(
    territory: Territory,
    *,
    territory_source: TerritorySource,
    address_resolver: AddressResolver,
    rng: np.random.Generator | None = None,
    request_delay_seconds: float | None = None,
    max_drive_minutes: float | None = None,
    generated_at: datetime | None = None,
) -> TargetingDocument:
    """Build the complete targeting document for ``territory``.

    Raises:
        NoBoundaryError: the territory has no polygon with at least three distinct vertices.
    """

    ring = territory.boundary
    if not ring or not has_distinct_vertices(ring):
        raise NoBoundaryError(territory.clinic_id)

    rng = rng if rng is not None else np.random.default_rng()
    delay = request_delay_seconds if request_delay_seconds is not None else settings.geocode_delay_seconds
    max_drive_minutes = (
        max_drive_minutes if max_drive_minutes is not None else settings.competitor_drive_time_minutes
    )
    throttle = RequestThrottle(delay)

    center = territory.center or boundary_centroid(ring)
    box = bounding_box(ring)
    width, height = territory_dimensions(box, center)
    size = max(width, height)
    logger.info(
        f"Generating targeting for clinic {territory.clinic_id}: "
        f"{width:.1f} x {height:.1f} mi territory, {len(ring)} boundary vertices"
    )

    siblings = await territory_source.list_territories()
    competitors = await _competitor_exclusions(
        territory, center, siblings, address_resolver, throttle, max_drive_minutes
    )
    logger.info(f"Found {len(competitors)} competing clinics within {max_drive_minutes:g} minutes")

    inclusion_samples = sample_inclusion_points(ring, center, size, rng=rng)
    exclusion_samples = sample_exclusion_points(ring, rng=rng)
    inclusion_radii = select_radii(size, len(inclusion_samples))
    exclusion_radii = select_radii(size, len(exclusion_samples))

    inclusions = await _sampled_locations(
        inclusion_samples, inclusion_radii, "Inclusion", address_resolver, throttle
    )
    boundary_exclusions = await _sampled_locations(
        exclusion_samples, exclusion_radii, "Boundary Exclusion", address_resolver, throttle
    )
    all_exclusions = [*competitors, *boundary_exclusions]

    return TargetingDocument(
        clinic_id=territory.clinic_id,
        clinic_name=territory.clinic_name,
        generated_at=_timestamp(generated_at or datetime.now(timezone.utc)),
        geo_locations=CustomLocations(custom_locations=inclusions),
        excluded_geo_locations=CustomLocations(custom_locations=all_exclusions),
        territory_info=TerritoryInfo(
            center_latitude=center.latitude,
            center_longitude=center.longitude,
            territory_width_miles=_round_half_up(width, 1),
            territory_height_miles=_round_half_up(height, 1),
            territory_size_miles=_round_half_up(size, 1),
        ),
        summary=TargetingSummary(
            total_inclusions=len(inclusions),
            total_exclusions=len(all_exclusions),
            competing_clinics_excluded=len(competitors),
            boundary_exclusions=len(boundary_exclusions),
            inclusion_radii_used=sorted({location.radius for location in inclusions}),
            exclusion_radii_used=sorted({location.radius for location in all_exclusions}),
            coverage_strategy=coverage_strategy(size),
        ),
    )
