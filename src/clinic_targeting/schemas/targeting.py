"""Pydantic models for the ad-platform targeting document."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Whole-mile radii stay integers on the wire.
Radius = Union[int, float]


class TargetingLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    address: Optional[str] = None
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    radius: Radius = Field(..., gt=0)
    distance_unit: str = "mile"
    distance_miles: Optional[float] = None
    estimated_drive_time_min: Optional[int] = None


class CustomLocations(BaseModel):
    custom_locations: list[TargetingLocation] = Field(default_factory=list)


class TerritoryInfo(BaseModel):
    center_latitude: float
    center_longitude: float
    territory_width_miles: float
    territory_height_miles: float
    territory_size_miles: float


class TargetingSummary(BaseModel):
    total_inclusions: int
    total_exclusions: int
    competing_clinics_excluded: int
    boundary_exclusions: int
    inclusion_radii_used: list[Radius]
    exclusion_radii_used: list[Radius]
    coverage_strategy: str


class TargetingDocument(BaseModel):
    clinic_id: str
    clinic_name: str
    generated_at: str
    geo_locations: CustomLocations
    excluded_geo_locations: CustomLocations
    territory_info: TerritoryInfo
    summary: TargetingSummary


class TargetingRequest(BaseModel):
    persist: bool = Field(default=True, description="Write the document to the exports directory.")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible point sampling.")
