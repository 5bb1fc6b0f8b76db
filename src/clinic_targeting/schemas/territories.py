"""Pydantic request/response models for territory and geometry endpoints."""

from __future__ import annotations

from typing import Optional, Sequence

from pydantic import BaseModel, Field, field_validator


class TerritorySummaryModel(BaseModel):
    clinic_id: str
    clinic_name: str
    state: Optional[str] = None
    city: Optional[str] = None
    metro_type: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    has_boundary: bool
    boundary_vertices: int


class SimplifyRequest(BaseModel):
    coordinates: Sequence[tuple[float, float]] = Field(..., description="Boundary ring as (lat, lon) pairs.")
    target_points: Optional[int] = Field(default=None, description="Desired vertex count after simplification.")

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(cls, value: Sequence[tuple[float, float]]) -> Sequence[tuple[float, float]]:
        if len(value) < 3:
            raise ValueError("coordinates must contain at least 3 points")
        return value

    @field_validator("target_points")
    @classmethod
    def validate_target_points(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 3:
            raise ValueError("target_points must be >= 3")
        return value


class SimplifyResponse(BaseModel):
    original_points: int
    simplified_points: int
    coordinates: list[list[float]]
