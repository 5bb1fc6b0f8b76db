"""API routes for boundary geometry utilities."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...models.domain import GeoPoint
from ...schemas.territories import SimplifyRequest, SimplifyResponse
from ...services.geojson import boundary_to_coordinates
from ...services.geospatial import simplify_to_target

router = APIRouter(prefix="/geometry", tags=["geometry"])


@router.post("/simplify", response_model=SimplifyResponse, status_code=status.HTTP_200_OK)
def simplify_boundary(payload: SimplifyRequest) -> SimplifyResponse:
    try:
        ring = [GeoPoint(lat, lon) for lat, lon in payload.coordinates]
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    simplified = simplify_to_target(ring, payload.target_points or settings.simplify_default_target)
    return SimplifyResponse(
        original_points=len(ring),
        simplified_points=len(simplified),
        coordinates=boundary_to_coordinates(simplified),
    )
