"""API routes for clinic territories and targeting export."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.targeting import TargetingDocument, TargetingRequest
from ...schemas.territories import TerritorySummaryModel
from ...services.targeting import NoBoundaryError
from ...services.targeting import service as targeting_service

router = APIRouter(prefix="/territories", tags=["territories"])


@router.get("", response_model=list[TerritorySummaryModel])
async def list_territories() -> list[TerritorySummaryModel]:
    try:
        territories = await targeting_service.get_territory_source().list_territories()
    except ConnectionError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return [
        TerritorySummaryModel(
            clinic_id=territory.clinic_id,
            clinic_name=territory.clinic_name,
            state=territory.state,
            city=territory.city,
            metro_type=territory.metro_type,
            latitude=territory.center.latitude if territory.center else None,
            longitude=territory.center.longitude if territory.center else None,
            has_boundary=territory.boundary is not None,
            boundary_vertices=len(territory.boundary or ()),
        )
        for territory in territories
    ]


@router.post(
    "/{clinic_id}/targeting",
    response_model=TargetingDocument,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def export_targeting(clinic_id: str, payload: TargetingRequest | None = None) -> TargetingDocument:
    """Generate the ad-platform targeting document for a clinic territory."""
    try:
        return await targeting_service.process_targeting_request(clinic_id, payload or TargetingRequest())
    except targeting_service.TerritoryNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except NoBoundaryError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    except ConnectionError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
