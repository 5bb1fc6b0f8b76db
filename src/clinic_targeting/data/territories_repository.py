"""Territory loader with database-first approach, falling back to a JSON snapshot."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import GeoPoint, Territory
from ..services.geojson import extract_boundary

TERRITORY_COLUMNS = "clinic_id,clinic_name,state,city,metro_type,raw_geojson,latitude,longitude"


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _first_present(*values: Any) -> Any:
    for value in values:
        if value not in (None, ""):
            return value
    return None


def _make_center(latitude: Any, longitude: Any) -> Optional[GeoPoint]:
    lat, lon = _to_float(latitude), _to_float(longitude)
    if lat is None or lon is None:
        return None
    try:
        return GeoPoint(lat, lon)
    except ValueError:
        return None


def merge_territory_rows(
    territory_rows: Iterable[dict],
    location_rows: Iterable[dict] = (),
) -> list[Territory]:
    """Join territory rows with clinic location rows on clinic id.

    Territory fields take precedence; the location table fills the gaps.
    """

    locations_by_id: dict[str, dict] = {}
    for location in location_rows:
        location_id = _first_present(location.get("ClinicID"), location.get("clinic_id"))
        if location_id is not None:
            locations_by_id[str(location_id)] = location

    territories: list[Territory] = []
    for row in territory_rows:
        raw_id = _first_present(row.get("clinic_id"), row.get("ClinicID"))
        if raw_id is None:
            logging.warning("Skipping territory row without clinic id")
            continue
        clinic_id = str(raw_id)
        location = locations_by_id.get(clinic_id, {})

        territories.append(
            Territory(
                clinic_id=clinic_id,
                clinic_name=str(
                    _first_present(row.get("clinic_name"), location.get("Name")) or f"Clinic {clinic_id}"
                ),
                metro_type=str(row.get("metro_type") or "unknown"),
                center=_make_center(
                    _first_present(row.get("latitude"), location.get("Latitude"), location.get("latitude")),
                    _first_present(row.get("longitude"), location.get("Longitude"), location.get("longitude")),
                ),
                boundary=extract_boundary(row.get("raw_geojson")),
                state=_first_present(row.get("state"), location.get("State")),
                city=_first_present(row.get("city"), location.get("City"), location.get("city")),
                address=_first_present(location.get("Address"), location.get("address"), row.get("address")),
            )
        )
    return territories


def _load_rows_from_database() -> tuple[list[dict], list[dict]] | None:
    """Load territory and location rows from Supabase. Returns None if database not configured."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        territories = (
            supabase.table(settings.territories_table).select(TERRITORY_COLUMNS).limit(1000).execute()
        )
        locations = supabase.table(settings.locations_table).select("*").execute()
    except Exception as exc:
        raise ConnectionError(f"Failed to load territories from Supabase: {exc}") from exc

    return list(territories.data or []), list(locations.data or [])


def _load_rows_from_file(source: Path | None = None) -> tuple[list[dict], list[dict]]:
    """Load rows from a JSON snapshot: a list of territory rows or {"territories": [...], "locations": [...]}."""
    path = source or settings.territories_file
    if not path.exists():
        raise FileNotFoundError(f"Territory snapshot not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    if isinstance(payload, list):
        return payload, []
    if isinstance(payload, dict):
        return list(payload.get("territories") or []), list(payload.get("locations") or [])
    raise ValueError(f"Territory snapshot '{path}' must hold a list or an object.")


def load_territories(source: Path | None = None) -> tuple[Territory, ...]:
    rows = None if source else _load_rows_from_database()
    if rows is None:
        rows = _load_rows_from_file(source)
        logging.info(f"Loaded {len(rows[0])} territory rows from file snapshot")
    territory_rows, location_rows = rows
    return tuple(merge_territory_rows(territory_rows, location_rows))


def find_territory(territories: Sequence[Territory], clinic_id: str) -> Territory | None:
    for territory in territories:
        if territory.clinic_id == clinic_id:
            return territory
    return None


class RepositoryTerritorySource:
    """Territory snapshot backed by Supabase or the local JSON file."""

    def __init__(self, source: Path | None = None) -> None:
        self._source = source
        self._snapshot: tuple[Territory, ...] | None = None

    async def list_territories(self) -> Sequence[Territory]:
        if self._snapshot is None:
            self._snapshot = await asyncio.to_thread(load_territories, self._source)
        return self._snapshot
