"""Boundary extraction from territory GeoJSON as stored in the data store."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon, shape

from ..models.domain import GeoPoint

logger = logging.getLogger(__name__)


def parse_raw_geojson(raw: Any) -> Optional[dict]:
    """Accept a JSON string or an already-decoded mapping."""

    if raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return None
    return raw if isinstance(raw, dict) else None


def extract_geometry(raw: Any) -> Optional[dict]:
    """Return the geometry object from a FeatureCollection, Feature or bare Geometry.

    For collections the last feature wins, since edits are appended.
    """

    document = parse_raw_geojson(raw)
    if not document:
        return None

    kind = document.get("type")
    if kind == "FeatureCollection":
        features = document.get("features")
        if not isinstance(features, list) or not features or not isinstance(features[-1], dict):
            return None
        geometry = features[-1].get("geometry")
        return geometry if isinstance(geometry, dict) else None
    if kind == "Feature":
        geometry = document.get("geometry")
        return geometry if isinstance(geometry, dict) else None
    if "coordinates" in document:
        return document
    return None


def extract_boundary(raw: Any) -> Optional[tuple[GeoPoint, ...]]:
    """Outer ring of a Polygon, or of the first polygon of a MultiPolygon."""

    geometry = extract_geometry(raw)
    if not geometry or geometry.get("type") not in {"Polygon", "MultiPolygon"}:
        return None

    try:
        geom = shape(geometry)
        if isinstance(geom, MultiPolygon):
            if geom.is_empty:
                return None
            geom = geom.geoms[0]
        if not isinstance(geom, Polygon) or geom.is_empty:
            return None
        ring = tuple(GeoPoint(lat, lon) for lon, lat, *_ in geom.exterior.coords)
    except (GEOSException, ValueError, TypeError, IndexError, KeyError, AttributeError) as exc:
        logger.warning(f"Discarding malformed boundary geometry: {exc}")
        return None

    return ring if has_distinct_vertices(ring) else None


def has_distinct_vertices(ring: Optional[Sequence[GeoPoint]], minimum: int = 3) -> bool:
    if not ring:
        return False
    return len(set(ring)) >= minimum


def boundary_centroid(ring: Sequence[GeoPoint]) -> GeoPoint:
    polygon = Polygon([(point.longitude, point.latitude) for point in ring])
    centroid = polygon.centroid
    if centroid.is_empty:
        lats = [point.latitude for point in ring]
        lons = [point.longitude for point in ring]
        return GeoPoint(sum(lats) / len(lats), sum(lons) / len(lons))
    return GeoPoint(centroid.y, centroid.x)


def boundary_to_coordinates(ring: Sequence[GeoPoint]) -> list[list[float]]:
    """Serialize a ring as [lat, lon] pairs for API responses."""

    return [[point.latitude, point.longitude] for point in ring]
