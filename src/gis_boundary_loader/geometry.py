"""GeoJSON geometry to storage geometry conversion."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from shapely import wkt as shapely_wkt
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, mapping, shape
from shapely.geometry.base import BaseGeometry

from .models import DEFAULT_SRID

STORAGE_GEOMETRY_TYPE = "MULTIPOLYGON"


class GeometryConversionError(ValueError):
    """Raised when a feature geometry cannot be stored."""


@dataclass(frozen=True)
class StorageGeometry:
    geometry: MultiPolygon
    srid: int = DEFAULT_SRID


def to_multipolygon(geom: BaseGeometry) -> MultiPolygon:
    """Promote POLYGON to MULTIPOLYGON; reject anything non-areal."""
    if geom.geom_type == "MultiPolygon":
        return geom
    if geom.geom_type == "Polygon":
        return MultiPolygon([geom])
    raise GeometryConversionError(
        f"Geometry type {geom.geom_type} cannot be stored as {STORAGE_GEOMETRY_TYPE}"
    )


def from_geojson(geometry: Optional[Mapping[str, Any]], srid: int = DEFAULT_SRID) -> StorageGeometry:
    """Convert a GeoJSON geometry object into a MultiPolygon tagged with ``srid``."""
    if not isinstance(geometry, Mapping):
        raise GeometryConversionError("Feature has no geometry object")
    try:
        geom = shape(geometry)
    except (ShapelyError, KeyError, TypeError, ValueError, IndexError, AttributeError) as exc:
        raise GeometryConversionError(f"Invalid GeoJSON geometry: {exc}") from exc
    if geom.is_empty:
        raise GeometryConversionError("Geometry is empty")
    return StorageGeometry(geometry=to_multipolygon(geom), srid=srid)


def from_wkt(text: str, srid: int = DEFAULT_SRID) -> StorageGeometry:
    try:
        geom = shapely_wkt.loads(text)
    except ShapelyError as exc:
        raise GeometryConversionError(f"Invalid WKT: {exc}") from exc
    return StorageGeometry(geometry=to_multipolygon(geom), srid=srid)


def geometry_text(geometry: Any) -> Optional[str]:
    """Serialise the source geometry object back to text for ``geometry_geojson``."""
    if geometry is None:
        return None
    return json.dumps(geometry, ensure_ascii=False, separators=(",", ":"))


def to_geojson_text(storage: StorageGeometry) -> str:
    return geometry_text(mapping(storage.geometry))
