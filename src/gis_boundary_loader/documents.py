"""Pydantic models for GeoJSON FeatureCollection documents."""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class GeoJSONDocumentError(ValueError):
    """Raised when the input cannot be read as a FeatureCollection at all."""


class FeatureModel(BaseModel):
    type: Optional[str] = None
    properties: Optional[dict[str, Any]] = None
    geometry: Optional[dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")


class FeatureCollectionModel(BaseModel):
    type: Optional[str] = None
    # Items stay raw here; each one is validated on its own so that a single
    # bad feature does not reject the whole document.
    features: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    @field_validator("features", mode="before")
    @classmethod
    def _null_features(cls, value: Any) -> Any:
        return [] if value is None else value


def parse_feature_collection(geojson_text: str) -> FeatureCollectionModel:
    """Parse ``geojson_text`` into a FeatureCollection or raise GeoJSONDocumentError.

    A document without features (a non-object value, a missing or null
    ``features`` member) yields an empty collection. Only invalid JSON or a
    ``features`` member that is present but not an array is fatal.
    """
    try:
        payload = json.loads(geojson_text)
    except (TypeError, ValueError) as exc:
        raise GeoJSONDocumentError(f"Input is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        return FeatureCollectionModel()

    try:
        return FeatureCollectionModel.model_validate(payload)
    except ValidationError as exc:
        raise GeoJSONDocumentError(
            f"Document is not a FeatureCollection: {exc}"
        ) from exc


def parse_feature(raw: Any) -> FeatureModel:
    """Validate one element of ``features``; raises pydantic's ValidationError."""
    return FeatureModel.model_validate(raw)
