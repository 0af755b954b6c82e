"""GeoJSON feature ingestion into the country and state tables."""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from .documents import FeatureModel, parse_feature, parse_feature_collection
from .geometry import GeometryConversionError, from_geojson, geometry_text
from .logging_utils import get_logger
from .mappings.common import as_text, first_present
from .mappings.registry import ENTITY_MAPPERS
from .mappings.states import parent_reference
from .models import (DEFAULT_PROGRESS_EVERY, DEFAULT_SRID, EntityKind,
                     FeatureOutcome, IngestSummary, OutcomeStatus)
from .persistence import BoundaryStore, row_digest

LOGGER = get_logger("ingest")

# Keys used only to label log lines for features that fail before mapping.
_LABEL_KEYS = ("NAME", "name", "ADMIN", "admin")

PER_FEATURE_ERRORS = (
    ValidationError,
    GeometryConversionError,
    SQLAlchemyError,
    TypeError,
    ValueError,
)


def _feature_label(raw: Any) -> Optional[str]:
    properties = raw.get("properties") if isinstance(raw, dict) else None
    return as_text(first_present(properties, _LABEL_KEYS))


def build_row(
    store: BoundaryStore,
    feature: FeatureModel,
    kind: EntityKind,
    srid: int = DEFAULT_SRID,
) -> Dict[str, Any]:
    """Map one feature to an insertable row, resolving the parent country for states."""
    properties = feature.properties
    row: Dict[str, Any] = dict(ENTITY_MAPPERS[kind](properties))

    if kind is EntityKind.STATE:
        parent = parent_reference(row)
        row["country_id"] = (
            None if parent.empty else store.find_country_id(parent.iso_a2, parent.admin)
        )

    # A null geometry is stored as NULL; only a present but unusable one fails.
    row["geometry"] = (
        None if feature.geometry is None else from_geojson(feature.geometry, srid=srid)
    )
    row["geometry_geojson"] = geometry_text(feature.geometry)
    row["properties"] = properties
    row["row_digest"] = row_digest(kind, row)
    return row


def ingest_feature(
    store: BoundaryStore,
    raw: Any,
    kind: EntityKind,
    index: int,
    srid: int = DEFAULT_SRID,
) -> FeatureOutcome:
    label = _feature_label(raw)
    try:
        feature = parse_feature(raw)
        row = build_row(store, feature, kind, srid=srid)
        label = row.get("name") or label
        inserted = store.insert_row(kind, row)
    except PER_FEATURE_ERRORS as exc:
        LOGGER.warning("Failed to insert %s: %s, Error: %s", kind.value, label, exc)
        return FeatureOutcome(index=index, name=label, status=OutcomeStatus.FAILED, reason=str(exc))

    status = OutcomeStatus.INSERTED if inserted else OutcomeStatus.SKIPPED_DUPLICATE
    return FeatureOutcome(index=index, name=label, status=status)


def ingest_features(
    store: BoundaryStore,
    geojson_text: str,
    entity_kind: Union[EntityKind, str],
    srid: int = DEFAULT_SRID,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
) -> IngestSummary:
    """
    Load every feature of a FeatureCollection into the table for ``entity_kind``.

    Malformed top-level JSON raises ``GeoJSONDocumentError`` before anything is
    written. Problems with individual features are logged and recorded as
    failed outcomes; the run continues with the next feature.
    """
    kind = EntityKind(entity_kind)
    progress_every = max(1, progress_every)
    collection = parse_feature_collection(geojson_text)
    summary = IngestSummary(entity_kind=kind)
    total = len(collection.features)

    LOGGER.info("Loading %s %s feature(s)", total, kind.value)
    for index, raw in enumerate(collection.features):
        summary.record(ingest_feature(store, raw, kind, index, srid=srid))
        if summary.attempted % progress_every == 0:
            LOGGER.debug("Processed %s/%s %s features", summary.attempted, total, kind.value)

    LOGGER.info(
        "Finished %s load: %s attempted, %s inserted, %s duplicate, %s failed",
        kind.value,
        summary.attempted,
        summary.inserted,
        summary.skipped_duplicate,
        summary.failed,
    )
    return summary


def ingest(store: BoundaryStore, geojson_text: str, entity_kind: Union[EntityKind, str]) -> int:
    """Return the number of features attempted, failures included."""
    return ingest_features(store, geojson_text, entity_kind).attempted


def ingest_countries(store: BoundaryStore, geojson_text: str) -> int:
    return ingest(store, geojson_text, EntityKind.COUNTRY)


def ingest_states(store: BoundaryStore, geojson_text: str) -> int:
    return ingest(store, geojson_text, EntityKind.STATE)
