"""Shared utilities for mapping GeoJSON properties onto table columns."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import yaml

from ..models import DEFAULT_MAPPINGS_RESOURCE, EntityKind

PACKAGE = "gis_boundary_loader"


class MappingConfigError(ValueError):
    """Raised when the field mapping resource is malformed."""


@dataclass(frozen=True)
class FieldSpec:
    """One target column and the source keys that may feed it."""

    column: str
    keys: Tuple[str, ...]
    default: Optional[str] = None
    null_if: Tuple[str, ...] = ()


def as_text(value: Any) -> Optional[str]:
    """Render a property value the way a JSON ``->>`` lookup would."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def first_present(
    obj: Optional[Mapping[str, Any]], keys: Sequence[str], default: Any = None
) -> Any:
    """Return the first value under ``keys`` that is present and not null."""
    if not isinstance(obj, Mapping):
        return default
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return default


def nullif(value: Optional[str], sentinels: Sequence[str]) -> Optional[str]:
    if value is not None and value in sentinels:
        return None
    return value


def resolve_field(properties: Optional[Mapping[str, Any]], spec: FieldSpec) -> Optional[str]:
    value = as_text(first_present(properties, spec.keys))
    if value is None:
        value = spec.default
    return nullif(value, spec.null_if)


def map_properties(
    properties: Optional[Mapping[str, Any]], specs: Sequence[FieldSpec]
) -> Dict[str, Optional[str]]:
    return {spec.column: resolve_field(properties, spec) for spec in specs}


def _parse_field(column: str, raw: Any) -> FieldSpec:
    if not isinstance(raw, dict):
        raise MappingConfigError(f"Mapping for column {column!r} must be a mapping")
    keys = raw.get("keys")
    if not isinstance(keys, list) or not keys:
        raise MappingConfigError(f"Column {column!r} needs a non-empty 'keys' list")
    default = raw.get("default")
    null_if = raw.get("null_if") or []
    return FieldSpec(
        column=column,
        keys=tuple(str(k) for k in keys),
        default=None if default is None else str(default),
        null_if=tuple(str(v) for v in null_if),
    )


def parse_field_mappings(document: Any) -> Dict[EntityKind, Tuple[FieldSpec, ...]]:
    if not isinstance(document, dict):
        raise MappingConfigError("Field mappings must be a mapping of entity kinds")
    result: Dict[EntityKind, Tuple[FieldSpec, ...]] = {}
    for kind in EntityKind:
        columns = document.get(kind.value)
        if not isinstance(columns, dict):
            raise MappingConfigError(f"Missing field mappings for {kind.value!r}")
        result[kind] = tuple(_parse_field(col, raw) for col, raw in columns.items())
    return result


@lru_cache(maxsize=None)
def load_field_mappings(
    resource: str = DEFAULT_MAPPINGS_RESOURCE,
) -> Dict[EntityKind, Tuple[FieldSpec, ...]]:
    with resources.files(PACKAGE).joinpath(resource).open("r", encoding="utf-8") as fh:
        return parse_field_mappings(yaml.safe_load(fh))
