"""Mapping helpers for Natural Earth admin-0 country features."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..models import EntityKind
from .common import load_field_mappings, map_properties


def map_country(properties: Optional[Mapping[str, Any]]) -> Dict[str, Optional[str]]:
    return map_properties(properties, load_field_mappings()[EntityKind.COUNTRY])
