"""Mapping helpers for Natural Earth admin-1 state/province features."""

from __future__ import annotations

from typing import Any, Dict, Mapping, NamedTuple, Optional

from ..models import EntityKind
from .common import load_field_mappings, map_properties


class ParentReference(NamedTuple):
    """Values used to find the owning country of a state."""

    iso_a2: Optional[str]
    admin: Optional[str]

    @property
    def empty(self) -> bool:
        return self.iso_a2 is None and self.admin is None


def map_state(properties: Optional[Mapping[str, Any]]) -> Dict[str, Optional[str]]:
    return map_properties(properties, load_field_mappings()[EntityKind.STATE])


def parent_reference(columns: Mapping[str, Optional[str]]) -> ParentReference:
    # ISO alpha-2 first; the admin name is the fallback match on countries.name.
    return ParentReference(iso_a2=columns.get("iso_a2"), admin=columns.get("admin"))
