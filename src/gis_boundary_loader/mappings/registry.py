"""Registry of property mappers per entity kind."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from ..models import EntityKind
from .countries import map_country
from .states import map_state

PropertyMapper = Callable[[Optional[Mapping[str, Any]]], Dict[str, Optional[str]]]

ENTITY_MAPPERS: Dict[EntityKind, PropertyMapper] = {
    EntityKind.COUNTRY: map_country,
    EntityKind.STATE: map_state,
}
