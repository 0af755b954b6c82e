"""Declarative property-to-column mappings."""

from . import common, countries, registry, states

__all__ = [
    "common",
    "countries",
    "registry",
    "states",
]
