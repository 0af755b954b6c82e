from __future__ import annotations

import json
import uuid
from typing import Any, Dict, List, Mapping, Optional

import pytest
from sqlalchemy.exc import IntegrityError

from gis_boundary_loader.models import EntityKind, StateOverviewRow


class InMemoryStore:
    """BoundaryStore with the same dedup and lookup rules as PostgisStore."""

    def __init__(self) -> None:
        self.rows: Dict[EntityKind, List[Dict[str, Any]]] = {
            EntityKind.COUNTRY: [],
            EntityKind.STATE: [],
        }
        self.fail_names: set = set()
        self._next_id = 1

    @property
    def countries(self) -> List[Dict[str, Any]]:
        return self.rows[EntityKind.COUNTRY]

    @property
    def states(self) -> List[Dict[str, Any]]:
        return self.rows[EntityKind.STATE]

    def find_country_id(self, iso_a2: Optional[str], admin: Optional[str]) -> Optional[str]:
        iso_matches = [r for r in self.countries if iso_a2 is not None and r["iso_a2"] == iso_a2]
        name_matches = [r for r in self.countries if admin is not None and r["name"] == admin]
        candidates = sorted(iso_matches, key=lambda r: r["id"]) or sorted(
            name_matches, key=lambda r: r["id"]
        )
        return candidates[0]["id"] if candidates else None

    def insert_row(self, kind: EntityKind, row: Mapping[str, Any]) -> bool:
        if row.get("name") in self.fail_names:
            raise IntegrityError("INSERT", {}, Exception("simulated constraint violation"))
        table = self.rows[kind]
        if any(existing["row_digest"] == row["row_digest"] for existing in table):
            return False
        stored = dict(row)
        stored["id"] = str(uuid.UUID(int=self._next_id))
        self._next_id += 1
        table.append(stored)
        return True

    def has_rows(self, kind: EntityKind) -> bool:
        return bool(self.rows[kind])

    def has_states_for(self, country_id: str) -> bool:
        return any(r["country_id"] == country_id for r in self.states)

    def country_names(self) -> List[str]:
        return sorted(r["name"] for r in self.countries)

    def state_overview(self) -> List[StateOverviewRow]:
        overview = []
        for country in sorted(self.countries, key=lambda r: (r["name"], r["id"])):
            names = sorted(s["name"] for s in self.states if s["country_id"] == country["id"])
            overview.append(StateOverviewRow(country["name"], len(names), names))
        return overview


def rectangle(min_x: float, min_y: float, max_x: float, max_y: float) -> Dict[str, Any]:
    return {
        "type": "Polygon",
        "coordinates": [
            [[min_x, min_y], [max_x, min_y], [max_x, max_y], [min_x, max_y], [min_x, min_y]]
        ],
    }


def feature(properties: Optional[Dict[str, Any]], geometry: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": geometry if geometry is not None else rectangle(0, 0, 1, 1),
    }


def collection(*features: Dict[str, Any]) -> str:
    return json.dumps({"type": "FeatureCollection", "features": list(features)})


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def france_feature() -> Dict[str, Any]:
    return feature(
        {
            "NAME": "France",
            "NAME_EN": "France",
            "ISO_A2": "FR",
            "ISO_A3": "FRA",
            "ISO_N3": "250",
            "CONTINENT": "Europe",
        },
        rectangle(-5, 42, 10, 51),
    )


@pytest.fixture
def us_feature() -> Dict[str, Any]:
    return feature(
        {
            "NAME": "United States of America",
            "ISO_A2": "US",
            "ISO_A3": "USA",
            "ISO_N3": "840",
        },
        {
            "type": "MultiPolygon",
            "coordinates": [
                rectangle(-125, 25, -66, 48)["coordinates"],
                rectangle(-170, 52, -140, 71)["coordinates"],
            ],
        },
    )
