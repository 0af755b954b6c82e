"""Fallback sample rows for testing without the Natural Earth downloads.

Geometries are coarse bounding rectangles, not real borders. Countries are
only seeded into an empty table, and US states only while the US row has no
states yet, so re-running is harmless.
"""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional

from .geometry import from_wkt, to_geojson_text
from .logging_utils import get_logger
from .models import EntityKind
from .persistence import BoundaryStore, row_digest

LOGGER = get_logger("samples")

US_ADMIN_NAME = "United States of America"


class SampleCountry(NamedTuple):
    name: str
    iso_a2: str
    iso_a3: str
    wkt: str
    continent: str
    pop_est: int


class SampleState(NamedTuple):
    name: str
    postal: str
    wkt: str
    region: str
    pop_est: int


SAMPLE_COUNTRIES: List[SampleCountry] = [
    SampleCountry(US_ADMIN_NAME, "US", "USA",
                  "MULTIPOLYGON(((-125 48, -125 25, -66 25, -66 48, -125 48)))",
                  "North America", 331002651),
    SampleCountry("Canada", "CA", "CAN",
                  "MULTIPOLYGON(((-141 83, -141 48, -52 48, -52 83, -141 83)))",
                  "North America", 37742154),
    SampleCountry("Mexico", "MX", "MEX",
                  "MULTIPOLYGON(((-117 32, -117 14, -86 14, -86 32, -117 32)))",
                  "North America", 128932753),
    SampleCountry("United Kingdom", "GB", "GBR",
                  "MULTIPOLYGON(((-8 61, -8 49, 2 49, 2 61, -8 61)))",
                  "Europe", 67886011),
    SampleCountry("France", "FR", "FRA",
                  "MULTIPOLYGON(((-5 51, -5 42, 10 42, 10 51, -5 51)))",
                  "Europe", 65273511),
    SampleCountry("Germany", "DE", "DEU",
                  "MULTIPOLYGON(((5 55, 5 47, 15 47, 15 55, 5 55)))",
                  "Europe", 83783942),
    SampleCountry("Australia", "AU", "AUS",
                  "MULTIPOLYGON(((113 -10, 113 -44, 154 -44, 154 -10, 113 -10)))",
                  "Oceania", 25499884),
    SampleCountry("Brazil", "BR", "BRA",
                  "MULTIPOLYGON(((-74 5, -74 -34, -34 -34, -34 5, -74 5)))",
                  "South America", 212559417),
    SampleCountry("China", "CN", "CHN",
                  "MULTIPOLYGON(((73 54, 73 18, 135 18, 135 54, 73 54)))",
                  "Asia", 1439323776),
    SampleCountry("India", "IN", "IND",
                  "MULTIPOLYGON(((68 35, 68 6, 97 6, 97 35, 68 35)))",
                  "Asia", 1380004385),
]

SAMPLE_US_STATES: List[SampleState] = [
    SampleState("California", "CA",
                "MULTIPOLYGON(((-124.4 42, -124.4 32.5, -114.1 32.5, -114.1 42, -124.4 42)))",
                "West", 39538223),
    SampleState("Texas", "TX",
                "MULTIPOLYGON(((-106.6 36.5, -106.6 25.8, -93.5 25.8, -93.5 36.5, -106.6 36.5)))",
                "South", 29145505),
    SampleState("New York", "NY",
                "MULTIPOLYGON(((-79.8 45, -79.8 40.5, -71.9 40.5, -71.9 45, -79.8 45)))",
                "Northeast", 20201249),
    SampleState("Florida", "FL",
                "MULTIPOLYGON(((-87.6 31, -87.6 24.5, -80 24.5, -80 31, -87.6 31)))",
                "South", 21538187),
    SampleState("Illinois", "IL",
                "MULTIPOLYGON(((-91.5 42.5, -91.5 37, -87.5 37, -87.5 42.5, -91.5 42.5)))",
                "Midwest", 12812508),
    SampleState("Pennsylvania", "PA",
                "MULTIPOLYGON(((-80.5 42, -80.5 39.7, -75 39.7, -75 42, -80.5 42)))",
                "Northeast", 13002700),
    SampleState("Ohio", "OH",
                "MULTIPOLYGON(((-84.8 42, -84.8 38.4, -80.5 38.4, -80.5 42, -84.8 42)))",
                "Midwest", 11799448),
    SampleState("Georgia", "GA",
                "MULTIPOLYGON(((-85.6 35, -85.6 30.4, -80.8 30.4, -80.8 35, -85.6 35)))",
                "South", 10711908),
    SampleState("North Carolina", "NC",
                "MULTIPOLYGON(((-84.3 36.6, -84.3 33.8, -75.5 33.8, -75.5 36.6, -84.3 36.6)))",
                "South", 10439388),
    SampleState("Michigan", "MI",
                "MULTIPOLYGON(((-90.4 48.2, -90.4 41.7, -82.4 41.7, -82.4 48.2, -90.4 48.2)))",
                "Midwest", 10077331),
]


def _finish_row(kind: EntityKind, row: Dict[str, Any], wkt: str) -> Dict[str, Any]:
    geometry = from_wkt(wkt)
    row["geometry"] = geometry
    row["geometry_geojson"] = to_geojson_text(geometry)
    row["row_digest"] = row_digest(kind, row)
    return row


def country_row(sample: SampleCountry) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "name": sample.name,
        "name_en": sample.name,
        "iso_a2": sample.iso_a2,
        "iso_a3": sample.iso_a3,
        "iso_n3": None,
        "properties": {"continent": sample.continent, "pop_est": sample.pop_est},
    }
    return _finish_row(EntityKind.COUNTRY, row, sample.wkt)


def state_row(sample: SampleState, country_id: Optional[str]) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "name": sample.name,
        "name_en": sample.name,
        "iso_a2": "US",
        "adm1_code": f"US-{sample.postal}",
        "admin": US_ADMIN_NAME,
        "type": "State",
        "type_en": "State",
        "country_id": country_id,
        "properties": {"postal": sample.postal, "region": sample.region, "pop_est": sample.pop_est},
    }
    return _finish_row(EntityKind.STATE, row, sample.wkt)


def seed_sample_countries(store: BoundaryStore) -> int:
    """Insert the sample countries if the table is empty; return rows inserted."""
    if store.has_rows(EntityKind.COUNTRY):
        LOGGER.info("Countries table already has data, skipping sample insert")
        return 0
    inserted = sum(
        1 for sample in SAMPLE_COUNTRIES
        if store.insert_row(EntityKind.COUNTRY, country_row(sample))
    )
    LOGGER.info("Inserted %s sample countries for testing", inserted)
    return inserted


def seed_sample_states(store: BoundaryStore) -> int:
    us_id = store.find_country_id("US", None)
    if us_id is None:
        LOGGER.info("US country not found - load countries first")
        return 0
    if store.has_states_for(us_id):
        LOGGER.info("States table already has US data, skipping sample insert")
        return 0
    inserted = sum(
        1 for sample in SAMPLE_US_STATES
        if store.insert_row(EntityKind.STATE, state_row(sample, us_id))
    )
    LOGGER.info("Inserted %s sample US states for testing", inserted)
    return inserted
