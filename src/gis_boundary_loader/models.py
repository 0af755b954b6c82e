from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

DEFAULT_SRID = 4326
DEFAULT_SCHEMA_NAME = "gis"
DEFAULT_DB_CONNECT_TIMEOUT = 60.0
DEFAULT_PROGRESS_EVERY = 100
DEFAULT_MAPPINGS_RESOURCE = "field_mappings.yaml"

# Columns hashed into ``row_digest``; together they form the insertable tuple.
DEDUP_COLUMNS = {
    "country": (
        "name",
        "name_en",
        "iso_a2",
        "iso_a3",
        "iso_n3",
        "geometry_geojson",
        "properties",
    ),
    "state": (
        "name",
        "name_en",
        "iso_a2",
        "adm1_code",
        "admin",
        "type",
        "type_en",
        "country_id",
        "geometry_geojson",
        "properties",
    ),
}


class EntityKind(str, Enum):
    COUNTRY = "country"
    STATE = "state"


class OutcomeStatus(str, Enum):
    INSERTED = "inserted"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    FAILED = "failed"


@dataclass(frozen=True)
class DatabaseConfig:
    url: str
    connect_timeout: float = DEFAULT_DB_CONNECT_TIMEOUT
    apply_schema: bool = False


@dataclass(frozen=True)
class FeatureOutcome:
    """Result of processing a single feature."""

    index: int
    name: Optional[str]
    status: OutcomeStatus
    reason: Optional[str] = None


@dataclass
class IngestSummary:
    entity_kind: EntityKind
    attempted: int = 0
    inserted: int = 0
    skipped_duplicate: int = 0
    failed: int = 0
    failures: List[FeatureOutcome] = field(default_factory=list)

    def record(self, outcome: FeatureOutcome) -> None:
        # Every feature counts as attempted, including failures.
        self.attempted += 1
        if outcome.status is OutcomeStatus.INSERTED:
            self.inserted += 1
        elif outcome.status is OutcomeStatus.SKIPPED_DUPLICATE:
            self.skipped_duplicate += 1
        else:
            self.failed += 1
            self.failures.append(outcome)


@dataclass(frozen=True)
class StateOverviewRow:
    country: str
    state_count: int
    states: List[str]
