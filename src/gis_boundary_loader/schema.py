from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from geoalchemy2 import Geometry
from sqlalchemy import (CHAR, Column, DateTime, ForeignKey, MetaData, Table,
                        Text, func, text)
from sqlalchemy.dialects.postgresql import JSONB, UUID

from .models import DEFAULT_SCHEMA_NAME, DEFAULT_SRID, EntityKind


@dataclass(frozen=True)
class BoundaryTables:
    """SQLAlchemy tables for one ``gis`` schema."""

    metadata: MetaData
    countries: Table
    states: Table

    def for_kind(self, kind: EntityKind) -> Table:
        return self.countries if kind is EntityKind.COUNTRY else self.states


def _geometry_column() -> Column:
    return Column(
        "geometry",
        Geometry(geometry_type="MULTIPOLYGON", srid=DEFAULT_SRID, spatial_index=False),
        nullable=True,
    )


def _common_tail() -> list:
    return [
        _geometry_column(),
        Column("geometry_geojson", Text),
        Column("properties", JSONB, server_default=text("'{}'::jsonb")),
        Column("row_digest", Text, nullable=False, unique=True),
        Column("created_at", DateTime(timezone=True), server_default=func.now()),
        Column("updated_at", DateTime(timezone=True), server_default=func.now()),
    ]


def build_tables(schema_name: str = DEFAULT_SCHEMA_NAME) -> BoundaryTables:
    metadata = MetaData(schema=schema_name)
    countries = Table(
        "countries",
        metadata,
        Column("id", UUID(as_uuid=False), primary_key=True,
               server_default=text("gen_random_uuid()")),
        Column("name", Text, nullable=False),
        Column("name_en", Text),
        Column("iso_a2", CHAR(2)),
        Column("iso_a3", CHAR(3)),
        Column("iso_n3", CHAR(3)),
        *_common_tail(),
    )
    states = Table(
        "states",
        metadata,
        Column("id", UUID(as_uuid=False), primary_key=True,
               server_default=text("gen_random_uuid()")),
        Column("name", Text, nullable=False),
        Column("name_en", Text),
        Column("iso_a2", CHAR(2)),
        Column("adm1_code", Text),
        Column("admin", Text),
        Column("type", Text),
        Column("type_en", Text),
        Column(
            "country_id",
            UUID(as_uuid=False),
            ForeignKey(f"{schema_name}.countries.id", ondelete="CASCADE"),
        ),
        *_common_tail(),
    )
    return BoundaryTables(metadata=metadata, countries=countries, states=states)


_TABLES: Dict[str, BoundaryTables] = {}


def get_tables(schema_name: str = DEFAULT_SCHEMA_NAME) -> BoundaryTables:
    if schema_name not in _TABLES:
        _TABLES[schema_name] = build_tables(schema_name)
    return _TABLES[schema_name]
