from __future__ import annotations

import json
from hashlib import blake2s
from itertools import groupby
from typing import Any, List, Mapping, Optional, Protocol

from geoalchemy2.shape import from_shape
from sqlalchemy import case, exists, or_, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import Engine
from sqlalchemy.sql import Select
from sqlalchemy.sql.dml import Insert

from .geometry import StorageGeometry
from .logging_utils import get_logger
from .models import DEDUP_COLUMNS, EntityKind, StateOverviewRow
from .schema import BoundaryTables, get_tables

LOGGER = get_logger("persistence")


def row_digest(kind: EntityKind, row: Mapping[str, Any]) -> str:
    """Hash the insertable tuple so identical rows collide on ``row_digest``."""
    payload = [row.get(column) for column in DEDUP_COLUMNS[kind.value]]
    canonical = json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)
    return blake2s(canonical.encode("utf-8"), digest_size=16).hexdigest()


class BoundaryStore(Protocol):
    """Storage operations the loaders rely on."""

    def find_country_id(self, iso_a2: Optional[str], admin: Optional[str]) -> Optional[str]:
        ...

    def insert_row(self, kind: EntityKind, row: Mapping[str, Any]) -> bool:
        ...

    def has_rows(self, kind: EntityKind) -> bool:
        ...

    def has_states_for(self, country_id: str) -> bool:
        ...

    def country_names(self) -> List[str]:
        ...

    def state_overview(self) -> List[StateOverviewRow]:
        ...


def build_insert(table, row: Mapping[str, Any]) -> Insert:
    values = dict(row)
    geometry = values.get("geometry")
    if isinstance(geometry, StorageGeometry):
        values["geometry"] = from_shape(geometry.geometry, srid=geometry.srid)
    return (
        pg_insert(table)
        .values(**values)
        .on_conflict_do_nothing(index_elements=[table.c.row_digest])
        .returning(table.c.id)
    )


def build_country_lookup(
    tables: BoundaryTables, iso_a2: Optional[str], admin: Optional[str]
) -> Optional[Select]:
    countries = tables.countries
    conditions = []
    if iso_a2 is not None:
        conditions.append(countries.c.iso_a2 == iso_a2)
    if admin is not None:
        conditions.append(countries.c.name == admin)
    if not conditions:
        return None
    # ISO matches rank ahead of name matches; lowest id breaks remaining ties.
    ordering = [countries.c.id]
    if iso_a2 is not None:
        ordering.insert(0, case((countries.c.iso_a2 == iso_a2, 0), else_=1))
    return select(countries.c.id).where(or_(*conditions)).order_by(*ordering).limit(1)


class PostgisStore:
    """BoundaryStore backed by the ``gis`` schema via SQLAlchemy."""

    def __init__(self, engine: Engine, tables: Optional[BoundaryTables] = None) -> None:
        self._engine = engine
        self._tables = tables or get_tables()

    def find_country_id(self, iso_a2: Optional[str], admin: Optional[str]) -> Optional[str]:
        stmt = build_country_lookup(self._tables, iso_a2, admin)
        if stmt is None:
            return None
        with self._engine.connect() as conn:
            found = conn.execute(stmt).scalar_one_or_none()
        return None if found is None else str(found)

    def insert_row(self, kind: EntityKind, row: Mapping[str, Any]) -> bool:
        stmt = build_insert(self._tables.for_kind(kind), row)
        # One transaction per row; a failure never undoes earlier rows.
        with self._engine.begin() as conn:
            inserted_id = conn.execute(stmt).scalar_one_or_none()
        if inserted_id is None:
            LOGGER.debug("Duplicate %s row skipped (%s)", kind.value, row.get("name"))
        return inserted_id is not None

    def has_rows(self, kind: EntityKind) -> bool:
        table = self._tables.for_kind(kind)
        with self._engine.connect() as conn:
            return bool(conn.execute(select(exists().select_from(table))).scalar())

    def has_states_for(self, country_id: str) -> bool:
        states = self._tables.states
        stmt = select(exists().where(states.c.country_id == country_id))
        with self._engine.connect() as conn:
            return bool(conn.execute(stmt).scalar())

    def country_names(self) -> List[str]:
        countries = self._tables.countries
        with self._engine.connect() as conn:
            return list(
                conn.execute(select(countries.c.name).order_by(countries.c.name)).scalars()
            )

    def state_overview(self) -> List[StateOverviewRow]:
        countries, states = self._tables.countries, self._tables.states
        stmt = (
            select(countries.c.id, countries.c.name, states.c.name.label("state_name"))
            .select_from(countries.outerjoin(states, states.c.country_id == countries.c.id))
            .order_by(countries.c.name, countries.c.id, states.c.name)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).all()
        overview: List[StateOverviewRow] = []
        for (_, country), group in groupby(rows, key=lambda r: (r.id, r.name)):
            names = [r.state_name for r in group if r.state_name is not None]
            overview.append(StateOverviewRow(country=country, state_count=len(names), states=names))
        return overview
