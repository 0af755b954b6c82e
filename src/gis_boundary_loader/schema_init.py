"""
Utilities to bootstrap the PostGIS schema for the boundary loader.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import psycopg

from .logging_utils import get_logger

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("schema.sql")
SENTINEL_TABLE = "gis.countries"

LOGGER = get_logger(__name__)


def schema_exists(dsn: str, table: str = SENTINEL_TABLE) -> bool:
    """Return True if the sentinel table already exists."""
    with psycopg.connect(dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT to_regclass(%s)", (table,))
            return cur.fetchone()[0] is not None


def apply_schema(dsn: str, sql_path: Optional[Path] = None, force: bool = False) -> bool:
    """
    Execute the schema SQL file against the given database.

    The DDL is idempotent, so ``force`` re-runs it even when the tables exist.
    Returns True if the schema was applied, False if it already existed.
    """
    path = sql_path or DEFAULT_SCHEMA_PATH
    ddl = path.read_text(encoding="utf-8")

    if not force and schema_exists(dsn):
        LOGGER.info("Schema already present (%s exists), skipping DDL", SENTINEL_TABLE)
        return False

    with psycopg.connect(dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            cur.execute(ddl)

    LOGGER.info("Applied schema from %s", path.name)
    return True
