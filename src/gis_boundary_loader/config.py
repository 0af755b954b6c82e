"""Configuration loading for the GIS boundary loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .models import (DEFAULT_DB_CONNECT_TIMEOUT, DEFAULT_PROGRESS_EVERY,
                     DatabaseConfig)

SQLALCHEMY_DRIVER = "postgresql+psycopg"


def _int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def normalize_dsn(dsn: str) -> str:
    """Rewrite a libpq-style URL so SQLAlchemy picks the psycopg 3 driver."""
    for prefix in ("postgresql://", "postgres://"):
        if dsn.startswith(prefix):
            return f"{SQLALCHEMY_DRIVER}://{dsn[len(prefix):]}"
    return dsn


def libpq_dsn(url: str) -> str:
    """Inverse of :func:`normalize_dsn`, for code that talks to psycopg directly."""
    prefix = f"{SQLALCHEMY_DRIVER}://"
    if url.startswith(prefix):
        return f"postgresql://{url[len(prefix):]}"
    return url


@dataclass(frozen=True)
class Settings:
    db_dsn: str
    db_connect_timeout: float
    apply_schema: bool
    log_level: str
    progress_every: int

    @classmethod
    def from_env(cls, use_dotenv: bool = True) -> "Settings":
        if use_dotenv:
            load_dotenv()

        pg_dsn = os.getenv("PG_DSN")
        if not pg_dsn:
            # Compose from the individual POSTGRES_* vars when no full DSN is given.
            db = os.getenv("POSTGRES_DB", "gis")
            user = os.getenv("POSTGRES_USER", "postgres")
            password = os.getenv("POSTGRES_PASSWORD", "postgres")
            host = os.getenv("POSTGRES_HOST", "localhost")
            port = os.getenv("POSTGRES_PORT", "5432")
            pg_dsn = f"postgresql://{user}:{password}@{host}:{port}/{db}"

        return cls(
            db_dsn=normalize_dsn(pg_dsn),
            db_connect_timeout=_float(
                os.getenv("DATABASE_CONNECT_TIMEOUT"), DEFAULT_DB_CONNECT_TIMEOUT
            ),
            apply_schema=_bool(os.getenv("DATABASE_APPLY_SCHEMA")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            progress_every=max(1, _int(os.getenv("PROGRESS_EVERY"), DEFAULT_PROGRESS_EVERY)),
        )

    @property
    def database(self) -> DatabaseConfig:
        return DatabaseConfig(
            url=self.db_dsn,
            connect_timeout=self.db_connect_timeout,
            apply_schema=self.apply_schema,
        )
