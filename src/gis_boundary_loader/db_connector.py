from __future__ import annotations

import time
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine, create_engine
from sqlalchemy.exc import OperationalError

from .config import libpq_dsn
from .logging_utils import get_logger
from .models import DatabaseConfig
from .schema_init import apply_schema

LOGGER = get_logger("db")


class DatabaseSession:
    """Manage the SQLAlchemy engine used by the loaders."""

    def __init__(self, config: DatabaseConfig) -> None:
        self._config = config
        self._engine: Optional[Engine] = None

    def open(self) -> Engine:
        if self._engine is not None:
            return self._engine

        deadline = time.time() + self._config.connect_timeout
        attempts = 0
        while True:
            attempts += 1
            engine = create_engine(self._config.url, future=True)
            try:
                LOGGER.info("Creating SQLAlchemy engine (attempt %s)", attempts)
                with engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
                self._engine = engine
                LOGGER.info("Connected to database")
                break
            except OperationalError as exc:
                engine.dispose()
                if time.time() >= deadline:
                    raise RuntimeError("Database connection timed out") from exc
                LOGGER.warning("Database not ready yet (%s), retrying...", exc)
                time.sleep(min(2 * attempts, 10))

        if self._config.apply_schema:
            LOGGER.info("Applying database schema as requested by configuration")
            self.ensure_schema()
        return self._engine

    def ensure_schema(self, force: bool = False) -> bool:
        return apply_schema(libpq_dsn(self._config.url), force=force)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Engine not initialised; call open()")
        return self._engine

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None

    def __enter__(self) -> Engine:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
