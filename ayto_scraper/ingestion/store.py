"""
PostgreSQL Store.

Opens one connection per unit of work and guarantees it is closed on every
exit path. Connections are never shared between runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

import psycopg2
import psycopg2.extras

from ayto_scraper.configs.settings import Settings, get_settings
from ayto_scraper.ingestion.errors import StoreError
from ayto_scraper.ingestion.tables import TableSpec

logger = logging.getLogger(__name__)


class PostgresStore:
    """Connection factory plus the read/DDL queries used by the API."""

    def __init__(self, conn_params: dict[str, Any]):
        """Initialize with psycopg2 connection parameters."""
        self.conn_params = conn_params

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PostgresStore":
        """Build a store from DATABASE_URL."""
        settings = settings or get_settings()
        return cls(settings.get_psycopg2_params())

    def connect(self):
        """
        Open a new connection.

        Raises:
            StoreError: If the database is unreachable
        """
        try:
            return psycopg2.connect(**self.conn_params)
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to connect to the database: {e}")
            raise StoreError(f"Database connection failed: {e}") from e

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Yield a connection that is closed when the block exits."""
        conn = self.connect()
        try:
            yield conn
        finally:
            conn.close()

    def fetch_all(self, table: TableSpec) -> list[dict[str, Any]]:
        """Return every row of a table in insertion order."""
        with self.connection() as conn:
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                cur.execute(table.select_all_sql())
                return [dict(row) for row in cur.fetchall()]

    def ensure_schema(self, tables: Iterable[TableSpec]) -> None:
        """Create the record tables and their natural-key indexes."""
        with self.connection() as conn:
            with conn.cursor() as cur:
                for table in tables:
                    cur.execute(table.ddl)
                    logger.info(f"Ensured table {table.name}")
            conn.commit()
