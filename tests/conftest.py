"""
Shared pytest fixtures for the ayto-scraper test suite.

Provides fixture markup loaders, a scripted page fetcher and an in-memory
stand-in for a psycopg2 connection that enforces natural-key uniqueness.
"""

from pathlib import Path
from typing import Dict, Optional

import psycopg2.errors
import pytest

from ayto_scraper.configs.config import SelectorConfig, SourceDefinition
from ayto_scraper.ingestion.adapters import BaseSourceAdapter
from ayto_scraper.ingestion.errors import TransportError
from ayto_scraper.ingestion.store import PostgresStore
from ayto_scraper.ingestion.tables import TableSpec, table_for
from ayto_scraper.schemas.records import ContentType, ValidationMode

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "https://www.aytoleon.es"
EVENTS_URL = f"{BASE_URL}/es/actualidad/eventos/Paginas/default.aspx"
AGENDA_URL = f"{BASE_URL}/es/actualidad/agenda/Paginas/default.aspx"
AVISOS_URL = f"{BASE_URL}/es/actualidad/avisos/Paginas/default.aspx"
NOTICIAS_URL = f"{BASE_URL}/es/actualidad/noticias/Paginas/default.aspx"


def load_fixture(name: str) -> str:
    """Read an HTML fixture from tests/fixtures."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


# =============================================================================
# FAKE DATABASE
# =============================================================================


class FakeCursor:
    """Cursor executing INSERTs against a FakeConnection."""

    def __init__(self, conn: "FakeConnection"):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def execute(self, sql, params=None):
        store = self.conn.store
        call_index = len(store.executed)
        store.executed.append((sql, params))

        if call_index in store.disconnect_on:
            self.conn.closed = 2
        if call_index in store.fail_on:
            raise store.fail_on[call_index]

        table = store.tables[sql.split()[2]]
        key = store.natural_key(table, params)
        if key in self.conn.keys(table):
            raise psycopg2.errors.UniqueViolation(
                "duplicate key value violates unique constraint"
            )
        self.conn.pending.append((table.name, tuple(params)))


class FakeConnection:
    """
    Minimal psycopg2 connection double.

    Rows become visible to the uniqueness check once committed or while
    pending in the current transaction; rollback discards pending rows.
    """

    def __init__(self, store: "FakeStore"):
        self.store = store
        self.pending = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def keys(self, table: TableSpec):
        rows = self.store.rows.get(table.name, []) + [
            params for name, params in self.pending if name == table.name
        ]
        return {self.store.natural_key(table, row) for row in rows}

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        for name, params in self.pending:
            self.store.rows.setdefault(name, []).append(params)
        self.pending = []
        self.commits += 1

    def rollback(self):
        self.pending = []
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeStore(PostgresStore):
    """
    PostgresStore backed by in-memory tables.

    Committed rows survive across connections, so a second run over the
    same records sees them as duplicates. ``fail_on`` maps the index of an
    execute() call (counted across the store) to the exception it raises;
    indexes in ``disconnect_on`` also mark the connection as closed, the way
    psycopg2 does when the server goes away.
    """

    def __init__(
        self,
        tables,
        fail_on: Optional[Dict[int, Exception]] = None,
        disconnect_on: Optional[set] = None,
    ):
        super().__init__({})
        self.tables = {t.name: t for t in tables}
        self.fail_on = fail_on or {}
        self.disconnect_on = disconnect_on or set()
        self.rows: Dict[str, list] = {}
        self.executed = []
        self.connections = []

    @staticmethod
    def natural_key(table: TableSpec, params):
        return tuple(params[table.columns.index(c)] or "" for c in table.natural_key)

    def connect(self):
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn


# =============================================================================
# FAKE FETCHER
# =============================================================================


class FakeAdapter(BaseSourceAdapter):
    """Serves pages from a dict; unknown URLs fail like a 404."""

    def __init__(self, pages: Dict[str, str], failing: Optional[set] = None):
        super().__init__(name="fake")
        self.pages = pages
        self.failing = failing or set()
        self.requested = []
        self.closed = False

    def fetch_html(self, url: str) -> str:
        self.requested.append(url)
        if url in self.failing:
            raise TransportError(url, "connection reset")
        if url not in self.pages:
            raise TransportError(url, "404 Client Error: Not Found", status_code=404)
        return self.pages[url]

    def close(self) -> None:
        self.closed = True


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def events_html():
    return load_fixture("eventos.html")


@pytest.fixture
def avisos_html():
    return load_fixture("avisos.html")


@pytest.fixture
def aviso_detail_html():
    return load_fixture("aviso_detalle.html")


@pytest.fixture
def noticias_html():
    return load_fixture("noticias.html")


@pytest.fixture
def sources():
    """Source catalogue mirroring the packaged sources.yaml."""
    return {
        ContentType.EVENTS: SourceDefinition(
            content_type=ContentType.EVENTS,
            url=EVENTS_URL,
            table="events",
            validation=ValidationMode.LENIENT,
        ),
        ContentType.AGENDA: SourceDefinition(
            content_type=ContentType.AGENDA,
            url=AGENDA_URL,
            table="agenda_events",
            validation=ValidationMode.STRICT,
        ),
        ContentType.NOTICES: SourceDefinition(
            content_type=ContentType.NOTICES,
            url=AVISOS_URL,
            table="avisos",
            selectors=SelectorConfig(content=".ms-rtestate-field"),
        ),
        ContentType.NEWS: SourceDefinition(
            content_type=ContentType.NEWS,
            url=NOTICIAS_URL,
            table="news",
        ),
    }


@pytest.fixture
def source_tables(sources):
    """TableSpecs for every source in the catalogue."""
    return [table_for(ct, s.table, s.validation) for ct, s in sources.items()]


@pytest.fixture
def fake_store(source_tables):
    """Empty in-memory store knowing every catalogue table."""
    return FakeStore(source_tables)
