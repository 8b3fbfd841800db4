"""
Unit tests for the ingestion engine.

Tests for RecordWriter outcome classification against the in-memory store
from conftest, which enforces natural keys like the real unique indexes.
"""

import psycopg2
import psycopg2.errors
import pytest

from ayto_scraper.ingestion.errors import StoreError
from ayto_scraper.ingestion.outcomes import OutcomeStatus
from ayto_scraper.ingestion.persist import RecordWriter, missing_fields
from ayto_scraper.ingestion.tables import event_table, news_table, notices_table
from ayto_scraper.schemas.records import (
    EventRecord,
    NewsRecord,
    NoticeRecord,
    ValidationMode,
)
from conftest import FakeStore

# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def agenda_table():
    return event_table("agenda_events", ValidationMode.STRICT)


@pytest.fixture
def events_table():
    return event_table("events", ValidationMode.LENIENT)


@pytest.fixture
def complete_event():
    return EventRecord(
        event_date="5 de marzo de 2025",
        event_time="19:30",
        title="Concierto de primavera",
        location="Auditorio Ciudad de León",
    )


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestMissingFields:
    def test_none_and_blank_are_missing(self):
        record = EventRecord(title="  ", location=None, event_date="x", event_time="y")
        assert missing_fields(record, ("title", "location", "event_date")) == [
            "title",
            "location",
        ]

    def test_nothing_missing(self, complete_event):
        assert missing_fields(complete_event, ("title", "location")) == []


class TestPersistBatch:
    """Tests for RecordWriter.persist_batch."""

    def test_identical_natural_keys(self, agenda_table, complete_event):
        """Two records with the same natural key: one saved, one duplicate."""
        store = FakeStore([agenda_table])
        summary = RecordWriter(store, agenda_table).persist_batch(
            [complete_event, complete_event]
        )

        assert [o.status for o in summary.outcomes] == [
            OutcomeStatus.SUCCESS,
            OutcomeStatus.DUPLICATE,
        ]
        assert len(store.rows["agenda_events"]) == 1
        assert store.connections[0].rollbacks == 1

    def test_skipped_record_never_reaches_store(self, agenda_table, complete_event):
        store = FakeStore([agenda_table])
        incomplete = complete_event.model_copy(update={"location": None})

        summary = RecordWriter(store, agenda_table).persist_batch([incomplete])

        assert summary.outcomes[0].status == OutcomeStatus.SKIPPED
        assert summary.outcomes[0].message == "Missing required fields: location"
        assert store.executed == []

    def test_strict_batch_counts(self, agenda_table, complete_event):
        """Duplicate plus missing location in a strict table."""
        store = FakeStore([agenda_table])
        batch = [
            complete_event,
            complete_event,
            complete_event.model_copy(update={"location": None}),
        ]

        summary = RecordWriter(store, agenda_table).persist_batch(batch)

        assert summary.total_processed == 3
        assert summary.counts() == {
            "saved": 1,
            "duplicates": 1,
            "skipped": 1,
            "errors": 0,
        }

    def test_lenient_table_lets_index_reject_incomplete_rows(self, events_table):
        """Only the title is checked; null key columns still collide."""
        store = FakeStore([events_table])
        batch = [
            EventRecord(title="Ruta guiada"),
            EventRecord(title="Ruta guiada"),
            EventRecord(event_time="10:00"),
        ]

        summary = RecordWriter(store, events_table).persist_batch(batch)

        assert [o.status for o in summary.outcomes] == [
            OutcomeStatus.SUCCESS,
            OutcomeStatus.DUPLICATE,
            OutcomeStatus.SKIPPED,
        ]

    def test_rerun_reports_duplicates(self, agenda_table, complete_event):
        """Ingestion is idempotent across runs."""
        store = FakeStore([agenda_table])
        writer = RecordWriter(store, agenda_table)

        writer.persist_batch([complete_event])
        second = writer.persist_batch([complete_event])

        assert second.counts()["duplicates"] == 1
        assert len(store.rows["agenda_events"]) == 1

    def test_database_error_continues_batch(self, agenda_table, complete_event):
        """A non-constraint database error is recorded and the batch goes on."""
        store = FakeStore(
            [agenda_table],
            fail_on={0: psycopg2.DataError("value too long for type character")},
        )
        other = complete_event.model_copy(update={"title": "Otro concierto"})

        summary = RecordWriter(store, agenda_table).persist_batch(
            [complete_event, other]
        )

        assert [o.status for o in summary.outcomes] == [
            OutcomeStatus.ERROR,
            OutcomeStatus.SUCCESS,
        ]
        assert summary.errors[0].message == "value too long for type character"
        assert store.connections[0].rollbacks == 1
        assert store.rows["agenda_events"] == [
            ("5 de marzo de 2025", "19:30", "Otro concierto", "Auditorio Ciudad de León")
        ]

    def test_connection_lost_mid_batch(self, agenda_table, complete_event):
        """A hard failure aborts the batch and still releases the connection."""
        store = FakeStore(
            [agenda_table],
            fail_on={1: psycopg2.OperationalError("server closed the connection")},
            disconnect_on={1},
        )
        batch = [
            complete_event,
            complete_event.model_copy(update={"title": "Segundo"}),
            complete_event.model_copy(update={"title": "Tercero"}),
        ]

        with pytest.raises(StoreError, match="server closed the connection"):
            RecordWriter(store, agenda_table).persist_batch(batch)

        assert len(store.connections) == 1
        assert store.connections[0].closed
        assert len(store.executed) == 2

    @pytest.mark.parametrize(
        "error",
        [
            psycopg2.errors.ProgramLimitExceeded(
                "index row size 3120 exceeds btree version 4 maximum 2704"
            ),
            psycopg2.errors.QueryCanceled(
                "canceling statement due to statement timeout"
            ),
        ],
    )
    def test_statement_failure_on_live_connection_is_record_error(
        self, agenda_table, complete_event, error
    ):
        """Operational errors on an open connection only fail their record."""
        store = FakeStore([agenda_table], fail_on={0: error})
        oversized = complete_event.model_copy(update={"title": "x" * 3000})

        summary = RecordWriter(store, agenda_table).persist_batch(
            [oversized, complete_event]
        )

        assert [o.status for o in summary.outcomes] == [
            OutcomeStatus.ERROR,
            OutcomeStatus.SUCCESS,
        ]
        assert summary.errors[0].message == str(error)
        assert store.connections[0].rollbacks == 1
        assert len(store.rows["agenda_events"]) == 1

    def test_interface_error_aborts_batch(self, agenda_table, complete_event):
        store = FakeStore(
            [agenda_table],
            fail_on={0: psycopg2.InterfaceError("connection already closed")},
        )

        with pytest.raises(StoreError, match="connection already closed"):
            RecordWriter(store, agenda_table).persist_batch(
                [complete_event, complete_event.model_copy(update={"title": "Otro"})]
            )

        assert len(store.executed) == 1
        assert store.connections[0].closed

    def test_one_connection_per_batch(self, agenda_table, complete_event):
        store = FakeStore([agenda_table])
        RecordWriter(store, agenda_table).persist_batch(
            [complete_event, complete_event.model_copy(update={"title": "Otro"})]
        )

        assert len(store.connections) == 1
        assert store.connections[0].closed
        assert store.connections[0].commits == 2

    def test_empty_batch(self, agenda_table):
        store = FakeStore([agenda_table])
        summary = RecordWriter(store, agenda_table).persist_batch([])
        assert summary.total_processed == 0
        assert store.connections[0].closed


class TestOtherTables:
    def test_notices_keyed_on_title_and_link(self):
        table = notices_table("avisos")
        store = FakeStore([table])
        batch = [
            NoticeRecord(title="Corte de agua", link=None),
            NoticeRecord(title="Corte de agua", link=None, subtitle="otro texto"),
            NoticeRecord(title="Corte de agua", link="https://example.org/a"),
        ]

        summary = RecordWriter(store, table).persist_batch(batch)

        assert summary.counts() == {
            "saved": 2,
            "duplicates": 1,
            "skipped": 0,
            "errors": 0,
        }

    def test_news_requires_date_and_link(self):
        table = news_table("news")
        store = FakeStore([table])
        batch = [
            NewsRecord(title="Campaña de reciclaje", raw_date="13/10/2025"),
            NewsRecord(
                title="Nueva biblioteca",
                raw_date="14/10/2025",
                link="https://example.org/n",
            ),
        ]

        summary = RecordWriter(store, table).persist_batch(batch)

        assert summary.outcomes[0].status == OutcomeStatus.SKIPPED
        assert summary.outcomes[0].message == "Missing required fields: link"
        assert summary.outcomes[1].status == OutcomeStatus.SUCCESS
