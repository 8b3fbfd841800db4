# Persistence layer for scraped records
"""
Ingestion Engine.

Persists a batch of records into one table, classifying every record as
success, duplicate, skipped or error. Each record is inserted in its own
transaction, so a failing record is rolled back without touching the ones
already committed, and processing continues with the next record.

Connection-level failures are not record outcomes: they abort the batch and
propagate to the caller once the connection has been released.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import psycopg2
import psycopg2.errors
from pydantic import BaseModel

from ayto_scraper.ingestion.errors import StoreError
from ayto_scraper.ingestion.outcomes import IngestionSummary, OutcomeStatus
from ayto_scraper.ingestion.store import PostgresStore
from ayto_scraper.ingestion.tables import TableSpec

logger = logging.getLogger(__name__)


def missing_fields(record: BaseModel, required: Sequence[str]) -> list[str]:
    """Return the required fields that are None or blank on a record."""
    missing = []
    for name in required:
        value = getattr(record, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


class RecordWriter:
    """
    Handles persisting scraped records to one PostgreSQL table.

    The writer owns exactly one connection for the duration of a batch.
    """

    def __init__(self, store: PostgresStore, table: TableSpec) -> None:
        self.store = store
        self.table = table

    def persist_batch(self, records: Sequence[BaseModel]) -> IngestionSummary:
        """
        Persist records in input order.

        Returns:
            IngestionSummary with one outcome per record

        Raises:
            StoreError: If the connection is lost mid-batch
        """
        summary = IngestionSummary(table=self.table.name)
        insert_sql = self.table.insert_sql()

        with self.store.connection() as conn:
            for record in records:
                missing = missing_fields(record, self.table.required)
                if missing:
                    summary.add(
                        OutcomeStatus.SKIPPED,
                        record,
                        f"Missing required fields: {', '.join(missing)}",
                    )
                    continue

                params = tuple(getattr(record, col) for col in self.table.columns)
                try:
                    with conn.cursor() as cur:
                        cur.execute(insert_sql, params)
                    conn.commit()
                    summary.add(OutcomeStatus.SUCCESS, record)
                except psycopg2.errors.UniqueViolation:
                    conn.rollback()
                    summary.add(OutcomeStatus.DUPLICATE, record)
                except psycopg2.Error as e:
                    # OperationalError also covers statement-level failures
                    # (statement timeout, index row too large) on a live connection
                    if isinstance(e, psycopg2.InterfaceError) or conn.closed:
                        logger.error(
                            f"Lost connection while writing to {self.table.name} "
                            f"after {summary.total_processed} records: {e}"
                        )
                        raise StoreError(f"Connection lost during ingestion: {e}") from e
                    conn.rollback()
                    message = str(e).strip()
                    logger.error(
                        f"Failed to persist record '{getattr(record, 'title', None)}' "
                        f"into {self.table.name}: {message}"
                    )
                    summary.add(OutcomeStatus.ERROR, record, message)

        log_summary(summary)
        return summary


def log_summary(summary: IngestionSummary) -> None:
    """Write the per-run summary block to the log."""
    counts = summary.counts()
    logger.info(
        f"Ingestion into {summary.table} finished: "
        f"processed={summary.total_processed} saved={counts['saved']} "
        f"duplicates={counts['duplicates']} skipped={counts['skipped']} "
        f"errors={counts['errors']}"
    )
    if counts["duplicates"]:
        logger.warning(
            f"{counts['duplicates']} duplicate records in {summary.table} were not stored"
        )
    if counts["skipped"]:
        logger.warning(
            f"{counts['skipped']} incomplete records in {summary.table} were not stored"
        )
    for outcome in summary.errors:
        logger.error(
            f"  - title={getattr(outcome.record, 'title', None)!r} reason={outcome.message}"
        )
