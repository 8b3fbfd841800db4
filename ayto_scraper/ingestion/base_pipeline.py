"""
Base Pipeline Architecture.

This module defines the abstract base class for the per-content-type
scraping pipelines. A pipeline takes one listing page through:

    fetching → parsing → (enriching) → (categorizing) → ingesting → reporting

Enriching and categorizing only apply to content types that override them.
A failure in any stage abandons the run: the result is marked FAILED and
carries no summary, so callers never see partial data.

Any new content type must:
1. Inherit from BasePipeline and implement parse()
2. Register itself with @register_pipeline(ContentType.X)
"""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from ayto_scraper.configs.config import SourceDefinition
from ayto_scraper.ingestion.adapters import BaseSourceAdapter
from ayto_scraper.ingestion.outcomes import IngestionSummary
from ayto_scraper.ingestion.parsers import ListingParser
from ayto_scraper.ingestion.persist import RecordWriter
from ayto_scraper.ingestion.store import PostgresStore
from ayto_scraper.ingestion.tables import TableSpec, table_for
from ayto_scraper.monitoring.logging import with_context
from ayto_scraper.schemas.records import ContentType


class PipelineStatus(str, Enum):
    """Status of a pipeline execution."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class PipelineStage(str, Enum):
    """Stages a pipeline run moves through."""

    FETCHING = "fetching"
    PARSING = "parsing"
    ENRICHING = "enriching"
    CATEGORIZING = "categorizing"
    INGESTING = "ingesting"
    REPORTING = "reporting"


@dataclass
class PipelineExecutionResult:
    """Result of a pipeline execution."""

    status: PipelineStatus
    content_type: ContentType
    execution_id: str
    started_at: datetime
    ended_at: datetime
    summary: Optional[IngestionSummary] = None
    failed_stage: Optional[PipelineStage] = None
    error: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        """Calculate execution duration."""
        return (self.ended_at - self.started_at).total_seconds()

    @property
    def succeeded(self) -> bool:
        return self.status == PipelineStatus.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses; failed runs expose no records."""
        payload: dict[str, Any] = {
            "content_type": self.content_type.value,
            "status": self.status.value,
            "execution_id": self.execution_id,
        }
        if self.summary is not None:
            payload.update(self.summary.to_dict())
        return payload


class BasePipeline(ABC):
    """
    Abstract base class for all content-type pipelines.

    Subclasses must:
    - Implement parse() for their listing layout
    - Optionally override enrich() and categorize()
    """

    enriches: bool = False
    categorizes: bool = False

    def __init__(
        self,
        source: SourceDefinition,
        adapter: BaseSourceAdapter,
        store: PostgresStore,
        parser: Optional[ListingParser] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            source: Listing URL, table and selectors for this content type
            adapter: Page fetcher
            store: Database the records are written to
            parser: Listing parser, built from the source selectors by default
        """
        self.source = source
        self.content_type: ContentType = source.content_type
        self.adapter = adapter
        self.store = store
        self.parser = parser or ListingParser(source.selectors)
        self.table: TableSpec = table_for(
            source.content_type, source.table, source.validation
        )
        self.logger = logging.getLogger(
            f"ayto_scraper.pipeline.{source.content_type.value}"
        )
        self.execution_id: Optional[str] = None

    # ========================================================================
    # STAGES
    # ========================================================================

    @abstractmethod
    def parse(self, html: str, page_url: str) -> list[BaseModel]:
        """
        Parse the listing page into typed records.

        Args:
            html: Listing page markup
            page_url: URL the markup came from

        Returns:
            One record per listing row
        """
        pass

    def enrich(self, records: list[BaseModel]) -> list[BaseModel]:
        """Attach detail-page data to records. No-op by default."""
        return records

    def categorize(self, records: list[BaseModel]) -> list[BaseModel]:
        """Assign taxonomy categories to records. No-op by default."""
        return records

    # ========================================================================
    # EXECUTION
    # ========================================================================

    def execute(self) -> PipelineExecutionResult:
        """
        Run the pipeline once over the configured listing page.

        Returns:
            PipelineExecutionResult; FAILED results carry the failing stage
            and error message but no summary
        """
        self.execution_id = self._generate_execution_id()
        started_at = datetime.now(timezone.utc)
        stage = PipelineStage.FETCHING
        log = with_context(
            self.logger,
            execution_id=self.execution_id,
            content_type=self.content_type.value,
        )
        log.info(f"Starting scrape of {self.source.url}")

        try:
            html = self.adapter.fetch_html(self.source.url)

            stage = PipelineStage.PARSING
            records = self.parse(html, self.source.url)
            log.info(f"Parsed {len(records)} records", extra={"stage": stage.value})

            if self.enriches:
                stage = PipelineStage.ENRICHING
                records = self.enrich(records)

            if self.categorizes:
                stage = PipelineStage.CATEGORIZING
                records = self.categorize(records)

            stage = PipelineStage.INGESTING
            summary = RecordWriter(self.store, self.table).persist_batch(records)

            stage = PipelineStage.REPORTING
            counts = summary.counts()
            log.info(
                f"Scrape completed: {summary.total_processed} processed, "
                f"{counts['saved']} saved, {counts['duplicates']} duplicates, "
                f"{counts['skipped']} skipped, {counts['errors']} errors",
                extra={"stage": stage.value},
            )
            return PipelineExecutionResult(
                status=PipelineStatus.SUCCESS,
                content_type=self.content_type,
                execution_id=self.execution_id,
                started_at=started_at,
                ended_at=datetime.now(timezone.utc),
                summary=summary,
            )

        except Exception as e:
            log.error(
                f"Pipeline failed during {stage.value}: {e}",
                exc_info=True,
                extra={"stage": stage.value},
            )
            return PipelineExecutionResult(
                status=PipelineStatus.FAILED,
                content_type=self.content_type,
                execution_id=self.execution_id,
                started_at=started_at,
                ended_at=datetime.now(timezone.utc),
                failed_stage=stage,
                error=str(e),
            )

    def _generate_execution_id(self) -> str:
        """Generate unique execution identifier."""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        unique_id = str(uuid.uuid4())[:8]
        return f"{self.content_type.value}_{timestamp}_{unique_id}"


# Pipeline registry - maps content types to pipeline classes
PIPELINE_REGISTRY: dict[ContentType, type[BasePipeline]] = {}


def register_pipeline(*content_types: ContentType) -> Callable:
    """
    Decorate a pipeline class to register it for one or more content types.

    Usage:
        @register_pipeline(ContentType.NEWS)
        class NewsPipeline(BasePipeline):
            ...
    """

    def decorator(cls: type[BasePipeline]) -> type[BasePipeline]:
        for content_type in content_types:
            PIPELINE_REGISTRY[content_type] = cls
        return cls

    return decorator
