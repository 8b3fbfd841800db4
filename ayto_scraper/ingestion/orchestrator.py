"""
Pipeline Orchestrator.

Coordinates the per-content-type pipelines: builds them from the source
catalogue, runs single scrapes and full syncs, and serves stored records.
Every run gets its own fetcher and its own database connection.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any, Optional

from ayto_scraper.configs.config import SourceDefinition, load_source_definitions
from ayto_scraper.configs.settings import Settings, get_settings
from ayto_scraper.ingestion import pipelines  # noqa: F401  (registers pipelines)
from ayto_scraper.ingestion.adapters import (
    BaseSourceAdapter,
    HttpAdapterConfig,
    HttpSourceAdapter,
)
from ayto_scraper.ingestion.base_pipeline import (
    PIPELINE_REGISTRY,
    BasePipeline,
    PipelineExecutionResult,
)
from ayto_scraper.ingestion.store import PostgresStore
from ayto_scraper.ingestion.tables import table_for
from ayto_scraper.schemas.records import ContentType

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[], BaseSourceAdapter]

# Runs kept in memory; each holds every record it processed
HISTORY_LIMIT = 50


class PipelineOrchestrator:
    """
    Coordinates all content-type pipelines.

    Responsibilities:
    - Build a pipeline per content type from the source catalogue
    - Execute single scrapes and sequential full syncs
    - Track recent execution history
    - Read back stored records
    """

    def __init__(
        self,
        sources: dict[ContentType, SourceDefinition],
        store: PostgresStore,
        adapter_factory: AdapterFactory,
        history_limit: int = HISTORY_LIMIT,
    ):
        """
        Initialize the orchestrator.

        Args:
            sources: Source definitions keyed by content type
            store: Database the pipelines write to
            adapter_factory: Builds a fresh page fetcher for each run
            history_limit: Most recent runs kept in execution_history
        """
        self.sources = sources
        self.store = store
        self.adapter_factory = adapter_factory
        self.execution_history: deque[PipelineExecutionResult] = deque(
            maxlen=history_limit
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PipelineOrchestrator":
        """Wire the orchestrator from environment settings."""
        settings = settings or get_settings()
        adapter_config = HttpAdapterConfig(
            timeout_s=settings.REQUEST_TIMEOUT,
            user_agent=settings.USER_AGENT,
        )
        return cls(
            sources=load_source_definitions(settings=settings),
            store=PostgresStore.from_settings(settings),
            adapter_factory=lambda: HttpSourceAdapter(adapter_config),
        )

    # ========================================================================
    # PIPELINE MANAGEMENT
    # ========================================================================

    def _source(self, content_type: ContentType) -> SourceDefinition:
        source = self.sources.get(content_type)
        if source is None:
            raise KeyError(f"No source configured for '{content_type.value}'")
        return source

    def build_pipeline(
        self, content_type: ContentType, adapter: BaseSourceAdapter
    ) -> BasePipeline:
        """Instantiate the registered pipeline for a content type."""
        pipeline_cls = PIPELINE_REGISTRY.get(content_type)
        if pipeline_cls is None:
            raise KeyError(f"No pipeline registered for '{content_type.value}'")
        return pipeline_cls(self._source(content_type), adapter, self.store)

    def list_content_types(self) -> list[ContentType]:
        """Content types with both a source and a pipeline, in catalogue order."""
        return [ct for ct in self.sources if ct in PIPELINE_REGISTRY]

    # ========================================================================
    # EXECUTION
    # ========================================================================

    def scrape_and_save(self, content_type: ContentType) -> PipelineExecutionResult:
        """
        Scrape one listing page and persist its records.

        Args:
            content_type: Which listing to scrape

        Returns:
            PipelineExecutionResult of the run
        """
        with self.adapter_factory() as adapter:
            result = self.build_pipeline(content_type, adapter).execute()
        self.execution_history.append(result)
        return result

    def scrape_all_and_save(
        self, content_types: Optional[Iterable[ContentType]] = None
    ) -> dict[ContentType, PipelineExecutionResult]:
        """
        Run several pipelines one after another.

        A failing content type does not stop the others; its entry is a
        FAILED result.

        Args:
            content_types: Subset to run, defaults to every configured type

        Returns:
            Results keyed by content type, in execution order
        """
        results: dict[ContentType, PipelineExecutionResult] = {}
        for content_type in content_types or self.list_content_types():
            results[content_type] = self.scrape_and_save(content_type)

        failed = [ct.value for ct, r in results.items() if not r.succeeded]
        if failed:
            logger.warning(f"Full sync finished with failures in: {', '.join(failed)}")
        else:
            logger.info(f"Full sync finished: {len(results)} content types")
        return results

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_all(self, content_type: ContentType) -> list[dict[str, Any]]:
        """Return every stored record of a content type."""
        source = self._source(content_type)
        return self.store.fetch_all(
            table_for(content_type, source.table, source.validation)
        )

    def ensure_schema(self) -> None:
        """Create the tables of every configured content type."""
        self.store.ensure_schema(
            table_for(ct, s.table, s.validation) for ct, s in self.sources.items()
        )

    def get_execution_history(
        self, content_type: Optional[ContentType] = None, limit: int = 10
    ) -> list[PipelineExecutionResult]:
        """Most recent runs, oldest first, optionally for one content type."""
        results = list(self.execution_history)
        if content_type:
            results = [r for r in results if r.content_type == content_type]
        return results[-limit:]
