"""Events and agenda listings share the same row layout and table shape."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ayto_scraper.ingestion.base_pipeline import BasePipeline, register_pipeline
from ayto_scraper.schemas.records import ContentType, EventRecord


@register_pipeline(ContentType.EVENTS, ContentType.AGENDA)
class EventsPipeline(BasePipeline):
    """Scrape dated events; time and location come from the subtitle."""

    # Reference date for the year of scraped labels; None means today.
    today: Optional[date] = None

    def parse(self, html: str, page_url: str) -> list[EventRecord]:
        return self.parser.parse_events(html, page_url, today=self.today)
