"""News listing pipeline."""

from __future__ import annotations

from ayto_scraper.ingestion.base_pipeline import BasePipeline, register_pipeline
from ayto_scraper.schemas.records import ContentType, NewsRecord


@register_pipeline(ContentType.NEWS)
class NewsPipeline(BasePipeline):
    """Scrape news articles; dates are stored as printed."""

    def parse(self, html: str, page_url: str) -> list[NewsRecord]:
        return self.parser.parse_news(html, page_url)
