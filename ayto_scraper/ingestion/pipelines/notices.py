"""
Notices Pipeline.

Notices are the only content type with a second pass: every notice that
links to a detail page gets that page's text as its content, then the title
is categorized. Detail fetches run one at a time, and a failing one only
costs that notice its content.
"""

from __future__ import annotations

from typing import Optional

from ayto_scraper.ingestion.base_pipeline import BasePipeline, register_pipeline
from ayto_scraper.ingestion.errors import EnrichmentError, TransportError
from ayto_scraper.ingestion.parsers import extract_detail_content
from ayto_scraper.normalization.categorizer import categorize_notice
from ayto_scraper.schemas.records import ContentType, NoticeRecord


@register_pipeline(ContentType.NOTICES)
class NoticesPipeline(BasePipeline):
    """Scrape notices, fetch their detail pages and categorize them."""

    enriches = True
    categorizes = True

    def parse(self, html: str, page_url: str) -> list[NoticeRecord]:
        return self.parser.parse_notices(html, page_url)

    def fetch_detail_content(self, link: str) -> Optional[str]:
        """
        Fetch a notice detail page and extract its text.

        Raises:
            EnrichmentError: If the page cannot be fetched
        """
        try:
            html = self.adapter.fetch_html(link)
        except TransportError as e:
            raise EnrichmentError(str(e)) from e
        return extract_detail_content(html, self.source.selectors.content)

    def enrich(self, records: list[NoticeRecord]) -> list[NoticeRecord]:
        enriched = []
        for notice in records:
            content = None
            if notice.link:
                try:
                    content = self.fetch_detail_content(notice.link)
                except EnrichmentError as e:
                    self.logger.warning(
                        f"Could not fetch content for notice '{notice.title}': {e}"
                    )
            enriched.append(notice.model_copy(update={"content": content}))
        return enriched

    def categorize(self, records: list[NoticeRecord]) -> list[NoticeRecord]:
        return [
            notice.model_copy(update={"category": categorize_notice(notice.title)})
            for notice in records
        ]
