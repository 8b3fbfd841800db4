"""
Listing Page Parser.

BeautifulSoup-based parser for the municipal site's listing pages. Each
listing row carries a date label, a title and one or more subtitle nodes;
what the subtitle means depends on the content type:

- events/agenda: ``"19:30 horas Auditorio Ciudad de León"`` (time + place)
- notices: free text, with the row wrapped in (or containing) a link
- news: first subtitle is the publication date, last one the teaser text
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ayto_scraper.configs.config import SelectorConfig
from ayto_scraper.normalization.dates import normalize_event_date
from ayto_scraper.schemas.records import (
    EventRecord,
    NewsRecord,
    NoticeRecord,
    RawListingItem,
)

logger = logging.getLogger(__name__)

LEADING_TIME_RE = re.compile(r"^(\d{1,2}:\d{2})")
LEADING_HOURS_RE = re.compile(r"^\s*horas\s*", re.IGNORECASE)
WHITESPACE_RE = re.compile(r"\s+")


def _clean(text: Optional[str]) -> Optional[str]:
    """Strip text and map empty strings to None."""
    if text is None:
        return None
    text = text.strip()
    return text or None


def _collapse(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text.replace("\n", " ")).strip()


def split_time_and_location(
    subtitle: Optional[str],
) -> tuple[Optional[str], Optional[str]]:
    """
    Split an event subtitle into ``(event_time, location)``.

    A leading ``H:MM``/``HH:MM`` is taken as the time and removed; the rest,
    minus a leading "horas" and with whitespace collapsed, is the location.
    Without a leading time the whole subtitle is the location.

    Args:
        subtitle: Stripped subtitle text or None

    Returns:
        Tuple of (event_time, location), either of which may be None
    """
    subtitle = _clean(subtitle)
    if subtitle is None:
        return None, None

    event_time = None
    remainder = subtitle
    match = LEADING_TIME_RE.match(subtitle)
    if match:
        event_time = match.group(1)
        remainder = subtitle[match.end():]

    location = _collapse(LEADING_HOURS_RE.sub("", remainder, count=1))
    return event_time, location or None


def extract_detail_content(html: str, selector: str) -> Optional[str]:
    """
    Extract the main text of a detail page.

    Args:
        html: Detail page markup
        selector: CSS selector of the content node

    Returns:
        Collapsed text of the first matching node, or None
    """
    if not html:
        return None
    soup = BeautifulSoup(html, "lxml")
    node = soup.select_one(selector)
    if node is None:
        return None
    return _clean(_collapse(node.get_text(" ")))


class ListingParser:
    """
    Parser for one listing page.

    Extracts one record per row; fields missing from a row stay None so the
    ingestion engine can decide whether the record is usable.
    """

    def __init__(self, selectors: Optional[SelectorConfig] = None):
        self.selectors = selectors or SelectorConfig()

    # ------------------------------------------------------------------
    # Row extraction
    # ------------------------------------------------------------------

    def _rows(self, html: str) -> list[Tag]:
        soup = BeautifulSoup(html or "", "lxml")
        return soup.select(self.selectors.row)

    def _text(self, row: Tag, selector: str) -> Optional[str]:
        node = row.select_one(selector)
        return _clean(node.get_text()) if node is not None else None

    def _link(self, row: Tag, page_url: str) -> Optional[str]:
        """Resolve the row's link: enclosing anchor first, then a nested one."""
        anchor = row.find_parent("a", href=True) or row.select_one("a[href]")
        if anchor is None:
            return None
        href = _clean(anchor.get("href"))
        return urljoin(page_url, href) if href else None

    def parse_items(self, html: str, page_url: str) -> list[RawListingItem]:
        """
        Extract the raw fields of every listing row.

        Args:
            html: Listing page markup
            page_url: URL the markup was fetched from, for link resolution

        Returns:
            One RawListingItem per row, in document order
        """
        items = [
            RawListingItem(
                raw_date_text=self._text(row, self.selectors.date),
                title=self._text(row, self.selectors.title),
                subtitle_text=self._text(row, self.selectors.subtitle),
                detail_link=self._link(row, page_url),
            )
            for row in self._rows(html)
        ]
        logger.debug(f"Parsed {len(items)} listing rows from {page_url}")
        return items

    # ------------------------------------------------------------------
    # Content-type specific records
    # ------------------------------------------------------------------

    def parse_events(
        self, html: str, page_url: str, today: Optional[date] = None
    ) -> list[EventRecord]:
        """Parse an events or agenda listing."""
        events = []
        for item in self.parse_items(html, page_url):
            event_time, location = split_time_and_location(item.subtitle_text)
            events.append(
                EventRecord(
                    event_date=normalize_event_date(item.raw_date_text, today=today),
                    event_time=event_time,
                    title=item.title,
                    location=location,
                )
            )
        return events

    def parse_notices(self, html: str, page_url: str) -> list[NoticeRecord]:
        """Parse a notices listing; content and category are filled in later."""
        return [
            NoticeRecord(
                title=item.title,
                subtitle=item.subtitle_text,
                link=item.detail_link,
            )
            for item in self.parse_items(html, page_url)
        ]

    def parse_news(self, html: str, page_url: str) -> list[NewsRecord]:
        """
        Parse a news listing.

        The first subtitle node holds the date as printed; the last one the
        teaser text. A row with a single subtitle node has no content.
        """
        news = []
        for row in self._rows(html):
            subtitles = row.select(self.selectors.subtitle)
            raw_date = _clean(subtitles[0].get_text()) if subtitles else None
            content = (
                _clean(_collapse(subtitles[-1].get_text()))
                if len(subtitles) > 1
                else None
            )
            news.append(
                NewsRecord(
                    title=self._text(row, self.selectors.title),
                    raw_date=raw_date,
                    content=content,
                    link=self._link(row, page_url),
                )
            )
        return news
