"""Run-level exceptions raised by the scraping pipeline."""

from __future__ import annotations

from typing import Optional


class ScraperError(Exception):
    """Base class for pipeline failures."""


class TransportError(ScraperError):
    """A page could not be fetched (network, DNS or HTTP status failure)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch {url}: {message}")
        self.url = url
        self.status_code = status_code


class EnrichmentError(ScraperError):
    """A notice detail page could not be fetched or read."""


class StoreError(ScraperError):
    """The database connection was lost or could not be opened."""
