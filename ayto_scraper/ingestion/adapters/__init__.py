"""
Source Adapters.

Adapters hide how listing and detail pages are retrieved so the parsing
heuristics can run against fixture markup in tests.

Usage:
    from ayto_scraper.ingestion.adapters import HttpSourceAdapter

    with HttpSourceAdapter(HttpAdapterConfig(timeout_s=10)) as adapter:
        html = adapter.fetch_html(url)
"""

from .base_adapter import BaseSourceAdapter
from .http_adapter import HttpAdapterConfig, HttpSourceAdapter

__all__ = [
    "BaseSourceAdapter",
    "HttpAdapterConfig",
    "HttpSourceAdapter",
]
