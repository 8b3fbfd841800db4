"""
Base Source Adapter.

Interface every page fetcher implements. Pipelines only ever call
fetch_html(), so tests can serve fixture markup instead of the live site.
"""

import logging
from abc import ABC, abstractmethod


class BaseSourceAdapter(ABC):
    """
    Fetches listing and detail pages by URL.

    Adapters are used as context managers; one adapter serves one pipeline
    run and is closed when the run ends.
    """

    def __init__(self, name: str = "base"):
        self.name = name
        self.logger = logging.getLogger(f"ayto_scraper.adapter.{name}")

    @abstractmethod
    def fetch_html(self, url: str) -> str:
        """
        Return the markup served at ``url``.

        Raises:
            TransportError: If the page cannot be retrieved
        """

    def close(self) -> None:
        """Release held connections; nothing to do by default."""

    def __enter__(self) -> "BaseSourceAdapter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
