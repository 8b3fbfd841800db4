"""Requests-based page fetcher.

Features:
- session reuse + connection pooling
- per-request timeout
- no retries: a failed fetch surfaces as TransportError
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import requests

from ayto_scraper.ingestion.errors import TransportError

from .base_adapter import BaseSourceAdapter


@dataclass
class HttpAdapterConfig:
    """Configuration options for the HTTP adapter."""

    timeout_s: float = 30.0
    verify_ssl: bool = True
    user_agent: str | None = None

    # pool
    pool_connections: int = 4
    pool_maxsize: int = 4


class HttpSourceAdapter(BaseSourceAdapter):
    """Fetch pages over HTTP using the requests library."""

    def __init__(
        self,
        config: HttpAdapterConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(name="http")
        self.config = config or HttpAdapterConfig()
        self._session = session or requests.Session()

        adapter = requests.adapters.HTTPAdapter(
            pool_connections=self.config.pool_connections,
            pool_maxsize=self.config.pool_maxsize,
        )
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        if self.config.user_agent:
            self._session.headers["User-Agent"] = self.config.user_agent

    def fetch_html(self, url: str) -> str:
        """Fetch a page and return its decoded body."""
        t0 = time.time()
        try:
            resp = self._session.get(
                url,
                timeout=self.config.timeout_s,
                verify=self.config.verify_ssl,
                allow_redirects=True,
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(url, str(e), status_code=status) from e
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        elapsed_ms = (time.time() - t0) * 1000
        self.logger.debug(
            f"GET {url} -> {resp.status_code} ({len(resp.content)} bytes, {elapsed_ms:.0f} ms)"
        )
        return resp.text

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()
