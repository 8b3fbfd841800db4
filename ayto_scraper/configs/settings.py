"""Environment-driven settings for the scraper, API and CLI."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import make_url

PACKAGE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """
    Scraper settings read from the environment or a local .env file.

    Only DATABASE_URL is mandatory; everything else has a working default
    for the city council site.
    """

    # Postgres, SQLAlchemy URL form
    DATABASE_URL: str = Field(..., min_length=1)

    # Site being scraped; substituted into sources.yaml as ${BASE_URL}
    BASE_URL: str = "https://www.aytoleon.es"
    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)
    USER_AGENT: str = "ayto-scraper/1.0"

    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    SOURCES_CONFIG_PATH: Path = PACKAGE_DIR / "configs" / "sources.yaml"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def get_psycopg2_params(self) -> dict:
        """
        Split DATABASE_URL into keyword arguments for psycopg2.connect.

        Driver suffixes such as ``postgresql+psycopg2`` are accepted and
        percent-encoded credentials are decoded.

        Returns
        -------
        dict
            host, port, dbname, user and password.
        """
        url = make_url(self.DATABASE_URL)
        return {
            "host": url.host,
            "port": url.port,
            "dbname": url.database,
            "user": url.username,
            "password": url.password,
        }


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
