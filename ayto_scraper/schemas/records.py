# ayto_scraper/schemas/records.py
"""
Record Schemas.

Typed records produced by the listing parser and consumed by the ingestion
engine. Every field the source page may lack is optional: presence is
checked by the engine against the table's required fields, not here, so
that a malformed row becomes a ``skipped`` outcome instead of a parse error.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ayto_scraper.schemas.taxonomy import DEFAULT_CATEGORY


class ContentType(str, Enum):
    """Kinds of listing pages scraped from the municipal site."""

    EVENTS = "eventos"
    AGENDA = "agenda"
    NOTICES = "avisos"
    NEWS = "noticias"


class ValidationMode(str, Enum):
    """
    Pre-insert validation policy for event tables.

    STRICT requires every natural-key field; LENIENT only requires the title
    and lets the uniqueness constraint reject incomplete rows.
    """

    STRICT = "strict"
    LENIENT = "lenient"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class RawListingItem(_Record):
    """Fields extracted verbatim from one listing row."""

    raw_date_text: Optional[str] = None
    title: Optional[str] = None
    subtitle_text: Optional[str] = None
    detail_link: Optional[str] = None


class EventRecord(_Record):
    """An event from the events or agenda listing."""

    event_date: Optional[str] = None
    event_time: Optional[str] = None
    title: Optional[str] = None
    location: Optional[str] = None


class NoticeRecord(_Record):
    """A public notice ("aviso"), optionally enriched with its detail page."""

    title: Optional[str] = None
    subtitle: Optional[str] = None
    link: Optional[str] = None
    content: Optional[str] = None
    category: str = DEFAULT_CATEGORY


class NewsRecord(_Record):
    """A news article; the date is stored exactly as the site prints it."""

    title: Optional[str] = None
    raw_date: Optional[str] = None
    content: Optional[str] = None
    link: Optional[str] = None
