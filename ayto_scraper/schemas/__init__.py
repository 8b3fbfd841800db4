"""Record schemas shared by the parser, pipelines and ingestion engine."""

from .records import (
    ContentType,
    EventRecord,
    NewsRecord,
    NoticeRecord,
    RawListingItem,
    ValidationMode,
)
from .taxonomy import DEFAULT_CATEGORY, NoticeCategory

__all__ = [
    "ContentType",
    "ValidationMode",
    "RawListingItem",
    "EventRecord",
    "NoticeRecord",
    "NewsRecord",
    "NoticeCategory",
    "DEFAULT_CATEGORY",
]
