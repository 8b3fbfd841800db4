"""Text normalization helpers for scraped listing fields."""

from .categorizer import CATEGORY_RULES, categorize_notice
from .dates import normalize_event_date

__all__ = ["CATEGORY_RULES", "categorize_notice", "normalize_event_date"]
