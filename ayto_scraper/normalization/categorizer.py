"""
Notice Categorizer.

Maps a notice title to the fixed taxonomy using an ordered rule table.
Rules are evaluated top to bottom and the first match wins; adding a
category means appending a rule.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Optional

from ayto_scraper.schemas.taxonomy import DEFAULT_CATEGORY, NoticeCategory

TitlePredicate = Callable[[str], bool]


def contains_any(*keywords: str) -> TitlePredicate:
    """Build a predicate matching titles that contain any of the keywords."""

    def predicate(title: str) -> bool:
        return any(keyword in title for keyword in keywords)

    return predicate


CATEGORY_RULES: list[tuple[TitlePredicate, NoticeCategory]] = [
    (contains_any("tráfico", "circulación"), NoticeCategory.TRAFFIC),
    (contains_any("agua"), NoticeCategory.SUPPLIES),
    (contains_any("infraestructura"), NoticeCategory.INFRASTRUCTURE),
]


def categorize_notice(
    title: Optional[str],
    rules: Optional[list[tuple[TitlePredicate, NoticeCategory]]] = None,
) -> str:
    """
    Return the category for a notice title.

    Args:
        title: Notice title; None falls through to the default category
        rules: Rule table to evaluate, defaults to CATEGORY_RULES

    Returns:
        Category label, ``"Sin categoría"`` when no rule matches
    """
    if not title:
        return DEFAULT_CATEGORY

    lowered = title.lower()
    for predicate, category in rules if rules is not None else CATEGORY_RULES:
        if predicate(lowered):
            return category.value
    return DEFAULT_CATEGORY
