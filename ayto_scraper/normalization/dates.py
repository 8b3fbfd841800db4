"""
Date Normalizer.

Turns the abbreviated Spanish date labels printed on listing rows
("05 MAR", "12 dic.") into the long form stored in the database
("5 de marzo de 2025").

The labels carry no year, so the year of the reference date is used. An
event scraped in December for a January date is therefore dated in the
wrong year; this is a known limitation of the source markup.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

DATE_LABEL_RE = re.compile(r"^(\d{1,2})\s+([a-záéíóú]{3})\.?$", re.IGNORECASE)

MONTH_ABBREVIATIONS: dict[str, int] = {
    "ene": 1,
    "feb": 2,
    "mar": 3,
    "abr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "ago": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dic": 12,
}

MONTH_NAMES: tuple[str, ...] = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)


def format_long_date(value: date) -> str:
    """Render a date as ``D de <mes> de YYYY``."""
    return f"{value.day} de {MONTH_NAMES[value.month - 1]} de {value.year}"


def normalize_event_date(
    raw_date: Optional[str], today: Optional[date] = None
) -> Optional[str]:
    """
    Normalize a listing date label.

    Args:
        raw_date: Label text, e.g. ``"05 MAR"``; may contain line breaks
        today: Reference date supplying the year, defaults to ``date.today()``

    Returns:
        Long-form date string, or None when the label is empty, does not
        match ``<day> <month>``, names an unknown month or an impossible day
    """
    if not raw_date:
        return None

    cleaned = raw_date.replace("\r", "").replace("\n", "").strip()
    match = DATE_LABEL_RE.match(cleaned)
    if not match:
        return None

    month = MONTH_ABBREVIATIONS.get(match.group(2).lower())
    if month is None:
        return None

    year = (today or date.today()).year
    try:
        parsed = date(year, month, int(match.group(1)))
    except ValueError:
        return None
    return format_long_date(parsed)
