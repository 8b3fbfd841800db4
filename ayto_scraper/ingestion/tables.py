"""
Record Tables.

Column layout, required fields and DDL for the record tables. Each table
has an expression unique index over its natural key; nullable key columns
are wrapped in COALESCE so that a missing value still collides.
"""

from __future__ import annotations

from dataclasses import dataclass

from ayto_scraper.schemas.records import ContentType, ValidationMode


@dataclass(frozen=True)
class TableSpec:
    """How a record type is stored."""

    name: str
    columns: tuple[str, ...]
    required: tuple[str, ...]
    natural_key: tuple[str, ...]
    ddl: str

    def insert_sql(self) -> str:
        placeholders = ", ".join(["%s"] * len(self.columns))
        return (
            f"INSERT INTO {self.name} ({', '.join(self.columns)}) "
            f"VALUES ({placeholders})"
        )

    def select_all_sql(self) -> str:
        return f"SELECT * FROM {self.name} ORDER BY id"


# ----------------------------------------------------------------------
# Events / agenda
# ----------------------------------------------------------------------

EVENT_COLUMNS = ("event_date", "event_time", "title", "location")


def event_table(name: str, mode: ValidationMode) -> TableSpec:
    """Layout of an events-shaped table under the given validation mode."""
    required = EVENT_COLUMNS if mode == ValidationMode.STRICT else ("title",)
    ddl = f"""
        CREATE TABLE IF NOT EXISTS {name} (
            id SERIAL PRIMARY KEY,
            event_date TEXT,
            event_time TEXT,
            title TEXT NOT NULL,
            location TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        CREATE UNIQUE INDEX IF NOT EXISTS {name}_natural_key
            ON {name} (
                (COALESCE(event_date, '')), (COALESCE(event_time, '')),
                title, (COALESCE(location, ''))
            );
        """
    return TableSpec(
        name=name,
        columns=EVENT_COLUMNS,
        required=required,
        natural_key=EVENT_COLUMNS,
        ddl=ddl,
    )


# ----------------------------------------------------------------------
# Notices
# ----------------------------------------------------------------------


def notices_table(name: str) -> TableSpec:
    """Layout of the notices table; the natural key is title + link."""
    ddl = f"""
        CREATE TABLE IF NOT EXISTS {name} (
            id SERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            subtitle TEXT,
            link TEXT,
            content TEXT,
            category TEXT NOT NULL DEFAULT 'Sin categoría',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        CREATE UNIQUE INDEX IF NOT EXISTS {name}_natural_key
            ON {name} (title, (COALESCE(link, '')));
        """
    return TableSpec(
        name=name,
        columns=("title", "subtitle", "link", "content", "category"),
        required=("title",),
        natural_key=("title", "link"),
        ddl=ddl,
    )


# ----------------------------------------------------------------------
# News
# ----------------------------------------------------------------------


def news_table(name: str) -> TableSpec:
    """Layout of the news table; every key column is mandatory."""
    ddl = f"""
        CREATE TABLE IF NOT EXISTS {name} (
            id SERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            raw_date TEXT NOT NULL,
            content TEXT,
            link TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
        CREATE UNIQUE INDEX IF NOT EXISTS {name}_natural_key
            ON {name} (title, raw_date, link);
        """
    return TableSpec(
        name=name,
        columns=("title", "raw_date", "content", "link"),
        required=("title", "raw_date", "link"),
        natural_key=("title", "raw_date", "link"),
        ddl=ddl,
    )


def table_for(
    content_type: ContentType, table_name: str, mode: ValidationMode
) -> TableSpec:
    """
    Resolve the table layout for a content type.

    Args:
        content_type: Kind of records stored
        table_name: Table name from the source catalogue
        mode: Validation mode, only meaningful for event tables

    Returns:
        TableSpec for the content type
    """
    if content_type in (ContentType.EVENTS, ContentType.AGENDA):
        return event_table(table_name, mode)
    if content_type == ContentType.NOTICES:
        return notices_table(table_name)
    return news_table(table_name)
