"""Source catalogue loader: which listing page feeds which table."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ayto_scraper.configs.settings import Settings, get_settings
from ayto_scraper.schemas.records import ContentType, ValidationMode


class SelectorConfig(BaseModel):
    """CSS selectors describing the listing markup."""

    row: str = ".row.listitem-row"
    date: str = ".shortpoint-listitem-date"
    title: str = ".listitem-title"
    subtitle: str = ".listitem-subtitle"
    content: str = "body"


class SourceDefinition(BaseModel):
    """One listing page and the table its records land in."""

    content_type: ContentType
    url: str = Field(..., min_length=1)
    table: str = Field(..., min_length=1)
    validation: ValidationMode = ValidationMode.STRICT
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)


def _substitute_placeholders(content: str, settings: Settings) -> str:
    """Replace ``${KEY}`` placeholders with the matching settings value."""
    for key, value in settings.model_dump().items():
        placeholder = f"${{{key}}}"
        if placeholder in content:
            content = content.replace(placeholder, str(value).rstrip("/"))
    return content


def load_source_definitions(
    path: Path | None = None, settings: Settings | None = None
) -> dict[ContentType, SourceDefinition]:
    """
    Load the YAML source catalogue.

    Args:
        path: Catalogue file, defaults to ``Settings.SOURCES_CONFIG_PATH``
        settings: Settings used for placeholder substitution

    Returns:
        Source definitions keyed by content type, in file order

    Raises:
        FileNotFoundError: If the catalogue file does not exist
        ValueError: If the catalogue has no ``sources`` mapping
    """
    settings = settings or get_settings()
    path = path or settings.SOURCES_CONFIG_PATH
    if not path.exists():
        raise FileNotFoundError(f"Missing sources config at {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(_substitute_placeholders(f.read(), settings))

    sources = (data or {}).get("sources")
    if not isinstance(sources, dict) or not sources:
        raise ValueError(f"No sources declared in {path}")

    definitions: dict[ContentType, SourceDefinition] = {}
    for name, raw in sources.items():
        definition = SourceDefinition(content_type=name, **(raw or {}))
        definitions[definition.content_type] = definition
    return definitions
