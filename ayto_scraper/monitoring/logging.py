"""Console logging for scraper runs.

Every pipeline run logs through a context adapter, so each line can carry
the run's execution id, content type and current stage. Output is either
one JSON object per line or plain text.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER = "ayto_scraper"
CONTEXT_FIELDS = ("execution_id", "content_type", "stage")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields set on a record, in CONTEXT_FIELDS order."""
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None)
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(_record_context(record))
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """``<time> LEVEL logger [key=value ...] message``"""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record)} {record.levelname} {record.name}"
        context = _record_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        line += f" {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO", json_logs: bool = False) -> logging.Logger:
    """
    Route the package's log output to stdout.

    Safe to call repeatedly: the previous handler is replaced.

    Args:
        level: Level name; unknown names fall back to INFO
        json_logs: Emit JSON lines instead of text

    Returns:
        The package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_logs else TextFormatter())
    logger.addHandler(handler)
    return logger


class ContextAdapter(logging.LoggerAdapter):
    """LoggerAdapter whose context is merged with per-call ``extra``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def with_context(logger: logging.Logger, **context: Any) -> ContextAdapter:
    """Bind run context (execution_id, content_type, stage) to a logger."""
    bound = {k: v for k, v in context.items() if k in CONTEXT_FIELDS and v}
    return ContextAdapter(logger, bound)
