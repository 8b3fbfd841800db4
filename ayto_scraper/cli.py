#!/usr/bin/env python3
"""Command-line interface for the municipal scraper.

Commands:
  - ayto-scraper scrape <type|all> : Scrape listing page(s) and store the records
  - ayto-scraper list <type>       : Print stored records as JSON
  - ayto-scraper init-db           : Create the record tables
  - ayto-scraper serve             : Run the HTTP API

Typical usage:
  ayto-scraper init-db
  ayto-scraper scrape avisos
  ayto-scraper scrape all --json-logs
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from ayto_scraper import __version__
from ayto_scraper.configs.settings import get_settings
from ayto_scraper.ingestion.orchestrator import PipelineOrchestrator
from ayto_scraper.monitoring.logging import setup_logging
from ayto_scraper.schemas.records import ContentType

logger = logging.getLogger("ayto_scraper.cli")

CONTENT_TYPE_CHOICES = [ct.value for ct in ContentType]


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ayto-scraper", description="Municipal website scraper")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    p.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = p.add_subparsers(dest="cmd")

    ps = sub.add_parser("scrape", help="Scrape and store records")
    ps.add_argument("content_type", choices=CONTENT_TYPE_CHOICES + ["all"])

    pl = sub.add_parser("list", help="Print stored records")
    pl.add_argument("content_type", choices=CONTENT_TYPE_CHOICES)

    sub.add_parser("init-db", help="Create tables and natural-key indexes")

    pv = sub.add_parser("serve", help="Run the HTTP API")
    pv.add_argument("--host", default="127.0.0.1")
    pv.add_argument("--port", type=int, default=3000)

    return p


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return 0
    if not args.cmd:
        parser.print_help()
        return 2

    settings = get_settings()
    setup_logging(args.log_level or settings.LOG_LEVEL, args.json_logs or settings.JSON_LOGS)

    if args.cmd == "serve":
        import uvicorn

        uvicorn.run("ayto_scraper.main:app", host=args.host, port=args.port)
        return 0

    orchestrator = PipelineOrchestrator.from_settings(settings)

    if args.cmd == "init-db":
        orchestrator.ensure_schema()
        return 0

    if args.cmd == "list":
        _print_json(orchestrator.get_all(ContentType(args.content_type)))
        return 0

    if args.content_type == "all":
        results = list(orchestrator.scrape_all_and_save().values())
    else:
        results = [orchestrator.scrape_and_save(ContentType(args.content_type))]

    _print_json(
        [
            r.to_dict() if r.succeeded else {**r.to_dict(), "error": r.error}
            for r in results
        ]
    )
    return 0 if all(r.succeeded for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
