"""Application entry point for searchgate."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from art import tprint

import settings
from adapters.migrations import build_registry
from adapters.searchee_loader import load_searchees
from adapters.sqlite_storage import SQLiteStorage
from core.admission import AdmissionPipeline
from core.diagnostics import LoggingDiagnostics
from logging_config import SecretMaskingFormatter, configure_logging

NAME = "SEARCHGATE"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _open_storage(formatter: Optional[SecretMaskingFormatter]) -> SQLiteStorage:
    """Open the history store and bring its schema up to date.

    Stored indexer API keys are registered with the log formatter as soon
    as the indexer table is guaranteed to exist.
    """

    storage = SQLiteStorage(settings.DB_PATH)
    applied = storage.migrate(build_registry())
    if formatter is not None:
        formatter.add_secrets(storage.list_indexer_apikeys())
    if applied:
        LOGGER.info("Applied %s migration(s): %s", len(applied), ", ".join(applied))
    return storage


def _migrate(formatter: Optional[SecretMaskingFormatter]) -> None:
    storage = _open_storage(formatter)
    print(f"Schema at {storage.applied_migrations()[-1]}")


def _list_migrations() -> None:
    storage = SQLiteStorage(settings.DB_PATH)
    applied = set(storage.applied_migrations())
    for index, migration in enumerate(build_registry().list_migrations(), start=1):
        state = "applied" if migration.name in applied else "pending"
        print(f"{index}. {migration.name} | {state}")


def _prefilter(path: str, formatter: Optional[SecretMaskingFormatter]) -> None:
    storage = _open_storage(formatter)
    searchees = load_searchees(path)
    LOGGER.info("Loaded %s searchees from %s", len(searchees), path)

    pipeline = AdmissionPipeline(
        config=settings.PREFILTER,
        indexers=storage,
        store=storage,
        diagnostics=LoggingDiagnostics(),
    )
    admitted = asyncio.run(pipeline.admit(searchees))
    for searchee in admitted:
        print(searchee.name)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="searchgate")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("migrate", help="Apply pending schema migrations")
    subparsers.add_parser("migrations", help="List migrations and whether they are applied")
    prefilter_parser = subparsers.add_parser(
        "prefilter",
        help="Print the searchees from a JSON snapshot that are eligible for searching",
    )
    prefilter_parser.add_argument("path", help="JSON list of searchees")

    args = parser.parse_args(argv)
    _print_banner()
    formatter = configure_logging(settings.LOGGING, settings.PROJECT_ROOT)

    try:
        if args.command == "migrations":
            _list_migrations()
        elif args.command == "prefilter":
            _prefilter(args.path, formatter)
        else:
            _migrate(formatter)
    except Exception:
        LOGGER.exception("searchgate %s failed", args.command or "migrate")
        raise


if __name__ == "__main__":
    main()
