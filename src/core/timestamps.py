"""Timestamp and rate-limit filter (core domain).

Uses the search history of one searchee, aggregated over every enabled
indexer, to skip items that were abandoned long ago or searched too recently.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable

from core.config import PrefilterConfig
from core.content import rejection_message
from core.diagnostics import VERBOSE, DiagnosticSink, Label
from core.durations import Enabled, format_duration
from core.models import Searchee
from core.ports import IndexerRegistryPort, TimestampStorePort

Clock = Callable[[], int]


def now_ms() -> int:
    return int(time.time() * 1000)


def human_readable(timestamp_ms: int) -> str:
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


async def filter_timestamps(
    searchee: Searchee,
    config: PrefilterConfig,
    indexers: IndexerRegistryPort,
    store: TimestampStorePort,
    diagnostics: DiagnosticSink,
    clock: Clock = now_ms,
) -> bool:
    """Return True when the searchee's history allows another search.

    Lookup and query failures are not handled here: without the enabled
    indexer set there is no safe answer, so the error goes to the caller.
    """

    enabled = await indexers.get_enabled_indexers()
    summary = await store.get_timestamp_summary(searchee.name, [indexer.id for indexer in enabled])
    now = clock()

    exclude_older = config.exclude_older
    first_searched = summary.first_searched_any
    if (
        isinstance(exclude_older, Enabled)
        and first_searched is not None
        and first_searched < now - exclude_older.ms
    ):
        diagnostics.record(
            VERBOSE,
            Label.PREFILTER,
            rejection_message(
                searchee,
                f"its first search timestamp {human_readable(first_searched)} "
                f"is older than {format_duration(exclude_older.ms)} ago",
            ),
        )
        return False

    exclude_recent = config.exclude_recent_search
    last_searched = summary.last_searched_all
    if (
        isinstance(exclude_recent, Enabled)
        and last_searched is not None
        and last_searched > now - exclude_recent.ms
    ):
        diagnostics.record(
            VERBOSE,
            Label.PREFILTER,
            rejection_message(
                searchee,
                f"its last search timestamp {human_readable(last_searched)} "
                f"is newer than {format_duration(exclude_recent.ms)} ago",
            ),
        )
        return False

    return True
