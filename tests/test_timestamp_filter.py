from __future__ import annotations

import asyncio
from typing import Optional, Sequence

import pytest

from core.config import PrefilterConfig
from core.diagnostics import VERBOSE, Label
from core.durations import DISABLED, HOUR, MINUTE, DAY, Enabled
from core.models import Indexer, Searchee, TimestampSummary
from core.timestamps import filter_timestamps

NOW = 1_700_000_000_000


class FakeIndexers:
    def __init__(self, ids: Sequence[int] = (1, 2)) -> None:
        self.ids = list(ids)
        self.calls = 0

    async def get_enabled_indexers(self) -> list[Indexer]:
        self.calls += 1
        return [Indexer(id=i, url=f"https://indexer{i}.test") for i in self.ids]


class FakeStore:
    def __init__(
        self,
        first: Optional[int] = None,
        last: Optional[int] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.summary = TimestampSummary(first_searched_any=first, last_searched_all=last)
        self.error = error
        self.queries: list[tuple[str, list[int]]] = []

    async def get_timestamp_summary(self, searchee_name: str, indexer_ids) -> TimestampSummary:
        self.queries.append((searchee_name, list(indexer_ids)))
        if self.error:
            raise self.error
        return self.summary


class RecordingDiagnostics:
    def __init__(self) -> None:
        self.messages: list[str] = []
        self.levels: list[tuple[int, str]] = []

    def record(self, level, label, message) -> None:
        self.levels.append((level, label))
        self.messages.append(message)


def _run(config: PrefilterConfig, store: FakeStore, indexers: Optional[FakeIndexers] = None):
    diagnostics = RecordingDiagnostics()
    result = asyncio.run(
        filter_timestamps(
            Searchee(name="Movie.2020"),
            config,
            indexers or FakeIndexers(),
            store,
            diagnostics,
            clock=lambda: NOW,
        )
    )
    return result, diagnostics


def test_exclude_older_rejects_stale_first_search() -> None:
    config = PrefilterConfig(exclude_older=Enabled(7 * DAY))

    rejected, diagnostics = _run(config, FakeStore(first=NOW - 10 * DAY, last=NOW - 10 * DAY))
    accepted, _ = _run(config, FakeStore(first=NOW - 3 * DAY, last=NOW - 3 * DAY))

    assert rejected is False
    assert accepted is True
    assert "first search timestamp" in diagnostics.messages[0]
    assert "older than 7 days ago" in diagnostics.messages[0]
    assert diagnostics.levels == [(VERBOSE, Label.PREFILTER)]


def test_exclude_recent_search_rate_limits() -> None:
    config = PrefilterConfig(exclude_recent_search=Enabled(HOUR))

    rejected, diagnostics = _run(config, FakeStore(first=NOW - DAY, last=NOW - 10 * MINUTE))
    accepted, _ = _run(config, FakeStore(first=NOW - DAY, last=NOW - 2 * HOUR))

    assert rejected is False
    assert accepted is True
    assert "newer than 1 hour ago" in diagnostics.messages[0]
    assert diagnostics.levels == [(VERBOSE, Label.PREFILTER)]


def test_never_searched_is_always_accepted() -> None:
    config = PrefilterConfig(exclude_older=Enabled(0), exclude_recent_search=Enabled(100 * DAY))

    accepted, diagnostics = _run(config, FakeStore())

    assert accepted is True
    assert diagnostics.messages == []


def test_disabled_thresholds_accept_everything() -> None:
    config = PrefilterConfig(exclude_older=DISABLED, exclude_recent_search=DISABLED)

    accepted, _ = _run(config, FakeStore(first=NOW - 1000 * DAY, last=NOW - 1))

    assert accepted is True


def test_queries_with_enabled_indexer_ids() -> None:
    store = FakeStore()
    indexers = FakeIndexers(ids=[3, 7])

    _run(PrefilterConfig(), store, indexers)

    assert indexers.calls == 1
    assert store.queries == [("Movie.2020", [3, 7])]


def test_store_errors_propagate() -> None:
    store = FakeStore(error=RuntimeError("database is locked"))

    with pytest.raises(RuntimeError, match="database is locked"):
        _run(PrefilterConfig(exclude_older=Enabled(DAY)), store)
