"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any torrent client or storage-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class SearcheeFile:
    """A single file inside a searchee's payload."""

    name: str
    length: int = 0


@dataclass(frozen=True)
class Searchee:
    """A candidate release that may be searched against indexers.

    ``info_hash`` is only present for items backed by a real torrent in the
    client; name-only guesses leave it empty.
    """

    name: str
    files: Tuple[SearcheeFile, ...] = field(default_factory=tuple)
    info_hash: Optional[str] = None


@dataclass(frozen=True)
class Indexer:
    """A configured search backend."""

    id: int
    url: str
    enabled: bool = True
    status: Optional[str] = None
    retry_after: Optional[int] = None


@dataclass(frozen=True)
class TimestampSummary:
    """Search history for one searchee aggregated over enabled indexers.

    Both fields are epoch milliseconds, or None when no enabled indexer has a
    recorded value.
    """

    first_searched_any: Optional[int] = None
    last_searched_all: Optional[int] = None
