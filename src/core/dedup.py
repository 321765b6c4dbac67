"""Deduplication helpers (core domain)."""

from __future__ import annotations

from typing import Dict, Iterable, List

from core.diagnostics import VERBOSE, DiagnosticSink, Label
from core.models import Searchee


def filter_dupes(searchees: Iterable[Searchee], diagnostics: DiagnosticSink) -> List[Searchee]:
    """Collapse searchees sharing a name into one representative.

    The first item seen for a name wins, except that a name-only placeholder
    is upgraded the first time a torrent-backed item (one with an info hash)
    shows up. The upgraded item keeps the placeholder's position.
    """

    incoming = list(searchees)
    by_name: Dict[str, Searchee] = {}
    for searchee in incoming:
        existing = by_name.get(searchee.name)
        if existing is None:
            by_name[searchee.name] = searchee
        elif searchee.info_hash and not existing.info_hash:
            by_name[searchee.name] = searchee

    filtered = list(by_name.values())
    removed = len(incoming) - len(filtered)
    if removed > 0:
        diagnostics.record(
            VERBOSE, Label.PREFILTER, f"{removed} duplicates not selected for searching"
        )
    return filtered
