"""Observability sink shared by the filters.

Filters never log directly; they receive a ``DiagnosticSink`` so callers can
route or capture rejection reasons. Recording is fire-and-forget.
"""

from __future__ import annotations

import enum
import logging
from typing import Protocol

VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")


class Label(str, enum.Enum):
    PREFILTER = "prefilter"
    MIGRATIONS = "migrations"


class DiagnosticSink(Protocol):
    """Accepts leveled, labeled diagnostic messages."""

    def record(self, level: int, label: Label, message: str) -> None:
        ...


class LoggingDiagnostics:
    """Default sink that forwards diagnostics to stdlib logging."""

    def __init__(self, root: str = "searchgate") -> None:
        self._root = root

    def record(self, level: int, label: Label, message: str) -> None:
        logging.getLogger(f"{self._root}.{label.value}").log(level, message)
