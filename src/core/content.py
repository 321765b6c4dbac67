"""Content shape filter (core domain).

Rejects searchees whose files do not fit the configured preferences, e.g.
lone episodes or payloads containing non-video files.
"""

from __future__ import annotations

import os
import re

from core.config import PrefilterConfig
from core.diagnostics import VERBOSE, DiagnosticSink, Label
from core.models import Searchee

# Season/episode tokens (S01E02, S01.E02, S01E02E03) or dated episodes
# (2021.03.04). A bare E<n> is not enough: audio tags and release groups use it.
EP_REGEX = re.compile(
    r"^(?P<title>.+?)[_.\s-]+"
    r"(?:(?P<season>S\d+)[_.\s-]?(?P<episode>E\d+(?:[\s-]?E?\d+)?(?![ip]))(?!\d+[ip])"
    r"|(?P<date>(?P<year>(?:19|20)\d{2})[_.\s-](?P<month>\d{2})[_.\s-](?P<day>\d{2})))",
    re.IGNORECASE,
)

# Compared case-sensitively against the suffix after the last dot.
VIDEO_EXTENSIONS = frozenset({".mp4", ".mkv", ".avi", ".m4v", ".ts", ".wmv", ".mov"})


def is_single_episode(searchee: Searchee) -> bool:
    """True when the searchee is exactly one episode-named file."""

    return len(searchee.files) == 1 and EP_REGEX.search(searchee.files[0].name) is not None


def all_files_are_videos(searchee: Searchee) -> bool:
    return all(
        os.path.splitext(file.name)[1] in VIDEO_EXTENSIONS for file in searchee.files
    )


def rejection_message(searchee: Searchee, reason: str) -> str:
    return f"Torrent {searchee.name} was not selected for searching because {reason}"


def filter_by_content(
    searchee: Searchee, config: PrefilterConfig, diagnostics: DiagnosticSink
) -> bool:
    """Return True when the searchee's files match the configured preferences."""

    if not config.include_episodes and is_single_episode(searchee):
        diagnostics.record(
            VERBOSE, Label.PREFILTER, rejection_message(searchee, "it is a single episode")
        )
        return False

    if not config.include_non_videos and not all_files_are_videos(searchee):
        diagnostics.record(
            VERBOSE, Label.PREFILTER, rejection_message(searchee, "not all files are videos")
        )
        return False

    return True
