"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from core.durations import DISABLED, DurationSetting, parse_duration


@dataclass(frozen=True)
class PrefilterConfig:
    """Runtime switches consumed by the admission filters."""

    include_episodes: bool = False
    include_non_videos: bool = False
    exclude_older: DurationSetting = DISABLED
    exclude_recent_search: DurationSetting = DISABLED


def build_prefilter_config(raw: Mapping[str, Any]) -> PrefilterConfig:
    """Normalize the ``prefilter`` section of config.json.

    Duration values that cannot be parsed switch their check off instead of
    failing startup.
    """

    return PrefilterConfig(
        include_episodes=bool(raw.get("include_episodes", False)),
        include_non_videos=bool(raw.get("include_non_videos", False)),
        exclude_older=parse_duration(raw.get("exclude_older"), key="exclude_older"),
        exclude_recent_search=parse_duration(
            raw.get("exclude_recent_search"), key="exclude_recent_search"
        ),
    )
