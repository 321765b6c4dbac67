from __future__ import annotations

import json

from core.config import build_prefilter_config
from core.durations import DAY, DISABLED, HOUR, MINUTE, WEEK, Enabled, format_duration, parse_duration


def test_parse_numbers_and_unit_strings() -> None:
    assert parse_duration(3600000) == Enabled(HOUR)
    assert parse_duration("2w") == Enabled(2 * WEEK)
    assert parse_duration("90 minutes") == Enabled(90 * MINUTE)
    assert parse_duration("1.5 hours") == Enabled(90 * MINUTE)
    assert parse_duration("250") == Enabled(250)


def test_unusable_values_disable_the_check() -> None:
    for raw in (None, False, True, "", "   ", "soon", "3 fortnights", -5, [1], float("inf"), float("nan")):
        assert parse_duration(raw) == DISABLED


def test_format_duration_long_form() -> None:
    assert format_duration(7 * DAY) == "7 days"
    assert format_duration(HOUR) == "1 hour"
    assert format_duration(90 * MINUTE) == "2 hours"
    assert format_duration(500) == "500 ms"


def test_build_prefilter_config_defaults() -> None:
    config = build_prefilter_config({"exclude_older": "2 weeks", "exclude_recent_search": "nope"})

    assert config.include_episodes is False
    assert config.include_non_videos is False
    assert config.exclude_older == Enabled(2 * WEEK)
    assert config.exclude_recent_search == DISABLED


def test_non_finite_config_values_disable_the_check() -> None:
    config = build_prefilter_config(
        json.loads('{"exclude_older": Infinity, "exclude_recent_search": NaN}')
    )

    assert config.exclude_older == DISABLED
    assert config.exclude_recent_search == DISABLED


def test_year_is_a_julian_year() -> None:
    assert parse_duration("1y") == Enabled(int(365.25 * DAY))
