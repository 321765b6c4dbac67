"""Duration settings used by the timestamp filter.

Durations are modelled as a tagged option so the filter never has to inspect
raw config values: a threshold is either ``Disabled`` or ``Enabled(ms)``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Union

LOGGER = logging.getLogger(__name__)

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = int(365.25 * DAY)

_UNITS = {
    "ms": 1,
    "msec": 1,
    "msecs": 1,
    "millisecond": 1,
    "milliseconds": 1,
    "s": SECOND,
    "sec": SECOND,
    "secs": SECOND,
    "second": SECOND,
    "seconds": SECOND,
    "m": MINUTE,
    "min": MINUTE,
    "mins": MINUTE,
    "minute": MINUTE,
    "minutes": MINUTE,
    "h": HOUR,
    "hr": HOUR,
    "hrs": HOUR,
    "hour": HOUR,
    "hours": HOUR,
    "d": DAY,
    "day": DAY,
    "days": DAY,
    "w": WEEK,
    "week": WEEK,
    "weeks": WEEK,
    "y": YEAR,
    "yr": YEAR,
    "yrs": YEAR,
    "year": YEAR,
    "years": YEAR,
}

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-z]*)\s*$", re.IGNORECASE)

# Largest unit first so format_duration picks the most natural one.
_LONG_UNITS = [
    ("day", DAY),
    ("hour", HOUR),
    ("minute", MINUTE),
    ("second", SECOND),
]


@dataclass(frozen=True)
class Disabled:
    """The threshold is turned off."""


@dataclass(frozen=True)
class Enabled:
    """The threshold is active with a length in milliseconds."""

    ms: int


DurationSetting = Union[Disabled, Enabled]

DISABLED = Disabled()


def parse_duration(raw: Any, *, key: str = "duration") -> DurationSetting:
    """Turn a raw config value into a DurationSetting.

    Accepted forms:
    - non-negative integers/floats: milliseconds
    - strings: ``"<number><unit>"`` such as ``"2w"``, ``"90 minutes"``,
      ``"1.5 hours"``; a bare numeric string is milliseconds

    ``None``, booleans and empty strings disable the threshold. Anything
    else is a config mistake; it is logged and treated as disabled.
    """

    if raw is None or isinstance(raw, bool):
        return DISABLED

    if isinstance(raw, (int, float)):
        # json.load accepts Infinity and NaN.
        if not math.isfinite(raw) or raw < 0:
            LOGGER.warning("Ignoring out of range %s: %r (check disabled)", key, raw)
            return DISABLED
        return Enabled(int(raw))

    if isinstance(raw, str):
        if not raw.strip():
            return DISABLED
        match = _DURATION_RE.match(raw)
        if match:
            amount, unit = match.group(1), match.group(2).lower()
            factor = _UNITS.get(unit or "ms")
            if factor is not None:
                return Enabled(int(float(amount) * factor))

    LOGGER.warning("Ignoring unparseable %s: %r (check disabled)", key, raw)
    return DISABLED


def format_duration(ms: int) -> str:
    """Render milliseconds in long form, e.g. ``"7 days"`` or ``"1 hour"``."""

    magnitude = abs(ms)
    for unit_name, unit_ms in _LONG_UNITS:
        if magnitude >= unit_ms:
            return _plural(ms, unit_ms, unit_name)
    return f"{ms} ms"


def _plural(ms: int, unit_ms: int, name: str) -> str:
    amount = round(ms / unit_ms)
    is_plural = abs(ms) >= unit_ms * 1.5
    return f"{amount} {name}{'s' if is_plural else ''}"
