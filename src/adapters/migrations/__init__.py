"""Schema history for the SQLite store, oldest first.

New steps are appended to ``MIGRATIONS``; existing names must never change
because stores record them as applied.
"""

from __future__ import annotations

from core.migrations import Migration, MigrationRegistry

from . import m00_initial_schema, m01_jobs, m02_timestamps, m03_rate_limits

MIGRATIONS = tuple(
    Migration(name=module.NAME, upgrade=module.upgrade)
    for module in (m00_initial_schema, m01_jobs, m02_timestamps, m03_rate_limits)
)


def build_registry() -> MigrationRegistry:
    return MigrationRegistry(MIGRATIONS)
