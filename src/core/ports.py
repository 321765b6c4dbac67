"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage and indexer adapters so that
the core can be reused with different backends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

from core.models import Indexer, TimestampSummary

if TYPE_CHECKING:
    from core.migrations import Migration


class IndexerRegistryPort(Protocol):
    """Source of the currently enabled indexers."""

    async def get_enabled_indexers(self) -> list[Indexer]:
        ...


class TimestampStorePort(Protocol):
    """Read access to persisted search history."""

    async def get_timestamp_summary(
        self, searchee_name: str, indexer_ids: Sequence[int]
    ) -> TimestampSummary:
        ...


class MigrationStorePort(Protocol):
    """Storage operations required by the migration registry."""

    def applied_migrations(self) -> list[str]:
        ...

    def apply_migration(self, migration: "Migration") -> None:
        """Run the migration and record it as applied in one transaction."""
        ...
