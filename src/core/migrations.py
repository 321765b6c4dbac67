"""Ordered schema migration registry.

The registry is an explicit, immutable list of steps. ``apply`` runs the
pending suffix in order and stops at the first failure, so a store is always
left at the state produced by some prefix of the list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Tuple

from core.ports import MigrationStorePort

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """One named schema step. ``upgrade`` receives the store's connection."""

    name: str
    upgrade: Callable[[Any], None]


class MigrationError(RuntimeError):
    """Raised when the registry cannot bring a store forward."""

    def __init__(self, message: str, migration_name: str | None = None) -> None:
        super().__init__(message)
        self.migration_name = migration_name


class MigrationRegistry:
    """Applies a fixed sequence of migrations exactly once each."""

    def __init__(self, migrations: Iterable[Migration]) -> None:
        self._migrations: Tuple[Migration, ...] = tuple(migrations)
        names = [migration.name for migration in self._migrations]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate migration names: {', '.join(duplicates)}")

    def list_migrations(self) -> Tuple[Migration, ...]:
        return self._migrations

    def pending(self, store: MigrationStorePort) -> List[Migration]:
        """Return the migrations not yet applied to the store, in order.

        The store must hold exactly a prefix of this registry. Unknown names
        or gaps mean the store was written by another build (or edited by
        hand) and we refuse to guess.
        """

        applied = set(store.applied_migrations())
        known = {migration.name for migration in self._migrations}

        unknown = sorted(applied - known)
        if unknown:
            raise MigrationError(
                f"Store has migrations this build does not know about: {', '.join(unknown)}"
            )

        prefix_len = 0
        for migration in self._migrations:
            if migration.name not in applied:
                break
            prefix_len += 1

        remaining = self._migrations[prefix_len:]
        out_of_order = [migration.name for migration in remaining if migration.name in applied]
        if out_of_order:
            missing = remaining[0].name
            raise MigrationError(
                f"Migration {missing} was skipped but later migrations are applied: "
                f"{', '.join(out_of_order)}",
                migration_name=missing,
            )

        return list(remaining)

    def apply(self, store: MigrationStorePort) -> List[str]:
        """Apply every pending migration and return the names that ran."""

        to_run = self.pending(store)
        if not to_run:
            LOGGER.debug("Schema already up to date (%s migrations)", len(self._migrations))
            return []

        applied: List[str] = []
        for migration in to_run:
            try:
                store.apply_migration(migration)
            except Exception as exc:
                # The store rolled this step back; nothing after it may run.
                LOGGER.error("Migration %s failed: %s", migration.name, exc)
                raise MigrationError(
                    f"Migration {migration.name} failed: {exc}",
                    migration_name=migration.name,
                ) from exc
            LOGGER.info("Applied migration %s", migration.name)
            applied.append(migration.name)
        return applied
