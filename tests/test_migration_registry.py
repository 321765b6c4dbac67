from __future__ import annotations

import pytest

from adapters.migrations import MIGRATIONS, build_registry
from core.migrations import Migration, MigrationError, MigrationRegistry


class FakeMigrationStore:
    """Records applied names; each upgrade sees the names applied before it."""

    def __init__(self, applied=None) -> None:
        self.applied: list[str] = list(applied or [])
        self.calls: list[str] = []

    def applied_migrations(self) -> list[str]:
        return list(self.applied)

    def apply_migration(self, migration: Migration) -> None:
        self.calls.append(migration.name)
        migration.upgrade(self)
        self.applied.append(migration.name)


def _step(name: str, requires=None, fail: bool = False) -> Migration:
    def upgrade(store: FakeMigrationStore) -> None:
        if requires is not None:
            assert store.applied[-1] == requires, f"{name} ran before {requires}"
        if fail:
            raise RuntimeError(f"{name} exploded")

    return Migration(name=name, upgrade=upgrade)


def test_applies_in_order_and_records_each_before_the_next() -> None:
    registry = MigrationRegistry([_step("a"), _step("b", requires="a"), _step("c", requires="b")])
    store = FakeMigrationStore()

    assert registry.apply(store) == ["a", "b", "c"]
    assert store.applied == ["a", "b", "c"]


def test_second_apply_is_a_noop() -> None:
    registry = MigrationRegistry([_step("a"), _step("b", requires="a")])
    store = FakeMigrationStore()
    registry.apply(store)
    store.calls.clear()

    assert registry.apply(store) == []
    assert store.calls == []


def test_failure_stops_forward_progress_and_resume_picks_up_there() -> None:
    broken = MigrationRegistry([_step("a"), _step("b", fail=True), _step("c")])
    store = FakeMigrationStore()

    with pytest.raises(MigrationError) as excinfo:
        broken.apply(store)

    assert excinfo.value.migration_name == "b"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert store.applied == ["a"]
    assert store.calls == ["a", "b"]

    fixed = MigrationRegistry([_step("a"), _step("b", requires="a"), _step("c", requires="b")])
    store.calls.clear()
    assert fixed.apply(store) == ["b", "c"]
    assert store.calls == ["b", "c"]


def test_unknown_applied_migration_is_refused() -> None:
    registry = MigrationRegistry([_step("a")])
    store = FakeMigrationStore(applied=["a", "z-from-the-future"])

    with pytest.raises(MigrationError, match="z-from-the-future"):
        registry.apply(store)
    assert store.calls == []


def test_gap_in_applied_migrations_is_refused() -> None:
    registry = MigrationRegistry([_step("a"), _step("b"), _step("c")])
    store = FakeMigrationStore(applied=["a", "c"])

    with pytest.raises(MigrationError) as excinfo:
        registry.apply(store)
    assert excinfo.value.migration_name == "b"
    assert store.calls == []


def test_duplicate_names_rejected() -> None:
    with pytest.raises(ValueError, match="dup"):
        MigrationRegistry([_step("dup"), _step("dup")])


def test_shipped_migrations_have_stable_order() -> None:
    names = [m.name for m in build_registry().list_migrations()]

    assert names == ["00-initial-schema", "01-jobs", "02-timestamps", "03-rate-limits"]
    assert tuple(build_registry().list_migrations()) == MIGRATIONS
