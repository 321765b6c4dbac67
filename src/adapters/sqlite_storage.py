"""SQLite storage adapter.

Implements the core store, indexer registry and migration ports on top of a
single SQLite database. Async port methods run their blocking query in a
worker thread with a connection of their own.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from contextlib import closing, contextmanager
from typing import Iterator, List, Optional, Sequence, Tuple

from core.migrations import Migration, MigrationRegistry
from core.models import Indexer, TimestampSummary

LOGGER = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the core storage ports."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        # Commit/rollback via the connection context, then always close it.
        with closing(self._connect()) as conn:
            with conn:
                yield conn

    def init_db(self) -> None:
        """Create the migrations bookkeeping table if it does not exist.

        Everything else is created by the migrations themselves.
        """

        with self._session() as conn:
            # migrations records every applied schema step, in order.
            # Fields:
            # - name: stable migration name (PRIMARY KEY)
            # - applied_at: epoch ms when the step committed
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS migrations (
                    name TEXT PRIMARY KEY,
                    applied_at INTEGER NOT NULL
                )
                """
            )

    def migrate(self, registry: MigrationRegistry) -> List[str]:
        """Bring the schema up to date and return the migrations that ran."""

        return registry.apply(self)

    # -- MigrationStorePort -------------------------------------------------

    def applied_migrations(self) -> List[str]:
        """Return applied migration names in the order they were applied.

        A brand new database has no bookkeeping table yet; it is created here
        so the registry can run against any store without a separate setup.
        """

        self.init_db()
        with self._session() as conn:
            rows = conn.execute(
                "SELECT name FROM migrations ORDER BY applied_at, rowid"
            ).fetchall()
        return [row["name"] for row in rows]

    def apply_migration(self, migration: Migration) -> None:
        """Run one migration and record it, atomically.

        The connection runs in autocommit mode with an explicit BEGIN so DDL
        statements are part of the transaction and roll back on failure.
        """

        with closing(self._connect()) as conn:
            conn.isolation_level = None
            conn.execute("BEGIN")
            try:
                migration.upgrade(conn)
                conn.execute(
                    "INSERT INTO migrations (name, applied_at) VALUES (?, ?)",
                    (migration.name, _now_ms()),
                )
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def schema_snapshot(self) -> List[Tuple[str, str, Optional[str]]]:
        """Return (type, name, sql) for every schema object, sorted by name."""

        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT type, name, sql FROM sqlite_master
                WHERE name NOT LIKE 'sqlite_%'
                ORDER BY name
                """
            ).fetchall()
        return [(row["type"], row["name"], row["sql"]) for row in rows]

    # -- IndexerRegistryPort ------------------------------------------------

    def list_enabled_indexers(self, now: Optional[int] = None) -> List[Indexer]:
        """Return indexers that are active, searchable and not backing off.

        A failing indexer is usable again once its retry_after has passed.
        A NULL search_cap means capabilities were never probed.
        """

        now = _now_ms() if now is None else now
        with self._session() as conn:
            rows = conn.execute(
                """
                SELECT id, url, active, status, retry_after FROM indexer
                WHERE active = 1
                  AND (search_cap IS NULL OR search_cap = 1)
                  AND (status IS NULL OR status = 'OK' OR retry_after < ?)
                ORDER BY id
                """,
                (now,),
            ).fetchall()
        return [
            Indexer(
                id=int(row["id"]),
                url=row["url"],
                enabled=bool(row["active"]),
                status=row["status"],
                retry_after=row["retry_after"],
            )
            for row in rows
        ]

    def list_indexer_apikeys(self) -> List[str]:
        """Return every stored API key, enabled or not, for log masking."""

        with self._session() as conn:
            rows = conn.execute(
                "SELECT DISTINCT apikey FROM indexer WHERE apikey IS NOT NULL AND apikey != ''"
            ).fetchall()
        return [row["apikey"] for row in rows]

    async def get_enabled_indexers(self) -> List[Indexer]:
        return await asyncio.to_thread(self.list_enabled_indexers)

    # -- TimestampStorePort -------------------------------------------------

    def timestamp_summary(
        self, searchee_name: str, indexer_ids: Sequence[int]
    ) -> TimestampSummary:
        """Aggregate first/last search times over the given indexers.

        Every (searchee, indexer) pair is considered, searched or not; MIN and
        MAX skip the NULLs of never-searched pairs, so a summary field is only
        None when no indexer in the set has a value.
        """

        ids = list(indexer_ids)
        if not ids:
            return TimestampSummary()

        placeholders = ", ".join("?" for _ in ids)
        with self._session() as conn:
            row = conn.execute(
                f"""
                SELECT
                    MIN(t.first_searched) AS first_searched_any,
                    MAX(t.last_searched) AS last_searched_all
                FROM searchee AS s
                CROSS JOIN indexer AS i
                LEFT OUTER JOIN timestamp AS t
                    ON t.indexer_id = i.id AND t.searchee_id = s.id
                WHERE s.name = ?
                  AND i.id IN ({placeholders})
                """,
                (searchee_name, *ids),
            ).fetchone()

        if row is None:
            return TimestampSummary()
        return TimestampSummary(
            first_searched_any=row["first_searched_any"],
            last_searched_all=row["last_searched_all"],
        )

    async def get_timestamp_summary(
        self, searchee_name: str, indexer_ids: Sequence[int]
    ) -> TimestampSummary:
        return await asyncio.to_thread(self.timestamp_summary, searchee_name, list(indexer_ids))

    # -- Writes used by the search step ------------------------------------

    def add_indexer(
        self,
        url: str,
        apikey: Optional[str] = None,
        active: bool = True,
        search_cap: Optional[bool] = None,
    ) -> int:
        """Insert or update an indexer by url and return its id."""

        with self._session() as conn:
            conn.execute(
                """
                INSERT INTO indexer (url, apikey, active, search_cap)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(url) DO UPDATE SET
                    apikey = excluded.apikey,
                    active = excluded.active,
                    search_cap = excluded.search_cap
                """,
                (url, apikey, int(active), None if search_cap is None else int(search_cap)),
            )
            row = conn.execute("SELECT id FROM indexer WHERE url = ?", (url,)).fetchone()
        return int(row["id"])

    def set_indexer_status(
        self, indexer_id: int, status: Optional[str], retry_after: Optional[int]
    ) -> None:
        with self._session() as conn:
            conn.execute(
                "UPDATE indexer SET status = ?, retry_after = ? WHERE id = ?",
                (status, retry_after, indexer_id),
            )

    def upsert_searchee(self, name: str) -> int:
        """Return the id for a searchee name, creating the row if needed."""

        with self._session() as conn:
            return self._upsert_searchee(conn, name)

    @staticmethod
    def _upsert_searchee(conn: sqlite3.Connection, name: str) -> int:
        conn.execute("INSERT OR IGNORE INTO searchee (name) VALUES (?)", (name,))
        row = conn.execute("SELECT id FROM searchee WHERE name = ?", (name,)).fetchone()
        return int(row["id"])

    def record_search(self, searchee_name: str, indexer_id: int, searched_at: int) -> None:
        """Record that a searchee was searched against an indexer.

        first_searched only ever moves earlier and last_searched only later,
        so out-of-order writes keep first_searched <= last_searched.
        """

        with self._session() as conn:
            searchee_id = self._upsert_searchee(conn, searchee_name)
            conn.execute(
                """
                INSERT INTO timestamp (searchee_id, indexer_id, first_searched, last_searched)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(searchee_id, indexer_id) DO UPDATE SET
                    first_searched = MIN(
                        COALESCE(timestamp.first_searched, excluded.first_searched),
                        excluded.first_searched
                    ),
                    last_searched = MAX(
                        COALESCE(timestamp.last_searched, excluded.last_searched),
                        excluded.last_searched
                    )
                """,
                (searchee_id, indexer_id, searched_at, searched_at),
            )
        LOGGER.debug("Recorded search of %s on indexer %s", searchee_name, indexer_id)
