"""Migration 02: indexers and per-(searchee, indexer) search timestamps.

Timestamps are epoch milliseconds. The composite primary key guarantees a
single row per pair.
"""

from __future__ import annotations

import sqlite3

NAME = "02-timestamps"


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE indexer (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            url TEXT NOT NULL UNIQUE,
            apikey TEXT,
            active INTEGER NOT NULL DEFAULT 1
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE timestamp (
            searchee_id INTEGER NOT NULL REFERENCES searchee(id),
            indexer_id INTEGER NOT NULL REFERENCES indexer(id),
            first_searched INTEGER,
            last_searched INTEGER,
            PRIMARY KEY (searchee_id, indexer_id)
        )
        """
    )
