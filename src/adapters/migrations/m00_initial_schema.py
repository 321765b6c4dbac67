"""Migration 00: searchees and per-candidate decisions."""

from __future__ import annotations

import sqlite3

NAME = "00-initial-schema"


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE searchee (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        )
        """
    )
    # decision caches the match verdict for each (searchee, result guid).
    conn.execute(
        """
        CREATE TABLE decision (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            searchee_id INTEGER NOT NULL REFERENCES searchee(id),
            guid TEXT NOT NULL,
            info_hash TEXT,
            decision TEXT NOT NULL,
            first_seen INTEGER,
            last_seen INTEGER,
            UNIQUE (searchee_id, guid)
        )
        """
    )
