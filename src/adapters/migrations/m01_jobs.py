"""Migration 01: last-run bookkeeping for scheduled jobs."""

from __future__ import annotations

import sqlite3

NAME = "01-jobs"


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE job_log (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            last_run INTEGER
        )
        """
    )
