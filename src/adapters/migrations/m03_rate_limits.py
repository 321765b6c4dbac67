"""Migration 03: indexer health and capability columns.

- status: last failure kind reported by the search step (NULL when healthy)
- retry_after: epoch ms before which a failing indexer is skipped
- search_cap: whether the indexer supports plain searches at all
"""

from __future__ import annotations

import sqlite3

NAME = "03-rate-limits"


def upgrade(conn: sqlite3.Connection) -> None:
    conn.execute("ALTER TABLE indexer ADD COLUMN status TEXT")
    conn.execute("ALTER TABLE indexer ADD COLUMN retry_after INTEGER")
    conn.execute("ALTER TABLE indexer ADD COLUMN search_cap INTEGER")
