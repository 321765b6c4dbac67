"""Adapters that connect the core to SQLite and on-disk searchee snapshots."""
