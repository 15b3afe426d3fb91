"""Migration 003: Add current hitpoints to characters."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    try:
        conn.execute("ALTER TABLE characters ADD COLUMN hp INTEGER NOT NULL DEFAULT 0")
    except sqlite3.OperationalError:
        pass  # column already exists
