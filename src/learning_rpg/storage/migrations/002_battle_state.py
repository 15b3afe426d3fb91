"""Migration 002: Track the battle state machine on battles."""
from __future__ import annotations

import sqlite3


def upgrade(conn: sqlite3.Connection) -> None:
    try:
        conn.execute("ALTER TABLE battles ADD COLUMN state INTEGER NOT NULL DEFAULT 0")
    except sqlite3.OperationalError:
        pass  # column already exists
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_battles_character_state ON battles(characterid, state)"
    )
