from __future__ import annotations

import sqlite3

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS characters (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    userid       INTEGER NOT NULL UNIQUE,
    xp           INTEGER NOT NULL DEFAULT 0,
    timecreated  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS monsters (
    id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name   TEXT NOT NULL,
    hp     INTEGER NOT NULL DEFAULT 100,
    level  INTEGER NOT NULL DEFAULT 3
);

CREATE TABLE IF NOT EXISTS battles (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    characterid  INTEGER NOT NULL REFERENCES characters(id),
    monsterid    INTEGER NOT NULL,
    monsterhp    INTEGER NOT NULL DEFAULT 0,
    timecreated  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS items (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    name       TEXT NOT NULL,
    rarity     TEXT NOT NULL DEFAULT 'common',
    type       TEXT NOT NULL DEFAULT 'other',
    stackable  BOOLEAN NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS item_instances (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    itemid       INTEGER NOT NULL,
    characterid  INTEGER NOT NULL REFERENCES characters(id),
    stack        INTEGER NOT NULL DEFAULT 1,
    timecreated  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS events (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    event_type   TEXT NOT NULL,
    objecttable  TEXT NOT NULL,
    objectid     INTEGER,
    userid       INTEGER,
    timecreated  INTEGER NOT NULL,
    other        TEXT,
    snapshot     TEXT
);

CREATE INDEX IF NOT EXISTS idx_item_instances_character ON item_instances(characterid, itemid);
CREATE INDEX IF NOT EXISTS idx_events_type ON events(event_type);
"""


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript(_SCHEMA_SQL)
