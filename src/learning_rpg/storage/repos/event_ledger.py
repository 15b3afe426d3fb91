from __future__ import annotations

import json
from typing import Any

from learning_rpg.models.event import RpgEvent
from learning_rpg.storage.database import Database

_JSON_FIELDS = ("other", "snapshot")


def _deserialize(row: Any) -> dict | None:
    """Convert a sqlite3.Row to a dict with the JSON fields parsed."""
    if row is None:
        return None
    result = dict(row)
    for field in _JSON_FIELDS:
        raw = result.get(field)
        if raw is not None and isinstance(raw, str):
            result[field] = json.loads(raw)
    return result


def _deserialize_many(rows: list) -> list[dict]:
    return [_deserialize(r) for r in rows]


class EventLedgerRepo:
    """Append-only repository for the event ledger."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def append(self, event: RpgEvent) -> None:
        """Insert a new event. Events are immutable once written."""
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO events "
                "(event_type, objecttable, objectid, userid, timecreated, other, snapshot) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    event.event_type.value,
                    event.objecttable,
                    event.objectid,
                    event.userid,
                    event.timecreated,
                    json.dumps(event.payload()),
                    json.dumps(event.snapshot),
                ),
            )

    def get_by_user(
        self, userid: int, event_type: str | None = None, limit: int = 50
    ) -> list[dict]:
        """Return events involving a given user, newest first."""
        with self.db.get_connection() as conn:
            if event_type is None:
                rows = conn.execute(
                    "SELECT * FROM events WHERE userid = ? ORDER BY id DESC LIMIT ?",
                    (userid, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM events WHERE userid = ? AND event_type = ? "
                    "ORDER BY id DESC LIMIT ?",
                    (userid, event_type, limit),
                ).fetchall()
        return _deserialize_many(rows)
