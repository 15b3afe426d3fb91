"""Shared CRUD for repositories whose rows map one-to-one onto a model."""
from __future__ import annotations

import logging
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel

from learning_rpg.errors import InvariantError
from learning_rpg.storage.database import Database

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class RecordRepo(Generic[M]):
    """Insert/update/get/delete for one table keyed by an integer ``id``.

    ``insert`` only accepts unsaved records and ``update`` only persisted ones.
    """

    table: str = ""
    model: Type[M]

    def __init__(self, db: Database) -> None:
        self.db = db

    def _to_row(self, record: M) -> dict[str, Any]:
        return record.model_dump(mode="json", exclude={"id"})

    def _from_row(self, row: Any) -> M | None:
        if row is None:
            return None
        return self.model.model_validate(dict(row))

    def insert(self, record: M) -> M:
        """Insert an unsaved record and return it with its new id."""
        if record.id is not None:
            raise InvariantError(
                f"{self.model.__name__} is already stored", details={"id": record.id}
            )
        data = self._to_row(record)
        columns = ", ".join(data.keys())
        placeholders = ", ".join("?" for _ in data)
        sql = f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})"
        with self.db.get_connection() as conn:
            cursor = conn.execute(sql, list(data.values()))
            new_id = cursor.lastrowid
        record.id = new_id
        logger.debug("Inserted %s id=%s", self.table, new_id)
        return record

    def update(self, record: M) -> None:
        """Write all fields of a persisted record."""
        if record.id is None:
            raise InvariantError(f"{self.model.__name__} has not been stored yet")
        data = self._to_row(record)
        updates = ", ".join(f"{k} = ?" for k in data)
        sql = f"UPDATE {self.table} SET {updates} WHERE id = ?"
        with self.db.get_connection() as conn:
            conn.execute(sql, [*data.values(), record.id])

    def get(self, record_id: int) -> M | None:
        """Fetch a record by id."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ?", (record_id,)
            ).fetchone()
        return self._from_row(row)

    def delete(self, record_id: int) -> None:
        with self.db.get_connection() as conn:
            conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))

    def list_all(self) -> list[M]:
        """Return every record ordered by id."""
        with self.db.get_connection() as conn:
            rows = conn.execute(f"SELECT * FROM {self.table} ORDER BY id").fetchall()
        return [self._from_row(r) for r in rows]

    def count(self) -> int:
        with self.db.get_connection() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {self.table}").fetchone()
        return row["cnt"] if row else 0
