from __future__ import annotations

from learning_rpg.models.item import InventoryItem, ItemDefinition
from learning_rpg.storage.repos.base import RecordRepo


class ItemRepo(RecordRepo[ItemDefinition]):
    """Repository for item definitions."""

    table = "items"
    model = ItemDefinition

    def get_many(self, item_ids: list[int]) -> dict[int, ItemDefinition]:
        """Fetch several definitions at once, indexed by id."""
        if not item_ids:
            return {}
        placeholders = ", ".join("?" for _ in item_ids)
        with self.db.get_connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM items WHERE id IN ({placeholders})", list(item_ids)
            ).fetchall()
        items = [self._from_row(r) for r in rows]
        return {item.id: item for item in items}


class InventoryRepo(RecordRepo[InventoryItem]):
    """Repository for item instances held by characters."""

    table = "item_instances"
    model = InventoryItem

    def get_for(self, characterid: int, itemid: int) -> InventoryItem | None:
        """Fetch a character's instance of an item."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM item_instances WHERE characterid = ? AND itemid = ? "
                "ORDER BY id LIMIT 1",
                (characterid, itemid),
            ).fetchone()
        return self._from_row(row)

    def list_for_character(self, characterid: int) -> list[InventoryItem]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM item_instances WHERE characterid = ? ORDER BY id",
                (characterid,),
            ).fetchall()
        return [self._from_row(r) for r in rows]

    def delete_for_item(self, itemid: int) -> int:
        """Delete every instance of an item. Returns the number removed."""
        with self.db.get_connection() as conn:
            cursor = conn.execute("DELETE FROM item_instances WHERE itemid = ?", (itemid,))
        return cursor.rowcount
