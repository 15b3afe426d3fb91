from __future__ import annotations

from learning_rpg.models.battle import Battle, BattleState
from learning_rpg.storage.repos.base import RecordRepo


class BattleRepo(RecordRepo[Battle]):
    """Repository for battle records."""

    table = "battles"
    model = Battle

    def find_for_character(self, characterid: int, state: BattleState) -> Battle | None:
        """Fetch a character's battle in the given state."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM battles WHERE characterid = ? AND state = ? "
                "ORDER BY id LIMIT 1",
                (characterid, int(state)),
            ).fetchone()
        return self._from_row(row)

    def list_for_character(self, characterid: int, limit: int = 20) -> list[Battle]:
        """Return the most recent battles of a character."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM battles WHERE characterid = ? ORDER BY id DESC LIMIT ?",
                (characterid, limit),
            ).fetchall()
        return [self._from_row(r) for r in rows]
