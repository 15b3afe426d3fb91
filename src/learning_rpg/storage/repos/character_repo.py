from __future__ import annotations

from learning_rpg.models.character import Character
from learning_rpg.storage.repos.base import RecordRepo


class CharacterRepo(RecordRepo[Character]):
    """Repository for player character records."""

    table = "characters"
    model = Character

    def get_by_user(self, userid: int) -> Character | None:
        """Fetch the character owned by a platform user."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE userid = ?", (userid,)
            ).fetchone()
        return self._from_row(row)
