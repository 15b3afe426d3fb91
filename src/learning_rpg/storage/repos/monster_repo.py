from __future__ import annotations

from learning_rpg.models.monster import MonsterTemplate
from learning_rpg.storage.repos.base import RecordRepo


class MonsterRepo(RecordRepo[MonsterTemplate]):
    """Repository for monster templates."""

    table = "monsters"
    model = MonsterTemplate
