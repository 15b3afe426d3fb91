from __future__ import annotations

from learning_rpg.storage.repos.battle_repo import BattleRepo
from learning_rpg.storage.repos.character_repo import CharacterRepo
from learning_rpg.storage.repos.event_ledger import EventLedgerRepo
from learning_rpg.storage.repos.item_repo import InventoryRepo, ItemRepo
from learning_rpg.storage.repos.monster_repo import MonsterRepo

__all__ = [
    "BattleRepo",
    "CharacterRepo",
    "EventLedgerRepo",
    "InventoryRepo",
    "ItemRepo",
    "MonsterRepo",
]
