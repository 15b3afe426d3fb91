"""Character system: XP, hitpoints and inventory of a user's character."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from learning_rpg.engine.event_bus import EventBus
from learning_rpg.errors import InvariantError, NotFoundError
from learning_rpg.mechanics.xp_table import LevelTable
from learning_rpg.models.character import Character
from learning_rpg.models.event import XpGained
from learning_rpg.models.item import InventoryEntry, InventoryItem

logger = logging.getLogger(__name__)


class CharacterSystem:
    """Owns every change to a character's xp and hp.

    ``take_damage`` and ``restore_max_hp`` only change the record in memory;
    ``grant_xp`` persists and emits ``XpGained``.
    """

    def __init__(
        self,
        repos: dict[str, Any],
        levels: LevelTable,
        bus: EventBus,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.repos = repos
        self.levels = levels
        self.bus = bus
        self.clock = clock

    # -- Derived stats --

    def level(self, character: Character) -> int:
        return self.levels.level_from_xp(character.xp)

    def max_hp(self, character: Character) -> int:
        return self.levels.max_hp_from_level(self.level(character))

    # -- Lookup --

    def get_character(self, characterid: int) -> Character:
        character = self.repos["character"].get(characterid)
        if character is None:
            raise NotFoundError("character", characterid)
        return character

    def get_user_character(self, userid: int) -> Character:
        """Find the user's character, creating it at level 1 with full HP."""
        character = self.repos["character"].get_by_user(userid)
        if character is not None:
            return character
        character = Character(
            userid=userid,
            xp=0,
            hp=self.levels.max_hp_from_level(1),
            timecreated=int(self.clock()),
        )
        self.repos["character"].insert(character)
        logger.info("Created character %s for user %s", character.id, userid)
        return character

    def list_characters(self) -> list[tuple[int, int]]:
        """Every character as ``(userid, level)``, ordered by id."""
        return [
            (character.userid, self.level(character))
            for character in self.repos["character"].list_all()
        ]

    def save(self, character: Character) -> None:
        self.repos["character"].update(character)

    # -- Progression --

    def grant_xp(self, character: Character, amount: int) -> XpGained | None:
        """Add XP, heal fully on level-up, persist and emit ``XpGained``.

        Zero or negative amounts are ignored.
        """
        if amount <= 0:
            return None
        if not character.is_persisted:
            raise InvariantError("Unable to grant xp to a character not yet stored")

        snapshot = character.model_dump(mode="json")
        oldxp = character.xp
        oldlevel = self.levels.level_from_xp(oldxp)
        character.xp = oldxp + amount
        newlevel = self.levels.level_from_xp(character.xp)
        if newlevel > oldlevel:
            character.hp = self.levels.max_hp_from_level(newlevel)
            logger.info(
                "Character %s reached level %d (was %d)", character.id, newlevel, oldlevel
            )
        self.save(character)

        event = XpGained.create(
            objectid=character.id,
            userid=character.userid,
            oldlevel=oldlevel,
            newlevel=newlevel,
            leveledup=newlevel > oldlevel,
            xpgained=amount,
            oldxp=oldxp,
            newxp=character.xp,
            snapshot=snapshot,
        )
        self.bus.emit(event)
        return event

    def take_damage(self, character: Character, amount: int) -> None:
        """Lower HP, never below zero. Not persisted; caller checks for death."""
        character.hp = max(character.hp - max(amount, 0), 0)

    def restore_max_hp(self, character: Character) -> None:
        """Heal to the max HP of the current level. Not persisted."""
        character.hp = self.max_hp(character)

    # -- Inventory --

    def add_item_to_inventory(self, character: Character, itemid: int) -> InventoryItem:
        """Give one unit of an item, stacking onto an existing instance when allowed."""
        if not character.is_persisted:
            raise InvariantError("Unable to give item to character not yet stored")
        item = self.repos["item"].get(itemid)
        if item is None:
            raise InvariantError(f"Invalid itemid provided: {itemid}")

        inventory = self.repos["inventory"]
        if item.stackable:
            instance = inventory.get_for(character.id, itemid)
            if instance is not None:
                instance.stack += 1
                inventory.update(instance)
                return instance

        instance = InventoryItem(
            itemid=itemid,
            characterid=character.id,
            stack=1,
            timecreated=int(self.clock()),
        )
        return inventory.insert(instance)

    def inventory(self, character: Character) -> list[InventoryEntry]:
        """List the character's items, dropping instances of deleted items."""
        instances = self.repos["inventory"].list_for_character(character.id)
        definitions = self.repos["item"].get_many(sorted({i.itemid for i in instances}))
        entries: list[InventoryEntry] = []
        for instance in instances:
            item = definitions.get(instance.itemid)
            if item is None:
                logger.warning(
                    "Removing orphaned inventory rows for deleted item %s", instance.itemid
                )
                self.repos["inventory"].delete_for_item(instance.itemid)
                continue
            entries.append(InventoryEntry(instance=instance, item=item))
        return entries
