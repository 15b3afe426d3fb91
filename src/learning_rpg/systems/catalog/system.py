"""Catalog system: administration of monster templates and item definitions."""
from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from learning_rpg.errors import InvariantError, NotFoundError
from learning_rpg.models.item import ItemDefinition, ItemRarity, ItemType
from learning_rpg.models.monster import MonsterTemplate

logger = logging.getLogger(__name__)

_MONSTER_FIELDS = ("name", "hp", "level")
_ITEM_FIELDS = ("name", "rarity", "type", "stackable")


def _invalid(entity: str, exc: ValidationError) -> InvariantError:
    return InvariantError(
        f"Invalid {entity} values",
        details={"errors": [err["msg"] for err in exc.errors()]},
    )


class CatalogSystem:
    def __init__(self, repos: dict[str, Any]) -> None:
        self.repos = repos

    # -- Monsters --

    def list_monsters(self) -> list[MonsterTemplate]:
        return self.repos["monster"].list_all()

    def get_monster(self, monsterid: int) -> MonsterTemplate:
        monster = self.repos["monster"].get(monsterid)
        if monster is None:
            raise NotFoundError("monster", monsterid)
        return monster

    def create_monster(self, name: str, hp: int = 100, level: int = 3) -> MonsterTemplate:
        try:
            monster = MonsterTemplate(name=name, hp=hp, level=level)
        except ValidationError as exc:
            raise _invalid("monster", exc) from exc
        self.repos["monster"].insert(monster)
        logger.info("Created monster %s (%s)", monster.id, name)
        return monster

    def update_monster(self, monsterid: int, **changes: Any) -> MonsterTemplate:
        """Change name, hp or level. Running battles keep their own HP."""
        monster = self.get_monster(monsterid)
        try:
            for field in _MONSTER_FIELDS:
                if changes.get(field) is not None:
                    setattr(monster, field, changes[field])
        except ValidationError as exc:
            raise _invalid("monster", exc) from exc
        self.repos["monster"].update(monster)
        return monster

    def delete_monster(self, monster: MonsterTemplate) -> None:
        if not monster.is_persisted:
            raise InvariantError("This monster does not yet have an id, and can't be deleted.")
        self.repos["monster"].delete(monster.id)
        logger.info("Deleted monster %s", monster.id)

    # -- Items --

    def list_items(self) -> list[ItemDefinition]:
        return self.repos["item"].list_all()

    def get_item(self, itemid: int) -> ItemDefinition:
        item = self.repos["item"].get(itemid)
        if item is None:
            raise NotFoundError("item", itemid)
        return item

    def create_item(
        self,
        name: str,
        rarity: ItemRarity | str = ItemRarity.COMMON,
        type: ItemType | str = ItemType.OTHER,
        stackable: bool = False,
    ) -> ItemDefinition:
        try:
            item = ItemDefinition(name=name, rarity=rarity, type=type, stackable=stackable)
        except ValidationError as exc:
            raise _invalid("item", exc) from exc
        self.repos["item"].insert(item)
        logger.info("Created item %s (%s)", item.id, name)
        return item

    def update_item(self, itemid: int, **changes: Any) -> ItemDefinition:
        item = self.get_item(itemid)
        try:
            for field in _ITEM_FIELDS:
                if changes.get(field) is not None:
                    setattr(item, field, changes[field])
        except ValidationError as exc:
            raise _invalid("item", exc) from exc
        self.repos["item"].update(item)
        return item

    def delete_item(self, item: ItemDefinition) -> None:
        """Delete a definition. Held instances are pruned when inventories are listed."""
        if not item.is_persisted:
            raise InvariantError("This item does not yet have an id, and can't be deleted.")
        self.repos["item"].delete(item.id)
        logger.info("Deleted item %s", item.id)
