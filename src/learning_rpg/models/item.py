from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemRarity(str, Enum):
    VERY_COMMON = "very_common"
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    ULTRA_RARE = "ultra_rare"
    LEGENDARY = "legendary"


class ItemType(str, Enum):
    FOOD = "food"
    POTION = "potion"
    WEAPON = "weapon"
    TOOL = "tool"
    OTHER = "other"


class ItemDefinition(BaseModel):
    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    name: str = ""
    rarity: ItemRarity = ItemRarity.COMMON
    type: ItemType = ItemType.OTHER
    stackable: bool = False

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


class InventoryItem(BaseModel):
    """One item instance owned by a character."""

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    itemid: int
    characterid: int
    stack: int = Field(default=1, ge=1)
    timecreated: int = 0


class InventoryEntry(BaseModel):
    """An inventory instance joined with its item definition, for display."""

    instance: InventoryItem
    item: ItemDefinition
