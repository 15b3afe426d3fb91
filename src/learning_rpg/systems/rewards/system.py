"""Reward system: items and XP handed out in reaction to battles and quizzes."""
from __future__ import annotations

import logging
import random
from typing import Any, Sequence

from learning_rpg.engine.event_bus import EventBus
from learning_rpg.mechanics.loot import calculate_stack_loss, pick_random
from learning_rpg.models.battle import BattleState
from learning_rpg.models.character import Character
from learning_rpg.models.event import BattleEnded
from learning_rpg.models.item import InventoryItem, ItemDefinition
from learning_rpg.storage.database import Database
from learning_rpg.systems.character.system import CharacterSystem

logger = logging.getLogger(__name__)

DEFAULT_XP_PER_ANSWER = 4
DEFAULT_XP_PER_CORRECT = 19


class RewardSystem:
    """Victory grants a random item, defeat takes part of a random stack.

    Quiz hooks grant XP per answer and an item for a flawless attempt.
    """

    def __init__(
        self,
        db: Database,
        repos: dict[str, Any],
        characters: CharacterSystem,
        rng: random.Random | None = None,
        xp_per_answer: int = DEFAULT_XP_PER_ANSWER,
        xp_per_correct: int = DEFAULT_XP_PER_CORRECT,
    ) -> None:
        self.db = db
        self.repos = repos
        self.characters = characters
        self.rng = rng or random.Random()
        self.xp_per_answer = xp_per_answer
        self.xp_per_correct = xp_per_correct

    def register(self, bus: EventBus) -> None:
        bus.subscribe(BattleEnded, self.on_battle_ended)

    # -- Battle outcomes --

    def on_battle_ended(self, event: BattleEnded) -> None:
        character = self.characters.get_character(event.characterid)
        if event.newstate == BattleState.VICTORY:
            self.grant_random_item(character)
        elif event.newstate == BattleState.DEFEAT:
            self.lose_random_item(character)

    def grant_random_item(self, character: Character) -> ItemDefinition | None:
        """Give one uniformly chosen item. No-op when no items are defined."""
        item = pick_random(self.repos["item"].list_all(), self.rng)
        if item is None:
            logger.warning("No items defined, nothing to grant to character %s", character.id)
            return None
        self.characters.add_item_to_inventory(character, item.id)
        logger.info("Character %s received item %s", character.id, item.name)
        return item

    def lose_random_item(self, character: Character) -> InventoryItem | None:
        """Shrink or remove one uniformly chosen inventory instance.

        Returns the instance as it was before the loss, or None for an empty
        inventory.
        """
        inventory = self.repos["inventory"]
        instance = pick_random(inventory.list_for_character(character.id), self.rng)
        if instance is None:
            return None
        before = instance.model_copy()
        loss = calculate_stack_loss(instance.stack)
        if loss["remaining"] > 0:
            instance.stack = loss["remaining"]
            inventory.update(instance)
        else:
            inventory.delete(instance.id)
        logger.info(
            "Character %s lost %d of item %s", character.id, loss["lost"], instance.itemid
        )
        return before

    # -- Quiz hooks --

    def on_quiz_attempt_updated(self, userid: int, answered: int) -> None:
        """Some questions were answered; the grade is not known yet."""
        if answered <= 0:
            return
        with self.db.transaction():
            character = self.characters.get_user_character(userid)
            self.characters.grant_xp(character, answered * self.xp_per_answer)

    def on_quiz_attempt_submitted(self, userid: int, results: Sequence[bool]) -> None:
        """Grant XP per correct answer and an item for a flawless attempt."""
        with self.db.transaction():
            character = self.characters.get_user_character(userid)
            correct = sum(1 for r in results if r)
            self.characters.grant_xp(character, correct * self.xp_per_correct)
            if results and correct == len(results):
                self.grant_random_item(character)
