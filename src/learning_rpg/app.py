"""Main application bootstrap: wires storage, systems and observers together."""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Sequence

from learning_rpg.models.battle import Battle, BattleState
from learning_rpg.models.character import Character

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config.toml"
RECENT_BATTLES = 5


def _load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config.toml from the project root."""
    import tomllib

    config_path = config_path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


class RpgApp:
    """Entry point the web handler (or the CLI) calls into.

    Components are created lazily on first use.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        rng: random.Random | None = None,
    ):
        self.config = config if config is not None else _load_config()
        self.rng = rng or random.Random()

        self._db = None
        self._repos: dict[str, Any] | None = None
        self._levels = None
        self._bus = None
        self._characters = None
        self._battles = None
        self._rewards = None
        self._catalog = None

    # -- Component initialization (lazy) --

    @property
    def title(self) -> str:
        return self.config.get("rpg", {}).get("title", "RPG")

    @property
    def db(self):
        if self._db is None:
            from learning_rpg.storage.database import Database

            db_path = self.config.get("storage", {}).get("db_path", "data/rpg.db")
            self._db = Database(db_path)
            self._db.initialize()
        return self._db

    @property
    def repos(self) -> dict[str, Any]:
        if self._repos is None:
            from learning_rpg.storage.repos import (
                BattleRepo,
                CharacterRepo,
                EventLedgerRepo,
                InventoryRepo,
                ItemRepo,
                MonsterRepo,
            )

            self._repos = {
                "character": CharacterRepo(self.db),
                "battle": BattleRepo(self.db),
                "monster": MonsterRepo(self.db),
                "item": ItemRepo(self.db),
                "inventory": InventoryRepo(self.db),
                "events": EventLedgerRepo(self.db),
            }
        return self._repos

    @property
    def levels(self):
        if self._levels is None:
            from learning_rpg.mechanics.xp_table import LevelTable

            self._levels = LevelTable.from_config(self.config)
        return self._levels

    @property
    def bus(self):
        if self._bus is None:
            from learning_rpg.engine.event_bus import EventBus

            self._bus = EventBus(ledger=self.repos["events"])
        return self._bus

    @property
    def characters(self):
        if self._characters is None:
            from learning_rpg.systems.character.system import CharacterSystem

            self._characters = CharacterSystem(self.repos, self.levels, self.bus)
        return self._characters

    @property
    def battles(self):
        if self._battles is None:
            from learning_rpg.systems.combat.system import DEFAULT_ENCOUNTER_THRESHOLD, BattleSystem

            threshold = self.config.get("exploration", {}).get(
                "encounter_threshold", DEFAULT_ENCOUNTER_THRESHOLD
            )
            self._battles = BattleSystem(
                self.db, self.repos, self.characters, self.bus,
                rng=self.rng, encounter_threshold=threshold,
            )
            self.rewards  # subscribes the reward observer
        return self._battles

    @property
    def rewards(self):
        if self._rewards is None:
            from learning_rpg.systems.rewards.system import (
                DEFAULT_XP_PER_ANSWER,
                DEFAULT_XP_PER_CORRECT,
                RewardSystem,
            )

            rewards_cfg = self.config.get("rewards", {})
            self._rewards = RewardSystem(
                self.db, self.repos, self.characters, rng=self.rng,
                xp_per_answer=rewards_cfg.get("xp_per_answer", DEFAULT_XP_PER_ANSWER),
                xp_per_correct=rewards_cfg.get("xp_per_correct", DEFAULT_XP_PER_CORRECT),
            )
            self._rewards.register(self.bus)
        return self._rewards

    @property
    def catalog(self):
        if self._catalog is None:
            from learning_rpg.systems.catalog.system import CatalogSystem

            self._catalog = CatalogSystem(self.repos)
        return self._catalog

    # -- Battle operations --

    def start_battle(self, battleid: int) -> Battle:
        return self.battles.start_battle(battleid)

    def decline_battle(self, battleid: int) -> Battle:
        return self.battles.decline_battle(battleid)

    def attack_monster(self, battleid: int):
        return self.battles.attack_monster(battleid)

    def explore(self, userid: int) -> Battle | None:
        character = self.user_character(userid)
        return self.battles.explore(character)

    # -- Character --

    def user_character(self, userid: int) -> Character:
        with self.db.transaction():
            return self.characters.get_user_character(userid)

    def adventure(self, userid: int) -> dict[str, Any]:
        """Everything the adventure page shows for a user."""
        character = self.user_character(userid)
        level = self.characters.level(character)
        ongoing = self.battles.find_for_character(character.id, BattleState.ONGOING)
        pending = None
        if ongoing is None:
            pending = self.battles.find_for_character(character.id, BattleState.NOT_STARTED)
        battle = ongoing or pending
        monster = self.repos["monster"].get(battle.monsterid) if battle else None
        recent = self.repos["battle"].list_for_character(character.id, limit=RECENT_BATTLES)
        return {
            "title": self.title,
            "character": character,
            "xp": character.xp,
            "level": level,
            "remainingxp": self.levels.remaining_xp_until_next_level(character.xp),
            "targetxp": self.levels.xp_required_for_level(level + 1),
            "hp": character.hp,
            "maxhp": self.characters.max_hp(character),
            "inventory": self.characters.inventory(character),
            "ongoingbattle": ongoing,
            "pendingbattle": pending,
            "monster": monster,
            "recentbattles": recent,
        }

    def roster(self) -> list[tuple[int, int]]:
        """Every character as (userid, level), for the administration page."""
        return self.characters.list_characters()

    def history(self, userid: int, event_type: str | None = None, limit: int = 20) -> list[dict]:
        """Recorded XP and battle events of a user, newest first."""
        return self.repos["events"].get_by_user(userid, event_type=event_type, limit=limit)

    # -- Quiz hooks --

    def quiz_attempt_updated(self, userid: int, answered: int) -> None:
        self.rewards.on_quiz_attempt_updated(userid, answered)

    def quiz_attempt_submitted(self, userid: int, results: Sequence[bool]) -> None:
        self.rewards.on_quiz_attempt_submitted(userid, results)

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None
