"""Battle system: the battle state machine and the attack turn."""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Callable

from learning_rpg.engine.event_bus import EventBus
from learning_rpg.errors import InvariantError, NotFoundError
from learning_rpg.mechanics.combat_math import roll_monster_damage, roll_player_damage
from learning_rpg.mechanics.loot import pick_random
from learning_rpg.models.battle import Battle, BattleState
from learning_rpg.models.character import Character
from learning_rpg.models.event import BattleEnded
from learning_rpg.models.monster import MonsterTemplate
from learning_rpg.storage.database import Database
from learning_rpg.systems.character.system import CharacterSystem

logger = logging.getLogger(__name__)

DEFAULT_ENCOUNTER_THRESHOLD = 50


@dataclass
class AttackResult:
    battle: Battle
    character: Character
    player_damage: int = 0
    monster_damage: int | None = None

    @property
    def outcome(self) -> BattleState | None:
        return self.battle.state


class BattleSystem:
    """Drives battles from NOT_STARTED through ONGOING to a terminal state.

    Terminal transitions emit ``BattleEnded``; plain ``change_state`` calls
    never do.
    """

    def __init__(
        self,
        db: Database,
        repos: dict[str, Any],
        characters: CharacterSystem,
        bus: EventBus,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        encounter_threshold: int = DEFAULT_ENCOUNTER_THRESHOLD,
    ) -> None:
        self.db = db
        self.repos = repos
        self.characters = characters
        self.bus = bus
        self.rng = rng or random.Random()
        self.clock = clock
        self.encounter_threshold = encounter_threshold

    # -- Lookup --

    def get_battle(self, battleid: int) -> Battle:
        battle = self.repos["battle"].get(battleid)
        if battle is None:
            raise NotFoundError("battle", battleid)
        return battle

    def get_monster(self, monsterid: int) -> MonsterTemplate:
        monster = self.repos["monster"].get(monsterid)
        if monster is None:
            raise NotFoundError("monster", monsterid)
        return monster

    def find_for_character(self, characterid: int, state: BattleState) -> Battle | None:
        return self.repos["battle"].find_for_character(characterid, state)

    # -- State machine --

    def setup(self, battle: Battle, characterid: int) -> Battle:
        """Spawn a random monster for a fresh battle and store it.

        Leaves the battle untouched when no monster templates exist.
        """
        if battle.is_persisted:
            raise InvariantError("Battle is already setup", details={"id": battle.id})
        if battle.characterid != 0 or battle.monsterid != 0 or battle.state is not None:
            raise InvariantError("Battle has already been setup")

        monster = pick_random(self.repos["monster"].list_all(), self.rng)
        if monster is None:
            logger.warning("No monsters defined, cannot set up a battle")
            return battle

        battle.characterid = characterid
        battle.monsterid = monster.id
        battle.monsterhp = monster.hp
        battle.timecreated = int(self.clock())
        battle.state = BattleState.NOT_STARTED
        self.repos["battle"].insert(battle)
        logger.info(
            "Battle %s set up: character %s vs %s", battle.id, characterid, monster.name
        )
        return battle

    def change_state(self, battle: Battle, state: int) -> None:
        """Set a new state. Not persisted; the caller checks the transition."""
        if state < BattleState.NOT_STARTED or state > BattleState.RETREATED:
            raise InvariantError(f"Invalid battle state {state}")
        battle.state = BattleState(state)

    def damage_monster(self, battle: Battle, amount: int) -> None:
        """Hit the monster. A killing blow wins the battle.

        On victory the battle is stored, the character gains XP equal to the
        killing blow and ``BattleEnded`` is emitted. Otherwise nothing is stored;
        the counter-attack in ``damage_character`` persists the battle.
        """
        snapshot = battle.snapshot()
        battle.monsterhp -= max(amount, 0)
        if battle.monsterhp > 0:
            return

        battle.monsterhp = 0
        oldstate = battle.state
        self.change_state(battle, BattleState.VICTORY)
        self.repos["battle"].update(battle)
        character = self.characters.get_character(battle.characterid)
        self.characters.grant_xp(character, amount)
        logger.info("Battle %s won by character %s", battle.id, character.id)
        self._emit_ended(battle, character, oldstate, snapshot)

    def damage_character(self, battle: Battle, amount: int) -> Character:
        """Hit the character. At zero HP the character respawns and the battle is lost.

        Both the character and the battle are stored in every case.
        """
        if not battle.is_set_up:
            raise InvariantError("This battle has not been setup")
        snapshot = battle.snapshot()
        character = self.characters.get_character(battle.characterid)
        self.characters.take_damage(character, amount)
        if character.hp == 0:
            self.characters.restore_max_hp(character)
            oldstate = battle.state
            self.change_state(battle, BattleState.DEFEAT)
            self.characters.save(character)
            self.repos["battle"].update(battle)
            logger.info("Battle %s lost by character %s", battle.id, character.id)
            self._emit_ended(battle, character, oldstate, snapshot)
        self.characters.save(character)
        self.repos["battle"].update(battle)
        return character

    def _emit_ended(
        self,
        battle: Battle,
        character: Character,
        oldstate: BattleState | None,
        snapshot: dict[str, Any],
    ) -> None:
        event = BattleEnded.create(
            objectid=battle.id,
            userid=character.userid,
            characterid=battle.characterid,
            oldstate=-1 if oldstate is None else int(oldstate),
            newstate=int(battle.state),
            snapshot=snapshot,
        )
        self.bus.emit(event)

    # -- Operations --

    def start_battle(self, battleid: int) -> Battle:
        """Accept a pending battle."""
        with self.db.transaction():
            battle = self.get_battle(battleid)
            if battle.state != BattleState.NOT_STARTED:
                raise InvariantError("Battle cannot already be started.", details={"id": battleid})
            ongoing = self.find_for_character(battle.characterid, BattleState.ONGOING)
            if ongoing is not None:
                raise InvariantError(
                    "Character already has an ongoing battle", details={"id": ongoing.id}
                )
            self.change_state(battle, BattleState.ONGOING)
            self.repos["battle"].update(battle)
        return battle

    def decline_battle(self, battleid: int) -> Battle:
        """Decline a pending battle or retreat from an ongoing one."""
        with self.db.transaction():
            battle = self.get_battle(battleid)
            if not battle.can_retreat():
                raise InvariantError("Battle has already ended.", details={"id": battleid})
            self.change_state(battle, BattleState.RETREATED)
            self.repos["battle"].update(battle)
        return battle

    def attack_monster(self, battleid: int) -> AttackResult:
        """One turn: the character strikes first, a surviving monster strikes back."""
        with self.db.transaction():
            battle = self.get_battle(battleid)
            if not battle.is_ongoing():
                raise InvariantError("Battle must be ongoing.", details={"id": battleid})
            character = self.characters.get_character(battle.characterid)
            level = self.characters.level(character)
            hit = roll_player_damage(level, self.rng)
            self.damage_monster(battle, hit.total)
            result = AttackResult(battle=battle, character=character, player_damage=hit.total)
            if not battle.has_ended():
                monster = self.get_monster(battle.monsterid)
                counter = roll_monster_damage(monster.level, self.rng)
                result.character = self.damage_character(battle, counter.total)
                result.monster_damage = counter.total
            else:
                result.character = self.characters.get_character(battle.characterid)
        return result

    def explore(self, character: Character) -> Battle | None:
        """Look for trouble: resume the open battle or maybe provoke a new one."""
        with self.db.transaction():
            battle = self.find_for_character(character.id, BattleState.ONGOING)
            if battle is not None:
                return battle
            battle = self.find_for_character(character.id, BattleState.NOT_STARTED)
            if battle is not None:
                return battle
            if self.rng.randint(0, 100) <= self.encounter_threshold:
                return None
            battle = self.setup(Battle(), character.id)
        return battle if battle.is_persisted else None
