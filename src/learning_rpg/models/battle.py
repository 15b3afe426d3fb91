from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class BattleState(IntEnum):
    NOT_STARTED = 0
    ONGOING = 1
    VICTORY = 2
    DEFEAT = 3
    RETREATED = 4


TERMINAL_STATES = frozenset({BattleState.VICTORY, BattleState.DEFEAT, BattleState.RETREATED})
OPEN_STATES = frozenset({BattleState.NOT_STARTED, BattleState.ONGOING})


class Battle(BaseModel):
    """One encounter between a character and a spawned monster.

    A fresh battle has no state until it is set up.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    characterid: int = 0
    monsterid: int = 0
    monsterhp: int = 0
    timecreated: int = 0
    state: Optional[BattleState] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def is_set_up(self) -> bool:
        return self.characterid != 0

    def can_retreat(self) -> bool:
        return self.state in OPEN_STATES

    def has_ended(self) -> bool:
        return self.state in TERMINAL_STATES

    def is_ongoing(self) -> bool:
        return self.state == BattleState.ONGOING

    def snapshot(self) -> dict[str, Any]:
        """Plain record of the battle, as stored."""
        record = self.model_dump(mode="json")
        if record["id"] is None:
            del record["id"]
        return record
