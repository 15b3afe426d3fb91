from __future__ import annotations

import time
from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError, model_validator

from learning_rpg.errors import InvariantError
from learning_rpg.models.battle import OPEN_STATES, TERMINAL_STATES


class EventType(str, Enum):
    XP_GAINED = "XP_GAINED"
    BATTLE_ENDED = "BATTLE_ENDED"


class RpgEvent(BaseModel):
    """Base for typed domain events.

    ``objectid`` points at the record the event is about and ``snapshot`` holds
    that record as it was before the change.
    """

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[EventType]
    objecttable: ClassVar[str]

    objectid: Optional[int] = None
    userid: Optional[int] = None
    timecreated: int = Field(default_factory=lambda: int(time.time()))
    snapshot: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def create(cls, **data: Any):
        """Build and validate the event, raising InvariantError on bad payloads."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvariantError(
                f"Invalid {cls.event_type.value} payload",
                details={"errors": [err["msg"] for err in exc.errors()]},
            ) from exc

    def payload(self) -> dict[str, Any]:
        """Event-specific fields, without the common envelope."""
        return self.model_dump(
            mode="json", exclude={"objectid", "userid", "timecreated", "snapshot"}
        )


class XpGained(RpgEvent):
    """Fired every time a character gains XP."""

    event_type: ClassVar[EventType] = EventType.XP_GAINED
    objecttable: ClassVar[str] = "characters"

    oldlevel: StrictInt
    newlevel: StrictInt
    leveledup: StrictBool
    xpgained: StrictInt
    oldxp: StrictInt
    newxp: StrictInt

    @model_validator(mode="after")
    def _check_progression(self) -> XpGained:
        if self.xpgained <= 0:
            raise ValueError("The 'xpgained' value cannot be less than or equal to 0.")
        if self.oldlevel > self.newlevel:
            raise ValueError("The 'oldlevel' value cannot be greater than 'newlevel'.")
        if self.oldxp > self.newxp:
            raise ValueError("The 'oldxp' value cannot be greater than 'newxp'.")
        return self


class BattleEnded(RpgEvent):
    """Fired when a battle moves from an open state to a terminal one."""

    event_type: ClassVar[EventType] = EventType.BATTLE_ENDED
    objecttable: ClassVar[str] = "battles"

    characterid: StrictInt
    oldstate: StrictInt
    newstate: StrictInt

    @model_validator(mode="after")
    def _check_transition(self) -> BattleEnded:
        if self.oldstate not in OPEN_STATES:
            raise ValueError("oldstate must be either NOT_STARTED or ONGOING.")
        if self.newstate not in TERMINAL_STATES:
            raise ValueError("newstate must be either VICTORY, DEFEAT, or RETREATED.")
        return self
