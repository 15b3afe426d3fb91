from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Character(BaseModel):
    """A user's RPG avatar. Level and max HP derive from ``xp``."""

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    userid: int
    xp: int = Field(default=0, ge=0)
    hp: int = Field(default=0, ge=0)
    timecreated: int = 0

    @property
    def is_persisted(self) -> bool:
        return self.id is not None
