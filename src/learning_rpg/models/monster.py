from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MonsterTemplate(BaseModel):
    """Reference definition a battle spawns its monster from.

    ``hp`` is the maximum; the current HP of a fight lives on the battle.
    """

    model_config = ConfigDict(from_attributes=True, validate_assignment=True)

    id: Optional[int] = None
    name: str = ""
    hp: int = Field(default=100, gt=0)
    level: int = Field(default=3, gt=0)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None
