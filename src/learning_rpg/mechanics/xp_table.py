"""XP, level and hitpoint tables. Pure math, no I/O."""
from __future__ import annotations

from typing import Any

MAX_LEVEL = 100
DEFAULT_BASE_XP_TARGET = 120
DEFAULT_GROWTH_MULTIPLIER = 1.1

_HP_BASE = 40.0
_HP_PER_LEVEL = 16.0
_HP_GROWTH = 1.05


class LevelTable:
    """XP requirements per level, computed once from the configured curve.

    Level 1 needs 0 XP, level 2 needs ``base_xp_target``, and every level after
    that needs ``growth_multiplier`` times the previous requirement. Build a new
    table when the configuration changes.
    """

    def __init__(
        self,
        base_xp_target: int = DEFAULT_BASE_XP_TARGET,
        growth_multiplier: float = DEFAULT_GROWTH_MULTIPLIER,
        max_level: int = MAX_LEVEL,
    ) -> None:
        self.base_xp_target = int(base_xp_target)
        self.growth_multiplier = float(growth_multiplier)
        self.max_level = max_level
        self._levels = self._build()

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> LevelTable:
        """Build a table from the ``[rpg]`` section of config.toml."""
        rpg_cfg = config.get("rpg", {})
        return cls(
            base_xp_target=rpg_cfg.get("base_xp_target", DEFAULT_BASE_XP_TARGET),
            growth_multiplier=rpg_cfg.get("growth_multiplier", DEFAULT_GROWTH_MULTIPLIER),
        )

    def _build(self) -> dict[int, int]:
        levels = {1: 0}
        xp = float(self.base_xp_target)
        for level in range(2, self.max_level + 1):
            levels[level] = int(xp)
            xp *= self.growth_multiplier
        return levels

    @property
    def levels(self) -> dict[int, int]:
        """Required XP indexed by level."""
        return dict(self._levels)

    def xp_required_for_level(self, level: int) -> int | None:
        """XP required to reach the given level, or None past the cap."""
        return self._levels.get(level)

    def level_from_xp(self, xp: int) -> int:
        """Determine level from total XP.

        Scans upward and stops at the first level whose requirement is at least
        ``xp``: exactly reaching a requirement keeps that level, and any XP past
        it already counts as the next one. Past the last requirement the level
        is capped.
        """
        for lvl, required in self._levels.items():
            if required >= xp:
                return lvl
        return self.max_level

    def remaining_xp_until_next_level(self, xp: int) -> int:
        """XP still missing for the next level, 0 at the level cap."""
        target = self.xp_required_for_level(self.level_from_xp(xp) + 1)
        if target is None:
            return 0
        return target - xp

    def max_hp_from_level(self, level: int) -> int:
        return max_hp_from_level(level)


def max_hp_from_level(level: int) -> int:
    """Max HP for a character or monster of the given level.

    The 5% growth compounds once per level and only the final value is
    truncated.
    """
    hp = _HP_BASE + float(level) * _HP_PER_LEVEL
    for _ in range(level):
        hp *= _HP_GROWTH
    return int(hp)
