"""Combat math. Damage ranges and rolls, no I/O."""
from __future__ import annotations

import random
from dataclasses import dataclass

PLAYER_DAMAGE_MIN_PER_LEVEL = 2
PLAYER_DAMAGE_MAX_PER_LEVEL = 4
MONSTER_DAMAGE_MIN_PER_LEVEL = 3
MONSTER_DAMAGE_MAX_PER_LEVEL = 4


@dataclass
class DamageRoll:
    low: int
    high: int
    total: int = 0


def player_damage_range(level: int) -> tuple[int, int]:
    """Inclusive damage range for a character attack."""
    return level * PLAYER_DAMAGE_MIN_PER_LEVEL, level * PLAYER_DAMAGE_MAX_PER_LEVEL


def monster_damage_range(level: int) -> tuple[int, int]:
    """Inclusive damage range for a monster counter-attack."""
    return level * MONSTER_DAMAGE_MIN_PER_LEVEL, level * MONSTER_DAMAGE_MAX_PER_LEVEL


def roll_damage(low: int, high: int, rng: random.Random | None = None) -> DamageRoll:
    """Roll uniformly in [low, high], both ends included."""
    rng = rng or random
    return DamageRoll(low=low, high=high, total=rng.randint(low, high))


def roll_player_damage(level: int, rng: random.Random | None = None) -> DamageRoll:
    return roll_damage(*player_damage_range(level), rng=rng)


def roll_monster_damage(level: int, rng: random.Random | None = None) -> DamageRoll:
    return roll_damage(*monster_damage_range(level), rng=rng)
