"""Tests for src/learning_rpg/mechanics/combat_math.py."""
from __future__ import annotations

import pytest

from learning_rpg.mechanics.combat_math import (
    monster_damage_range,
    player_damage_range,
    roll_damage,
    roll_monster_damage,
    roll_player_damage,
)


class TestDamageRanges:
    @pytest.mark.parametrize("level, expected", [(1, (2, 4)), (3, (6, 12)), (10, (20, 40))])
    def test_player(self, level, expected):
        assert player_damage_range(level) == expected

    @pytest.mark.parametrize("level, expected", [(1, (3, 4)), (3, (9, 12)), (10, (30, 40))])
    def test_monster(self, level, expected):
        assert monster_damage_range(level) == expected


class TestRollDamage:
    def test_stays_in_inclusive_range(self, seeded_rng):
        totals = {roll_damage(2, 4, seeded_rng).total for _ in range(200)}
        assert totals == {2, 3, 4}

    def test_player_roll(self, seeded_rng):
        for _ in range(50):
            result = roll_player_damage(5, seeded_rng)
            assert 10 <= result.total <= 20
            assert (result.low, result.high) == (10, 20)

    def test_monster_roll(self, seeded_rng):
        for _ in range(50):
            assert 6 <= roll_monster_damage(2, seeded_rng).total <= 8
