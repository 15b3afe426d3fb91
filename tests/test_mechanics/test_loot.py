"""Tests for src/learning_rpg/mechanics/loot.py."""
from __future__ import annotations

import pytest

from learning_rpg.mechanics.loot import calculate_stack_loss, pick_random


class TestCalculateStackLoss:
    @pytest.mark.parametrize("stack, lost, remaining", [
        (1, 1, 0),
        (2, 1, 1),
        (3, 2, 1),
        (5, 4, 1),
        (10, 8, 2),
        (11, 8, 3),
        (100, 80, 20),
    ])
    def test_loss(self, stack, lost, remaining):
        assert calculate_stack_loss(stack) == {"lost": lost, "remaining": remaining}

    @pytest.mark.parametrize("stack", range(2, 60))
    def test_larger_stacks_keep_at_least_one(self, stack):
        assert calculate_stack_loss(stack)["remaining"] >= 1


class TestPickRandom:
    def test_empty(self):
        assert pick_random([]) is None

    def test_single(self):
        assert pick_random(["only"]) == "only"

    def test_uses_given_source(self, seeded_rng):
        picks = {pick_random([1, 2, 3], seeded_rng) for _ in range(100)}
        assert picks == {1, 2, 3}
