"""Tests for src/learning_rpg/systems/rewards/system.py."""
from __future__ import annotations

import pytest

from learning_rpg.models.battle import BattleState
from learning_rpg.models.event import BattleEnded


def _stacks(app, character):
    return [e.instance.stack for e in app.characters.inventory(character)]


class TestBattleOutcomes:
    def _ended(self, character, newstate):
        return BattleEnded.create(
            objectid=1,
            userid=character.userid,
            characterid=character.id,
            oldstate=int(BattleState.ONGOING),
            newstate=int(newstate),
        )

    def test_victory_grants_item(self, app, character, potion):
        app.rewards.on_battle_ended(self._ended(character, BattleState.VICTORY))
        assert _stacks(app, character) == [1]

    def test_defeat_takes_item(self, app, character, potion):
        for _ in range(5):
            app.characters.add_item_to_inventory(character, potion.id)
        app.rewards.on_battle_ended(self._ended(character, BattleState.DEFEAT))
        assert _stacks(app, character) == [1]

    def test_retreat_changes_nothing(self, app, character, potion):
        app.characters.add_item_to_inventory(character, potion.id)
        app.rewards.on_battle_ended(self._ended(character, BattleState.RETREATED))
        assert _stacks(app, character) == [1]


class TestItems:
    def test_grant_picks_from_all_items(self, app, scripted_rng, character, potion):
        sword = app.catalog.create_item("Sword", type="weapon")
        scripted_rng.pick = 1
        assert app.rewards.grant_random_item(character).id == sword.id

    def test_grant_without_items(self, app, character):
        assert app.rewards.grant_random_item(character) is None

    def test_lose_last_unit_deletes_instance(self, app, character, potion):
        app.characters.add_item_to_inventory(character, potion.id)
        before = app.rewards.lose_random_item(character)
        assert before.stack == 1
        assert app.repos["inventory"].list_for_character(character.id) == []

    @pytest.mark.parametrize(
        "stack, remaining",
        [(2, 1), (5, 1), (10, 2), (20, 4)],
    )
    def test_lose_part_of_stack(self, app, character, potion, stack, remaining):
        for _ in range(stack):
            app.characters.add_item_to_inventory(character, potion.id)
        before = app.rewards.lose_random_item(character)
        assert before.stack == stack
        assert _stacks(app, character) == [remaining]

    def test_lose_from_empty_inventory(self, app, character):
        assert app.rewards.lose_random_item(character) is None


class TestQuizHooks:
    def test_updated_grants_xp_per_answer(self, app, character):
        app.quiz_attempt_updated(character.userid, 3)
        assert app.user_character(character.userid).xp == 12

    def test_updated_with_nothing_answered(self, app, character):
        app.quiz_attempt_updated(character.userid, 0)
        assert app.user_character(character.userid).xp == 0
        assert app.history(character.userid) == []

    def test_updated_creates_character(self, app):
        app.quiz_attempt_updated(555, 1)
        assert app.repos["character"].get_by_user(555).xp == 4

    def test_flawless_attempt(self, app, character, potion):
        app.quiz_attempt_submitted(character.userid, [True, True])
        assert app.user_character(character.userid).xp == 38
        assert _stacks(app, character) == [1]

    def test_partial_attempt(self, app, character, potion):
        app.quiz_attempt_submitted(character.userid, [True, False])
        assert app.user_character(character.userid).xp == 19
        assert _stacks(app, character) == []

    def test_empty_attempt(self, app, character, potion):
        app.quiz_attempt_submitted(character.userid, [])
        assert app.user_character(character.userid).xp == 0
        assert _stacks(app, character) == []
        assert app.history(character.userid) == []

    def test_configured_rates(self, tmp_path):
        from learning_rpg.app import RpgApp

        rpg = RpgApp(config={
            "storage": {"db_path": str(tmp_path / "rates.db")},
            "rewards": {"xp_per_answer": 1, "xp_per_correct": 10},
        })
        rpg.quiz_attempt_updated(1, 2)
        rpg.quiz_attempt_submitted(1, [True, False, True])
        assert rpg.user_character(1).xp == 22
        rpg.close()
