"""Tests for src/learning_rpg/systems/character/system.py."""
from __future__ import annotations

import pytest

from learning_rpg.app import RpgApp
from learning_rpg.errors import InvariantError, NotFoundError
from learning_rpg.mechanics.xp_table import max_hp_from_level
from learning_rpg.models.character import Character


def _xp_events(app):
    return app.history(42, "XP_GAINED")


class TestUserCharacter:
    def test_created_on_first_visit(self, app):
        character = app.user_character(7)
        assert character.id is not None
        assert character.userid == 7
        assert character.xp == 0
        assert character.hp == max_hp_from_level(1) == 58

    def test_reused_on_later_visits(self, app):
        assert app.user_character(7).id == app.user_character(7).id

    def test_list_characters(self, app):
        assert app.characters.list_characters() == []
        app.user_character(7)
        app.user_character(3)
        app.quiz_attempt_updated(3, 31)
        assert app.characters.list_characters() == [(7, 1), (3, 3)]

    def test_get_character_missing(self, app):
        with pytest.raises(NotFoundError) as exc_info:
            app.characters.get_character(404)
        assert exc_info.value.entity == "character"


class TestGrantXp:
    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_is_noop(self, app, character, amount):
        assert app.characters.grant_xp(character, amount) is None
        assert character.xp == 0
        assert _xp_events(app) == []

    def test_without_level_up(self, app, character):
        app.characters.grant_xp(character, 10)
        character.hp = 10
        app.characters.save(character)
        event = app.characters.grant_xp(character, 50)
        assert event.leveledup is False
        assert event.oldlevel == event.newlevel == 2
        stored = app.characters.get_character(character.id)
        assert stored.xp == 60
        assert stored.hp == 10

    def test_first_xp_levels_up(self, app, character):
        character.hp = 10
        event = app.characters.grant_xp(character, 1)
        assert (event.oldlevel, event.newlevel, event.leveledup) == (1, 2, True)
        assert character.hp == max_hp_from_level(2)

    def test_level_up_heals(self, app, character):
        character.hp = 10
        event = app.characters.grant_xp(character, 200)
        assert event.leveledup is True
        assert event.newlevel == 8
        assert character.hp == max_hp_from_level(8)
        assert app.characters.get_character(character.id).hp == max_hp_from_level(8)

    def test_level_up_on_steep_curve(self, tmp_path):
        rpg = RpgApp(config={
            "storage": {"db_path": str(tmp_path / "steep.db")},
            "rpg": {"base_xp_target": 120, "growth_multiplier": 2.0},
        })
        character = rpg.user_character(1)
        character.hp = 10
        event = rpg.characters.grant_xp(character, 200)
        assert (event.oldlevel, event.newlevel, event.leveledup) == (1, 3, True)
        assert character.hp == max_hp_from_level(3)
        rpg.close()

    def test_event_recorded(self, app, character):
        app.characters.grant_xp(character, 30)
        app.characters.grant_xp(character, 20)
        events = _xp_events(app)
        assert len(events) == 2
        assert events[0]["other"]["oldxp"] == 30
        assert events[0]["other"]["newxp"] == 50
        assert events[0]["snapshot"]["xp"] == 30
        assert events[0]["userid"] == character.userid

    def test_unsaved_character(self, app):
        with pytest.raises(InvariantError):
            app.characters.grant_xp(Character(userid=3), 10)


class TestHitpoints:
    def test_damage_clamps_at_zero(self, app, character):
        app.characters.take_damage(character, 500)
        assert character.hp == 0

    def test_damage_not_persisted(self, app, character):
        app.characters.take_damage(character, 8)
        assert character.hp == 50
        assert app.characters.get_character(character.id).hp == 58

    def test_negative_damage_does_not_heal(self, app, character):
        app.characters.take_damage(character, -20)
        assert character.hp == 58

    def test_restore(self, app, character):
        character.hp = 1
        app.characters.restore_max_hp(character)
        assert character.hp == app.characters.max_hp(character) == 58

    def test_hp_never_above_max(self, app, character):
        for amount in (30, 100, 5, 58):
            app.characters.take_damage(character, amount)
            app.characters.grant_xp(character, amount)
            assert 0 <= character.hp <= app.characters.max_hp(character)
        app.characters.restore_max_hp(character)
        assert character.hp == app.characters.max_hp(character)


class TestInventory:
    def test_stackable_items_stack(self, app, character, potion):
        app.characters.add_item_to_inventory(character, potion.id)
        app.characters.add_item_to_inventory(character, potion.id)
        entries = app.characters.inventory(character)
        assert len(entries) == 1
        assert entries[0].instance.stack == 2
        assert entries[0].item.name == "Potion"

    def test_non_stackable_items_do_not_stack(self, app, character):
        sword = app.catalog.create_item("Sword", type="weapon")
        app.characters.add_item_to_inventory(character, sword.id)
        app.characters.add_item_to_inventory(character, sword.id)
        entries = app.characters.inventory(character)
        assert [e.instance.stack for e in entries] == [1, 1]

    def test_stacks_are_per_character(self, app, character, potion):
        other = app.user_character(99)
        app.characters.add_item_to_inventory(character, potion.id)
        app.characters.add_item_to_inventory(other, potion.id)
        assert app.characters.inventory(character)[0].instance.stack == 1
        assert app.characters.inventory(other)[0].instance.stack == 1

    def test_unknown_item(self, app, character):
        with pytest.raises(InvariantError):
            app.characters.add_item_to_inventory(character, 12345)

    def test_unsaved_character(self, app, potion):
        with pytest.raises(InvariantError):
            app.characters.add_item_to_inventory(Character(userid=1), potion.id)

    def test_deleted_items_are_pruned(self, app, character, potion):
        app.characters.add_item_to_inventory(character, potion.id)
        app.catalog.delete_item(potion)
        assert app.characters.inventory(character) == []
        assert app.repos["inventory"].list_for_character(character.id) == []
