"""Tests for src/learning_rpg/models/event.py."""
from __future__ import annotations

import pytest

from learning_rpg.errors import InvariantError
from learning_rpg.models.battle import BattleState
from learning_rpg.models.event import BattleEnded, EventType, XpGained


def _xp_payload(**overrides):
    data = {
        "objectid": 1,
        "userid": 7,
        "oldlevel": 1,
        "newlevel": 2,
        "leveledup": True,
        "xpgained": 150,
        "oldxp": 0,
        "newxp": 150,
    }
    data.update(overrides)
    return data


class TestXpGained:
    def test_valid(self):
        event = XpGained.create(**_xp_payload())
        assert event.event_type == EventType.XP_GAINED
        assert event.payload() == {
            "oldlevel": 1, "newlevel": 2, "leveledup": True,
            "xpgained": 150, "oldxp": 0, "newxp": 150,
        }

    @pytest.mark.parametrize("overrides", [
        {"xpgained": 0},
        {"xpgained": -5},
        {"oldlevel": 3, "newlevel": 2},
        {"oldxp": 200, "newxp": 150},
    ])
    def test_rejects_impossible_progression(self, overrides):
        with pytest.raises(InvariantError):
            XpGained.create(**_xp_payload(**overrides))

    @pytest.mark.parametrize("key", ["oldlevel", "newlevel", "leveledup", "xpgained", "oldxp", "newxp"])
    def test_rejects_missing_fields(self, key):
        data = _xp_payload()
        del data[key]
        with pytest.raises(InvariantError):
            XpGained.create(**data)

    def test_rejects_non_bool_leveledup(self):
        with pytest.raises(InvariantError):
            XpGained.create(**_xp_payload(leveledup="yes"))

    def test_rejects_string_numbers(self):
        with pytest.raises(InvariantError):
            XpGained.create(**_xp_payload(xpgained="150"))

    def test_events_are_frozen(self):
        event = XpGained.create(**_xp_payload())
        with pytest.raises(Exception):
            event.xpgained = 10


class TestBattleEnded:
    @pytest.mark.parametrize("old", [BattleState.NOT_STARTED, BattleState.ONGOING])
    @pytest.mark.parametrize("new", [BattleState.VICTORY, BattleState.DEFEAT, BattleState.RETREATED])
    def test_valid_transitions(self, old, new):
        event = BattleEnded.create(objectid=3, characterid=1, oldstate=int(old), newstate=int(new))
        assert event.oldstate == old
        assert event.newstate == new

    @pytest.mark.parametrize("old, new", [
        (BattleState.VICTORY, BattleState.DEFEAT),
        (BattleState.ONGOING, BattleState.ONGOING),
        (BattleState.NOT_STARTED, BattleState.NOT_STARTED),
        (-1, BattleState.VICTORY),
    ])
    def test_invalid_transitions(self, old, new):
        with pytest.raises(InvariantError):
            BattleEnded.create(objectid=3, characterid=1, oldstate=int(old), newstate=int(new))

    def test_snapshot_kept_out_of_payload(self):
        event = BattleEnded.create(
            objectid=3, characterid=1, oldstate=1, newstate=2,
            snapshot={"id": 3, "state": 1},
        )
        assert event.snapshot == {"id": 3, "state": 1}
        assert event.payload() == {"characterid": 1, "oldstate": 1, "newstate": 2}
