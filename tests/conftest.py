"""Shared fixtures for the RPG test suite."""
from __future__ import annotations

import random

import pytest

from learning_rpg.app import RpgApp


class ScriptedRandom:
    """Random source returning queued rolls, then the low end of each range.

    ``choice`` always returns the element at index ``pick``.
    """

    def __init__(self, rolls=(), pick: int = 0):
        self.rolls = list(rolls)
        self.pick = pick
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if self.rolls:
            value = self.rolls.pop(0)
            assert a <= value <= b, f"scripted roll {value} outside [{a}, {b}]"
            return value
        return a

    def choice(self, seq):
        return seq[self.pick % len(seq)]


@pytest.fixture
def in_memory_db(tmp_path):
    from learning_rpg.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def scripted_rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture
def app(tmp_path, scripted_rng):
    rpg = RpgApp(
        config={"storage": {"db_path": str(tmp_path / "rpg.db")}},
        rng=scripted_rng,
    )
    rpg.battles  # wire observers
    yield rpg
    rpg.close()


@pytest.fixture
def character(app):
    return app.user_character(42)


@pytest.fixture
def goblin(app):
    return app.catalog.create_monster("Goblin", hp=30, level=1)


@pytest.fixture
def potion(app):
    return app.catalog.create_item("Potion", rarity="rare", type="potion", stackable=True)


@pytest.fixture
def ongoing_battle(app, character, goblin):
    from learning_rpg.models.battle import Battle

    battle = app.battles.setup(Battle(), character.id)
    return app.start_battle(battle.id)


@pytest.fixture
def seeded_rng():
    return random.Random(42)
