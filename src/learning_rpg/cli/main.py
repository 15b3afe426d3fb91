"""Typer CLI application."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from learning_rpg.errors import InvariantError, NotFoundError
from learning_rpg.models.event import EventType
from learning_rpg.models.item import ItemRarity, ItemType

app = typer.Typer(
    name="learning-rpg",
    help="Character progression and monster battles for quiz takers",
    no_args_is_help=True,
)
monster_app = typer.Typer(help="Manage monster templates")
item_app = typer.Typer(help="Manage item definitions")
app.add_typer(monster_app, name="monster")
app.add_typer(item_app, name="item")

_state: dict = {}

EXIT_FAILED = 1
EXIT_NOT_FOUND = 4


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    previous = _state.pop("app", None)
    if previous is not None:
        previous.close()
    _state["config_path"] = config


def _app():
    from learning_rpg.app import RpgApp, _load_config

    if "app" not in _state:
        _state["app"] = RpgApp(config=_load_config(_state.get("config_path")))
    return _state["app"]


def _display():
    from learning_rpg.cli.display import Display

    return Display()


def _run(fn, *args):
    """Call into the app, turning domain errors into exit codes."""
    try:
        return fn(*args)
    except NotFoundError as exc:
        _display().show_error(f"Not found: {exc.message}")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except InvariantError as exc:
        _display().show_error(f"Operation failed: {exc.message}")
        raise typer.Exit(code=EXIT_FAILED)


@app.command("init-db")
def init_db() -> None:
    """Create or upgrade the database."""
    _app().db
    typer.echo("Database ready.")


@app.command()
def status(user: int = typer.Argument(..., help="Platform user id")) -> None:
    """Show the adventure page for a user."""
    page = _run(_app().adventure, user)
    _display().show_adventure(page)


@app.command()
def explore(user: int = typer.Argument(..., help="Platform user id")) -> None:
    """Look for trouble."""
    rpg = _app()
    battle = _run(rpg.explore, user)
    if battle is None:
        typer.echo("You follow the path further. Nothing happens.")
        return
    _display().show_battle(battle, rpg.battles.get_monster(battle.monsterid))


@app.command()
def start(battle: int = typer.Argument(..., help="Battle id")) -> None:
    """Accept a pending battle."""
    rpg = _app()
    result = _run(rpg.start_battle, battle)
    _display().show_battle(result, rpg.battles.get_monster(result.monsterid))


@app.command()
def decline(battle: int = typer.Argument(..., help="Battle id")) -> None:
    """Decline a pending battle or retreat from an ongoing one."""
    _run(_app().decline_battle, battle)
    typer.echo("You retreat.")


@app.command()
def attack(battle: int = typer.Argument(..., help="Battle id")) -> None:
    """Attack the monster in an ongoing battle."""
    rpg = _app()
    result = _run(rpg.attack_monster, battle)
    monster = rpg.battles.get_monster(result.battle.monsterid)
    _display().show_attack(result, monster, rpg.characters.max_hp(result.character))


@app.command()
def quiz(
    user: int = typer.Argument(..., help="Platform user id"),
    correct: int = typer.Option(0, "--correct", help="Correctly answered questions"),
    wrong: int = typer.Option(0, "--wrong", help="Wrongly answered questions"),
) -> None:
    """Submit a quiz attempt result for a user."""
    results = [True] * correct + [False] * wrong
    _run(_app().quiz_attempt_submitted, user, results)
    typer.echo(f"Quiz attempt recorded: {correct}/{len(results)} correct.")


@app.command()
def roster() -> None:
    """List every character with its level."""
    _display().show_roster(_app().roster())


@app.command()
def history(
    user: int = typer.Argument(..., help="Platform user id"),
    event_type: Optional[EventType] = typer.Option(None, "--type", help="Only this kind of event"),
    limit: int = typer.Option(20, "--limit", min=1),
) -> None:
    """Show the recorded XP and battle events of a user."""
    kind = event_type.value if event_type is not None else None
    _display().show_history(_app().history(user, event_type=kind, limit=limit))


@monster_app.command("add")
def monster_add(
    name: str,
    hp: int = typer.Option(100, "--hp", min=1),
    level: int = typer.Option(3, "--level", min=1),
) -> None:
    monster = _app().catalog.create_monster(name, hp=hp, level=level)
    typer.echo(f"Created monster {monster.id}.")


@monster_app.command("list")
def monster_list() -> None:
    _display().show_monsters(_app().catalog.list_monsters())


@monster_app.command("delete")
def monster_delete(monster_id: int) -> None:
    catalog = _app().catalog
    monster = _run(catalog.get_monster, monster_id)
    catalog.delete_monster(monster)
    typer.echo(f"Deleted monster {monster_id}.")


@item_app.command("add")
def item_add(
    name: str,
    rarity: ItemRarity = typer.Option(ItemRarity.COMMON, "--rarity"),
    type: ItemType = typer.Option(ItemType.OTHER, "--type"),
    stackable: bool = typer.Option(False, "--stackable"),
) -> None:
    item = _app().catalog.create_item(name, rarity=rarity, type=type, stackable=stackable)
    typer.echo(f"Created item {item.id}.")


@item_app.command("list")
def item_list() -> None:
    _display().show_items(_app().catalog.list_items())


@item_app.command("delete")
def item_delete(item_id: int) -> None:
    catalog = _app().catalog
    item = _run(catalog.get_item, item_id)
    catalog.delete_item(item)
    typer.echo(f"Deleted item {item_id}.")


if __name__ == "__main__":
    app()
