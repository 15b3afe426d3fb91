"""Rich terminal display for the adventure page and battles."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from learning_rpg.models.battle import Battle, BattleState
from learning_rpg.models.item import InventoryEntry, ItemDefinition
from learning_rpg.models.monster import MonsterTemplate

console = Console()

_RARITY_STYLES = {
    "very_common": "dim",
    "common": "white",
    "uncommon": "green",
    "rare": "blue",
    "ultra_rare": "magenta",
    "legendary": "bold yellow",
}

_STATE_LABELS = {
    BattleState.NOT_STARTED: "[yellow]Not started[/yellow]",
    BattleState.ONGOING: "[cyan]Ongoing[/cyan]",
    BattleState.VICTORY: "[bold green]Victory[/bold green]",
    BattleState.DEFEAT: "[bold red]Defeat[/bold red]",
    BattleState.RETREATED: "[dim]Retreated[/dim]",
}


def _hp_bar(current: int, maximum: int, width: int = 20) -> Text:
    ratio = current / maximum if maximum > 0 else 0
    filled = int(ratio * width)
    if ratio > 0.5:
        color = "green"
    elif ratio > 0.25:
        color = "yellow"
    else:
        color = "red"
    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * (width - filled), style="dim")
    bar.append(f" {current}/{maximum}")
    return bar


class Display:
    def __init__(self, width: int = 80):
        self.console = console
        self.width = width

    def show_adventure(self, page: dict[str, Any]) -> None:
        stats = Table.grid(padding=(0, 2))
        stats.add_row("[bold]Level[/bold]", str(page["level"]))
        target = page["targetxp"]
        xp_line = f"{page['xp']}" if target is None else f"{page['xp']} / {target} ({page['remainingxp']} to go)"
        stats.add_row("[bold]XP[/bold]", xp_line)
        stats.add_row("[bold]HP[/bold]", _hp_bar(page["hp"], page["maxhp"]))
        self.console.print(Panel(
            stats, title=f"[bold cyan]{page['title']}[/bold cyan]",
            border_style="cyan", box=box.ROUNDED, width=self.width,
        ))
        self.show_inventory(page["inventory"])
        battle = page["ongoingbattle"] or page["pendingbattle"]
        if battle is not None and page["monster"] is not None:
            self.show_battle(battle, page["monster"])
        if page.get("recentbattles"):
            self.show_recent_battles(page["recentbattles"])

    def show_inventory(self, entries: list[InventoryEntry]) -> None:
        if not entries:
            self.console.print("  [dim]Your inventory is empty.[/dim]")
            return
        table = Table(title="Inventory", box=box.SIMPLE, width=self.width)
        table.add_column("Item")
        table.add_column("Type")
        table.add_column("Rarity")
        table.add_column("Qty", justify="right")
        for entry in entries:
            rarity = entry.item.rarity.value
            table.add_row(
                entry.item.name,
                entry.item.type.value,
                f"[{_RARITY_STYLES.get(rarity, 'white')}]{rarity.replace('_', ' ')}[/]",
                str(entry.instance.stack),
            )
        self.console.print(table)

    def show_battle(self, battle: Battle, monster: MonsterTemplate) -> None:
        body = Table.grid(padding=(0, 2))
        body.add_row("[bold]Battle[/bold]", f"#{battle.id}")
        body.add_row("[bold]State[/bold]", _STATE_LABELS.get(battle.state, "?"))
        body.add_row("[bold]Monster[/bold]", f"{monster.name} (level {monster.level})")
        body.add_row("[bold]Monster HP[/bold]", _hp_bar(battle.monsterhp, monster.hp))
        self.console.print(Panel(body, border_style="red", box=box.HEAVY, width=self.width))

    def show_attack(self, result: Any, monster: MonsterTemplate, max_hp: int) -> None:
        self.console.print(f"  You hit [bold]{monster.name}[/bold] for [red]{result.player_damage}[/red] damage.")
        if result.monster_damage is not None:
            self.console.print(
                f"  {monster.name} strikes back for [red]{result.monster_damage}[/red] damage."
            )
        self.console.print("  HP: ", _hp_bar(result.character.hp, max_hp))
        if result.outcome == BattleState.VICTORY:
            self.console.print("  [bold green]The monster is defeated![/bold green]")
        elif result.outcome == BattleState.DEFEAT:
            self.console.print("  [bold red]You were defeated, and wake up fully healed.[/bold red]")

    def show_recent_battles(self, battles: list[Battle]) -> None:
        table = Table(title="Recent battles", box=box.SIMPLE, width=self.width)
        table.add_column("Battle", justify="right")
        table.add_column("State")
        table.add_column("Monster HP", justify="right")
        for battle in battles:
            table.add_row(f"#{battle.id}", _STATE_LABELS.get(battle.state, "?"), str(battle.monsterhp))
        self.console.print(table)

    def show_roster(self, roster: list[tuple[int, int]]) -> None:
        if not roster:
            self.console.print("  [dim]No characters yet.[/dim]")
            return
        table = Table(title="Characters", box=box.SIMPLE)
        table.add_column("User", justify="right")
        table.add_column("Level", justify="right")
        for userid, level in roster:
            table.add_row(str(userid), str(level))
        self.console.print(table)

    def show_history(self, events: list[dict[str, Any]]) -> None:
        if not events:
            self.console.print("  [dim]Nothing has happened yet.[/dim]")
            return
        table = Table(title="History", box=box.SIMPLE)
        table.add_column("When")
        table.add_column("Event")
        table.add_column("Details")
        for event in events:
            other = event.get("other") or {}
            if event["event_type"] == "XP_GAINED":
                detail = f"+{other.get('xpgained')} XP, level {other.get('oldlevel')} -> {other.get('newlevel')}"
            else:
                state = other.get("newstate")
                label = BattleState(state).name.lower() if state is not None else "?"
                detail = f"battle #{event['objectid']} ended: {label}"
            when = datetime.fromtimestamp(event["timecreated"]).strftime("%Y-%m-%d %H:%M")
            table.add_row(when, event["event_type"], detail)
        self.console.print(table)

    def show_monsters(self, monsters: list[MonsterTemplate]) -> None:
        table = Table(title="Monsters", box=box.SIMPLE)
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("HP", justify="right")
        table.add_column("Level", justify="right")
        for m in monsters:
            table.add_row(str(m.id), m.name, str(m.hp), str(m.level))
        self.console.print(table)

    def show_items(self, items: list[ItemDefinition]) -> None:
        table = Table(title="Items", box=box.SIMPLE)
        table.add_column("ID", justify="right")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Rarity")
        table.add_column("Stackable")
        for i in items:
            table.add_row(
                str(i.id), i.name, i.type.value, i.rarity.value, "yes" if i.stackable else "no"
            )
        self.console.print(table)

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")
