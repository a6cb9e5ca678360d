"""Terminal rendering for finished or in-progress battles.

Pure string helpers (:func:`describe_event`, :func:`hp_bar`) plus
:func:`render_battle`, which prints one rich Panel per slot and a Table
narrating the event log.
"""
from __future__ import annotations
from typing import Optional, Sequence

from rich.align import Align
from rich.box import ROUNDED
from rich.columns import Columns
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from duelsim.core.types import format_types
from .events import (BattleEvent, BattleStart, DamageDealt, Faint, MoveMissed, MoveUsed, StatChanged,
                     StatusApplied, StatusDamage, StatusHealed, TurnEnd, TurnStart)
from .models import StatusCondition
from .service import Battle
from .state import ActiveCombatant

STATUS_ABBREVIATIONS = {"burn": "BRN", "poison": "PSN", "paralysis": "PAR", "sleep": "SLP"}
_STATUS_VERBS = {"burn": "was burned", "poison": "was poisoned", "paralysis": "is paralyzed", "sleep": "fell asleep"}

def _status_abbr(status: Optional[StatusCondition]) -> str:
    if status is None:
        return ""
    return STATUS_ABBREVIATIONS.get(status.type, status.type[:3].upper())

def _display_name(name: str) -> str:
    return name.replace("-", " ").title()

def hp_bar(current: int, max_hp: int, width: int = 20) -> str:
    """HP bar as rich markup, green above half, yellow above a quarter, red below."""
    if max_hp <= 0:
        return "[red]FAINTED[/red]"
    current = max(0, min(current, max_hp))
    percent = current / max_hp
    filled = int(percent * width)
    if current > 0 and filled == 0:
        filled = 1  # a sliver stays visible until the faint
    if percent > 0.5:
        color = "green"
    elif percent > 0.25:
        color = "yellow"
    else:
        color = "red"
    bar = "█" * filled + "░" * (width - filled)
    return f"[{color}]{bar}[/{color}]"

def describe_event(event: BattleEvent, names: Sequence[str]) -> str:
    """One plain English line per log entry. ``names`` are the two slot names."""
    def who(index: int) -> str:
        return _display_name(names[index])

    if isinstance(event, BattleStart):
        return f"{_display_name(event.pokemon1)} vs {_display_name(event.pokemon2)} (seed {event.seed})"
    if isinstance(event, TurnStart):
        return f"Turn {event.turn_number}"
    if isinstance(event, TurnEnd):
        return f"End of turn {event.turn_number}"
    if isinstance(event, MoveUsed):
        return f"{who(event.pokemon_index)} used {_display_name(event.move_name)}!"
    if isinstance(event, MoveMissed):
        return f"{who(event.pokemon_index)}'s {_display_name(event.move_name)} missed!"
    if isinstance(event, DamageDealt):
        return f"{who(event.pokemon_index)} took {event.damage} damage ({event.remaining_hp} HP left)"
    if isinstance(event, StatusApplied):
        return f"{who(event.pokemon_index)} {_STATUS_VERBS.get(event.status.type, 'was afflicted')}!"
    if isinstance(event, StatusDamage):
        return (f"{who(event.pokemon_index)} is hurt by its {event.status_type} "
                f"({event.damage} damage, {event.remaining_hp} HP left)")
    if isinstance(event, StatusHealed):
        return f"{who(event.pokemon_index)} woke up!" if event.status is None else \
            f"{who(event.pokemon_index)} recovered from {event.status.type}!"
    if isinstance(event, StatChanged):
        stat = event.stat.replace("_", " ")
        if event.new_stage == event.old_stage:
            return f"{who(event.pokemon_index)}'s {stat} won't go any {'higher' if event.new_stage > 0 else 'lower'}!"
        direction = "rose" if event.new_stage > event.old_stage else "fell"
        return f"{who(event.pokemon_index)}'s {stat} {direction}! (stage {event.new_stage:+d})"
    if isinstance(event, Faint):
        return f"{who(event.pokemon_index)} fainted!"
    return str(event)

def _slot_panel(slot: ActiveCombatant, title: str, bar_width: int) -> Panel:
    c = slot.combatant
    info = _display_name(c.name)
    if slot.status is not None:
        info += f" {_status_abbr(slot.status)}"
    return Panel(
        f"[bold bright_white]{info}[/bold bright_white]\n"
        f"[bright_white][[/bright_white]{format_types(c.types)}[bright_white]][/bright_white]\n"
        f"[bright_white]HP: {slot.current_hp}/{slot.max_hp}[/bright_white]\n"
        f"{hp_bar(slot.current_hp, slot.max_hp, bar_width)}",
        title=f"[bright_white bold]{title}[/bright_white bold]",
        box=ROUNDED,
        style="bright_white",
        width=max(30, bar_width + 6),
        padding=(0, 1),
    )

def render_battle(battle: Battle, console: Optional[Console] = None, *, bar_width: int = 20) -> None:
    console = console or Console()
    state = battle.state
    names = [a.combatant.name for a in state.active]

    panels = [_slot_panel(slot, f"SIDE {i + 1}", bar_width) for i, slot in enumerate(state.active)]
    console.print(Align.center(Columns(panels, equal=True, expand=False, padding=(0, 4))))

    table = Table(title="[bold]BATTLE LOG[/bold]", box=ROUNDED, show_header=True, style="bright_white")
    table.add_column("Turn", justify="right", style="dim")
    table.add_column("Event", justify="left")
    turn = 0
    for event in state.log:
        if isinstance(event, TurnStart):
            turn = event.turn_number
            continue
        if isinstance(event, TurnEnd):
            continue
        table.add_row(str(turn) if turn else "", describe_event(event, names))
    console.print(table)

    if state.winner is not None:
        console.print(f"[bold green]{_display_name(names[state.winner])} wins![/bold green]")
    elif state.active[0].is_fainted and state.active[1].is_fainted:
        console.print("[bold yellow]Both sides fainted. No winner.[/bold yellow]")
    else:
        console.print(f"[dim]Battle undecided after {state.turn_number} turns.[/dim]")

__all__ = ["hp_bar","describe_event","render_battle","STATUS_ABBREVIATIONS"]
