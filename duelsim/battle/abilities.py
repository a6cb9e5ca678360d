"""Ability hooks.

An :class:`Ability` is a name plus any subset of six optional hooks. The
engine looks abilities up in an :class:`AbilityTable` that is built once and
passed in explicitly; a missing ability or a missing hook is a no-op.

Hook signatures (``index`` is the owner's slot):

  on_enter_battle(state, index)                -> state | None
  on_take_damage(state, index, damage)         -> state | None
  on_deal_damage(state, index, damage)         -> state | None
  on_faint(state, index)                       -> state | None
  modify_stat(state, index, stat_name, value)  -> value
  modify_damage(state, index, move, damage)    -> damage

A state hook returning None means "nothing changed".
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from .models import Move
from .state import BattleState, change_stat_stage, opponent_of

StateHook = Callable[[BattleState, int], Optional[BattleState]]
DamageEventHook = Callable[[BattleState, int, int], Optional[BattleState]]
StatHook = Callable[[BattleState, int, str, int], int]
DamageHook = Callable[[BattleState, int, Move, int], int]


@dataclass(frozen=True)
class Ability:
    name: str
    on_enter_battle: Optional[StateHook] = None
    on_take_damage: Optional[DamageEventHook] = None
    on_deal_damage: Optional[DamageEventHook] = None
    on_faint: Optional[StateHook] = None
    modify_stat: Optional[StatHook] = None
    modify_damage: Optional[DamageHook] = None


class AbilityTable:
    """Immutable, case-insensitive name -> Ability lookup."""

    def __init__(self, abilities: Iterable[Ability] = ()):
        table: Dict[str, Ability] = {}
        for ability in abilities:
            table[ability.name.lower()] = ability
        self._table = MappingProxyType(table)

    def get(self, name: Optional[str]) -> Optional[Ability]:
        if not name:
            return None
        return self._table.get(name.lower())

    def has(self, name: str) -> bool:
        return name.lower() in self._table

    def all(self) -> Tuple[Ability, ...]:
        return tuple(self._table.values())

    def with_ability(self, ability: Ability) -> "AbilityTable":
        return AbilityTable(self.all() + (ability,))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[Ability]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"AbilityTable({sorted(self._table)})"

# ---------------------------------------------------------------------------
# Built-ins
# ---------------------------------------------------------------------------

def _intimidate_on_enter(state: BattleState, index: int) -> Optional[BattleState]:
    return change_stat_stage(state, opponent_of(index), "attack", -1)

INTIMIDATE = Ability(name="intimidate", on_enter_battle=_intimidate_on_enter)

PINCH_HP_THRESHOLD = 0.33
PINCH_DAMAGE_BOOST = 1.5

def pinch_ability(name: str, boosted_type: str) -> Ability:
    """Boosts one move type by 1.5x while the owner is below a third of max HP."""
    def modify_damage(state: BattleState, index: int, move: Move, damage: int) -> int:
        slot = state.active[index]
        if slot.hp_ratio >= PINCH_HP_THRESHOLD or move.type != boosted_type:
            return damage
        return math.floor(damage * PINCH_DAMAGE_BOOST)
    return Ability(name=name, modify_damage=modify_damage)

BLAZE = pinch_ability("blaze", "fire")
TORRENT = pinch_ability("torrent", "water")
OVERGROW = pinch_ability("overgrow", "grass")
SWARM = pinch_ability("swarm", "bug")

BUILTIN_ABILITIES: Tuple[Ability, ...] = (INTIMIDATE, BLAZE, TORRENT, OVERGROW, SWARM)

def default_ability_table() -> AbilityTable:
    return AbilityTable(BUILTIN_ABILITIES)

__all__ = [
    "Ability","AbilityTable","INTIMIDATE","BLAZE","TORRENT","OVERGROW","SWARM",
    "BUILTIN_ABILITIES","pinch_ability","default_ability_table",
]
