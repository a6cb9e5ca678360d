"""Battle state aggregate.

A :class:`BattleState` is a frozen snapshot: two active slots, the turn
counter, the originating seed, the winner and the append-only log. Every
helper here returns a new snapshot; the untouched slot is shared, not copied.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .events import BattleEvent, BattleStart, StatChanged, StatusApplied, event_from_dict
from .models import (BaseStats, Combatant, StatStages, StatusCondition,
                     status_from_dict, status_to_dict)


@dataclass(frozen=True)
class ActiveCombatant:
    combatant: Combatant
    current_hp: int
    max_hp: int
    status: Optional[StatusCondition] = None
    stat_stages: StatStages = field(default_factory=StatStages)
    # Reserved for volatile effects (confusion and the like); unused by built-ins
    volatile_effects: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_fainted(self) -> bool:
        return self.current_hp <= 0

    @property
    def hp_ratio(self) -> float:
        return self.current_hp / self.max_hp if self.max_hp > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        c = self.combatant
        return {
            "combatant": {
                "id": c.id, "name": c.name, "types": list(c.types), "ability": c.ability,
                "base_stats": vars(c.base_stats).copy(),
            },
            "current_hp": self.current_hp,
            "max_hp": self.max_hp,
            "status": status_to_dict(self.status),
            "stat_stages": vars(self.stat_stages).copy(),
            "volatile_effects": dict(self.volatile_effects),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ActiveCombatant":
        c = raw["combatant"]
        combatant = Combatant(id=c["id"], name=c["name"], types=tuple(c["types"]),
                              base_stats=BaseStats(**c["base_stats"]), ability=c.get("ability", "none"))
        return cls(
            combatant=combatant,
            current_hp=int(raw["current_hp"]),
            max_hp=int(raw["max_hp"]),
            status=status_from_dict(raw.get("status")),
            stat_stages=StatStages(**raw.get("stat_stages", {})),
            volatile_effects=MappingProxyType(dict(raw.get("volatile_effects", {}))),
        )


def create_active_combatant(combatant: Combatant) -> ActiveCombatant:
    max_hp = combatant.base_stats.hp
    return ActiveCombatant(combatant=combatant, current_hp=max_hp, max_hp=max_hp)


@dataclass(frozen=True)
class BattleState:
    turn_number: int
    active: Tuple[ActiveCombatant, ActiveCombatant]
    log: Tuple[BattleEvent, ...]
    seed: int
    winner: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn_number": self.turn_number,
            "active": [a.to_dict() for a in self.active],
            "log": [e.as_dict() for e in self.log],
            "seed": self.seed,
            "winner": self.winner,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BattleState":
        a0, a1 = (ActiveCombatant.from_dict(a) for a in raw["active"])
        return cls(
            turn_number=int(raw["turn_number"]),
            active=(a0, a1),
            log=tuple(event_from_dict(e) for e in raw["log"]),
            seed=int(raw["seed"]),
            winner=raw.get("winner"),
        )


def create_battle_state(combatant1: Combatant, combatant2: Combatant, seed: int) -> BattleState:
    return BattleState(
        turn_number=0,
        active=(create_active_combatant(combatant1), create_active_combatant(combatant2)),
        log=(BattleStart(pokemon1=combatant1.name, pokemon2=combatant2.name, seed=seed),),
        seed=seed,
    )

def opponent_of(index: int) -> int:
    return 1 - index

def is_battle_over(state: BattleState) -> bool:
    return state.active[0].is_fainted or state.active[1].is_fainted or state.winner is not None

def get_winner(state: BattleState) -> Optional[int]:
    """Stored winner, else the lone standing side; None while ongoing or on a double faint."""
    if state.winner is not None:
        return state.winner
    faint0 = state.active[0].is_fainted
    faint1 = state.active[1].is_fainted
    if faint0 and not faint1:
        return 1
    if faint1 and not faint0:
        return 0
    return None

def add_battle_event(state: BattleState, event: BattleEvent) -> BattleState:
    return replace(state, log=state.log + (event,))

def update_active(state: BattleState, index: int, **updates: Any) -> BattleState:
    slot = replace(state.active[index], **updates)
    active = (slot, state.active[1]) if index == 0 else (state.active[0], slot)
    return replace(state, active=active)

def set_winner(state: BattleState, winner: Optional[int]) -> BattleState:
    if state.winner is not None:
        return state  # a decided battle stays decided
    return replace(state, winner=winner)

def change_stat_stage(state: BattleState, index: int, stat: str, delta: int) -> BattleState:
    """Shift one stage (clamped to [-6, 6]) and log a stat_changed event."""
    stages = state.active[index].stat_stages
    new_stages = stages.modify(stat, delta)
    state = update_active(state, index, stat_stages=new_stages)
    return add_battle_event(state, StatChanged(pokemon_index=index, stat=stat,
                                               old_stage=stages.get(stat), new_stage=new_stages.get(stat)))

def apply_status(state: BattleState, index: int, status: StatusCondition) -> BattleState:
    """Inflict a status. A slot that already carries one keeps it (silent no-op)."""
    if state.active[index].status is not None:
        return state
    state = update_active(state, index, status=status)
    return add_battle_event(state, StatusApplied(pokemon_index=index, status=status))

__all__ = [
    "ActiveCombatant","BattleState","create_active_combatant","create_battle_state","opponent_of",
    "is_battle_over","get_winner","add_battle_event","update_active","set_winner",
    "change_stat_stage","apply_status",
]
