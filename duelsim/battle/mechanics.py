"""Pure battle formulas: accuracy, type matchups, stat stages, turn order, damage.

Damage follows the modern formula at a fixed battle level of 50:

    base  = floor(floor(22 * power * atk / def) / 50 + 2)
    final = floor(base * STAB * effectiveness * burn * random(0.85, 1.0))

with a floor of 1 unless the matchup is an immunity.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from duelsim.core.types import DEFAULT_TYPE_CHART, TypeChart
from .models import BaseStats, Combatant, Move, StatStages, StatusCondition, clamp_stage
from .rng import SeededRNG
from .status import get_damage_multiplier, get_speed_multiplier

BATTLE_LEVEL = 50
STAB_MULTIPLIER = 1.5
RANDOM_MIN = 0.85
RANDOM_MAX = 1.0

# (stat name, stage-adjusted value) -> value
StatModifier = Callable[[str, int], int]

# ---------------------------------------------------------------------------
# Accuracy & type effectiveness
# ---------------------------------------------------------------------------

def check_accuracy(move: Move, rng: SeededRNG) -> bool:
    if move.accuracy is None:
        return True
    return rng.chance(move.accuracy / 100)

def get_type_effectiveness(move_type: str, defending_types: Iterable[str],
                           type_chart: TypeChart = DEFAULT_TYPE_CHART) -> float:
    return type_chart.effectiveness(move_type, defending_types)

# ---------------------------------------------------------------------------
# Stage helpers
# ---------------------------------------------------------------------------

def clamp_stat_stage(stage: int) -> int:
    return clamp_stage(stage)

def stage_multiplier(stage: int) -> float:
    s = clamp_stage(stage)
    return (2 + s)/2 if s >= 0 else 2/(2 - s)

def get_effective_stat(base_stat: int, stage: int) -> int:
    return math.floor(base_stat * stage_multiplier(stage))

def get_effective_stats(base_stats: BaseStats, stages: StatStages) -> BaseStats:
    # HP never takes a stage
    return BaseStats(
        hp=base_stats.hp,
        attack=get_effective_stat(base_stats.attack, stages.attack),
        defense=get_effective_stat(base_stats.defense, stages.defense),
        special_attack=get_effective_stat(base_stats.special_attack, stages.special_attack),
        special_defense=get_effective_stat(base_stats.special_defense, stages.special_defense),
        speed=get_effective_stat(base_stats.speed, stages.speed),
    )

def modify_stat_stage(stages: StatStages, stat: str, delta: int) -> StatStages:
    return stages.modify(stat, delta)

def set_stat_stage(stages: StatStages, stat: str, value: int) -> StatStages:
    return stages.with_stage(stat, value)

# ---------------------------------------------------------------------------
# Turn order
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TurnOrderEntry:
    index: int
    priority: int
    speed: float

def get_effective_speed(combatant: Combatant, stages: StatStages,
                        status: Optional[StatusCondition] = None,
                        stat_modifier: Optional[StatModifier] = None) -> float:
    speed = get_effective_stat(combatant.base_stats.speed, stages.speed)
    if stat_modifier is not None:
        speed = stat_modifier("speed", speed)
    return speed * get_speed_multiplier(status)

def determine_turn_order(moves: Sequence[Move], combatants: Sequence[Combatant],
                         stages: Sequence[StatStages],
                         statuses: Sequence[Optional[StatusCondition]] = (None, None),
                         stat_modifiers: Sequence[Optional[StatModifier]] = (None, None)) -> Tuple[int, int]:
    """Priority desc, then effective speed desc, then slot index asc. No coin flips."""
    entries: List[TurnOrderEntry] = [
        TurnOrderEntry(i, moves[i].priority,
                       get_effective_speed(combatants[i], stages[i], statuses[i], stat_modifiers[i]))
        for i in (0, 1)
    ]
    entries.sort(key=lambda e: (-e.priority, -e.speed, e.index))
    return entries[0].index, entries[1].index

# ---------------------------------------------------------------------------
# Damage
# ---------------------------------------------------------------------------

def calculate_damage(attacker: Combatant, defender: Combatant, move: Move,
                     attacker_stages: StatStages, defender_stages: StatStages,
                     attacker_status: Optional[StatusCondition], rng: SeededRNG,
                     type_chart: TypeChart = DEFAULT_TYPE_CHART, *,
                     attacker_stat_modifier: Optional[StatModifier] = None,
                     defender_stat_modifier: Optional[StatModifier] = None) -> int:
    if not move.is_damaging:
        return 0  # non-damaging; no RNG draw
    if move.is_physical:
        atk_name, def_name = "attack", "defense"
    else:
        atk_name, def_name = "special_attack", "special_defense"
    atk = get_effective_stat(attacker.base_stats.get(atk_name), attacker_stages.get(atk_name))
    dfn = get_effective_stat(defender.base_stats.get(def_name), defender_stages.get(def_name))
    if attacker_stat_modifier is not None:
        atk = attacker_stat_modifier(atk_name, atk)
    if defender_stat_modifier is not None:
        dfn = defender_stat_modifier(def_name, dfn)

    level_factor = (2 * BATTLE_LEVEL) // 5 + 2
    base = math.floor(math.floor(level_factor * move.power * atk / max(1, dfn)) / 50 + 2)

    modifier = 1.0
    if attacker.has_stab(move.type):
        modifier *= STAB_MULTIPLIER
    effectiveness = get_type_effectiveness(move.type, defender.types, type_chart)
    modifier *= effectiveness
    modifier *= get_damage_multiplier(attacker_status, move)
    modifier *= rng.next_float(RANDOM_MIN, RANDOM_MAX)

    if effectiveness == 0:
        return 0
    return max(1, math.floor(base * modifier))

__all__ = [
    "BATTLE_LEVEL","StatModifier","TurnOrderEntry","check_accuracy","get_type_effectiveness",
    "clamp_stat_stage","stage_multiplier","get_effective_stat","get_effective_stats",
    "modify_stat_stage","set_stat_stage","get_effective_speed","determine_turn_order",
    "calculate_damage",
]
