"""Battle value objects: combatants, moves, stat stages and status conditions.

Everything here is frozen. The engine never mutates these in place; it
builds replacements with :func:`dataclasses.replace`.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import ClassVar, Literal, Optional, Tuple, Union

from duelsim.core.types import normalize_type

DamageClass = Literal["physical", "special", "status"]

STAGE_MIN = -6
STAGE_MAX = 6

BATTLE_STATS: Tuple[str, ...] = ("attack", "defense", "special_attack", "special_defense", "speed")
STAGE_STATS: Tuple[str, ...] = BATTLE_STATS + ("accuracy", "evasion")


def clamp_stage(stage: int) -> int:
    return max(STAGE_MIN, min(STAGE_MAX, int(stage)))


@dataclass(frozen=True)
class BaseStats:
    hp: int
    attack: int
    defense: int
    special_attack: int
    special_defense: int
    speed: int

    def get(self, name: str) -> int:
        return getattr(self, name)


@dataclass(frozen=True)
class Combatant:
    id: int
    name: str
    types: Tuple[str, ...]
    base_stats: BaseStats
    ability: str = "none"

    def __post_init__(self):
        object.__setattr__(self, "types", tuple(normalize_type(t) for t in self.types))

    def has_type(self, type_name: str) -> bool:
        return type_name.lower() in self.types

    def has_stab(self, move_type: str) -> bool:
        return self.has_type(move_type)


@dataclass(frozen=True)
class Move:
    id: int
    name: str
    type: str
    power: Optional[int] = None  # None for non-damaging moves
    accuracy: Optional[int] = None  # None never misses
    priority: int = 0
    damage_class: DamageClass = "physical"

    def __post_init__(self):
        object.__setattr__(self, "type", normalize_type(self.type))

    @property
    def is_damaging(self) -> bool:
        return self.power is not None and self.power > 0

    @property
    def is_physical(self) -> bool:
        return self.damage_class == "physical"


@dataclass(frozen=True)
class StatStages:
    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0
    accuracy: int = 0
    evasion: int = 0

    def __post_init__(self):
        for name in STAGE_STATS:
            object.__setattr__(self, name, clamp_stage(getattr(self, name)))

    def get(self, name: str) -> int:
        if name not in STAGE_STATS:
            raise KeyError(f"Unknown stat stage: {name}")
        return getattr(self, name)

    def with_stage(self, name: str, value: int) -> "StatStages":
        self.get(name)
        return replace(self, **{name: clamp_stage(value)})

    def modify(self, name: str, delta: int) -> "StatStages":
        return self.with_stage(name, self.get(name) + delta)


# ---------------------------------------------------------------------------
# Status conditions (closed set; only Sleep carries a payload)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Burn:
    type: ClassVar[str] = "burn"

@dataclass(frozen=True)
class Poison:
    type: ClassVar[str] = "poison"

@dataclass(frozen=True)
class Paralysis:
    type: ClassVar[str] = "paralysis"

@dataclass(frozen=True)
class Sleep:
    turns_remaining: int
    type: ClassVar[str] = "sleep"

StatusCondition = Union[Burn, Poison, Paralysis, Sleep]


def status_to_dict(status: Optional[StatusCondition]) -> Optional[dict]:
    if status is None:
        return None
    if isinstance(status, Sleep):
        return {"type": "sleep", "turns_remaining": status.turns_remaining}
    return {"type": status.type}


def status_from_dict(raw: Optional[dict]) -> Optional[StatusCondition]:
    if raw is None:
        return None
    kind = raw.get("type")
    if kind == "burn":
        return Burn()
    if kind == "poison":
        return Poison()
    if kind == "paralysis":
        return Paralysis()
    if kind == "sleep":
        return Sleep(int(raw.get("turns_remaining", 0)))
    raise KeyError(f"Unknown status: {kind!r}")

__all__ = [
    "DamageClass","BaseStats","Combatant","Move","StatStages","clamp_stage",
    "Burn","Poison","Paralysis","Sleep","StatusCondition",
    "BATTLE_STATS","STAGE_STATS","status_to_dict","status_from_dict",
]
