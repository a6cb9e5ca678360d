"""Battle log events.

The log is the only narrative a host gets of what happened in a battle, so
every entry is an immutable record with a ``type`` tag and a plain-data
``as_dict()`` form. :func:`event_from_dict` reverses it for hosts that persist
logs.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Optional, Type, Union

from .models import StatusCondition, status_from_dict, status_to_dict


@dataclass(frozen=True)
class _Event:
    type: ClassVar[str] = ""

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "status":
                value = status_to_dict(value)
            data[f.name] = value
        return data

@dataclass(frozen=True)
class BattleStart(_Event):
    pokemon1: str
    pokemon2: str
    seed: int
    type: ClassVar[str] = "battle_start"

@dataclass(frozen=True)
class TurnStart(_Event):
    turn_number: int
    type: ClassVar[str] = "turn_start"

@dataclass(frozen=True)
class TurnEnd(_Event):
    turn_number: int
    type: ClassVar[str] = "turn_end"

@dataclass(frozen=True)
class MoveUsed(_Event):
    pokemon_index: int
    move_name: str
    type: ClassVar[str] = "move_used"

@dataclass(frozen=True)
class MoveMissed(_Event):
    pokemon_index: int
    move_name: str
    type: ClassVar[str] = "move_missed"

@dataclass(frozen=True)
class DamageDealt(_Event):
    pokemon_index: int
    damage: int
    remaining_hp: int
    type: ClassVar[str] = "damage_dealt"

@dataclass(frozen=True)
class StatusApplied(_Event):
    pokemon_index: int
    status: StatusCondition
    type: ClassVar[str] = "status_applied"

@dataclass(frozen=True)
class StatusDamage(_Event):
    pokemon_index: int
    damage: int
    remaining_hp: int
    status_type: str
    type: ClassVar[str] = "status_damage"

@dataclass(frozen=True)
class StatusHealed(_Event):
    pokemon_index: int
    status: Optional[StatusCondition] = None
    type: ClassVar[str] = "status_healed"

@dataclass(frozen=True)
class StatChanged(_Event):
    pokemon_index: int
    stat: str
    old_stage: int
    new_stage: int
    type: ClassVar[str] = "stat_changed"

@dataclass(frozen=True)
class Faint(_Event):
    pokemon_index: int
    type: ClassVar[str] = "faint"


BattleEvent = Union[
    BattleStart, TurnStart, TurnEnd, MoveUsed, MoveMissed, DamageDealt,
    StatusApplied, StatusDamage, StatusHealed, StatChanged, Faint,
]

EVENT_TYPES: Dict[str, Type[_Event]] = {
    cls.type: cls for cls in (
        BattleStart, TurnStart, TurnEnd, MoveUsed, MoveMissed, DamageDealt,
        StatusApplied, StatusDamage, StatusHealed, StatChanged, Faint,
    )
}


def event_from_dict(raw: Dict[str, Any]) -> BattleEvent:
    kind = raw.get("type")
    cls = EVENT_TYPES.get(kind)  # type: ignore[arg-type]
    if cls is None:
        raise KeyError(f"Unknown event type: {kind!r}")
    kwargs = {f.name: raw[f.name] for f in fields(cls) if f.name in raw}
    if "status" in kwargs:
        kwargs["status"] = status_from_dict(kwargs["status"])
    return cls(**kwargs)  # type: ignore[return-value]

__all__ = [
    "BattleEvent","BattleStart","TurnStart","TurnEnd","MoveUsed","MoveMissed","DamageDealt",
    "StatusApplied","StatusDamage","StatusHealed","StatChanged","Faint","EVENT_TYPES","event_from_dict",
]
