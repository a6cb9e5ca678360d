"""Factory helpers for building Combatant and Move values from catalog records.

Accepts the PokeAPI-style shape (``stats[].stat.name``, ``types[].type.name``,
``damage_class.name``) as well as an already-flattened shape
(``base_stats`` mapping, ``types`` list of strings, ``damage_class`` string).
Shared by the matchup loader and tests.
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional

from duelsim.core.errors import ValidationError
from .models import BaseStats, Combatant, Move

_STAT_KEYS = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "special-attack": "special_attack",
    "special_attack": "special_attack",
    "special-defense": "special_defense",
    "special_defense": "special_defense",
    "speed": "speed",
}
_DAMAGE_CLASSES = {"physical", "special", "status"}

def _name_of(value: Any) -> Optional[str]:
    """``{"name": "fire", "url": ...}`` or a bare string -> the name."""
    if isinstance(value, Mapping):
        value = value.get("name")
    return value if isinstance(value, str) else None

def require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"{what} must be an object, got {type(value).__name__}")
    return value

def derive_base_stats(record: Mapping[str, Any]) -> BaseStats:
    stats: Dict[str, int] = {}
    if "base_stats" in record:
        for key, value in dict(record["base_stats"]).items():
            if key in _STAT_KEYS:
                stats[_STAT_KEYS[key]] = int(value)
    else:
        for entry in record.get("stats") or []:
            if not isinstance(entry, Mapping):
                continue
            key = _name_of(entry.get("stat"))
            if key in _STAT_KEYS:
                stats[_STAT_KEYS[key]] = int(entry.get("base_stat", 0))
    missing = [k for k in ("hp","attack","defense","special_attack","special_defense","speed") if k not in stats]
    if missing:
        raise ValidationError(f"{record.get('name', '?')}: missing stats {', '.join(missing)}")
    if stats["hp"] <= 0:
        raise ValidationError(f"{record.get('name', '?')}: hp must be positive")
    return BaseStats(**stats)

def _types_of(record: Mapping[str, Any]) -> List[str]:
    raw = record.get("types") or []
    if not isinstance(raw, (list, tuple)):
        raise ValidationError(f"{record.get('name', '?')}: types must be a list")
    if raw and isinstance(raw[0], Mapping):
        ordered = sorted((t for t in raw if isinstance(t, Mapping)), key=lambda t: t.get("slot", 0))
        names = [_name_of(t.get("type")) for t in ordered]
    else:
        names = [_name_of(t) for t in raw]
    types = [n.lower() for n in names if n]
    if not 1 <= len(types) <= 2:
        raise ValidationError(f"{record.get('name', '?')}: expected 1 or 2 types, got {len(types)}")
    return types

def _primary_ability(record: Mapping[str, Any]) -> str:
    raw = record.get("ability")
    if isinstance(raw, str) and raw:
        return raw
    entries = [e for e in record.get("abilities") or [] if isinstance(e, Mapping)]
    for entry in entries:
        if not entry.get("is_hidden", False):
            name = _name_of(entry.get("ability"))
            if name:
                return name
    if entries:
        return _name_of(entries[0].get("ability")) or "none"
    return "none"

def combatant_from_api(record: Mapping[str, Any], ability: Optional[str] = None) -> Combatant:
    require_mapping(record, "combatant record")
    if "name" not in record:
        raise ValidationError("combatant record has no name")
    return Combatant(
        id=int(record.get("id", 0)),
        name=str(record["name"]),
        types=tuple(_types_of(record)),
        base_stats=derive_base_stats(record),
        ability=ability or _primary_ability(record),
    )

def move_from_api(record: Mapping[str, Any]) -> Move:
    require_mapping(record, "move record")
    if "name" not in record:
        raise ValidationError("move record has no name")
    move_type = _name_of(record.get("type"))
    if not move_type:
        raise ValidationError(f"{record['name']}: move has no type")
    damage_class = _name_of(record.get("damage_class")) or "physical"
    if damage_class not in _DAMAGE_CLASSES:
        raise ValidationError(f"{record['name']}: unknown damage class {damage_class!r}")
    power = record.get("power")
    accuracy = record.get("accuracy")
    return Move(
        id=int(record.get("id", 0)),
        name=str(record["name"]),
        type=move_type,
        power=int(power) if power is not None else None,
        accuracy=int(accuracy) if accuracy is not None else None,
        priority=int(record.get("priority") or 0),
        damage_class=damage_class,  # type: ignore[arg-type]
    )

__all__ = ["combatant_from_api","move_from_api","derive_base_stats","require_mapping"]
