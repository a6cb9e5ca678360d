"""Global type metadata: matchup chart, colors & abbreviations.

Provides:
  ALL_TYPES: the eighteen elemental type names
  TypeChart: injectable (attacking, defending) -> multiplier table
  DEFAULT_TYPE_CHART: the standard chart (fairy included)
  TYPE_COLORS_HEX / TYPE_ABBREVIATIONS: display metadata used by the renderer
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple

ALL_TYPES: Tuple[str, ...] = (
    "normal", "fire", "water", "electric", "grass", "ice",
    "fighting", "poison", "ground", "flying", "psychic", "bug",
    "rock", "ghost", "dragon", "dark", "steel", "fairy",
)

_CHART: Dict[str, Dict[str, float]] = {
    # attacking -> {defending: multiplier}; anything absent is neutral
    "normal":  {"rock": 0.5, "ghost": 0.0, "steel": 0.5},
    "fire":    {"fire": 0.5, "water": 0.5, "grass": 2.0, "ice": 2.0, "bug": 2.0, "rock": 0.5, "dragon": 0.5, "steel": 2.0},
    "water":   {"fire": 2.0, "water": 0.5, "grass": 0.5, "ground": 2.0, "rock": 2.0, "dragon": 0.5},
    "grass":   {"fire": 0.5, "water": 2.0, "grass": 0.5, "poison": 0.5, "ground": 2.0, "flying": 0.5, "bug": 0.5, "rock": 2.0, "dragon": 0.5, "steel": 0.5},
    "electric":{"water": 2.0,"electric": 0.5,"grass": 0.5,"ground": 0.0,"flying": 2.0,"dragon": 0.5},
    "ice":     {"fire": 0.5,"water": 0.5,"grass": 2.0,"ice": 0.5,"ground": 2.0,"flying": 2.0,"dragon": 2.0,"steel": 0.5},
    "fighting":{"normal": 2.0,"ice": 2.0,"rock": 2.0,"dark": 2.0,"steel": 2.0,"poison": 0.5,"flying": 0.5,"psychic": 0.5,"bug": 0.5,"ghost": 0.0,"fairy": 0.5},
    "poison":  {"grass": 2.0,"poison": 0.5,"ground": 0.5,"rock": 0.5,"ghost": 0.5,"steel": 0.0,"fairy": 2.0},
    "ground":  {"fire": 2.0,"electric": 2.0,"poison": 2.0,"rock": 2.0,"steel": 2.0,"grass": 0.5,"bug": 0.5,"flying": 0.0},
    "flying":  {"grass": 2.0,"fighting": 2.0,"bug": 2.0,"electric": 0.5,"rock": 0.5,"steel": 0.5},
    "psychic": {"fighting": 2.0,"poison": 2.0,"psychic": 0.5,"steel": 0.5,"dark": 0.0},
    "bug":     {"grass": 2.0,"psychic": 2.0,"dark": 2.0,"fire": 0.5,"fighting": 0.5,"poison": 0.5,"flying": 0.5,"ghost": 0.5,"steel": 0.5,"fairy": 0.5},
    "rock":    {"fire": 2.0,"ice": 2.0,"flying": 2.0,"bug": 2.0,"fighting": 0.5,"ground": 0.5,"steel": 0.5},
    "ghost":   {"ghost": 2.0,"psychic": 2.0,"dark": 0.5,"normal": 0.0},
    "dragon":  {"dragon": 2.0,"steel": 0.5,"fairy": 0.0},
    "dark":    {"ghost": 2.0,"psychic": 2.0,"fighting": 0.5,"dark": 0.5,"fairy": 0.5},
    "steel":   {"ice": 2.0,"rock": 2.0,"fairy": 2.0,"fire": 0.5,"water": 0.5,"electric": 0.5,"steel": 0.5},
    "fairy":   {"fighting": 2.0,"dragon": 2.0,"dark": 2.0,"fire": 0.5,"poison": 0.5,"steel": 0.5},
}


def normalize_type(type_name: str) -> str:
    """Lowercase a type name; unknown names collapse to ``normal``."""
    t = str(type_name).strip().lower()
    return t if t in ALL_TYPES else "normal"


class TypeChart:
    """Read-only matchup table keyed by (attacking type, defending type)."""

    def __init__(self, table: Mapping[str, Mapping[str, float]]):
        self._table = MappingProxyType({
            atk.lower(): MappingProxyType({d.lower(): float(m) for d, m in row.items()})
            for atk, row in table.items()
        })

    def multiplier(self, attacking: str, defending: str) -> float:
        return self._table.get(attacking.lower(), {}).get(defending.lower(), 1.0)

    def effectiveness(self, move_type: str, defending_types: Iterable[str]) -> float:
        mult = 1.0
        for t in defending_types:
            mult *= self.multiplier(move_type, t)
        return mult

    def __repr__(self) -> str:
        return f"TypeChart({len(self._table)} attacking types)"


DEFAULT_TYPE_CHART = TypeChart(_CHART)

TYPE_COLORS_HEX: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ice": "ICE",
    "fighting": "FGT",
    "poison": "PSN",
    "ground": "GRN",
    "flying": "FLY",
    "psychic": "PSY",
    "bug": "BUG",
    "rock": "RCK",
    "ghost": "GHO",
    "dragon": "DRA",
    "dark": "DRK",
    "steel": "STL",
    "fairy": "FAI",
}

def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())

def type_markup(type_name: str, text: str) -> str:
    """Wrap text in rich color markup for the given type."""
    hex_color = TYPE_COLORS_HEX.get(type_name.lower())
    if not hex_color:
        return text
    return f"[{hex_color}]{text}[/{hex_color}]"

def format_types(types: Iterable[str]) -> str:
    return '/'.join(type_markup(t, type_abbreviation(t)) for t in types)

__all__ = [
    'ALL_TYPES','TypeChart','DEFAULT_TYPE_CHART','normalize_type',
    'TYPE_COLORS_HEX','TYPE_ABBREVIATIONS','type_abbreviation','type_markup','format_types'
]
