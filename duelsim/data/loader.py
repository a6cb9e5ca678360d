"""Matchup file loader.

A matchup is a small JSON document::

    {
      "seed": 12345,
      "max_turns": 50,
      "sides": [
        {"combatant": {...}, "ability": "intimidate", "moves": [{...}, ...]},
        {"combatant": {...}, "moves": [{...}]}
      ]
    }

Combatant and move records use the catalog shapes accepted by
:mod:`duelsim.battle.factory`. ``seed``, ``max_turns`` and ``ability`` are
optional.
"""
from __future__ import annotations
import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from duelsim.battle.factory import combatant_from_api, move_from_api, require_mapping
from duelsim.battle.models import Combatant, Move
from duelsim.core.errors import DataLoadError, ValidationError
from duelsim.core.logging import logger
from duelsim.core.paths import DEMO_MATCHUP


@dataclass(frozen=True)
class Side:
    combatant: Combatant
    moves: Tuple[Move, ...]


@dataclass(frozen=True)
class Matchup:
    sides: Tuple[Side, Side]
    seed: Optional[int] = None
    max_turns: Optional[int] = None

    @property
    def combatants(self) -> Tuple[Combatant, Combatant]:
        return self.sides[0].combatant, self.sides[1].combatant


def _side_from_dict(raw: Mapping[str, Any]) -> Side:
    require_mapping(raw, "side")
    if "combatant" not in raw:
        raise ValidationError("side has no combatant")
    combatant = require_mapping(raw["combatant"], "combatant record")
    moves = tuple(move_from_api(m) for m in raw.get("moves") or [])
    if not moves:
        raise ValidationError(f"side {combatant.get('name', '?')} has no moves")
    return Side(combatant=combatant_from_api(combatant, raw.get("ability")), moves=moves)

def matchup_from_dict(raw: Mapping[str, Any]) -> Matchup:
    require_mapping(raw, "matchup")
    sides = raw.get("sides") or []
    if not isinstance(sides, (list, tuple)):
        raise ValidationError("sides must be a list")
    if len(sides) != 2:
        raise ValidationError(f"expected 2 sides, got {len(sides)}")
    seed = raw.get("seed")
    max_turns = raw.get("max_turns")
    return Matchup(
        sides=(_side_from_dict(sides[0]), _side_from_dict(sides[1])),
        seed=int(seed) if seed is not None else None,
        max_turns=int(max_turns) if max_turns is not None else None,
    )

def load_matchup(path: Union[str, Path]) -> Matchup:
    path = Path(path)
    if not path.exists():
        raise DataLoadError(str(path), "file not found")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(str(path), str(e)) from e
    try:
        matchup = matchup_from_dict(raw)
    except (ValidationError, KeyError, TypeError, ValueError) as e:
        logger.warn("MatchupInvalid", path=str(path), error=str(e))
        raise DataLoadError(str(path), str(e)) from e
    logger.debug("MatchupLoaded", path=str(path),
                 p1=matchup.sides[0].combatant.name, p2=matchup.sides[1].combatant.name)
    return matchup

@lru_cache(maxsize=None)
def demo_matchup() -> Matchup:
    return load_matchup(DEMO_MATCHUP)

__all__ = ["Side","Matchup","matchup_from_dict","load_matchup","demo_matchup"]
