"""Battle facade.

:class:`BattleService` owns the ability table and type chart and wraps each
battle state in a :class:`Battle` handle. The module-level functions delegate
to a shared default :data:`battle_service`.
"""
from __future__ import annotations
import time
from dataclasses import dataclass
from itertools import cycle
from typing import Any, Dict, Optional, Sequence, Tuple

from duelsim.core.errors import InvalidArgument
from duelsim.core.logging import logger
from duelsim.core.types import DEFAULT_TYPE_CHART, TypeChart
from .abilities import AbilityTable, default_ability_table
from .engine import enter_battle, execute_turn as _execute_turn
from .events import BattleEvent
from .models import Combatant, Move
from .rng import SeededRNG
from .state import BattleState, create_battle_state, get_winner as _state_winner, is_battle_over

DEFAULT_MAX_TURNS = 100


@dataclass(frozen=True)
class Battle:
    state: BattleState
    abilities: AbilityTable
    type_chart: TypeChart

    @property
    def turn_number(self) -> int:
        return self.state.turn_number

    def to_dict(self) -> Dict[str, Any]:
        return self.state.to_dict()


class BattleService:
    def __init__(self, abilities: Optional[AbilityTable] = None, type_chart: Optional[TypeChart] = None):
        self.abilities = abilities if abilities is not None else default_ability_table()
        self.type_chart = type_chart if type_chart is not None else DEFAULT_TYPE_CHART

    def create_battle(self, combatant1: Combatant, combatant2: Combatant, seed: Optional[int] = None, *,
                      abilities: Optional[AbilityTable] = None,
                      type_chart: Optional[TypeChart] = None) -> Battle:
        if seed is None:
            seed = int(time.time() * 1000)
            logger.debug("UnseededBattle", seed=seed)
        else:
            SeededRNG(seed)  # validates the seed up front
        abilities = abilities if abilities is not None else self.abilities
        type_chart = type_chart if type_chart is not None else self.type_chart
        state = enter_battle(create_battle_state(combatant1, combatant2, seed), abilities)
        logger.debug("BattleCreated", p1=combatant1.name, p2=combatant2.name, seed=seed)
        return Battle(state=state, abilities=abilities, type_chart=type_chart)

    def execute_turn(self, battle: Battle, move_1: Move, move_2: Move) -> Battle:
        state = _execute_turn(battle.state, move_1, move_2,
                              abilities=battle.abilities, type_chart=battle.type_chart)
        if state is battle.state:
            return battle
        return Battle(state=state, abilities=battle.abilities, type_chart=battle.type_chart)

    def is_finished(self, battle: Battle) -> bool:
        return is_battle_over(battle.state)

    def get_winner(self, battle: Battle) -> Optional[int]:
        return _state_winner(battle.state)

    def get_log(self, battle: Battle) -> Tuple[BattleEvent, ...]:
        return battle.state.log

    def run_scripted(self, combatant1: Combatant, combatant2: Combatant,
                     moves_1: Sequence[Move], moves_2: Sequence[Move],
                     seed: Optional[int] = None, max_turns: int = DEFAULT_MAX_TURNS) -> Battle:
        """Cycle two fixed move lists until someone faints or ``max_turns`` pass."""
        if not moves_1 or not moves_2:
            raise InvalidArgument("Both sides need at least one move")
        if max_turns <= 0:
            raise InvalidArgument(f"max_turns must be positive, got {max_turns}")
        battle = self.create_battle(combatant1, combatant2, seed)
        for m1, m2 in zip(cycle(moves_1), cycle(moves_2)):
            if self.is_finished(battle) or battle.turn_number >= max_turns:
                break
            battle = self.execute_turn(battle, m1, m2)
        if not self.is_finished(battle):
            logger.info("TurnCapReached", turns=battle.turn_number)
        return battle


battle_service = BattleService()

def create_battle(combatant1: Combatant, combatant2: Combatant, seed: Optional[int] = None, *,
                  abilities: Optional[AbilityTable] = None, type_chart: Optional[TypeChart] = None) -> Battle:
    return battle_service.create_battle(combatant1, combatant2, seed, abilities=abilities, type_chart=type_chart)

def execute_turn(battle: Battle, move_1: Move, move_2: Move) -> Battle:
    return battle_service.execute_turn(battle, move_1, move_2)

def is_finished(battle: Battle) -> bool:
    return battle_service.is_finished(battle)

def get_winner(battle: Battle) -> Optional[int]:
    return battle_service.get_winner(battle)

def get_log(battle: Battle) -> Tuple[BattleEvent, ...]:
    return battle_service.get_log(battle)

__all__ = [
    "Battle","BattleService","battle_service","create_battle","execute_turn",
    "is_finished","get_winner","get_log","DEFAULT_MAX_TURNS",
]
