"""
Battle simulation package.
Modules:
- rng.py (seeded LCG)
- models.py (Combatant, Move, StatStages, Status)
- mechanics.py (damage calc, accuracy, STAB, type matchups, turn order)
- status.py / abilities.py (status machine, ability hooks)
- engine.py (turn resolution pipeline)
- service.py (facade)
"""
from .abilities import Ability, AbilityTable, default_ability_table
from .models import BaseStats, Burn, Combatant, Move, Paralysis, Poison, Sleep, StatStages
from .rng import SeededRNG
from .service import (Battle, BattleService, battle_service, create_battle, execute_turn,
                      get_log, get_winner, is_finished)

__all__ = [
    "Ability","AbilityTable","default_ability_table",
    "BaseStats","Combatant","Move","StatStages","Burn","Poison","Paralysis","Sleep",
    "SeededRNG","Battle","BattleService","battle_service",
    "create_battle","execute_turn","is_finished","get_winner","get_log",
]
