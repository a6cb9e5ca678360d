"""Status condition rules.

Each condition defines whether its holder can act, a speed multiplier,
end-of-turn HP loss and a per-turn transition:

  burn       acts normally, loses max(1, maxHP//16) per turn, physical damage halved
  poison     acts normally, loses max(1, maxHP//16) per turn
  paralysis  speed x0.25, 25% chance each turn to be unable to act
  sleep      cannot act while turns_remaining > 0; counter ticks down each turn end

The damage formula (:func:`duelsim.battle.mechanics.calculate_damage`) folds
:func:`get_damage_multiplier` into its modifier alongside STAB and type effectiveness.
"""
from __future__ import annotations
from typing import Optional

from duelsim.core.errors import InvalidArgument
from .models import Burn, Move, Paralysis, Poison, Sleep, StatusCondition
from .rng import SeededRNG

PARALYSIS_SPEED_MULTIPLIER = 0.25
PARALYSIS_SKIP_CHANCE = 0.25
BURN_DAMAGE_MULTIPLIER = 0.5
SLEEP_MAX_TURNS = 3

# ---------------------------------------------------------------------------
# Per-condition helpers
# ---------------------------------------------------------------------------

def get_burn_hp_loss(max_hp: int) -> int:
    return max(1, max_hp // 16)

def burn_affects_damage(move: Move) -> bool:
    return move.is_physical

def get_poison_hp_loss(max_hp: int) -> int:
    return max(1, max_hp // 16)

def can_act_with_paralysis(rng: SeededRNG) -> bool:
    return not rng.chance(PARALYSIS_SKIP_CHANCE)

def generate_sleep_duration(rng: SeededRNG) -> int:
    return rng.next_int(SLEEP_MAX_TURNS) + 1

def can_act_with_sleep(status: Sleep) -> bool:
    return status.turns_remaining == 0

def process_sleep_turn(status: Sleep) -> Optional[Sleep]:
    remaining = status.turns_remaining - 1
    if remaining <= 0:
        return None  # woke up
    return Sleep(remaining)

# ---------------------------------------------------------------------------
# Dispatch over the closed set
# ---------------------------------------------------------------------------

def can_act(status: Optional[StatusCondition], rng: SeededRNG) -> bool:
    """Only paralysis consumes an RNG draw."""
    if status is None:
        return True
    if isinstance(status, Sleep):
        return can_act_with_sleep(status)
    if isinstance(status, Paralysis):
        return can_act_with_paralysis(rng)
    return True

def get_speed_multiplier(status: Optional[StatusCondition]) -> float:
    if isinstance(status, Paralysis):
        return PARALYSIS_SPEED_MULTIPLIER
    return 1.0

def get_damage_multiplier(status: Optional[StatusCondition], move: Move) -> float:
    if isinstance(status, Burn) and burn_affects_damage(move):
        return BURN_DAMAGE_MULTIPLIER
    return 1.0

def apply_status_hp_loss(status: Optional[StatusCondition], max_hp: int) -> int:
    if isinstance(status, Burn):
        return get_burn_hp_loss(max_hp)
    if isinstance(status, Poison):
        return get_poison_hp_loss(max_hp)
    return 0

def process_status_turn(status: Optional[StatusCondition]) -> Optional[StatusCondition]:
    if status is None:
        return None
    if isinstance(status, Sleep):
        return process_sleep_turn(status)
    if isinstance(status, (Burn, Poison, Paralysis)):
        return status
    raise TypeError(f"Unhandled status condition: {status!r}")

def create_status(kind: str, rng: Optional[SeededRNG] = None) -> StatusCondition:
    if kind == "burn":
        return Burn()
    if kind == "poison":
        return Poison()
    if kind == "paralysis":
        return Paralysis()
    if kind == "sleep":
        if rng is None:
            raise InvalidArgument("RNG required for sleep status")
        return Sleep(generate_sleep_duration(rng))
    raise InvalidArgument(f"Unknown status kind: {kind!r}")

__all__ = [
    "can_act","get_speed_multiplier","get_damage_multiplier","apply_status_hp_loss",
    "process_status_turn","create_status","get_burn_hp_loss","burn_affects_damage",
    "get_poison_hp_loss","can_act_with_paralysis","generate_sleep_duration",
    "can_act_with_sleep","process_sleep_turn","PARALYSIS_SPEED_MULTIPLIER","PARALYSIS_SKIP_CHANCE",
    "BURN_DAMAGE_MULTIPLIER",
]
