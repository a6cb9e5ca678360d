"""Turn resolution.

One call to :func:`execute_turn` resolves exactly one turn and returns a new
:class:`~duelsim.battle.state.BattleState`; the input state is never
modified. Every turn draws from its own generator seeded with
``seed + turn_number``, so replaying from a saved state reproduces the turn.

Turn outline::

    turn_start
    first actor acts
    second actor acts        (only if nobody fainted)
    end-of-turn status phase (only if nobody fainted)
    turn_end                 (skipped when the first action ends the battle)
"""
from __future__ import annotations
from dataclasses import replace
from typing import Optional, Tuple

from duelsim.core.logging import logger
from duelsim.core.types import DEFAULT_TYPE_CHART, TypeChart
from .abilities import Ability, AbilityTable, default_ability_table
from .events import DamageDealt, Faint, MoveMissed, MoveUsed, StatusDamage, StatusHealed, TurnEnd, TurnStart
from .mechanics import StatModifier, calculate_damage, check_accuracy, determine_turn_order
from .models import Move
from .rng import SeededRNG
from .state import (BattleState, add_battle_event, get_winner, is_battle_over,
                    opponent_of, set_winner, update_active)
from .status import apply_status_hp_loss, can_act, process_status_turn

DEFAULT_ABILITIES = default_ability_table()

# ---------------------------------------------------------------------------
# Hook plumbing
# ---------------------------------------------------------------------------

def _ability_of(state: BattleState, index: int, abilities: AbilityTable) -> Optional[Ability]:
    return abilities.get(state.active[index].combatant.ability)

def _run_state_hook(state: BattleState, hook, index: int, *args) -> BattleState:
    if hook is None:
        return state
    result = hook(state, index, *args)
    return state if result is None else result

def _stat_modifier(state: BattleState, index: int, abilities: AbilityTable) -> Optional[StatModifier]:
    ability = _ability_of(state, index, abilities)
    if ability is None or ability.modify_stat is None:
        return None
    hook = ability.modify_stat
    return lambda stat, value: hook(state, index, stat, value)

def enter_battle(state: BattleState, abilities: AbilityTable = DEFAULT_ABILITIES) -> BattleState:
    """Fire on-enter hooks in slot order (0 then 1)."""
    for index in (0, 1):
        ability = _ability_of(state, index, abilities)
        if ability is not None:
            state = _run_state_hook(state, ability.on_enter_battle, index)
    return state

# ---------------------------------------------------------------------------
# Turn
# ---------------------------------------------------------------------------

def _any_fainted(state: BattleState) -> bool:
    return state.active[0].is_fainted or state.active[1].is_fainted

def _resolve_faint(state: BattleState, abilities: AbilityTable) -> BattleState:
    winner = get_winner(state)
    if winner is None:
        # double faint: no winner is declared
        logger.debug("DoubleFaint", turn=state.turn_number)
        return state
    loser = opponent_of(winner)
    state = set_winner(state, winner)
    state = add_battle_event(state, Faint(pokemon_index=loser))
    ability = _ability_of(state, loser, abilities)
    if ability is not None:
        state = _run_state_hook(state, ability.on_faint, loser)
    logger.debug("BattleFinished", turn=state.turn_number, winner=winner)
    return state

def execute_turn(state: BattleState, move_1: Move, move_2: Move, *,
                 abilities: AbilityTable = DEFAULT_ABILITIES,
                 type_chart: TypeChart = DEFAULT_TYPE_CHART) -> BattleState:
    if is_battle_over(state):
        return state

    rng = SeededRNG(state.seed + state.turn_number)
    state = replace(state, turn_number=state.turn_number + 1)
    state = add_battle_event(state, TurnStart(turn_number=state.turn_number))

    moves: Tuple[Move, Move] = (move_1, move_2)
    a0, a1 = state.active
    first, second = determine_turn_order(
        moves,
        (a0.combatant, a1.combatant),
        (a0.stat_stages, a1.stat_stages),
        (a0.status, a1.status),
        (_stat_modifier(state, 0, abilities), _stat_modifier(state, 1, abilities)),
    )

    state = _execute_action(state, first, moves[first], second, rng, abilities, type_chart)
    if _any_fainted(state):
        return _resolve_faint(state, abilities)

    state = _execute_action(state, second, moves[second], first, rng, abilities, type_chart)
    if _any_fainted(state):
        state = _resolve_faint(state, abilities)
    else:
        state = _apply_end_of_turn_status(state)
        if _any_fainted(state):
            state = _resolve_faint(state, abilities)

    state = add_battle_event(state, TurnEnd(turn_number=state.turn_number))
    logger.debug("TurnResolved", turn=state.turn_number,
                 hp0=state.active[0].current_hp, hp1=state.active[1].current_hp)
    return state

def _execute_action(state: BattleState, attacker_index: int, move: Move, defender_index: int,
                    rng: SeededRNG, abilities: AbilityTable, type_chart: TypeChart) -> BattleState:
    attacker = state.active[attacker_index]
    if not can_act(attacker.status, rng):
        return state  # asleep or fully paralyzed; nothing is logged

    state = add_battle_event(state, MoveUsed(pokemon_index=attacker_index, move_name=move.name))
    if not move.is_damaging:
        return state

    if not check_accuracy(move, rng):
        return add_battle_event(state, MoveMissed(pokemon_index=attacker_index, move_name=move.name))

    defender = state.active[defender_index]
    damage = calculate_damage(
        attacker.combatant, defender.combatant, move,
        attacker.stat_stages, defender.stat_stages, attacker.status, rng, type_chart,
        attacker_stat_modifier=_stat_modifier(state, attacker_index, abilities),
        defender_stat_modifier=_stat_modifier(state, defender_index, abilities),
    )

    attacker_ability = _ability_of(state, attacker_index, abilities)
    if attacker_ability is not None and attacker_ability.modify_damage is not None:
        damage = max(0, attacker_ability.modify_damage(state, attacker_index, move, damage))

    new_hp = max(0, defender.current_hp - damage)
    state = update_active(state, defender_index, current_hp=new_hp)
    state = add_battle_event(state, DamageDealt(pokemon_index=defender_index, damage=damage, remaining_hp=new_hp))

    defender_ability = _ability_of(state, defender_index, abilities)
    if defender_ability is not None:
        state = _run_state_hook(state, defender_ability.on_take_damage, defender_index, damage)
    if attacker_ability is not None:
        state = _run_state_hook(state, attacker_ability.on_deal_damage, attacker_index, damage)
    return state

def _apply_end_of_turn_status(state: BattleState) -> BattleState:
    for index in (0, 1):
        slot = state.active[index]
        hp_loss = apply_status_hp_loss(slot.status, slot.max_hp)
        if hp_loss > 0:
            new_hp = max(0, slot.current_hp - hp_loss)
            state = update_active(state, index, current_hp=new_hp)
            state = add_battle_event(state, StatusDamage(pokemon_index=index, damage=hp_loss,
                                                         remaining_hp=new_hp, status_type=slot.status.type))
        new_status = process_status_turn(slot.status)
        if new_status != slot.status:
            state = update_active(state, index, status=new_status)
            if new_status is None:
                # woke up
                state = add_battle_event(state, StatusHealed(pokemon_index=index, status=None))
    return state

__all__ = ["execute_turn", "enter_battle", "DEFAULT_ABILITIES"]
