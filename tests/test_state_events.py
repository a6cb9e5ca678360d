import pytest

from duelsim.battle.events import (BattleStart, DamageDealt, StatChanged, StatusApplied, StatusHealed,
                                   event_from_dict)
from duelsim.battle.models import Burn, Poison, Sleep
from duelsim.battle.state import (BattleState, add_battle_event, apply_status, change_stat_stage,
                                  create_battle_state, get_winner, is_battle_over, set_winner, update_active)


def fresh(mon):
    return create_battle_state(mon("left", hp=80), mon("right", hp=120), seed=77)


def test_initial_state(mon):
    state = fresh(mon)
    assert state.turn_number == 0
    assert state.winner is None
    assert state.log == (BattleStart(pokemon1="left", pokemon2="right", seed=77),)
    assert [a.current_hp for a in state.active] == [80, 120]
    assert [a.max_hp for a in state.active] == [80, 120]
    assert not is_battle_over(state)


def test_update_shares_untouched_slot(mon):
    state = fresh(mon)
    changed = update_active(state, 0, current_hp=10)
    assert changed.active[1] is state.active[1]
    assert state.active[0].current_hp == 80
    assert changed.active[0].hp_ratio == pytest.approx(0.125)


def test_winner_never_changes(mon):
    state = set_winner(fresh(mon), 1)
    assert set_winner(state, 0).winner == 1
    assert is_battle_over(state)


def test_winner_derived_from_hp(mon):
    state = fresh(mon)
    assert get_winner(state) is None
    assert get_winner(update_active(state, 1, current_hp=0)) == 0
    assert get_winner(update_active(state, 0, current_hp=-4)) == 1
    both = update_active(update_active(state, 0, current_hp=0), 1, current_hp=0)
    assert get_winner(both) is None
    assert is_battle_over(both)


def test_apply_status_logs_once(mon):
    state = apply_status(fresh(mon), 1, Poison())
    assert state.active[1].status == Poison()
    assert state.log[-1] == StatusApplied(pokemon_index=1, status=Poison())
    assert apply_status(state, 1, Burn()) is state


def test_change_stat_stage_clamps_and_logs(mon):
    state = fresh(mon)
    for _ in range(4):
        state = change_stat_stage(state, 0, "attack", 2)
    assert state.active[0].stat_stages.attack == 6
    assert state.log[-1] == StatChanged(pokemon_index=0, stat="attack", old_stage=6, new_stage=6)


def test_event_dicts():
    assert DamageDealt(pokemon_index=1, damage=12, remaining_hp=30).as_dict() == \
        {"type": "damage_dealt", "pokemon_index": 1, "damage": 12, "remaining_hp": 30}
    applied = StatusApplied(pokemon_index=0, status=Sleep(2))
    assert applied.as_dict()["status"] == {"type": "sleep", "turns_remaining": 2}
    assert event_from_dict(applied.as_dict()) == applied
    assert event_from_dict(StatusHealed(pokemon_index=1).as_dict()) == StatusHealed(pokemon_index=1)


def test_unknown_event_type():
    with pytest.raises(KeyError):
        event_from_dict({"type": "weather_changed"})


def test_state_round_trips_through_dict(mon):
    state = apply_status(fresh(mon), 0, Sleep(3))
    state = change_stat_stage(state, 1, "speed", -1)
    state = add_battle_event(state, DamageDealt(pokemon_index=1, damage=5, remaining_hp=115))
    state = update_active(state, 1, current_hp=115)
    restored = BattleState.from_dict(state.to_dict())
    assert restored.to_dict() == state.to_dict()
    assert restored.active[0].status == Sleep(3)
    assert restored.log == state.log
