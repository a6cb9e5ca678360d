import pytest

from duelsim.battle.mechanics import (check_accuracy, determine_turn_order, get_effective_speed,
                                      get_effective_stat, get_effective_stats, get_type_effectiveness,
                                      modify_stat_stage, set_stat_stage, stage_multiplier)
from duelsim.battle.models import BaseStats, Paralysis, StatStages
from duelsim.battle.rng import SeededRNG
from duelsim.core.types import normalize_type


@pytest.mark.parametrize("stage,expected", [(0, 1.0), (1, 1.5), (2, 2.0), (6, 4.0),
                                            (-1, 2 / 3), (-2, 0.5), (-6, 0.25), (9, 4.0), (-9, 0.25)])
def test_stage_multiplier(stage, expected):
    assert stage_multiplier(stage) == pytest.approx(expected)


def test_effective_stat_floors():
    assert get_effective_stat(100, -1) == 66
    assert get_effective_stat(75, 1) == 112


def test_effective_stats_leave_hp_alone():
    base = BaseStats(hp=80, attack=100, defense=100, special_attack=100, special_defense=100, speed=100)
    eff = get_effective_stats(base, StatStages(attack=2, speed=-2))
    assert eff.hp == 80
    assert eff.attack == 200
    assert eff.speed == 50
    assert eff.defense == 100


def test_stat_stages_clamp():
    assert StatStages(attack=9).attack == 6
    stages = modify_stat_stage(StatStages(defense=-5), "defense", -4)
    assert stages.defense == -6
    assert set_stat_stage(stages, "speed", 12).speed == 6
    with pytest.raises(KeyError):
        StatStages().get("hp")


def test_accuracy_none_never_misses_and_skips_rng(move):
    rng = SeededRNG(11)
    assert check_accuracy(move("swift", accuracy=None), rng)
    assert rng.get_seed() == 11


def test_accuracy_zero_always_misses(move):
    rng = SeededRNG(11)
    assert not any(check_accuracy(move("miss", accuracy=0), rng) for _ in range(50))


def test_type_effectiveness():
    assert get_type_effectiveness("fire", ("grass",)) == 2.0
    assert get_type_effectiveness("fire", ("water", "rock")) == 0.25
    assert get_type_effectiveness("grass", ("water", "ground")) == 4.0
    assert get_type_effectiveness("normal", ("ghost",)) == 0.0
    assert get_type_effectiveness("ice", ("ice",)) == 0.5
    assert get_type_effectiveness("dragon", ("fairy",)) == 0.0
    assert get_type_effectiveness("water", ("normal",)) == 1.0


def test_unknown_type_names_normalize():
    assert normalize_type("FIRE") == "fire"
    assert normalize_type("shadow") == "normal"


def test_priority_beats_speed(mon, move):
    slow = mon("slow", speed=10)
    fast = mon("fast", speed=200)
    order = determine_turn_order((move("quick-attack", priority=1), move("tackle")),
                                 (slow, fast), (StatStages(), StatStages()))
    assert order == (0, 1)


def test_faster_goes_first(mon, move):
    order = determine_turn_order((move(), move()), (mon(speed=50), mon(speed=150)),
                                 (StatStages(), StatStages()))
    assert order == (1, 0)


def test_speed_tie_goes_to_slot_zero(mon, move):
    order = determine_turn_order((move(), move()), (mon(speed=80), mon(speed=80)),
                                 (StatStages(), StatStages()))
    assert order == (0, 1)


@pytest.mark.parametrize("stage,expected", [(-1, (0, 1)), (-2, (1, 0))])
def test_speed_stage_changes_order(mon, move, stage, expected):
    """-1 leaves 100 at 66, still ahead of 60; -2 drops it to 50."""
    order = determine_turn_order((move(), move()), (mon(speed=100), mon(speed=60)),
                                 (StatStages(speed=stage), StatStages()))
    assert order == expected


def test_paralysis_quarters_speed(mon, move):
    fast = mon("fast", speed=100)
    assert get_effective_speed(fast, StatStages(), Paralysis()) == 25
    order = determine_turn_order((move(), move()), (fast, mon("slow", speed=50)),
                                 (StatStages(), StatStages()), (Paralysis(), None))
    assert order == (1, 0)


def test_stat_modifier_feeds_turn_order(mon, move):
    doubled = lambda stat, value: value * 2 if stat == "speed" else value
    order = determine_turn_order((move(), move()), (mon(speed=100), mon(speed=60)),
                                 (StatStages(), StatStages()), stat_modifiers=(None, doubled))
    assert order == (1, 0)
