import math

from duelsim.battle import create_battle, get_log
from duelsim.battle.abilities import (BLAZE, BUILTIN_ABILITIES, INTIMIDATE, Ability, AbilityTable,
                                      default_ability_table, pinch_ability)
from duelsim.battle.engine import enter_battle, execute_turn
from duelsim.battle.events import DamageDealt, MoveUsed, StatChanged, StatusApplied, StatusDamage
from duelsim.battle.models import Burn
from duelsim.battle.state import apply_status, create_battle_state, opponent_of, update_active

NO_ABILITIES = AbilityTable()


def dealt_to(state, index):
    return [e.damage for e in state.log if isinstance(e, DamageDealt) and e.pokemon_index == index]


def test_table_lookup_is_case_insensitive():
    table = default_ability_table()
    assert table.get("INTIMIDATE") is INTIMIDATE
    assert "Blaze" in table
    assert table.get("") is None
    assert table.get("levitate") is None
    assert len(table) == len(BUILTIN_ABILITIES)


def test_with_ability_returns_new_table():
    table = default_ability_table()
    extended = table.with_ability(Ability(name="run-away"))
    assert "run-away" in extended
    assert "run-away" not in table


def test_intimidate_on_battle_start(mon):
    battle = create_battle(mon("scary", ability="intimidate"), mon("victim"), seed=1)
    assert battle.state.active[1].stat_stages.attack == -1
    assert get_log(battle)[1] == StatChanged(pokemon_index=1, stat="attack", old_stage=0, new_stage=-1)


def test_enter_hooks_fire_in_slot_order(mon):
    state = create_battle_state(mon("a", ability="intimidate"), mon("b", ability="intimidate"), seed=1)
    state = enter_battle(state, default_ability_table())
    changes = [e.pokemon_index for e in state.log if isinstance(e, StatChanged)]
    assert changes == [1, 0]


def test_missing_ability_is_ignored(mon):
    battle = create_battle(mon("a", ability="not-a-real-ability"), mon("b"), seed=1)
    assert len(get_log(battle)) == 1


def test_blaze_boosts_fire_moves_in_a_pinch(mon, move, growl):
    blazer = mon("blazer", types=("fire",), ability="blaze", speed=120)
    target = mon("target", hp=300)
    ember = move("ember", type="fire", power=40, damage_class="special")
    state = update_active(create_battle_state(blazer, target, seed=9), 0, current_hp=20)

    boosted = dealt_to(execute_turn(state, ember, growl), 1)[0]
    plain = dealt_to(execute_turn(state, ember, growl, abilities=NO_ABILITIES), 1)[0]
    assert boosted == math.floor(plain * 1.5)


def test_blaze_idle_at_high_hp_or_other_types(mon, move, growl):
    blazer = mon("blazer", types=("fire",), ability="blaze", speed=120)
    state = create_battle_state(blazer, mon("target", hp=300), seed=9)
    ember = move("ember", type="fire", power=40, damage_class="special")
    assert dealt_to(execute_turn(state, ember, growl), 1) == \
        dealt_to(execute_turn(state, ember, growl, abilities=NO_ABILITIES), 1)

    low = update_active(state, 0, current_hp=20)
    slam = move("slam", power=80)
    assert dealt_to(execute_turn(low, slam, growl), 1) == \
        dealt_to(execute_turn(low, slam, growl, abilities=NO_ABILITIES), 1)


def test_pinch_ability_helper(mon, move):
    torrent_like = pinch_ability("riptide", "water")
    state = update_active(create_battle_state(mon("a"), mon("b"), seed=1), 0, current_hp=30)
    splash = move("surf", type="water", power=90)
    assert torrent_like.modify_damage(state, 0, splash, 40) == 60
    assert torrent_like.modify_damage(state, 0, move("slam"), 40) == 40
    assert BLAZE.modify_damage(state, 1, move("ember", type="fire"), 40) == 40


def test_modify_stat_hook_reduces_damage_taken(mon, move, growl):
    sturdy_fur = Ability(name="fur-coat", modify_stat=lambda s, i, stat, v: v * 2 if stat == "defense" else v)
    table = default_ability_table().with_ability(sturdy_fur)
    state = create_battle_state(mon("attacker"), mon("fluffy", ability="fur-coat", hp=300), seed=4)
    slam = move("slam", power=80)
    with_hook = dealt_to(execute_turn(state, slam, growl, abilities=table), 1)[0]
    without = dealt_to(execute_turn(state, slam, growl), 1)[0]
    assert with_hook < without


def test_modify_stat_hook_changes_turn_order(mon, move):
    quick = Ability(name="quick-feet", modify_stat=lambda s, i, stat, v: v * 2 if stat == "speed" else v)
    table = AbilityTable([quick])
    state = create_battle_state(mon("a", speed=100), mon("b", speed=60, ability="quick-feet"), seed=2)
    pound = move("pound", power=10)
    after = execute_turn(state, pound, pound, abilities=table)
    assert [e.pokemon_index for e in after.log if isinstance(e, MoveUsed)] == [1, 0]


def test_damage_hooks_receive_amount(mon, move, growl):
    taken, dealt = [], []
    table = AbilityTable([
        Ability(name="watcher", on_take_damage=lambda s, i, d: taken.append((i, d))),
        Ability(name="hitter", on_deal_damage=lambda s, i, d: dealt.append((i, d))),
    ])
    state = create_battle_state(mon("a", ability="hitter"), mon("b", ability="watcher"), seed=6)
    after = execute_turn(state, move("slam", power=80), growl, abilities=table)
    amount = dealt_to(after, 1)[0]
    assert taken == [(1, amount)]
    assert dealt == [(0, amount)]


def test_take_damage_hook_can_return_new_state(mon, move, growl):
    def scorch(state, index, damage):
        return apply_status(state, opponent_of(index), Burn())
    table = AbilityTable([Ability(name="flame-body", on_take_damage=scorch)])
    state = create_battle_state(mon("a"), mon("b", ability="flame-body"), seed=6)
    after = execute_turn(state, move("slam", power=80), growl, abilities=table)
    kinds = [e.type for e in after.log[2:]]
    assert kinds.index("damage_dealt") < kinds.index("status_applied")
    assert StatusApplied(pokemon_index=0, status=Burn()) in after.log
    assert any(isinstance(e, StatusDamage) and e.pokemon_index == 0 for e in after.log)


def test_faint_hook_fires_for_loser(mon, move):
    fainted = []
    table = AbilityTable([Ability(name="aftermath", on_faint=lambda s, i: fainted.append(i))])
    state = create_battle_state(mon("a", attack=200), mon("b", hp=10, ability="aftermath"), seed=3)
    mega_punch = move("mega-punch", power=100)
    after = execute_turn(state, mega_punch, mega_punch, abilities=table)
    assert after.winner == 0
    assert fainted == [1]


def test_negative_damage_from_hook_is_clamped(mon, move, growl):
    table = AbilityTable([Ability(name="heal-pulse", modify_damage=lambda s, i, m, d: -50)])
    state = create_battle_state(mon("a", ability="heal-pulse"), mon("b", hp=120), seed=6)
    state = update_active(state, 1, current_hp=100)
    after = execute_turn(state, move("slam", power=80), growl, abilities=table)
    assert dealt_to(after, 1) == [0]
    assert after.active[1].current_hp == 100
    assert after.active[1].current_hp <= after.active[1].max_hp
