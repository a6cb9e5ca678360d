import pytest

from duelsim.battle.models import BaseStats, Combatant, Move


def make_combatant(name="testmon", types=("normal",), *, hp=100, attack=100, defense=100,
                   special_attack=100, special_defense=100, speed=100, ability="none", id=1):
    return Combatant(
        id=id, name=name, types=tuple(types),
        base_stats=BaseStats(hp=hp, attack=attack, defense=defense, special_attack=special_attack,
                             special_defense=special_defense, speed=speed),
        ability=ability,
    )


def make_move(name="tackle", type="normal", *, power=40, accuracy=100, priority=0,
              damage_class="physical", id=1):
    return Move(id=id, name=name, type=type, power=power, accuracy=accuracy,
                priority=priority, damage_class=damage_class)


@pytest.fixture
def mon():
    return make_combatant


@pytest.fixture
def move():
    return make_move


@pytest.fixture
def growl():
    """A non-damaging move; keeps a turn from dealing any damage."""
    return make_move("growl", power=None, damage_class="status", id=45)
