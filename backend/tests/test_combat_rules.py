import random

import pytest

from app.combat.dice import DiceRoller
from app.combat.models.stat_block import Buff, StatBlock
from app.combat.rules import (
    compute_damage,
    equipment_upgrade_cost,
    get_tier_multiplier,
    monster_base_stats,
    monster_rewards,
    next_level_requirement,
)


def test_damage_is_at_least_one_for_all_non_negative_inputs():
    for attack in range(0, 60, 3):
        for defense in range(0, 60, 4):
            assert compute_damage(attack, defense) >= 1


def test_damage_is_attack_minus_defense_when_positive():
    assert compute_damage(15, 7) == 8
    assert compute_damage(7, 10) == 1


def test_monster_stats_normal_level_one():
    assert monster_base_stats(1, "normal") == {
        "max_hp": 70,
        "attack": 15,
        "defense": 7,
        "speed": 11,
    }


def test_monster_stats_elite_are_floored():
    stats = monster_base_stats(1, "elite")
    assert stats["max_hp"] == 105
    assert stats["attack"] == 22
    assert stats["defense"] == 10
    assert stats["speed"] == 16


@pytest.mark.parametrize("level", [1, 2, 5, 10])
def test_boss_stats_are_three_times_normal(level):
    normal = monster_base_stats(level, "normal")
    boss = monster_base_stats(level, "boss")
    for key in ("max_hp", "attack", "defense"):
        assert boss[key] == normal[key] * 3


def test_monster_rewards_scale_with_tier():
    assert monster_rewards(1, "normal") == {"exp": 30, "gold": 15}
    assert monster_rewards(1, "boss") == {"exp": 90, "gold": 45}
    assert monster_rewards(2, "elite") == {"exp": 60, "gold": 30}


def test_unknown_tier_raises():
    with pytest.raises(ValueError):
        get_tier_multiplier("legendary")


def test_level_and_upgrade_curves():
    assert next_level_requirement(100) == 150
    assert next_level_requirement(150) == 225
    assert equipment_upgrade_cost(50, 1) == 75
    assert equipment_upgrade_cost(50, 2) == 112


def test_stat_block_hp_stays_in_bounds():
    stats = StatBlock.full(level=1, max_hp=100, attack=10, defense=5)

    assert stats.take_damage(-5) == 0
    assert stats.current_hp == 100

    assert stats.take_damage(30) == 30
    assert stats.heal(1000, cap=stats.max_hp) == 30
    assert stats.current_hp == 100

    assert stats.take_damage(500) == 100
    assert stats.current_hp == 0
    assert stats.is_dead()

    assert stats.heal(-10, cap=stats.max_hp) == 0
    assert stats.current_hp == 0


def test_stat_block_constructor_clamps():
    stats = StatBlock(level=1, max_hp=50, current_hp=80, attack=-3, defense=-1)
    assert stats.current_hp == 50
    assert stats.attack == 0
    assert stats.defense == 0


def test_buff_tick_never_goes_negative():
    buff = Buff(name="狂暴", multiplier=1.3, remaining_turns=1)
    assert buff.tick() is True
    assert buff.tick() is True
    assert buff.remaining_turns == 0


def test_weighted_choice_follows_weights():
    dice = DiceRoller(random.Random(3))
    weights = {"a": 75, "b": 25}
    picks = [dice.weighted_choice(weights) for _ in range(4000)]
    ratio = picks.count("a") / len(picks)
    assert 0.7 < ratio < 0.8


def test_weighted_choice_rejects_empty():
    with pytest.raises(ValueError):
        DiceRoller().weighted_choice({})
