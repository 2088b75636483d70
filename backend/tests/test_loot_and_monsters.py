import logging
import random

import pytest

from app.combat.ai_opponent import MonsterAI
from app.combat.dice import DiceRoller
from app.combat.loot import LootEntry, LootResolver
from app.combat.monster_factory import create_monster


def test_loot_converges_to_double_gated_rate():
    resolver = LootResolver(DiceRoller(random.Random(1234)))
    entries = [LootEntry("iron_ore", 0.5), LootEntry("magic_crystal", 0.2)]
    trials = 20000
    counts = {"iron_ore": 0, "magic_crystal": 0}

    for _ in range(trials):
        for item_id in resolver.roll(entries):
            counts[item_id] += 1

    assert counts["iron_ore"] / trials == pytest.approx(0.3 * 0.5, abs=0.015)
    assert counts["magic_crystal"] / trials == pytest.approx(0.3 * 0.2, abs=0.01)


def test_failed_drop_check_drops_nothing(scripted_dice):
    resolver = LootResolver(scripted_dice(0.5, default=0.0))
    assert resolver.roll([LootEntry("iron_ore", 1.0)]) == []


def test_entries_are_rolled_independently(scripted_dice):
    resolver = LootResolver(scripted_dice(0.1, 0.7, 0.1))
    entries = [LootEntry("iron_ore", 0.6), LootEntry("wooden_sword", 0.4)]
    assert resolver.roll(entries) == ["wooden_sword"]


def test_unknown_loot_ids_are_skipped(caplog):
    resolver = LootResolver()
    with caplog.at_level(logging.WARNING):
        items = resolver.resolve_items(["iron_ore", "ghost_item"])

    assert [item.id for item in items] == ["iron_ore"]
    assert "ghost_item" in caplog.text


def test_normal_slime(slime):
    assert slime.name == "史莱姆"
    assert slime.sprite == "🟢"
    assert slime.stats.max_hp == 70
    assert slime.stats.current_hp == 70
    assert slime.stats.defense == 7
    assert [skill.id for skill in slime.skills] == ["split"]
    assert [(entry.item_id, entry.drop_chance) for entry in slime.loot] == [("magic_crystal", 0.3)]
    assert slime.exp_reward == 30
    assert slime.gold_reward == 15


def test_elite_gets_self_heal():
    goblin = create_monster("哥布林", 1, "elite")

    assert goblin.name == "【精英】哥布林"
    assert [skill.id for skill in goblin.skills] == ["ambush", "recover"]
    assert goblin.skills.get("recover").resolve_magnitude(goblin.effective_attack(), goblin.effective_max_hp()) == 21


def test_boss_gets_frenzy_and_extra_loot():
    normal = create_monster("骷髅", 3, "normal")
    boss = create_monster("骷髅", 3, "boss")

    assert boss.name == "【Boss】骷髅"
    assert [skill.id for skill in boss.skills] == ["bone_spear", "recover", "frenzy"]
    assert boss.stats.max_hp == normal.stats.max_hp * 3
    assert boss.stats.attack == normal.stats.attack * 3
    assert boss.stats.defense == normal.stats.defense * 3
    loot = [(entry.item_id, entry.drop_chance) for entry in boss.loot]
    assert ("dragon_scale", 0.5) in loot
    assert ("lucky_charm", 0.3) in loot
    assert len(loot) == 4


def test_unknown_species_uses_generic_template(caplog):
    with caplog.at_level(logging.WARNING):
        monster = create_monster("史莱姆王", 2, "normal")

    assert monster.sprite == "👾"
    assert [skill.id for skill in monster.skills] == ["basic_strike"]
    assert [entry.item_id for entry in monster.loot] == ["health_potion"]
    assert "史莱姆王" in caplog.text


def test_unknown_tier_raises():
    with pytest.raises(ValueError):
        create_monster("史莱姆", 1, "legendary")


def test_monsters_do_not_share_skill_state():
    first = create_monster("史莱姆", 1)
    second = create_monster("史莱姆", 1)
    first.skills.get("split").trigger_cooldown()
    assert second.skills.get("split").is_ready()


def test_ai_uses_ready_skill_and_commits_cooldown(slime, scripted_dice):
    ai = MonsterAI(scripted_dice(0.0))
    effect = ai.choose_action(slime)

    assert effect.name == "分裂"
    assert effect.magnitude == 7
    assert slime.skills.get("split").current_cooldown == 3


def test_ai_falls_back_to_basic_attack(slime):
    slime.skills.get("split").trigger_cooldown()
    effect = MonsterAI().choose_action(slime)

    assert effect.name == "普通攻击"
    assert effect.magnitude == 15
    assert effect.skill_id is None
