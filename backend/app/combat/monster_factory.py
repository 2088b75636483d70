"""Monster species table and tier-scaled monster construction."""
import copy
import logging
import math
import uuid
from typing import Any, Dict

from .loot import LootEntry
from .models.combatant import Monster
from .models.stat_block import StatBlock
from .rules import TIER_MULTIPLIERS, monster_base_stats, monster_rewards
from .skill_registry import create_skill_set

logger = logging.getLogger(__name__)

# 精英与Boss的自我恢复量（最大生命值比例）
MONSTER_HEAL_RATIO = 0.2

_SPECIES: Dict[str, Dict[str, Any]] = {
    "史莱姆": {
        "sprite": "🟢",
        "skills": ["split"],
        "loot": [("magic_crystal", 0.3)],
    },
    "哥布林": {
        "sprite": "👺",
        "skills": ["ambush"],
        "loot": [("wooden_sword", 0.4), ("iron_ore", 0.6)],
    },
    "骷髅": {
        "sprite": "💀",
        "skills": ["bone_spear"],
        "loot": [("iron_sword", 0.3), ("health_potion", 0.5)],
    },
    "蝙蝠": {
        "sprite": "🦇",
        "skills": ["sonic_wave"],
        "loot": [("magic_crystal", 0.4)],
    },
}

_DEFAULT_SPECIES: Dict[str, Any] = {
    "sprite": "👾",
    "skills": ["basic_strike"],
    "loot": [("health_potion", 0.3)],
}

_BOSS_EXTRA_LOOT = [("dragon_scale", 0.5), ("lucky_charm", 0.3)]


def get_species_template(species: str) -> Dict[str, Any]:
    """获取物种配置，未知物种返回通用模板"""
    template = _SPECIES.get(species)
    if template is None:
        logger.warning("Unknown monster species, using generic template: %s", species)
        template = _DEFAULT_SPECIES
    return copy.deepcopy(template)


def create_monster(species: str, level: int, tier: str = "normal") -> Monster:
    """
    生成怪物

    Args:
        species: 物种名（未知物种使用通用模板）
        level: 怪物等级（一般取玩家等级）
        tier: normal / elite / boss

    Returns:
        Monster: 新的怪物实例

    Raises:
        ValueError: tier 未知
    """
    if tier not in TIER_MULTIPLIERS:
        raise ValueError(f"Unknown monster tier: {tier}")
    level = max(1, level)
    template = get_species_template(species)

    base = monster_base_stats(level, tier)
    stats = StatBlock.full(
        level=level,
        max_hp=base["max_hp"],
        attack=base["attack"],
        defense=base["defense"],
        speed=base["speed"],
    )

    skill_ids = list(template["skills"])
    loot = [LootEntry(item_id, chance) for item_id, chance in template["loot"]]

    if tier in ("elite", "boss"):
        skill_ids.append("recover")
    if tier == "boss":
        skill_ids.append("frenzy")
        loot.extend(LootEntry(item_id, chance) for item_id, chance in _BOSS_EXTRA_LOOT)

    skills = create_skill_set("monster", skill_ids)
    recover = skills.get("recover")
    if recover:
        recover.power = math.floor(stats.max_hp * MONSTER_HEAL_RATIO)

    rewards = monster_rewards(level, tier)
    monster = Monster(
        species=species,
        tier=tier,
        stats=stats,
        skills=skills,
        loot=loot,
        exp_reward=rewards["exp"],
        gold_reward=rewards["gold"],
        sprite=template["sprite"],
        id=f"monster_{uuid.uuid4().hex[:8]}",
    )
    logger.debug(
        "monster created: %s L%s hp=%s atk=%s def=%s",
        monster.name,
        level,
        stats.max_hp,
        stats.attack,
        stats.defense,
    )
    return monster
