"""
战斗规则

定义所有战斗与成长相关的常量和公式
"""
import math
from typing import Any, Dict


# ============================================
# 常量定义
# ============================================

# 掉落总判定概率（先过这一关才逐项判定）
DROP_CHECK_CHANCE = 0.3

# 逃跑失败阈值：均匀随机数 > 0.3 即逃跑成功
FLEE_FAIL_THRESHOLD = 0.3

# 生命药水固定恢复量
POTION_HEAL_AMOUNT = 50

# 宠物协助所需忠诚度
PET_LOYALTY_THRESHOLD = 30
PET_LOYALTY_MAX = 100

# 胜利时宠物分得的经验比例
PET_EXP_SHARE = 0.5

# 玩家每回合结束恢复的魔法值
MANA_REGEN_PER_TURN = 5

# 减益默认持续回合
DEBUFF_DURATION = 2

# 升级曲线
INITIAL_NEXT_LEVEL_EXP = 100
NEXT_LEVEL_EXP_GROWTH = 1.5

# 装备升级
EQUIPMENT_UPGRADE_COST_GROWTH = 1.5
EQUIPMENT_UPGRADE_STAT_GROWTH = 1.2

# 技能升级
SKILL_UPGRADE_POWER_GROWTH = 1.2
SKILL_UPGRADE_COST_GROWTH = 1.1


# ============================================
# 怪物强度
# ============================================

TIER_MULTIPLIERS: Dict[str, float] = {
    "normal": 1,
    "elite": 1.5,
    "boss": 3,
}

TIER_PREFIXES: Dict[str, str] = {
    "normal": "",
    "elite": "【精英】",
    "boss": "【Boss】",
}


# ============================================
# 初始属性与升级成长
# ============================================

PLAYER_BASE_STATS: Dict[str, int] = {
    "level": 1,
    "max_hp": 100,
    "attack": 15,
    "defense": 10,
    "speed": 10,
}

PLAYER_BASE_MANA = 100

PLAYER_LEVEL_GAINS: Dict[str, int] = {
    "max_hp": 20,
    "attack": 5,
    "defense": 3,
}

PET_LEVEL_GAINS: Dict[str, int] = {
    "max_hp": 10,
    "attack": 3,
    "defense": 2,
    "loyalty": 5,
}

PET_TYPES: Dict[str, Dict[str, Any]] = {
    "dog": {
        "name": "小狗",
        "sprite": "🐕",
        "base_stats": {"hp": 80, "attack": 12, "defense": 8},
        "skills": ["assist_attack"],
        "loyalty": 50,
        "description": "忠诚的伙伴，擅长近战攻击。",
    },
}


# ============================================
# 野外遭遇
# ============================================

SPAWN_CHANCE = 0.3

SPECIES_WEIGHTS: Dict[str, int] = {
    "史莱姆": 40,
    "哥布林": 30,
    "骷髅": 20,
    "蝙蝠": 10,
}

BOSS_ROLL = 0.01
ELITE_ROLL = 0.1


# ============================================
# 规则函数
# ============================================


def compute_damage(attack: int, defense: int) -> int:
    """
    计算一次攻击的伤害

    Args:
        attack: 攻击方有效攻击力
        defense: 防御方有效防御力

    Returns:
        int: 伤害值（最少为1）
    """
    return max(1, attack - defense)


def get_tier_multiplier(tier: str) -> float:
    """获取怪物等级倍率"""
    if tier not in TIER_MULTIPLIERS:
        raise ValueError(f"Unknown monster tier: {tier}")
    return TIER_MULTIPLIERS[tier]


def monster_base_stats(level: int, tier: str) -> Dict[str, int]:
    """
    按等级和强度计算怪物基础属性

    Args:
        level: 怪物等级（取玩家等级）
        tier: normal / elite / boss

    Returns:
        Dict: max_hp / attack / defense / speed
    """
    multiplier = get_tier_multiplier(tier)
    return {
        "max_hp": math.floor((50 + level * 20) * multiplier),
        "attack": math.floor((10 + level * 5) * multiplier),
        "defense": math.floor((5 + level * 2) * multiplier),
        "speed": math.floor((10 + level) * multiplier),
    }


def monster_rewards(level: int, tier: str) -> Dict[str, int]:
    """计算击败怪物的经验与金币"""
    multiplier = get_tier_multiplier(tier)
    return {
        "exp": math.floor((20 + level * 10) * multiplier),
        "gold": math.floor((10 + level * 5) * multiplier),
    }


def next_level_requirement(current: int) -> int:
    """下一级所需经验"""
    return math.floor(current * NEXT_LEVEL_EXP_GROWTH)


def equipment_upgrade_cost(base_cost: int, level: int) -> int:
    """装备升级费用"""
    return math.floor(base_cost * math.pow(EQUIPMENT_UPGRADE_COST_GROWTH, level))
