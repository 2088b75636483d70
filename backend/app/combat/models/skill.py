"""
技能数据模型
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class EffectType(str, Enum):
    """技能效果类型"""

    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"


class Scaling(str, Enum):
    """power 的换算方式"""

    ATTACK = "attack"  # power × 施放者有效攻击力
    MAX_HP = "max_hp"  # power × 施放者有效生命上限
    ABSOLUTE = "absolute"  # power 即数值


@dataclass
class Skill:
    """
    技能实例

    每个战斗单位持有自己的实例，冷却状态互不影响
    """

    id: str
    name: str
    effect_type: EffectType
    power: float
    cooldown_turns: int
    current_cooldown: int = 0
    scaling: Scaling = Scaling.ATTACK
    resource_cost: int = 0
    unlock_level: int = 1
    duration: int = 0  # 增益/减益持续回合
    level: int = 1
    description: str = ""

    def __post_init__(self):
        self.cooldown_turns = max(0, self.cooldown_turns)
        self.current_cooldown = min(max(0, self.current_cooldown), self.cooldown_turns)

    def is_ready(self) -> bool:
        return self.current_cooldown == 0

    def trigger_cooldown(self):
        self.current_cooldown = self.cooldown_turns

    def tick(self):
        """冷却减1（不会低于0）"""
        self.current_cooldown = max(0, self.current_cooldown - 1)

    def resolve_magnitude(self, attack: int, max_hp: int) -> int:
        """按换算方式计算数值（向下取整）"""
        if self.scaling == Scaling.ATTACK:
            return int(self.power * attack)
        if self.scaling == Scaling.MAX_HP:
            return int(self.power * max_hp)
        return int(abs(self.power))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.effect_type.value,
            "power": self.power,
            "cooldown": self.cooldown_turns,
            "current_cooldown": self.current_cooldown,
            "resource_cost": self.resource_cost,
            "unlock_level": self.unlock_level,
            "level": self.level,
        }


@dataclass
class SkillEffect:
    """技能施放后的结算结果"""

    name: str
    magnitude: int
    effect_type: EffectType
    skill_id: Optional[str] = None
    power: float = 0.0
    duration: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "magnitude": self.magnitude,
            "type": self.effect_type.value,
            "skill_id": self.skill_id,
        }
