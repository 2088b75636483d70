"""
基础属性数据模型
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass
class Buff:
    """增益/减益效果（按倍率作用于攻击力）"""

    name: str
    multiplier: float  # >1 为增益，<1 为减益
    remaining_turns: int

    def tick(self) -> bool:
        """
        持有者回合结束时调用

        Returns:
            bool: 是否已过期
        """
        self.remaining_turns = max(0, self.remaining_turns - 1)
        return self.remaining_turns == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "multiplier": self.multiplier,
            "remaining_turns": self.remaining_turns,
        }


@dataclass
class StatBlock:
    """
    战斗单位的数值面板

    所有字段为非负整数，current_hp 始终不超过 max_hp
    """

    level: int
    max_hp: int
    current_hp: int
    attack: int
    defense: int
    speed: int = 0

    def __post_init__(self):
        self.max_hp = max(0, self.max_hp)
        self.current_hp = min(max(0, self.current_hp), self.max_hp)
        self.attack = max(0, self.attack)
        self.defense = max(0, self.defense)
        self.speed = max(0, self.speed)

    @classmethod
    def full(cls, level: int, max_hp: int, attack: int, defense: int, speed: int = 0) -> "StatBlock":
        """满血创建"""
        return cls(
            level=level,
            max_hp=max_hp,
            current_hp=max_hp,
            attack=attack,
            defense=defense,
            speed=speed,
        )

    def take_damage(self, amount: int) -> int:
        """
        受到伤害

        Args:
            amount: 伤害值（负数按0处理）

        Returns:
            int: 实际扣除的生命值
        """
        actual = min(max(0, amount), self.current_hp)
        self.current_hp -= actual
        return actual

    def heal(self, amount: int, cap: int) -> int:
        """
        恢复生命值

        Args:
            amount: 恢复量（负数按0处理）
            cap: 生命上限（玩家为含装备加成的有效上限）

        Returns:
            int: 实际恢复的量
        """
        actual = max(0, min(max(0, amount), cap - self.current_hp))
        self.current_hp += actual
        return actual

    def clamp_hp(self, cap: int):
        """上限变化后收敛当前生命值"""
        self.current_hp = min(max(0, self.current_hp), max(0, cap))

    def is_dead(self) -> bool:
        return self.current_hp <= 0

    def apply_level_up(self, gains: Mapping[str, int]):
        """应用一次升级成长（升级后满血）"""
        self.level += 1
        self.max_hp += gains.get("max_hp", 0)
        self.attack += gains.get("attack", 0)
        self.defense += gains.get("defense", 0)
        self.speed += gains.get("speed", 0)
        self.current_hp = self.max_hp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "max_hp": self.max_hp,
            "current_hp": self.current_hp,
            "attack": self.attack,
            "defense": self.defense,
            "speed": self.speed,
        }
