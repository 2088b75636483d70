"""
成长系统

玩家与宠物共用同一条经验曲线
"""
from dataclasses import dataclass
from typing import Any, Dict, List

from .rules import INITIAL_NEXT_LEVEL_EXP, next_level_requirement


@dataclass
class ProgressionLadder:
    """
    经验与等级

    规范化后始终满足 exp < next_level_exp
    """

    level: int = 1
    exp: int = 0
    next_level_exp: int = INITIAL_NEXT_LEVEL_EXP

    def gain_exp(self, amount: int) -> List[int]:
        """
        获得经验

        Args:
            amount: 经验值（负数按0处理）

        Returns:
            List[int]: 本次依次升到的等级（未升级时为空）
        """
        self.exp += max(0, amount)
        reached: List[int] = []
        while self.exp >= self.next_level_exp:
            self.exp -= self.next_level_exp
            self.level += 1
            self.next_level_exp = next_level_requirement(self.next_level_exp)
            reached.append(self.level)
        return reached

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "exp": self.exp,
            "next_level_exp": self.next_level_exp,
        }
