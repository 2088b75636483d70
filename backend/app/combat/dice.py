"""
概率工具

所有随机判定都经过可注入的 random.Random，便于测试固定种子
"""
import random
from typing import Dict, Optional, Sequence, TypeVar

T = TypeVar("T")


class DiceRoller:
    """随机判定器"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def roll(self) -> float:
        """投掷 [0, 1) 区间的均匀随机数"""
        return self.rng.random()

    def chance(self, probability: float) -> bool:
        """
        按概率判定

        Args:
            probability: 成功概率（0-1）

        Returns:
            bool: 判定是否成功
        """
        return self.rng.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        """等概率选择一个"""
        return options[int(self.rng.random() * len(options))]

    def weighted_choice(self, weights: Dict[str, int]) -> str:
        """
        按权重选择

        Args:
            weights: 选项 -> 权重

        Returns:
            str: 选中的选项

        Examples:
            >>> DiceRoller(random.Random(0)).weighted_choice({"史莱姆": 40, "哥布林": 60})
            '哥布林'
        """
        if not weights:
            raise ValueError("weights must not be empty")
        total = sum(weights.values())
        point = self.rng.random() * total
        for option, weight in weights.items():
            if point < weight:
                return option
            point -= weight
        # 浮点误差兜底
        return next(reversed(weights))
