"""
战斗结果数据模型
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .combat_session import CombatEvent, CombatOutcome


@dataclass
class CombatRewards:
    """战斗奖励"""

    exp: int = 0
    gold: int = 0
    items: List[str] = field(default_factory=list)  # 物品ID列表
    pet_exp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exp": self.exp,
            "gold": self.gold,
            "items": list(self.items),
            "pet_exp": self.pet_exp,
        }


@dataclass
class ActionResult:
    """
    一次玩家操作的结果

    ok 为 False 表示操作未生效（不在战斗中、没有药水、技能不可用等），
    message 给出提示
    """

    ok: bool = True
    message: str = ""
    events: List[CombatEvent] = field(default_factory=list)
    rewards: Optional[CombatRewards] = None
    outcome: Optional[CombatOutcome] = None

    @classmethod
    def rejected(cls, message: str) -> "ActionResult":
        return cls(ok=False, message=message)

    def add_event(self, event: CombatEvent):
        self.events.append(event)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "message": self.message,
            "events": [event.to_dict() for event in self.events],
            "rewards": self.rewards.to_dict() if self.rewards else None,
            "outcome": self.outcome.value if self.outcome else None,
        }
