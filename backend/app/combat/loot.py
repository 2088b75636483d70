"""
掉落结算

两段式判定：先过总掉落判定，再对每个掉落项独立判定
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .dice import DiceRoller
from .items import Item, get_item
from .rules import DROP_CHECK_CHANCE

logger = logging.getLogger(__name__)


@dataclass
class LootEntry:
    """掉落项"""

    item_id: str
    drop_chance: float

    def __post_init__(self):
        self.drop_chance = min(max(0.0, self.drop_chance), 1.0)

    def to_dict(self) -> Dict[str, Any]:
        return {"item_id": self.item_id, "drop_chance": self.drop_chance}


class LootResolver:
    """掉落结算器"""

    def __init__(self, dice: Optional[DiceRoller] = None):
        self.dice = dice or DiceRoller()

    def roll(self, entries: Sequence[LootEntry]) -> List[str]:
        """
        结算一次掉落

        Args:
            entries: 怪物的掉落表

        Returns:
            List[str]: 掉落的物品ID（可能为空）
        """
        if not self.dice.chance(DROP_CHECK_CHANCE):
            logger.debug("drop check failed")
            return []

        dropped: List[str] = []
        for entry in entries:
            if self.dice.chance(entry.drop_chance):
                dropped.append(entry.item_id)
        logger.debug("loot rolled: %s", dropped)
        return dropped

    def resolve_items(self, item_ids: Sequence[str]) -> List[Item]:
        """把物品ID换成目录中的物品定义，未知ID跳过"""
        items: List[Item] = []
        for item_id in item_ids:
            item = get_item(item_id)
            if item is None:
                logger.warning("Unknown loot item id skipped: %s", item_id)
                continue
            items.append(item)
        return items
