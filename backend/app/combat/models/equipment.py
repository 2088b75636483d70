"""
装备数据模型与属性汇总
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from ..items import Item, get_item
from ..rules import EQUIPMENT_UPGRADE_STAT_GROWTH, equipment_upgrade_cost

EQUIPMENT_SLOTS = ("weapon", "armor", "accessory", "helmet", "pants")


@dataclass
class Equipment:
    """装备实例"""

    id: str
    name: str
    slot: str
    attack: int = 0
    defense: int = 0
    health: int = 0
    level: int = 1
    max_level: int = 10
    upgrade_cost: int = 50
    rarity: str = "common"

    def __post_init__(self):
        self.level = min(max(1, self.level), self.max_level)

    @classmethod
    def from_item(cls, item: Item, max_level: int = 10) -> "Equipment":
        """从物品目录创建装备"""
        if not item.is_equippable():
            raise ValueError(f"Item is not equippable: {item.id}")
        return cls(
            id=item.id,
            name=item.name,
            slot=item.item_type,
            attack=item.stats.get("attack", 0),
            defense=item.stats.get("defense", 0),
            health=item.stats.get("health", 0),
            max_level=max_level,
            upgrade_cost=max(1, item.price),
            rarity=item.rarity,
        )

    def can_upgrade(self) -> bool:
        return self.level < self.max_level

    def next_upgrade_cost(self) -> int:
        return equipment_upgrade_cost(self.upgrade_cost, self.level)

    def upgrade(self):
        """升级一次（属性按比例提升，向下取整）"""
        if not self.can_upgrade():
            return
        self.level += 1
        if self.attack:
            self.attack = math.floor(self.attack * EQUIPMENT_UPGRADE_STAT_GROWTH)
        if self.defense:
            self.defense = math.floor(self.defense * EQUIPMENT_UPGRADE_STAT_GROWTH)
        if self.health:
            self.health = math.floor(self.health * EQUIPMENT_UPGRADE_STAT_GROWTH)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slot": self.slot,
            "attack": self.attack,
            "defense": self.defense,
            "health": self.health,
            "level": self.level,
            "max_level": self.max_level,
            "upgrade_cost": self.next_upgrade_cost(),
            "rarity": self.rarity,
        }


@dataclass
class EquipmentBonus:
    """装备加成合计"""

    attack: int = 0
    defense: int = 0
    health: int = 0


@dataclass
class EquipmentSlots:
    """
    装备栏

    每个槽位最多一件装备
    """

    items: Dict[str, Equipment] = field(default_factory=dict)

    def equip(self, slot: str, item: Equipment) -> Optional[Equipment]:
        """
        装备到槽位

        Returns:
            Optional[Equipment]: 被替换下来的装备
        """
        if slot not in EQUIPMENT_SLOTS:
            raise ValueError(f"Unknown equipment slot: {slot}")
        previous = self.items.get(slot)
        self.items[slot] = item
        return previous

    def unequip(self, slot: str) -> Optional[Equipment]:
        return self.items.pop(slot, None)

    def get(self, slot: str) -> Optional[Equipment]:
        return self.items.get(slot)

    def __iter__(self) -> Iterator[Tuple[str, Equipment]]:
        return iter(self.items.items())

    def total_bonus(self) -> EquipmentBonus:
        """汇总所有装备加成（每次重新计算）"""
        bonus = EquipmentBonus()
        for item in self.items.values():
            bonus.attack += item.attack
            bonus.defense += item.defense
            bonus.health += item.health
        return bonus

    def to_dict(self) -> Dict[str, Any]:
        return {slot: item.to_dict() for slot, item in self.items.items()}


def starter_kit() -> Dict[str, Equipment]:
    """新手装备（新角色创建时穿戴）"""
    return {
        "weapon": Equipment.from_item(get_item("starter_sword")),
        "armor": Equipment.from_item(get_item("starter_armor")),
    }
