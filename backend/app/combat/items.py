"""
物品目录

掉落、装备、药水共用的物品定义
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Item:
    """物品定义（只读模板）"""

    id: str
    name: str
    description: str
    price: int
    item_type: str  # weapon / armor / potion / material / accessory
    icon: str
    rarity: str = "common"
    stats: Dict[str, int] = field(default_factory=dict)
    level: Optional[int] = None

    def is_equippable(self) -> bool:
        return self.item_type in ("weapon", "armor", "accessory")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.item_type,
            "icon": self.icon,
            "rarity": self.rarity,
            "stats": dict(self.stats),
        }


ITEMS: Dict[str, Item] = {
    "starter_sword": Item(
        id="starter_sword",
        name="新手剑",
        description="新手冒险者的第一把剑",
        price=50,
        item_type="weapon",
        icon="🗡️",
        stats={"attack": 5},
        level=1,
    ),
    "starter_armor": Item(
        id="starter_armor",
        name="新手布甲",
        description="轻便的布甲",
        price=50,
        item_type="armor",
        icon="👕",
        stats={"defense": 3, "health": 20},
        level=1,
    ),
    "wooden_sword": Item(
        id="wooden_sword",
        name="木剑",
        description="一把简单的木剑",
        price=50,
        item_type="weapon",
        icon="🗡️",
        stats={"attack": 5},
        level=1,
    ),
    "iron_sword": Item(
        id="iron_sword",
        name="铁剑",
        description="普通的铁剑，较为耐用",
        price=150,
        item_type="weapon",
        icon="⚔️",
        rarity="uncommon",
        stats={"attack": 12},
        level=5,
    ),
    "leather_armor": Item(
        id="leather_armor",
        name="皮甲",
        description="基础防具",
        price=80,
        item_type="armor",
        icon="🛡️",
        stats={"defense": 8},
        level=1,
    ),
    "iron_armor": Item(
        id="iron_armor",
        name="铁甲",
        description="坚固的铁甲",
        price=200,
        item_type="armor",
        icon="🛡️",
        rarity="uncommon",
        stats={"defense": 15},
        level=5,
    ),
    "health_potion": Item(
        id="health_potion",
        name="生命药水",
        description="战斗中恢复50点生命值",
        price=30,
        item_type="potion",
        icon="🧪",
        stats={"health": 50},
    ),
    "mana_potion": Item(
        id="mana_potion",
        name="魔法药水",
        description="恢复50点魔法值",
        price=40,
        item_type="potion",
        icon="🧪",
        stats={"mana": 50},
    ),
    "iron_ore": Item(
        id="iron_ore",
        name="铁矿石",
        description="制作装备的材料",
        price=20,
        item_type="material",
        icon="⛏️",
    ),
    "magic_crystal": Item(
        id="magic_crystal",
        name="魔法水晶",
        description="蕴含魔法能量的水晶",
        price=100,
        item_type="material",
        icon="💎",
        rarity="rare",
    ),
    "lucky_charm": Item(
        id="lucky_charm",
        name="幸运符咒",
        description="带来好运的护身符",
        price=300,
        item_type="accessory",
        icon="🍀",
        rarity="rare",
        stats={"defense": 5},
    ),
    "dragon_scale": Item(
        id="dragon_scale",
        name="龙鳞",
        description="珍贵的龙鳞，可用于制作高级装备",
        price=1000,
        item_type="material",
        icon="🐉",
        rarity="epic",
    ),
}


def get_item(item_id: str) -> Optional[Item]:
    """根据ID获取物品"""
    return ITEMS.get(item_id)
