"""
战斗单位数据模型

玩家、怪物、宠物共享同一组能力接口，战斗引擎只面向该接口编写
"""
import math
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from ..items import get_item
from ..loot import LootEntry
from ..progression import ProgressionLadder
from ..rules import (
    PET_LEVEL_GAINS,
    PET_LOYALTY_MAX,
    PET_LOYALTY_THRESHOLD,
    PET_TYPES,
    PLAYER_BASE_MANA,
    PLAYER_BASE_STATS,
    PLAYER_LEVEL_GAINS,
    TIER_PREFIXES,
)
from ..skill_registry import SkillSet, create_skill_set
from .equipment import EQUIPMENT_SLOTS, Equipment, EquipmentSlots
from .skill import SkillEffect
from .stat_block import Buff, StatBlock


class CombatantType(str, Enum):
    """战斗单位类型"""

    PLAYER = "player"
    MONSTER = "monster"
    PET = "pet"


class Combatant:
    """
    战斗单位基类

    能力接口：get_stats / take_damage / heal / is_dead / use_skill / tick_cooldowns
    """

    combatant_type: CombatantType

    def __init__(
        self,
        id: str,
        name: str,
        stats: StatBlock,
        skills: Optional[SkillSet] = None,
    ):
        self.id = id
        self.name = name
        self.stats = stats
        self.skills = skills or SkillSet()
        self.buffs: List[Buff] = []

    # ===== 有效属性（每次重新计算） =====

    def _bonus_attack(self) -> int:
        return 0

    def _bonus_defense(self) -> int:
        return 0

    def _bonus_health(self) -> int:
        return 0

    def buff_multiplier(self) -> float:
        multiplier = 1.0
        for buff in self.buffs:
            if buff.remaining_turns > 0:
                multiplier *= buff.multiplier
        return multiplier

    def effective_attack(self) -> int:
        return math.floor((self.stats.attack + self._bonus_attack()) * self.buff_multiplier())

    def effective_defense(self) -> int:
        return self.stats.defense + self._bonus_defense()

    def effective_max_hp(self) -> int:
        return self.stats.max_hp + self._bonus_health()

    def get_stats(self) -> StatBlock:
        """返回含装备与增益的有效属性快照"""
        return StatBlock(
            level=self.stats.level,
            max_hp=self.effective_max_hp(),
            current_hp=self.stats.current_hp,
            attack=self.effective_attack(),
            defense=self.effective_defense(),
            speed=self.stats.speed,
        )

    # ===== 生命值 =====

    def take_damage(self, amount: int) -> int:
        """受到伤害，返回实际扣除量"""
        return self.stats.take_damage(amount)

    def heal(self, amount: int) -> int:
        """恢复生命值，返回实际恢复量"""
        return self.stats.heal(amount, self.effective_max_hp())

    def is_dead(self) -> bool:
        return self.stats.is_dead()

    # ===== 技能与增益 =====

    def use_skill(self, skill_id: str) -> Optional[SkillEffect]:
        """施放技能，不可用时返回 None"""
        return self.skills.use(
            skill_id,
            attack=self.effective_attack(),
            max_hp=self.effective_max_hp(),
            level=self.stats.level,
        )

    def tick_cooldowns(self):
        self.skills.tick()

    def add_buff(self, buff: Buff):
        """添加增益，同名增益会被覆盖"""
        self.buffs = [existing for existing in self.buffs if existing.name != buff.name]
        if buff.remaining_turns > 0:
            self.buffs.append(buff)

    def tick_buffs(self, only: Optional[Iterable[Buff]] = None) -> List[str]:
        """
        持有者回合结束时推进增益

        Args:
            only: 只推进这些增益实例（本回合新加的增益不推进）

        Returns:
            List[str]: 本次过期的增益名称
        """
        targets = self.buffs
        if only is not None:
            allowed = {id(buff) for buff in only}
            targets = [buff for buff in self.buffs if id(buff) in allowed]
        expired = [buff.name for buff in targets if buff.tick()]
        self.buffs = [buff for buff in self.buffs if buff.remaining_turns > 0]
        return expired

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.combatant_type.value,
            "stats": self.get_stats().to_dict(),
            "skills": self.skills.to_dict(),
            "buffs": [buff.to_dict() for buff in self.buffs],
        }


class Pet(Combatant):
    """宠物"""

    combatant_type = CombatantType.PET

    def __init__(self, name: str, pet_type: str = "dog", id: str = "pet"):
        template = PET_TYPES.get(pet_type)
        if not template:
            raise ValueError(f"Unknown pet type: {pet_type}")
        base = template["base_stats"]
        super().__init__(
            id=id,
            name=name,
            stats=StatBlock.full(
                level=1,
                max_hp=base["hp"],
                attack=base["attack"],
                defense=base["defense"],
            ),
            skills=create_skill_set("pet", template["skills"]),
        )
        self.pet_type = pet_type
        self.sprite = template["sprite"]
        self.loyalty = template["loyalty"]
        self.progression = ProgressionLadder()

    def is_loyal_enough(self) -> bool:
        return self.loyalty >= PET_LOYALTY_THRESHOLD

    def adjust_loyalty(self, delta: int) -> int:
        self.loyalty = min(PET_LOYALTY_MAX, max(0, self.loyalty + delta))
        return self.loyalty

    def gain_exp(self, amount: int) -> List[int]:
        """获得经验，返回本次升到的等级列表"""
        levels = self.progression.gain_exp(amount)
        for _ in levels:
            self.stats.apply_level_up(PET_LEVEL_GAINS)
            self.adjust_loyalty(PET_LEVEL_GAINS["loyalty"])
        return levels

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "pet_type": self.pet_type,
                "sprite": self.sprite,
                "loyalty": self.loyalty,
                "progression": self.progression.to_dict(),
            }
        )
        return data


class Player(Combatant):
    """玩家"""

    combatant_type = CombatantType.PLAYER

    def __init__(
        self,
        name: str = "玩家",
        stats: Optional[StatBlock] = None,
        gold: int = 100,
        health_potions: int = 3,
        mana: int = PLAYER_BASE_MANA,
        pet: Optional[Pet] = None,
        id: str = "player",
    ):
        if stats is None:
            stats = StatBlock.full(
                level=PLAYER_BASE_STATS["level"],
                max_hp=PLAYER_BASE_STATS["max_hp"],
                attack=PLAYER_BASE_STATS["attack"],
                defense=PLAYER_BASE_STATS["defense"],
                speed=PLAYER_BASE_STATS["speed"],
            )
        super().__init__(id=id, name=name, stats=stats, skills=create_skill_set("player"))
        self.progression = ProgressionLadder(level=stats.level)
        self.equipment = EquipmentSlots()
        self.gold = max(0, gold)
        self.max_mana = PLAYER_BASE_MANA
        self.mana = min(max(0, mana), self.max_mana)
        self.inventory: Dict[str, int] = {}
        if health_potions > 0:
            self.inventory["health_potion"] = health_potions
        self.pet = pet

    # ===== 装备加成 =====

    def _bonus_attack(self) -> int:
        return self.equipment.total_bonus().attack

    def _bonus_defense(self) -> int:
        return self.equipment.total_bonus().defense

    def _bonus_health(self) -> int:
        return self.equipment.total_bonus().health

    def equip(self, slot: str, item: Equipment) -> Optional[Equipment]:
        previous = self.equipment.equip(slot, item)
        self.stats.clamp_hp(self.effective_max_hp())
        return previous

    def unequip(self, slot: str) -> Optional[Equipment]:
        removed = self.equipment.unequip(slot)
        self.stats.clamp_hp(self.effective_max_hp())
        return removed

    def upgrade_blocker(self, slot: str) -> Optional[str]:
        """
        装备无法升级的原因

        Raises:
            ValueError: 槽位名未知
        """
        if slot not in EQUIPMENT_SLOTS:
            raise ValueError(f"Unknown equipment slot: {slot}")
        item = self.equipment.get(slot)
        if not item:
            return "该部位没有装备"
        if not item.can_upgrade():
            return f"{item.name}已达到最高等级"
        if self.gold < item.next_upgrade_cost():
            return "金币不足"
        return None

    def upgrade_equipment(self, slot: str) -> bool:
        """
        升级装备（扣除金币）

        Returns:
            bool: 是否升级成功（槽位为空/已满级/金币不足时失败）
        """
        if self.upgrade_blocker(slot):
            return False
        item = self.equipment.get(slot)
        self.spend_gold(item.next_upgrade_cost())
        item.upgrade()
        return True

    def equip_from_inventory(self, item_id: str) -> Optional[str]:
        """
        从背包穿戴装备，换下的装备放回背包（强化等级不保留）

        Returns:
            Optional[str]: 失败原因，成功时为 None
        """
        if self.inventory.get(item_id, 0) <= 0:
            return "背包中没有该物品"
        item = get_item(item_id)
        if not item or not item.is_equippable():
            return "该物品无法装备"

        self.remove_item(item_id)
        equipment = Equipment.from_item(item)
        previous = self.equip(equipment.slot, equipment)
        if previous:
            self.add_item(previous.id)
        return None

    # ===== 宠物 =====

    def get_pet(self) -> Optional[Pet]:
        return self.pet

    # ===== 成长 =====

    def gain_exp(self, amount: int) -> List[int]:
        """获得经验，返回本次升到的等级列表"""
        levels = self.progression.gain_exp(amount)
        for _ in levels:
            self.stats.apply_level_up(PLAYER_LEVEL_GAINS)
            self.stats.current_hp = self.effective_max_hp()
        return levels

    def gain_gold(self, amount: int):
        self.gold += max(0, amount)

    def spend_gold(self, amount: int) -> bool:
        if amount < 0 or self.gold < amount:
            return False
        self.gold -= amount
        return True

    # ===== 物品 =====

    @property
    def health_potions(self) -> int:
        return self.inventory.get("health_potion", 0)

    def add_item(self, item_id: str, quantity: int = 1):
        if quantity <= 0:
            return
        self.inventory[item_id] = self.inventory.get(item_id, 0) + quantity

    def remove_item(self, item_id: str, quantity: int = 1) -> bool:
        owned = self.inventory.get(item_id, 0)
        if quantity <= 0 or owned < quantity:
            return False
        if owned == quantity:
            del self.inventory[item_id]
        else:
            self.inventory[item_id] = owned - quantity
        return True

    def use_health_potion(self, heal_amount: int) -> bool:
        """消耗一瓶生命药水并恢复生命值，没有药水时返回 False"""
        if not self.remove_item("health_potion"):
            return False
        self.heal(heal_amount)
        return True

    # ===== 技能 =====

    def use_skill(self, skill_id: str) -> Optional[SkillEffect]:
        """施放技能，检查并扣除魔法值"""
        effect = self.skills.use(
            skill_id,
            attack=self.effective_attack(),
            max_hp=self.effective_max_hp(),
            resource=self.mana,
            level=self.progression.level,
        )
        if effect is None:
            return None
        self.mana -= self.skills.get(skill_id).resource_cost
        return effect

    def regenerate_mana(self, amount: int):
        self.mana = min(self.max_mana, self.mana + max(0, amount))

    def upgrade_skill(self, skill_id: str) -> bool:
        """升级已解锁的技能，未知或未解锁时返回 False"""
        skill = self.skills.get(skill_id)
        if not skill or self.progression.level < skill.unlock_level:
            return False
        return self.skills.upgrade(skill_id)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "gold": self.gold,
                "mana": self.mana,
                "max_mana": self.max_mana,
                "health_potions": self.health_potions,
                "inventory": dict(self.inventory),
                "equipment": self.equipment.to_dict(),
                "progression": self.progression.to_dict(),
                "pet": self.pet.to_dict() if self.pet else None,
            }
        )
        return data


class Monster(Combatant):
    """怪物（战斗结束后丢弃）"""

    combatant_type = CombatantType.MONSTER

    def __init__(
        self,
        species: str,
        tier: str,
        stats: StatBlock,
        skills: SkillSet,
        loot: List[LootEntry],
        exp_reward: int,
        gold_reward: int,
        sprite: str = "👾",
        id: str = "monster",
    ):
        super().__init__(
            id=id,
            name=f"{TIER_PREFIXES.get(tier, '')}{species}",
            stats=stats,
            skills=skills,
        )
        self.species = species
        self.tier = tier
        self.loot = loot
        self.exp_reward = exp_reward
        self.gold_reward = gold_reward
        self.sprite = sprite

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "species": self.species,
                "tier": self.tier,
                "sprite": self.sprite,
                "exp": self.exp_reward,
                "gold": self.gold_reward,
                "loot": [entry.to_dict() for entry in self.loot],
            }
        )
        return data
