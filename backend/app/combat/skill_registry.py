"""Skill templates per combatant kind and per-instance skill sets."""
import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .models.skill import EffectType, Scaling, Skill, SkillEffect
from .rules import SKILL_UPGRADE_COST_GROWTH, SKILL_UPGRADE_POWER_GROWTH

logger = logging.getLogger(__name__)


_PLAYER_TEMPLATES: Dict[str, Skill] = {
    "slash": Skill(
        id="slash",
        name="斩击",
        effect_type=EffectType.DAMAGE,
        power=1.2,
        cooldown_turns=3,
        resource_cost=20,
        unlock_level=1,
        description="对敌人造成120%攻击力的伤害",
    ),
    "heal": Skill(
        id="heal",
        name="治疗术",
        effect_type=EffectType.HEAL,
        power=0.3,
        scaling=Scaling.MAX_HP,
        cooldown_turns=5,
        resource_cost=30,
        unlock_level=3,
        description="恢复30%最大生命值",
    ),
    "fireball": Skill(
        id="fireball",
        name="火球术",
        effect_type=EffectType.DAMAGE,
        power=1.5,
        cooldown_turns=4,
        resource_cost=40,
        unlock_level=5,
        description="发射火球造成150%攻击力的伤害",
    ),
    "rage": Skill(
        id="rage",
        name="狂暴",
        effect_type=EffectType.BUFF,
        power=0.3,
        scaling=Scaling.ABSOLUTE,
        cooldown_turns=6,
        resource_cost=50,
        unlock_level=7,
        duration=3,
        description="提升30%攻击力，持续3回合",
    ),
}

_PET_TEMPLATES: Dict[str, Skill] = {
    "assist_attack": Skill(
        id="assist_attack",
        name="撕咬",
        effect_type=EffectType.DAMAGE,
        power=0.5,
        scaling=Scaling.ABSOLUTE,
        cooldown_turns=3,
        description="协助主人攻击，追加主人伤害50%的伤害",
    ),
}

_MONSTER_TEMPLATES: Dict[str, Skill] = {
    "split": Skill(
        id="split",
        name="分裂",
        effect_type=EffectType.DAMAGE,
        power=0.5,
        cooldown_turns=3,
        description="分裂成两个小史莱姆进行攻击",
    ),
    "ambush": Skill(
        id="ambush",
        name="突袭",
        effect_type=EffectType.DAMAGE,
        power=1.5,
        cooldown_turns=4,
        description="对玩家发动突然袭击",
    ),
    "bone_spear": Skill(
        id="bone_spear",
        name="骨矛投掷",
        effect_type=EffectType.DAMAGE,
        power=1.2,
        cooldown_turns=3,
        description="投掷骨矛进行远程攻击",
    ),
    "sonic_wave": Skill(
        id="sonic_wave",
        name="音波攻击",
        effect_type=EffectType.DEBUFF,
        power=0.8,
        scaling=Scaling.ABSOLUTE,
        cooldown_turns=2,
        description="发出超声波干扰玩家，降低其攻击力",
    ),
    "basic_strike": Skill(
        id="basic_strike",
        name="基础攻击",
        effect_type=EffectType.DAMAGE,
        power=1.0,
        cooldown_turns=1,
        description="普通攻击",
    ),
    "recover": Skill(
        id="recover",
        name="恢复",
        effect_type=EffectType.HEAL,
        power=0,  # 由怪物工厂按最大生命值写入绝对值
        scaling=Scaling.ABSOLUTE,
        cooldown_turns=5,
        description="恢复生命值",
    ),
    "frenzy": Skill(
        id="frenzy",
        name="狂暴",
        effect_type=EffectType.DAMAGE,
        power=2.0,
        cooldown_turns=6,
        description="造成双倍伤害",
    ),
}

_TEMPLATES_BY_KIND: Dict[str, Dict[str, Skill]] = {
    "player": _PLAYER_TEMPLATES,
    "pet": _PET_TEMPLATES,
    "monster": _MONSTER_TEMPLATES,
}


def get_template(kind: str, skill_id: str) -> Optional[Skill]:
    """获取技能模板（只读，不要直接修改）"""
    return _TEMPLATES_BY_KIND.get(kind, {}).get(skill_id)


def list_templates(kind: str) -> List[str]:
    return list(_TEMPLATES_BY_KIND.get(kind, {}).keys())


def create_skill_set(kind: str, skill_ids: Optional[Iterable[str]] = None) -> "SkillSet":
    """
    为一个战斗单位克隆技能实例

    Args:
        kind: player / pet / monster
        skill_ids: 需要的技能ID，为空时取该类型全部技能

    Returns:
        SkillSet: 独立的技能集合
    """
    templates = _TEMPLATES_BY_KIND.get(kind)
    if templates is None:
        raise ValueError(f"Unknown combatant kind: {kind}")
    ids = list(skill_ids) if skill_ids is not None else list(templates.keys())
    skills: Dict[str, Skill] = {}
    for skill_id in ids:
        template = templates.get(skill_id)
        if not template:
            raise ValueError(f"Unknown {kind} skill: {skill_id}")
        skills[skill_id] = copy.deepcopy(template)
    return SkillSet(skills=skills)


@dataclass
class SkillSet:
    """
    单个战斗单位持有的技能集合

    冷却只在持有者完成一个回合时推进
    """

    skills: Dict[str, Skill] = field(default_factory=dict)

    def get(self, skill_id: str) -> Optional[Skill]:
        return self.skills.get(skill_id)

    def add(self, skill: Skill):
        self.skills[skill.id] = skill

    def __iter__(self):
        return iter(self.skills.values())

    def __len__(self) -> int:
        return len(self.skills)

    def ready(self) -> List[Skill]:
        """当前可用（冷却为0）的技能"""
        return [skill for skill in self.skills.values() if skill.is_ready()]

    def can_use(self, skill_id: str, resource: int = 0, level: int = 1) -> bool:
        skill = self.skills.get(skill_id)
        if not skill:
            return False
        return (
            skill.is_ready()
            and resource >= skill.resource_cost
            and level >= skill.unlock_level
        )

    def use(
        self,
        skill_id: str,
        attack: int,
        max_hp: int = 0,
        resource: int = 0,
        level: int = 1,
    ) -> Optional[SkillEffect]:
        """
        施放技能

        不可用时返回 None；成功时写入冷却并返回结算结果。
        资源扣除由调用方按 resource_cost 处理。
        """
        if not self.can_use(skill_id, resource=resource, level=level):
            return None
        effect = self.commit(self.skills[skill_id], attack, max_hp)
        logger.debug("skill used: %s magnitude=%s", skill_id, effect.magnitude)
        return effect

    def commit(self, skill: Skill, attack: int, max_hp: int = 0) -> SkillEffect:
        """直接施放指定技能（AI已确认可用）"""
        skill.trigger_cooldown()
        return SkillEffect(
            name=skill.name,
            magnitude=skill.resolve_magnitude(attack, max_hp),
            effect_type=skill.effect_type,
            skill_id=skill.id,
            power=skill.power,
            duration=skill.duration,
        )

    def tick(self):
        """所有技能冷却减1"""
        for skill in self.skills.values():
            skill.tick()

    def upgrade(self, skill_id: str) -> bool:
        """技能升级：威力×1.2，消耗×1.1（向下取整）"""
        skill = self.skills.get(skill_id)
        if not skill:
            return False
        skill.level += 1
        skill.power = skill.power * SKILL_UPGRADE_POWER_GROWTH
        skill.resource_cost = math.floor(skill.resource_cost * SKILL_UPGRADE_COST_GROWTH)
        return True

    def to_dict(self) -> List[Dict]:
        return [skill.to_dict() for skill in self.skills.values()]
