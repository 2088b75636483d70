"""
怪物AI

决定怪物每回合使用的技能
"""
import logging
from typing import Optional

from .dice import DiceRoller
from .models.combatant import Monster
from .models.skill import EffectType, SkillEffect

logger = logging.getLogger(__name__)


class MonsterAI:
    """
    怪物AI

    规则：
    - 收集冷却为0的技能
    - 没有可用技能时使用普通攻击（基础攻击力，无冷却）
    - 否则等概率随机选择一个，并写入冷却
    """

    def __init__(self, dice: Optional[DiceRoller] = None):
        self.dice = dice or DiceRoller()

    def choose_action(self, monster: Monster) -> SkillEffect:
        """
        为怪物选择本回合行动

        Args:
            monster: 行动的怪物（冷却已在回合开始时推进）

        Returns:
            SkillEffect: 本回合的效果
        """
        ready = monster.skills.ready()
        if not ready:
            logger.debug("%s has no ready skill, basic attack", monster.name)
            return self.basic_attack(monster)

        skill = self.dice.choice(ready)
        logger.debug("%s chooses skill %s", monster.name, skill.id)
        return monster.skills.commit(
            skill,
            attack=monster.effective_attack(),
            max_hp=monster.effective_max_hp(),
        )

    @staticmethod
    def basic_attack(monster: Monster) -> SkillEffect:
        return SkillEffect(
            name="普通攻击",
            magnitude=monster.effective_attack(),
            effect_type=EffectType.DAMAGE,
        )
