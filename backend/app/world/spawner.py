"""
野外遭遇生成

按时间间隔判定是否刷出怪物，交给战斗引擎开始遭遇
"""
import logging
from typing import Optional

from app.combat.combat_engine import CombatEngine
from app.combat.dice import DiceRoller
from app.combat.models.combatant import Monster
from app.combat.monster_factory import create_monster
from app.combat.rules import BOSS_ROLL, ELITE_ROLL, SPAWN_CHANCE, SPECIES_WEIGHTS

logger = logging.getLogger(__name__)


class EncounterSpawner:
    """
    遭遇生成器

    - 每个刷怪间隔判定一次（不在战斗中时）
    - 物种按权重选择，强度按一次掷骰决定
    - 怪物等级取玩家等级
    """

    def __init__(
        self,
        engine: CombatEngine,
        dice: Optional[DiceRoller] = None,
        interval_ms: int = 3000,
        spawn_enabled: bool = True,
    ):
        self.engine = engine
        self.dice = dice or engine.dice
        self.interval_ms = interval_ms
        self.spawn_enabled = spawn_enabled
        self.elapsed_ms = 0

    def roll_tier(self) -> str:
        roll = self.dice.roll()
        if roll < BOSS_ROLL:
            return "boss"
        if roll < ELITE_ROLL:
            return "elite"
        return "normal"

    def roll_monster(self) -> Monster:
        """按权重生成一只怪物"""
        species = self.dice.weighted_choice(SPECIES_WEIGHTS)
        tier = self.roll_tier()
        level = self.engine.player.progression.level
        return create_monster(species, level, tier)

    def tick(self, elapsed_ms: int) -> Optional[Monster]:
        """
        推进时间

        Args:
            elapsed_ms: 经过的毫秒数

        Returns:
            Optional[Monster]: 本次刷出并已开战的怪物
        """
        if not self.spawn_enabled or self.engine.is_in_combat():
            self.elapsed_ms = 0
            return None

        self.elapsed_ms += max(0, elapsed_ms)
        if self.elapsed_ms < self.interval_ms:
            return None
        self.elapsed_ms = 0

        if not self.dice.chance(SPAWN_CHANCE):
            return None

        monster = self.roll_monster()
        result = self.engine.start_combat(monster)
        if not result.ok:
            logger.debug("spawn rejected: %s", result.message)
            return None
        logger.info("wild encounter: %s", monster.name)
        return monster
