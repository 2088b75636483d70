"""
战斗引擎

核心战斗逻辑实现
"""
import logging
import math
import uuid
from typing import Any, Dict, List, Optional

from .ai_opponent import MonsterAI
from .dice import DiceRoller
from .loot import LootResolver
from .models.combat_result import ActionResult, CombatRewards
from .models.combat_session import (
    CombatEvent,
    CombatOutcome,
    CombatPhase,
    CombatSession,
    EventKind,
    PendingStep,
)
from .models.combatant import Monster, Player
from .models.skill import EffectType, SkillEffect
from .models.stat_block import Buff
from .rules import (
    DEBUFF_DURATION,
    FLEE_FAIL_THRESHOLD,
    MANA_REGEN_PER_TURN,
    PET_EXP_SHARE,
    POTION_HEAL_AMOUNT,
    compute_damage,
)

logger = logging.getLogger(__name__)


class CombatEngine:
    """
    战斗引擎

    职责：
    - 开始遭遇
    - 执行玩家行动并即时结算怪物回合
    - 判定胜负、发放奖励
    - 管理唯一的延迟步骤（结算收尾）

    每次行动的逻辑立即完成，返回带建议播放时长的展示事件；
    胜负已分后进入 SETTLING，等 advance() 累计到收尾延迟后回到空闲。
    """

    def __init__(
        self,
        player: Player,
        dice: Optional[DiceRoller] = None,
        settle_delay_ms: int = 2000,
        turn_delay_ms: int = 1000,
        animation_ms: int = 500,
    ):
        self.player = player
        self.dice = dice or DiceRoller()
        self.ai = MonsterAI(self.dice)
        self.loot = LootResolver(self.dice)
        self.settle_delay_ms = settle_delay_ms
        self.turn_delay_ms = turn_delay_ms
        self.animation_ms = animation_ms

        self.session: Optional[CombatSession] = None
        self.pending: Optional[PendingStep] = None
        self._buffs_at_action_start: List[Buff] = []

    # ============================================
    # 公共接口
    # ============================================

    @property
    def phase(self) -> CombatPhase:
        return self.session.phase if self.session else CombatPhase.IDLE

    @property
    def monster(self) -> Optional[Monster]:
        return self.session.monster if self.session else None

    def is_in_combat(self) -> bool:
        """遭遇存在即视为战斗中（包括收尾阶段）"""
        return self.session is not None

    def start_combat(self, monster: Monster) -> ActionResult:
        """
        开始战斗

        Args:
            monster: 遭遇的怪物

        Returns:
            ActionResult: 含遭遇开始事件

        流程：
        1. 取消上一场遭遇遗留的延迟步骤
        2. 上一场处于收尾阶段时立即收尾
        3. 创建新会话，回合数归零
        """
        if self.session and self.session.phase != CombatPhase.SETTLING:
            return ActionResult.rejected("已经在战斗中")
        if self.player.is_dead():
            return ActionResult.rejected("你已经倒下了，无法战斗")

        self._cancel_pending()
        if self.session:
            self._close_encounter()

        self.session = CombatSession(
            encounter_id=f"encounter_{uuid.uuid4().hex[:8]}",
            monster=monster,
        )
        logger.info(
            "encounter started: %s (%s) L%s",
            monster.name,
            monster.tier,
            monster.stats.level,
        )

        result = ActionResult(message=f"{monster.sprite} {monster.name}出现了！")
        result.add_event(
            CombatEvent(
                kind=EventKind.START,
                source=monster.id,
                target=monster.id,
                label="出现",
                duration_ms=self.turn_delay_ms,
            )
        )
        self.session.record(result.events)
        return result

    def attack(self) -> ActionResult:
        """
        普通攻击

        伤害 = max(1, 玩家有效攻击 - 怪物有效防御)；
        忠诚度足够的宠物追加 floor(玩家伤害 × 协助倍率) 的伤害
        """
        rejected = self._check_player_can_act()
        if rejected:
            return rejected

        session = self.session
        monster = session.monster
        self._begin_player_action()

        damage = compute_damage(self.player.effective_attack(), monster.effective_defense())
        monster.take_damage(damage)
        result = ActionResult(message=f"你对{monster.name}造成了{damage}点伤害！")
        result.add_event(
            CombatEvent(
                kind=EventKind.DAMAGE,
                source=self.player.id,
                target=monster.id,
                value=damage,
                label="攻击",
                duration_ms=self.animation_ms,
            )
        )

        assist = self._pet_assist(damage, monster)
        if assist:
            result.add_event(assist)

        self._resolve_player_action(result)
        return result

    def use_potion(self) -> ActionResult:
        """使用生命药水（恢复固定50点）"""
        rejected = self._check_player_can_act()
        if rejected:
            return rejected
        if self.player.health_potions <= 0:
            return ActionResult.rejected("你没有生命药水了！")

        self._begin_player_action()

        before = self.player.stats.current_hp
        self.player.use_health_potion(POTION_HEAL_AMOUNT)
        healed = self.player.stats.current_hp - before

        result = ActionResult(message=f"你使用了生命药水，恢复了{healed}点生命值！")
        result.add_event(
            CombatEvent(
                kind=EventKind.HEAL,
                source=self.player.id,
                target=self.player.id,
                value=healed,
                label="生命药水",
                duration_ms=self.animation_ms,
            )
        )
        self._resolve_player_action(result)
        return result

    def use_skill(self, skill_id: str) -> ActionResult:
        """
        施放玩家技能

        技能不可用时不消耗回合
        """
        rejected = self._check_player_can_act()
        if rejected:
            return rejected

        skill = self.player.skills.get(skill_id)
        if not skill:
            return ActionResult.rejected(f"未知技能：{skill_id}")
        if self.player.progression.level < skill.unlock_level:
            return ActionResult.rejected(f"{skill.name}需要{skill.unlock_level}级解锁")
        if not skill.is_ready():
            return ActionResult.rejected(f"{skill.name}冷却中（剩余{skill.current_cooldown}回合）")
        if self.player.mana < skill.resource_cost:
            return ActionResult.rejected("魔法值不足")

        effect = self.player.use_skill(skill_id)
        if effect is None:
            return ActionResult.rejected(f"{skill.name}无法使用")
        self._begin_player_action()

        result = ActionResult()
        result.add_event(self._apply_player_skill(effect, result))
        self._resolve_player_action(result)
        return result

    def flee(self) -> ActionResult:
        """
        逃跑

        均匀随机数 > 0.3 时成功（无奖励、无惩罚），失败则怪物行动
        """
        rejected = self._check_player_can_act()
        if rejected:
            return rejected

        self._cancel_pending()
        self._begin_player_action()

        if self.dice.roll() > FLEE_FAIL_THRESHOLD:
            result = ActionResult(message="你成功逃脱了战斗！", outcome=CombatOutcome.FLED)
            result.add_event(
                CombatEvent(
                    kind=EventKind.FLEE,
                    source=self.player.id,
                    label="逃跑成功",
                    duration_ms=self.settle_delay_ms,
                )
            )
            self.session.record(result.events)
            self._begin_settle(CombatOutcome.FLED)
            return result

        result = ActionResult(message="逃跑失败！")
        result.add_event(
            CombatEvent(
                kind=EventKind.MESSAGE,
                source=self.player.id,
                label="逃跑失败",
                duration_ms=self.animation_ms,
            )
        )
        self._resolve_player_action(result)
        return result

    def monster_turn(self) -> List[CombatEvent]:
        """
        怪物回合

        流程：
        1. 怪物技能冷却推进
        2. AI选择技能
        3. 伤害 / 自我恢复 / 减益
        4. 检查玩家是否倒下
        """
        session = self.session
        if not session or session.phase == CombatPhase.SETTLING:
            return []

        monster = session.monster
        self._set_phase(CombatPhase.MONSTER_ACTING)
        monster.tick_cooldowns()
        effect = self.ai.choose_action(monster)

        self._set_phase(CombatPhase.RESOLVE_EFFECT)
        event = self._apply_monster_effect(monster, effect)
        events = [event]

        self._set_phase(CombatPhase.CHECK_DEFEAT)
        if self.player.is_dead():
            events.append(self._handle_defeat())
        else:
            self._set_phase(CombatPhase.AWAITING_PLAYER)
        return events

    def advance(self, elapsed_ms: int) -> ActionResult:
        """
        推进时间，收尾延迟到期后结束遭遇

        Args:
            elapsed_ms: 距上次调用经过的毫秒数
        """
        pending = self.pending
        if not pending or pending.cancelled:
            return ActionResult.rejected("没有待执行的步骤")

        pending.elapsed_ms += max(0, elapsed_ms)
        if not pending.is_due():
            remaining = pending.delay_ms - pending.elapsed_ms
            return ActionResult(message=f"战斗将在{remaining}毫秒后结束")
        return self.settle()

    def settle(self) -> ActionResult:
        """立即执行收尾步骤"""
        pending = self.pending
        if not pending or pending.cancelled:
            return ActionResult.rejected("没有待执行的步骤")

        outcome = pending.outcome
        self.pending = None
        self._close_encounter()
        return ActionResult(message="战斗结束", outcome=outcome)

    def get_snapshot(self) -> Dict[str, Any]:
        """当前战斗状态（纯数据）"""
        session = self.session
        pet = self.player.get_pet()
        return {
            "phase": self.phase.value,
            "in_combat": self.is_in_combat(),
            "encounter_id": session.encounter_id if session else None,
            "turn": session.turn if session else 0,
            "outcome": session.outcome.value if session and session.outcome else None,
            "player": self.player.to_dict(),
            "pet": pet.to_dict() if pet else None,
            "monster": session.monster.to_dict() if session else None,
            "pending": self.pending.to_dict() if self.pending else None,
        }

    # ============================================
    # 私有方法 - 玩家回合
    # ============================================

    def _check_player_can_act(self) -> Optional[ActionResult]:
        if not self.session:
            return ActionResult.rejected("当前不在战斗中")
        if self.session.phase == CombatPhase.SETTLING:
            return ActionResult.rejected("战斗已经结束")
        if self.session.phase != CombatPhase.AWAITING_PLAYER:
            return ActionResult.rejected("还没轮到你行动")
        return None

    def _begin_player_action(self):
        self.session.turn += 1
        self._buffs_at_action_start = list(self.player.buffs)
        self._set_phase(CombatPhase.PLAYER_ACTING)

    def _resolve_player_action(self, result: ActionResult):
        """
        玩家行动后的统一流程

        回合记账 → 胜利判定 → 怪物回合
        """
        session = self.session
        self._set_phase(CombatPhase.RESOLVE_EFFECT)
        self._end_player_half(result)

        self._set_phase(CombatPhase.CHECK_VICTORY)
        if session.monster.is_dead():
            self._handle_victory(result)
        else:
            for event in self.monster_turn():
                result.add_event(event)
            if session.outcome == CombatOutcome.DEFEAT:
                result.outcome = CombatOutcome.DEFEAT
                result.message = f"{result.message}\n你被击败了！".strip()

        session.record(result.events)

    def _end_player_half(self, result: ActionResult):
        """
        玩家半回合结束的记账

        技能与宠物冷却减1，本次行动前已存在的增益推进一回合，恢复魔法值
        """
        self.player.tick_cooldowns()
        pet = self.player.get_pet()
        if pet:
            pet.tick_cooldowns()

        for name in self.player.tick_buffs(only=self._buffs_at_action_start):
            result.add_event(
                CombatEvent(
                    kind=EventKind.MESSAGE,
                    target=self.player.id,
                    label=f"{name}效果消失",
                )
            )
        self._buffs_at_action_start = []
        self.player.regenerate_mana(MANA_REGEN_PER_TURN)

    def _pet_assist(self, player_damage: int, monster: Monster) -> Optional[CombatEvent]:
        pet = self.player.get_pet()
        if not pet or pet.is_dead() or not pet.is_loyal_enough():
            return None
        skill = pet.skills.get("assist_attack")
        if not skill or not skill.is_ready():
            return None

        skill.trigger_cooldown()
        bonus = math.floor(player_damage * skill.power)
        monster.take_damage(bonus)
        logger.debug("pet assist: %s dealt %s", pet.name, bonus)
        return CombatEvent(
            kind=EventKind.SKILL,
            source=pet.id,
            target=monster.id,
            value=bonus,
            label=skill.name,
            duration_ms=self.animation_ms,
        )

    def _apply_player_skill(self, effect: SkillEffect, result: ActionResult) -> CombatEvent:
        monster = self.session.monster
        if effect.effect_type == EffectType.DAMAGE:
            damage = compute_damage(effect.magnitude, monster.effective_defense())
            monster.take_damage(damage)
            result.message = f"你使用{effect.name}，造成了{damage}点伤害！"
            return CombatEvent(
                kind=EventKind.SKILL,
                source=self.player.id,
                target=monster.id,
                value=damage,
                label=effect.name,
                duration_ms=self.animation_ms,
            )

        if effect.effect_type == EffectType.HEAL:
            healed = self.player.heal(effect.magnitude)
            result.message = f"你使用{effect.name}，恢复了{healed}点生命值！"
            return CombatEvent(
                kind=EventKind.HEAL,
                source=self.player.id,
                target=self.player.id,
                value=healed,
                label=effect.name,
                duration_ms=self.animation_ms,
            )

        # 增益：攻击力提升 power 比例
        self.player.add_buff(
            Buff(name=effect.name, multiplier=1 + effect.power, remaining_turns=effect.duration)
        )
        result.message = f"你使用{effect.name}，攻击力提升了！"
        return CombatEvent(
            kind=EventKind.BUFF,
            source=self.player.id,
            target=self.player.id,
            value=round(effect.power * 100),
            label=effect.name,
            duration_ms=self.animation_ms,
        )

    # ============================================
    # 私有方法 - 怪物回合
    # ============================================

    def _apply_monster_effect(self, monster: Monster, effect: SkillEffect) -> CombatEvent:
        if effect.effect_type == EffectType.HEAL:
            healed = monster.heal(effect.magnitude)
            return CombatEvent(
                kind=EventKind.HEAL,
                source=monster.id,
                target=monster.id,
                value=healed,
                label=effect.name,
                duration_ms=self.turn_delay_ms,
            )

        if effect.effect_type == EffectType.DEBUFF:
            self.player.add_buff(
                Buff(name=effect.name, multiplier=effect.power, remaining_turns=DEBUFF_DURATION)
            )
            return CombatEvent(
                kind=EventKind.BUFF,
                source=monster.id,
                target=self.player.id,
                value=round((1 - effect.power) * 100),
                label=effect.name,
                duration_ms=self.turn_delay_ms,
            )

        damage = compute_damage(effect.magnitude, self.player.effective_defense())
        self.player.take_damage(damage)
        return CombatEvent(
            kind=EventKind.SKILL if effect.skill_id else EventKind.DAMAGE,
            source=monster.id,
            target=self.player.id,
            value=damage,
            label=effect.name,
            duration_ms=self.turn_delay_ms,
        )

    # ============================================
    # 私有方法 - 胜负与收尾
    # ============================================

    def _handle_victory(self, result: ActionResult):
        """发放经验、金币、掉落，宠物分得经验"""
        monster = self.session.monster
        rewards = CombatRewards(exp=monster.exp_reward, gold=monster.gold_reward)

        for level in self.player.gain_exp(rewards.exp):
            logger.info("player reached level %s", level)
            result.add_event(
                CombatEvent(
                    kind=EventKind.LEVEL_UP,
                    target=self.player.id,
                    value=level,
                    label="升级",
                    duration_ms=self.animation_ms,
                )
            )
        self.player.gain_gold(rewards.gold)

        for item in self.loot.resolve_items(self.loot.roll(monster.loot)):
            self.player.add_item(item.id)
            rewards.items.append(item.id)

        pet = self.player.get_pet()
        if pet and pet.is_loyal_enough():
            rewards.pet_exp = math.floor(rewards.exp * PET_EXP_SHARE)
            for level in pet.gain_exp(rewards.pet_exp):
                logger.info("pet %s reached level %s", pet.name, level)
                result.add_event(
                    CombatEvent(
                        kind=EventKind.LEVEL_UP,
                        target=pet.id,
                        value=level,
                        label="宠物升级",
                        duration_ms=self.animation_ms,
                    )
                )

        logger.info(
            "victory over %s: exp=%s gold=%s items=%s",
            monster.name,
            rewards.exp,
            rewards.gold,
            rewards.items,
        )
        message = f"战斗胜利！获得{rewards.exp}经验值和{rewards.gold}金币！"
        if rewards.items:
            message += "\n获得物品：" + "、".join(rewards.items)
        result.message = f"{result.message}\n{message}".strip()
        result.rewards = rewards
        result.outcome = CombatOutcome.VICTORY
        result.add_event(
            CombatEvent(
                kind=EventKind.VICTORY,
                source=self.player.id,
                target=monster.id,
                value=rewards.exp,
                label="胜利",
                duration_ms=self.settle_delay_ms,
            )
        )
        self._begin_settle(CombatOutcome.VICTORY)

    def _handle_defeat(self) -> CombatEvent:
        monster = self.session.monster
        logger.info("defeated by %s", monster.name)
        self._begin_settle(CombatOutcome.DEFEAT)
        return CombatEvent(
            kind=EventKind.DEFEAT,
            source=monster.id,
            target=self.player.id,
            label="失败",
            duration_ms=self.settle_delay_ms,
        )

    def _begin_settle(self, outcome: CombatOutcome):
        self._cancel_pending()
        self.session.outcome = outcome
        self._set_phase(CombatPhase.SETTLING)
        self.pending = PendingStep(
            encounter_id=self.session.encounter_id,
            outcome=outcome,
            delay_ms=self.settle_delay_ms,
        )

    def _cancel_pending(self):
        if self.pending and not self.pending.cancelled:
            logger.debug("pending step cancelled: %s", self.pending.encounter_id)
            self.pending.cancel()
        self.pending = None

    def _close_encounter(self):
        session = self.session
        if not session:
            return
        logger.info(
            "encounter ended: %s outcome=%s turns=%s",
            session.encounter_id,
            session.outcome.value if session.outcome else None,
            session.turn,
        )
        # 增益只在一场遭遇内有效
        self.player.buffs = []
        self.session = None

    def _set_phase(self, phase: CombatPhase):
        if self.session and self.session.phase != phase:
            logger.debug("phase %s -> %s", self.session.phase.value, phase.value)
            self.session.phase = phase
