"""
战斗会话数据模型
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .combatant import Monster


class CombatPhase(str, Enum):
    """战斗阶段"""

    IDLE = "idle"  # 空闲（无遭遇）
    AWAITING_PLAYER = "awaiting_player"  # 等待玩家行动
    PLAYER_ACTING = "player_acting"
    RESOLVE_EFFECT = "resolve_effect"
    CHECK_VICTORY = "check_victory"
    MONSTER_ACTING = "monster_acting"
    CHECK_DEFEAT = "check_defeat"
    SETTLING = "settling"  # 胜负已分，等待收尾


class CombatOutcome(str, Enum):
    """遭遇结束原因"""

    VICTORY = "victory"
    DEFEAT = "defeat"
    FLED = "fled"


class EventKind(str, Enum):
    """展示事件类型"""

    START = "start"
    DAMAGE = "damage"
    HEAL = "heal"
    SKILL = "skill"
    BUFF = "buff"
    LEVEL_UP = "level_up"
    MESSAGE = "message"
    VICTORY = "victory"
    DEFEAT = "defeat"
    FLEE = "flee"


@dataclass
class CombatEvent:
    """
    展示事件

    逻辑已即时结算，duration_ms 只是给表现层的建议播放时长
    """

    kind: EventKind
    source: Optional[str] = None
    target: Optional[str] = None
    value: int = 0
    label: Optional[str] = None
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "source": self.source,
            "target": self.target,
            "value": self.value,
            "label": self.label,
            "duration_ms": self.duration_ms,
        }


@dataclass
class PendingStep:
    """延迟执行的收尾步骤"""

    encounter_id: str
    outcome: CombatOutcome
    delay_ms: int
    elapsed_ms: int = 0
    cancelled: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def is_due(self) -> bool:
        return self.elapsed_ms >= self.delay_ms

    def cancel(self):
        self.cancelled = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "encounter_id": self.encounter_id,
            "outcome": self.outcome.value,
            "delay_ms": self.delay_ms,
            "elapsed_ms": self.elapsed_ms,
            "cancelled": self.cancelled,
        }


@dataclass
class CombatSession:
    """
    一场遭遇的状态

    同一时间只存在一场遭遇
    """

    encounter_id: str
    monster: Monster
    phase: CombatPhase = CombatPhase.AWAITING_PLAYER
    turn: int = 0
    outcome: Optional[CombatOutcome] = None
    event_log: List[CombatEvent] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)

    def record(self, events: List[CombatEvent]):
        self.event_log.extend(events)
