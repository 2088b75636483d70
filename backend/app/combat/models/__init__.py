"""Data models for the combat system."""

from .stat_block import Buff, StatBlock
from .skill import EffectType, Scaling, Skill, SkillEffect
from .equipment import EQUIPMENT_SLOTS, Equipment, EquipmentBonus, EquipmentSlots, starter_kit
from .combatant import Combatant, CombatantType, Monster, Pet, Player
from .combat_session import (
    CombatEvent,
    CombatOutcome,
    CombatPhase,
    CombatSession,
    EventKind,
    PendingStep,
)
from .combat_result import ActionResult, CombatRewards

__all__ = [
    "Buff",
    "StatBlock",
    "EffectType",
    "Scaling",
    "Skill",
    "SkillEffect",
    "EQUIPMENT_SLOTS",
    "Equipment",
    "EquipmentBonus",
    "EquipmentSlots",
    "starter_kit",
    "Combatant",
    "CombatantType",
    "Monster",
    "Pet",
    "Player",
    "CombatEvent",
    "CombatOutcome",
    "CombatPhase",
    "CombatSession",
    "EventKind",
    "PendingStep",
    "ActionResult",
    "CombatRewards",
]
