"""
数据模型包
"""
from .combat_api import (
    ActionResponse,
    AdvanceRequest,
    CombatEventModel,
    CombatStartRequest,
    EquipRequest,
    EquipResponse,
    EquipmentUpgradeResponse,
    RewardsModel,
    SkillUpgradeResponse,
    SpawnTickResponse,
)

__all__ = [
    "ActionResponse",
    "AdvanceRequest",
    "CombatEventModel",
    "CombatStartRequest",
    "EquipRequest",
    "EquipResponse",
    "EquipmentUpgradeResponse",
    "RewardsModel",
    "SkillUpgradeResponse",
    "SpawnTickResponse",
]
