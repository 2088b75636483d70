"""
Combat API models.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class CombatStartRequest(BaseModel):
    """Start combat request."""
    species: str = "史莱姆"
    tier: Literal["normal", "elite", "boss"] = "normal"
    level: Optional[int] = Field(default=None, ge=1, description="默认取玩家等级")


class AdvanceRequest(BaseModel):
    """Advance clock request."""
    elapsed_ms: int = Field(ge=0)


class CombatEventModel(BaseModel):
    """展示事件"""
    kind: str
    source: Optional[str] = None
    target: Optional[str] = None
    value: int = 0
    label: Optional[str] = None
    duration_ms: int = 0


class RewardsModel(BaseModel):
    """战斗奖励"""
    exp: int = 0
    gold: int = 0
    items: List[str] = Field(default_factory=list)
    pet_exp: int = 0


class ActionResponse(BaseModel):
    """Combat action response."""
    ok: bool
    message: str = ""
    events: List[CombatEventModel] = Field(default_factory=list)
    rewards: Optional[RewardsModel] = None
    outcome: Optional[str] = None
    state: Dict[str, Any] = Field(default_factory=dict)


class EquipRequest(BaseModel):
    """Equip from inventory request."""
    item_id: str


class EquipmentUpgradeResponse(BaseModel):
    """Equipment upgrade response."""
    ok: bool
    message: str = ""
    gold: int = 0
    equipment: Optional[Dict[str, Any]] = None


class EquipResponse(BaseModel):
    """Equip response."""
    ok: bool
    message: str = ""
    equipment: Dict[str, Any] = Field(default_factory=dict)
    inventory: Dict[str, int] = Field(default_factory=dict)


class SkillUpgradeResponse(BaseModel):
    """Skill upgrade response."""
    ok: bool
    message: str = ""
    skill: Optional[Dict[str, Any]] = None


class SpawnTickResponse(BaseModel):
    """World tick response."""
    spawned: bool = False
    monster: Optional[Dict[str, Any]] = None
    in_combat: bool = False
