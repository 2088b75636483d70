"""
Combat API routes.

战斗规则全部在 app.combat 内，这里只做请求转发与结果序列化
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.combat.combat_engine import CombatEngine
from app.combat.models.combat_result import ActionResult
from app.combat.monster_factory import create_monster
from app.dependencies import get_engine, get_spawner
from app.models.combat_api import (
    ActionResponse,
    AdvanceRequest,
    CombatStartRequest,
    EquipRequest,
    EquipResponse,
    EquipmentUpgradeResponse,
    SkillUpgradeResponse,
    SpawnTickResponse,
)
from app.world.spawner import EncounterSpawner

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Combat"])


def _to_response(result: ActionResult, engine: CombatEngine) -> ActionResponse:
    payload = result.to_dict()
    payload["state"] = engine.get_snapshot()
    return ActionResponse(**payload)


@router.post("/combat/start", response_model=ActionResponse)
async def start_combat(
    payload: CombatStartRequest,
    engine: CombatEngine = Depends(get_engine),
):
    """生成怪物并开始战斗"""
    level = payload.level or engine.player.progression.level
    try:
        monster = create_monster(payload.species, level, payload.tier)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_response(engine.start_combat(monster), engine)


@router.post("/combat/attack", response_model=ActionResponse)
async def attack(engine: CombatEngine = Depends(get_engine)):
    return _to_response(engine.attack(), engine)


@router.post("/combat/potion", response_model=ActionResponse)
async def use_potion(engine: CombatEngine = Depends(get_engine)):
    return _to_response(engine.use_potion(), engine)


@router.post("/combat/flee", response_model=ActionResponse)
async def flee(engine: CombatEngine = Depends(get_engine)):
    return _to_response(engine.flee(), engine)


@router.post("/combat/skills/{skill_id}", response_model=ActionResponse)
async def use_skill(skill_id: str, engine: CombatEngine = Depends(get_engine)):
    return _to_response(engine.use_skill(skill_id), engine)


@router.post("/combat/advance", response_model=ActionResponse)
async def advance(payload: AdvanceRequest, engine: CombatEngine = Depends(get_engine)):
    """推进时间（收尾延迟到期后结束遭遇）"""
    return _to_response(engine.advance(payload.elapsed_ms), engine)


@router.get("/combat/state")
async def get_state(engine: CombatEngine = Depends(get_engine)):
    return engine.get_snapshot()


@router.post("/equipment/{slot}/upgrade", response_model=EquipmentUpgradeResponse)
async def upgrade_equipment(slot: str, engine: CombatEngine = Depends(get_engine)):
    """升级装备（消耗金币）"""
    player = engine.player
    try:
        blocker: Optional[str] = player.upgrade_blocker(slot)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if blocker:
        item = player.equipment.get(slot)
        return EquipmentUpgradeResponse(
            ok=False,
            message=blocker,
            gold=player.gold,
            equipment=item.to_dict() if item else None,
        )

    player.upgrade_equipment(slot)
    item = player.equipment.get(slot)
    logger.info("equipment upgraded: %s -> L%s", item.name, item.level)
    return EquipmentUpgradeResponse(
        ok=True,
        message=f"{item.name}升级到了{item.level}级！",
        gold=player.gold,
        equipment=item.to_dict(),
    )


@router.post("/equipment/equip", response_model=EquipResponse)
async def equip_item(payload: EquipRequest, engine: CombatEngine = Depends(get_engine)):
    """从背包穿戴装备"""
    player = engine.player
    blocker = player.equip_from_inventory(payload.item_id)
    if blocker:
        return EquipResponse(
            ok=False,
            message=blocker,
            equipment=player.equipment.to_dict(),
            inventory=dict(player.inventory),
        )

    logger.info("equipped from inventory: %s", payload.item_id)
    return EquipResponse(
        ok=True,
        message="装备成功",
        equipment=player.equipment.to_dict(),
        inventory=dict(player.inventory),
    )


@router.post("/skills/{skill_id}/upgrade", response_model=SkillUpgradeResponse)
async def upgrade_skill(skill_id: str, engine: CombatEngine = Depends(get_engine)):
    player = engine.player
    if not player.upgrade_skill(skill_id):
        return SkillUpgradeResponse(ok=False, message="技能不存在或尚未解锁")

    skill = player.skills.get(skill_id)
    return SkillUpgradeResponse(
        ok=True,
        message=f"{skill.name}升级到了{skill.level}级！",
        skill=skill.to_dict(),
    )


@router.post("/world/tick", response_model=SpawnTickResponse)
async def world_tick(
    payload: AdvanceRequest,
    spawner: EncounterSpawner = Depends(get_spawner),
):
    """推进野外时间，可能触发遭遇"""
    monster = spawner.tick(payload.elapsed_ms)
    return SpawnTickResponse(
        spawned=monster is not None,
        monster=monster.to_dict() if monster else None,
        in_combat=spawner.engine.is_in_combat(),
    )
