"""
FastAPI dependencies.
"""
from functools import lru_cache

from app.combat.combat_engine import CombatEngine
from app.combat.models.combatant import Pet, Player
from app.combat.models.equipment import starter_kit
from app.config import settings
from app.world.spawner import EncounterSpawner


def create_player() -> Player:
    """新角色（穿戴新手装备，带一只小狗）"""
    player = Player(
        gold=settings.starter_gold,
        health_potions=settings.starter_health_potions,
        pet=Pet(name="小狗", pet_type="dog"),
    )
    for slot, item in starter_kit().items():
        player.equip(slot, item)
    return player


@lru_cache()
def get_engine() -> CombatEngine:
    return CombatEngine(
        player=create_player(),
        settle_delay_ms=settings.settle_delay_ms,
        turn_delay_ms=settings.turn_delay_ms,
        animation_ms=settings.animation_ms,
    )


@lru_cache()
def get_spawner() -> EncounterSpawner:
    return EncounterSpawner(get_engine(), interval_ms=settings.spawn_interval_ms)
