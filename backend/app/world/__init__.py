"""
World package -- 野外遭遇
"""
from app.world.spawner import EncounterSpawner

__all__ = ["EncounterSpawner"]
