"""Combat system package."""

from .combat_engine import CombatEngine
from .monster_factory import create_monster

__all__ = ["CombatEngine", "create_monster"]
