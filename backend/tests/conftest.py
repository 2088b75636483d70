import random

import pytest

from app.combat.dice import DiceRoller
from app.combat.monster_factory import create_monster


class ScriptedRandom(random.Random):
    """按顺序返回预设随机数，用完后返回 default"""

    def __init__(self, values, default=0.99):
        super().__init__(0)
        self.values = list(values)
        self.default = default

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def scripted_dice():
    def _make(*values, default=0.99):
        return DiceRoller(ScriptedRandom(values, default=default))

    return _make


@pytest.fixture
def slime():
    return create_monster("史莱姆", 1, "normal")
