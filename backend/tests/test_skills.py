import pytest

from app.combat.models.combatant import Player
from app.combat.models.skill import EffectType, Skill
from app.combat.skill_registry import create_skill_set, get_template, list_templates


def test_skill_cooldown_is_clamped_on_creation():
    skill = Skill(id="x", name="X", effect_type=EffectType.DAMAGE, power=1.0, cooldown_turns=3, current_cooldown=10)
    assert skill.current_cooldown == 3

    skill = Skill(id="y", name="Y", effect_type=EffectType.DAMAGE, power=1.0, cooldown_turns=3, current_cooldown=-2)
    assert skill.current_cooldown == 0


def test_skill_cooldown_never_underflows():
    skill = Skill(id="x", name="X", effect_type=EffectType.DAMAGE, power=1.0, cooldown_turns=2)
    skill.trigger_cooldown()
    for _ in range(5):
        skill.tick()
        assert 0 <= skill.current_cooldown <= skill.cooldown_turns
    assert skill.is_ready()


def test_skill_sets_do_not_share_instances():
    first = create_skill_set("player")
    second = create_skill_set("player")

    assert first.use("slash", attack=15, resource=100) is not None
    assert first.get("slash").current_cooldown == 3
    assert second.get("slash").current_cooldown == 0
    assert get_template("player", "slash").current_cooldown == 0


def test_damage_skill_magnitude_scales_with_attack():
    skills = create_skill_set("player")
    effect = skills.use("fireball", attack=15, resource=100, level=5)

    assert effect.name == "火球术"
    assert effect.magnitude == 22
    assert effect.effect_type == EffectType.DAMAGE


def test_skill_not_usable_without_resource():
    skills = create_skill_set("player")
    assert skills.use("slash", attack=15, resource=10) is None
    assert skills.get("slash").current_cooldown == 0


def test_skill_not_usable_before_unlock_level():
    skills = create_skill_set("player")
    assert skills.use("heal", attack=15, max_hp=100, resource=100, level=1) is None
    effect = skills.use("heal", attack=15, max_hp=100, resource=100, level=3)
    assert effect.magnitude == 30
    assert effect.effect_type == EffectType.HEAL


def test_skill_not_usable_on_cooldown():
    skills = create_skill_set("player")
    assert skills.use("slash", attack=15, resource=100) is not None
    assert skills.use("slash", attack=15, resource=100) is None


def test_unknown_skill_ids():
    skills = create_skill_set("player")
    assert skills.use("meteor", attack=15, resource=100) is None

    with pytest.raises(ValueError):
        create_skill_set("monster", ["nope"])
    with pytest.raises(ValueError):
        create_skill_set("dragon")


def test_skill_upgrade():
    skills = create_skill_set("player")
    assert skills.upgrade("slash") is True

    slash = skills.get("slash")
    assert slash.level == 2
    assert slash.power == pytest.approx(1.44)
    assert slash.resource_cost == 22
    assert skills.upgrade("meteor") is False


def test_player_upgrades_only_unlocked_skills():
    player = Player()

    assert player.upgrade_skill("heal") is False
    assert player.skills.get("heal").level == 1
    assert player.upgrade_skill("slash") is True
    assert player.skills.get("slash").level == 2

    player.use_skill("slash")
    assert player.mana == 78


def test_player_use_skill_spends_mana():
    player = Player()
    effect = player.use_skill("slash")

    assert effect is not None
    assert player.mana == 80

    assert player.use_skill("slash") is None
    assert player.mana == 80


def test_templates_per_kind():
    assert set(list_templates("player")) == {"slash", "heal", "fireball", "rage"}
    assert list_templates("pet") == ["assist_attack"]
    assert "frenzy" in list_templates("monster")
