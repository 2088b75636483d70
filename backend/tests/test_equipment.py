import pytest

from app.combat.items import get_item
from app.combat.models.combatant import Player
from app.combat.models.equipment import Equipment, EquipmentSlots, starter_kit


def test_equipment_bonuses_feed_effective_stats():
    player = Player()
    kit = starter_kit()
    player.equip("weapon", kit["weapon"])
    player.equip("armor", kit["armor"])

    stats = player.get_stats()
    assert stats.attack == 20
    assert stats.defense == 13
    assert stats.max_hp == 120
    assert stats.current_hp == 100


def test_unequip_clamps_current_hp():
    player = Player()
    player.equip("armor", starter_kit()["armor"])
    player.heal(100)
    assert player.stats.current_hp == 120

    removed = player.unequip("armor")

    assert removed.name == "新手布甲"
    assert player.get_stats().max_hp == 100
    assert player.stats.current_hp == 100


def test_equip_returns_replaced_item():
    slots = EquipmentSlots()
    first = Equipment.from_item(get_item("wooden_sword"))
    second = Equipment.from_item(get_item("iron_sword"))

    assert slots.equip("weapon", first) is None
    assert slots.equip("weapon", second) is first
    assert slots.total_bonus().attack == 12


def test_unknown_slot_is_rejected():
    with pytest.raises(ValueError):
        EquipmentSlots().equip("cape", Equipment(id="c", name="披风", slot="cape"))


def test_non_equippable_item_is_rejected():
    with pytest.raises(ValueError):
        Equipment.from_item(get_item("health_potion"))


def test_upgrade_spends_gold_and_scales_bonus():
    player = Player(gold=100)
    player.equip("weapon", starter_kit()["weapon"])

    assert player.upgrade_equipment("weapon") is True

    weapon = player.equipment.get("weapon")
    assert player.gold == 25
    assert weapon.level == 2
    assert weapon.attack == 6
    assert weapon.next_upgrade_cost() == 112

    assert player.upgrade_blocker("weapon") == "金币不足"
    assert player.upgrade_equipment("weapon") is False
    assert player.gold == 25


def test_upgrade_blockers():
    player = Player(gold=10_000)
    assert player.upgrade_blocker("armor") == "该部位没有装备"

    player.equip("armor", Equipment(id="a", name="旧甲", slot="armor", defense=2, level=3, max_level=3))
    assert "最高等级" in player.upgrade_blocker("armor")
    assert player.upgrade_equipment("armor") is False

    with pytest.raises(ValueError):
        player.upgrade_blocker("cape")


def test_equipment_level_never_exceeds_max():
    item = Equipment(id="x", name="X", slot="weapon", attack=10, level=15, max_level=10)
    assert item.level == 10
    item.upgrade()
    assert item.level == 10
    assert item.attack == 10


def test_starter_kit_comes_from_item_catalog():
    kit = starter_kit()

    assert kit["weapon"].id == "starter_sword"
    assert kit["weapon"].attack == 5
    assert kit["armor"].defense == 3
    assert kit["armor"].health == 20
    assert kit["armor"].next_upgrade_cost() == 75


def test_equip_from_inventory_swaps_gear():
    player = Player()
    player.equip("weapon", starter_kit()["weapon"])
    player.add_item("iron_sword")

    assert player.equip_from_inventory("iron_sword") is None

    assert player.equipment.get("weapon").id == "iron_sword"
    assert player.get_stats().attack == 27
    assert player.inventory == {"health_potion": 3, "starter_sword": 1}

    assert player.equip_from_inventory("starter_sword") is None
    assert player.equipment.get("weapon").id == "starter_sword"
    assert player.inventory["iron_sword"] == 1


def test_equip_from_inventory_blockers():
    player = Player()
    player.add_item("iron_ore")

    assert player.equip_from_inventory("iron_sword") == "背包中没有该物品"
    assert player.equip_from_inventory("iron_ore") == "该物品无法装备"
    assert player.equip_from_inventory("health_potion") == "该物品无法装备"
    assert player.inventory["iron_ore"] == 1
    assert player.equipment.to_dict() == {}
