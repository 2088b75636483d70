import random

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.combat.combat_engine import CombatEngine
from app.combat.dice import DiceRoller
from app.combat.models.combatant import Pet, Player
from app.combat.models.equipment import starter_kit
from app.combat.models.stat_block import StatBlock
from app.dependencies import create_player, get_engine, get_spawner
from app.main import app
from app.world.spawner import EncounterSpawner


@pytest.fixture
def engine():
    return CombatEngine(
        player=Player(pet=Pet(name="小狗")),
        dice=DiceRoller(random.Random(7)),
    )


@pytest_asyncio.fixture
async def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_spawner] = lambda: EncounterSpawner(engine)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_attack_outside_combat_is_advisory(client: AsyncClient):
    response = await client.post("/api/combat/attack")

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is False
    assert data["message"] == "当前不在战斗中"
    assert data["state"]["phase"] == "idle"


@pytest.mark.asyncio
async def test_start_and_attack(client: AsyncClient):
    response = await client.post("/api/combat/start", json={"species": "史莱姆", "tier": "normal"})
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["events"][0]["kind"] == "start"
    assert data["state"]["in_combat"] is True
    assert data["state"]["monster"]["name"] == "史莱姆"

    response = await client.post("/api/combat/attack")
    data = response.json()
    assert data["ok"] is True
    assert data["events"][0]["kind"] == "damage"
    assert data["events"][0]["value"] == 8
    assert data["state"]["turn"] == 1


@pytest.mark.asyncio
async def test_start_with_level_and_tier(client: AsyncClient):
    response = await client.post("/api/combat/start", json={"species": "蝙蝠", "tier": "boss", "level": 2})
    monster = response.json()["state"]["monster"]

    assert monster["name"] == "【Boss】蝙蝠"
    assert monster["stats"]["max_hp"] == 270
    assert monster["stats"]["level"] == 2


@pytest.mark.asyncio
async def test_unknown_tier_is_rejected_by_validation(client: AsyncClient):
    response = await client.post("/api/combat/start", json={"species": "史莱姆", "tier": "legendary"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_species_is_allowed(client: AsyncClient):
    response = await client.post("/api/combat/start", json={"species": "未知生物"})
    data = response.json()
    assert data["ok"] is True
    assert data["state"]["monster"]["sprite"] == "👾"


@pytest.mark.asyncio
async def test_skill_and_potion_endpoints(client: AsyncClient):
    await client.post("/api/combat/start", json={"species": "史莱姆"})

    locked = (await client.post("/api/combat/skills/heal")).json()
    assert locked["ok"] is False

    slash = (await client.post("/api/combat/skills/slash")).json()
    assert slash["ok"] is True
    assert slash["events"][0]["label"] == "斩击"

    potion = (await client.post("/api/combat/potion")).json()
    assert potion["ok"] is True
    assert potion["state"]["player"]["health_potions"] == 2


@pytest.mark.asyncio
async def test_victory_then_advance_to_idle(engine: CombatEngine, client: AsyncClient):
    engine.player = Player(stats=StatBlock.full(level=1, max_hp=100, attack=200, defense=10))
    await client.post("/api/combat/start", json={"species": "史莱姆"})

    data = (await client.post("/api/combat/attack")).json()
    assert data["outcome"] == "victory"
    assert data["rewards"]["exp"] == 30
    assert data["rewards"]["gold"] == 15
    assert data["state"]["phase"] == "settling"

    blocked = (await client.post("/api/combat/flee")).json()
    assert blocked["ok"] is False

    data = (await client.post("/api/combat/advance", json={"elapsed_ms": 2000})).json()
    assert data["ok"] is True
    assert data["state"]["phase"] == "idle"
    assert data["state"]["in_combat"] is False


@pytest.mark.asyncio
async def test_advance_rejects_negative_time(client: AsyncClient):
    response = await client.post("/api/combat/advance", json={"elapsed_ms": -1})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_state_endpoint(client: AsyncClient):
    response = await client.get("/api/combat/state")
    data = response.json()
    assert data["phase"] == "idle"
    assert data["pet"]["loyalty"] == 50
    assert data["player"]["gold"] == 100


@pytest.mark.asyncio
async def test_equipment_upgrade(engine: CombatEngine, client: AsyncClient):
    empty = (await client.post("/api/equipment/weapon/upgrade")).json()
    assert empty["ok"] is False
    assert empty["message"] == "该部位没有装备"

    engine.player.equip("weapon", starter_kit()["weapon"])
    data = (await client.post("/api/equipment/weapon/upgrade")).json()
    assert data["ok"] is True
    assert data["gold"] == 25
    assert data["equipment"]["level"] == 2
    assert data["equipment"]["attack"] == 6


@pytest.mark.asyncio
async def test_equipment_upgrade_unknown_slot(client: AsyncClient):
    response = await client.post("/api/equipment/cape/upgrade")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_world_tick_without_spawn(client: AsyncClient):
    response = await client.post("/api/world/tick", json={"elapsed_ms": 100})
    data = response.json()
    assert data["spawned"] is False
    assert data["in_combat"] is False


@pytest_asyncio.fixture
async def default_client():
    engine = CombatEngine(player=create_player(), dice=DiceRoller(random.Random(7)))
    app.dependency_overrides[get_engine] = lambda: engine
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_new_player_can_upgrade_starter_gear(default_client: AsyncClient):
    state = (await default_client.get("/api/combat/state")).json()
    assert state["player"]["equipment"]["weapon"]["id"] == "starter_sword"
    assert state["player"]["stats"]["attack"] == 20

    data = (await default_client.post("/api/equipment/weapon/upgrade")).json()
    assert data["ok"] is True
    assert data["gold"] == 25
    assert data["equipment"]["level"] == 2
    assert data["equipment"]["attack"] == 6

    armor = (await default_client.post("/api/equipment/armor/upgrade")).json()
    assert armor["ok"] is False
    assert armor["message"] == "金币不足"


@pytest.mark.asyncio
async def test_equip_item_from_inventory(engine: CombatEngine, client: AsyncClient):
    missing = (await client.post("/api/equipment/equip", json={"item_id": "iron_sword"})).json()
    assert missing["ok"] is False
    assert missing["message"] == "背包中没有该物品"

    engine.player.add_item("iron_sword")
    data = (await client.post("/api/equipment/equip", json={"item_id": "iron_sword"})).json()
    assert data["ok"] is True
    assert data["equipment"]["weapon"]["id"] == "iron_sword"
    assert "iron_sword" not in data["inventory"]

    response = await client.post("/api/equipment/equip", json={})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_skill_upgrade_endpoint(client: AsyncClient):
    data = (await client.post("/api/skills/slash/upgrade")).json()
    assert data["ok"] is True
    assert data["skill"]["level"] == 2
    assert data["skill"]["resource_cost"] == 22

    locked = (await client.post("/api/skills/heal/upgrade")).json()
    assert locked["ok"] is False
    assert locked["skill"] is None
