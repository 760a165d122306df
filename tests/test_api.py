"""Tests for the store API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardengine.db.database import get_session
from cardengine.main import app
from cardengine.models.db import Base


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _created(response) -> str:
    body = response.json()
    assert body["outcome"] == "success", body
    return body["data"]["created_ids"][0]


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.json() == {"status": "healthy", "database": None}

    async def test_ready(self, client: AsyncClient) -> None:
        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"


class TestStoreView:
    async def test_new_store_is_empty(self, client: AsyncClient) -> None:
        response = await client.get("/stores/fresh")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["catalog"] == []
        assert data["pool"] == []
        assert [b["key"] for b in data["boosters"]] == [
            "Universal",
            "Bullet",
            "Scope",
            "Trigger",
            "Jacket",
        ]

    async def test_delete_store(self, client: AsyncClient) -> None:
        await client.post("/stores/t/catalog", json={"name": "Ace"})

        response = await client.delete("/stores/t")

        assert response.json()["data"] == {"store_key": "t", "deleted": True}
        view = (await client.get("/stores/t")).json()["data"]
        assert view["catalog"] == []

    async def test_stores_are_isolated(self, client: AsyncClient) -> None:
        await client.post("/stores/one/catalog", json={"name": "Ace"})

        view = (await client.get("/stores/two")).json()["data"]

        assert view["catalog"] == []


class TestCardEndpoints:
    async def test_create_and_edit_card(self, client: AsyncClient) -> None:
        card_id = await _created(await client.post("/stores/t/catalog", json={"name": "Ace"}))

        response = await client.patch(
            f"/stores/t/cards/{card_id}",
            json={"name": "Ace of Spades", "type": "Gun", "rarity": "Legendary"},
        )
        assert response.json()["outcome"] == "success"
        await client.put(f"/stores/t/cards/{card_id}/tags", json={"tags": ["Bullet"]})

        view = (await client.get("/stores/t", params={"search": "bullet"})).json()["data"]
        assert [c["name"] for c in view["catalog"]] == ["Ace of Spades"]

    async def test_invalid_rarity_rejected(self, client: AsyncClient) -> None:
        card_id = await _created(await client.post("/stores/t/catalog", json={}))

        response = await client.patch(f"/stores/t/cards/{card_id}", json={"rarity": "Mythic"})

        assert response.status_code == 422

    async def test_unknown_card_is_known_failure(self, client: AsyncClient) -> None:
        response = await client.delete("/stores/t/cards/nope")

        body = response.json()
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "not_found"

    async def test_bad_zone_reference(self, client: AsyncClient) -> None:
        response = await client.post(
            "/stores/t/moves",
            json={"card_id": "x", "from_zone": "pool", "to_zone": "graveyard"},
        )

        body = response.json()
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "invalid_input"

    async def test_copy_from_catalog_to_pool(self, client: AsyncClient) -> None:
        card_id = await _created(await client.post("/stores/t/catalog", json={"name": "Ace"}))

        response = await client.post(
            "/stores/t/moves",
            json={"card_id": card_id, "from_zone": "master", "to_zone": "pool"},
        )

        copy_id = await _created(response)
        assert copy_id != card_id
        view = (await client.get("/stores/t")).json()["data"]
        assert [c["id"] for c in view["pool"]] == [copy_id]
        assert [c["id"] for c in view["catalog"]] == [card_id]


class TestHandFlow:
    async def test_draw_from_linked_deck(self, client: AsyncClient) -> None:
        card_id = await _created(await client.post("/stores/t/catalog", json={"name": "Ace"}))
        deck_id = await _created(await client.post("/stores/t/decks", json={"name": "Main"}))
        hand_id = await _created(await client.post("/stores/t/hands", json={}))
        await client.patch(f"/stores/t/hands/{hand_id}", json={"src_deck_id": deck_id})
        copy_id = await _created(
            await client.post(
                "/stores/t/moves",
                json={"card_id": card_id, "from_zone": "master", "to_zone": f"deck:{deck_id}"},
            )
        )

        response = await client.post(f"/stores/t/hands/{hand_id}/draw", json={"count": 1})

        assert response.json()["outcome"] == "success"
        view = (await client.get("/stores/t")).json()["data"]
        assert view["decks"][0]["count"] == 0
        assert [c["id"] for c in view["hands"][0]["cards"]] == [copy_id]
        assert view["hands"][0]["src_deck_id"] == deck_id

    async def test_draw_without_link(self, client: AsyncClient) -> None:
        hand_id = await _created(await client.post("/stores/t/hands", json={"name": "Solo"}))

        response = await client.post(f"/stores/t/hands/{hand_id}/draw", json={})

        assert response.status_code == 200
        body = response.json()
        assert body["outcome"] == "known_failure"
        assert body["failure"]["kind"] == "no_linked_deck"

    async def test_slot_move_and_clear(self, client: AsyncClient) -> None:
        card_id = await _created(await client.post("/stores/t/catalog", json={"name": "Ace"}))
        hand_id = await _created(await client.post("/stores/t/hands", json={}))

        await client.post(
            "/stores/t/moves/slot",
            json={"card_id": card_id, "from_zone": "master", "hand_id": hand_id, "slot_index": 3},
        )
        slots = (await client.get("/stores/t")).json()["data"]["hands"][0]["slots"]
        assert slots[3]["card"]["name"] == "Ace"

        await client.delete(f"/stores/t/hands/{hand_id}/slots/3")
        slots = (await client.get("/stores/t")).json()["data"]["hands"][0]["slots"]
        assert slots[3]["card"] is None


class TestBoosterEndpoints:
    async def test_short_pack_succeeds_with_notice(self, client: AsyncClient) -> None:
        await client.post("/stores/t/catalog", json={"name": "Ace"})

        response = await client.post("/stores/t/boosters/Universal")

        body = response.json()
        assert body["outcome"] == "success"
        assert len(body["data"]["created_ids"]) == 1
        assert body["data"]["notices"][0]["kind"] == "short_pack"

    async def test_empty_catalog(self, client: AsyncClient) -> None:
        body = (await client.post("/stores/t/boosters/Bullet")).json()

        assert body["failure"]["kind"] == "empty_candidate_pool"

    async def test_unknown_pack(self, client: AsyncClient) -> None:
        body = (await client.post("/stores/t/boosters/Sleeve")).json()

        assert body["failure"]["kind"] == "unknown_pack"

    async def test_pack_image(self, client: AsyncClient) -> None:
        await client.put("/stores/t/boosters/Scope/image", json={"image": "scope.png"})

        boosters = (await client.get("/stores/t")).json()["data"]["boosters"]

        assert boosters[2] == {"key": "Scope", "image": "scope.png"}
