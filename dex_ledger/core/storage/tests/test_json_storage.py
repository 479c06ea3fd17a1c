"""
Tests for JSON entity snapshots.
"""

from decimal import Decimal

import pytest

from dex_ledger.core.entities import Bundle, Pool, Token
from dex_ledger.core.storage.base import DataError
from dex_ledger.core.storage.json_storage import JsonStorage
from dex_ledger.core.storage.memory import EntityStore


@pytest.fixture
def entity_store():
    store = EntityStore()
    store.save(Bundle(eth_price_usd=Decimal("1834.123456789012345678901234567890")))
    store.save(Token(id="0xa", symbol="A", name="Token A", decimals=6,
                     whitelist_pools=["0xp"]))
    store.save(Pool(id="0xp", token0="0xa", token1="0xb", fee_tier=3000,
                    sqrt_price=2**160, tick=-10))
    return store


class TestJsonStorage:

    @pytest.mark.asyncio
    async def test_connect_creates_directory(self, tmp_path):
        storage = JsonStorage({"base_path": tmp_path / "snapshots"})

        async with storage:
            assert storage.is_connected
            assert await storage.health_check()

        assert not storage.is_connected

    @pytest.mark.asyncio
    async def test_entity_snapshot_round_trip(self, tmp_path, entity_store):
        async with JsonStorage({"base_path": tmp_path}) as storage:
            assert storage.save_entities(entity_store, "block_100")
            restored = storage.load_entities("block_100")

        assert (tmp_path / "block_100.json").exists()
        assert restored.get(Bundle, "1") == entity_store.get(Bundle, "1")
        assert restored.get(Token, "0xa").whitelist_pools == ["0xp"]
        assert restored.get(Pool, "0xp").sqrt_price == 2**160

    def test_compressed_snapshot(self, tmp_path, entity_store):
        storage = JsonStorage({"base_path": tmp_path, "compress": True})

        storage.save_entities(entity_store)

        assert (tmp_path / "entities.json.gz").exists()
        assert storage.load_entities().count(Token) == 1

    def test_missing_snapshot(self, tmp_path):
        assert JsonStorage({"base_path": tmp_path}).load_entities("nothing") is None

    def test_corrupt_snapshot(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json")

        with pytest.raises(DataError):
            JsonStorage({"base_path": tmp_path}).load_entities("broken")

    def test_snapshot_without_entities(self, tmp_path):
        storage = JsonStorage({"base_path": tmp_path})
        storage.save("other", {"hello": "world"})

        with pytest.raises(DataError):
            storage.load_entities("other")
