"""Key/value storage backends."""

import json

import pytest

from hedera_wallet_connect.transport import FileStorage, MemoryStorage


@pytest.mark.asyncio
async def test_memory_storage():
    storage = MemoryStorage({"a": 1})
    assert await storage.get_item("a") == 1
    await storage.set_item("b", [1, 2])
    assert await storage.get_item("b") == [1, 2]
    await storage.remove_item("a")
    await storage.remove_item("missing")
    assert await storage.get_item("a") is None


@pytest.mark.asyncio
async def test_file_storage_round_trip(tmp_path):
    path = tmp_path / "state" / "wc.json"
    storage = FileStorage(path)
    assert await storage.get_item("wc@2:client:session") is None

    await storage.set_item("wc@2:client:session", [{"topic": "t1"}])
    assert json.loads(path.read_text()) == {"wc@2:client:session": [{"topic": "t1"}]}
    assert await FileStorage(path).get_item("wc@2:client:session") == [{"topic": "t1"}]

    await storage.remove_item("wc@2:client:session")
    assert json.loads(path.read_text()) == {}


@pytest.mark.asyncio
async def test_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "wc.json"
    path.write_text("{not json")
    storage = FileStorage(path)
    assert await storage.get_item("anything") is None
    await storage.set_item("k", "v")
    assert await storage.get_item("k") == "v"
