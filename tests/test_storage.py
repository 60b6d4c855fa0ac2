import asyncio
import json

import pytest

from reelfeed.storage import JsonFileStorage, load_string_set, save_string_set
from reelfeed.subtitles import SUBTITLE_LANGUAGE_KEY, SubtitlePreferenceStore


@pytest.mark.asyncio
async def test_json_file_storage_roundtrip(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileStorage(path)

    assert await storage.get_item("missing") is None
    await storage.set_item("a", "1")
    await storage.set_item("b", "two")

    assert await storage.get_item("a") == "1"
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": "1", "b": "two"}


@pytest.mark.asyncio
async def test_json_file_storage_ignores_corrupt_file(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("[1, 2", encoding="utf-8")
    storage = JsonFileStorage(path)
    assert await storage.get_item("a") is None
    await storage.set_item("a", "x")
    assert await storage.get_item("a") == "x"


@pytest.mark.asyncio
async def test_string_set_helpers(tmp_path):
    storage = JsonFileStorage(tmp_path / "s.json")
    assert await load_string_set(storage, "k") is None
    await save_string_set(storage, "k", {"b", "a"})
    assert await load_string_set(storage, "k") == {"a", "b"}


@pytest.mark.asyncio
async def test_subtitle_preference_persists(tmp_path):
    storage = JsonFileStorage(tmp_path / "s.json")
    prefs = SubtitlePreferenceStore(storage)
    await prefs.set_language_code("ar")

    restored = SubtitlePreferenceStore(storage)
    await restored.hydrate()
    assert restored.language_code == "ar"
    assert json.loads(await storage.get_item(SUBTITLE_LANGUAGE_KEY)) == {"language_code": "ar"}

    await restored.clear()
    assert restored.language_code == ""


@pytest.mark.asyncio
async def test_json_file_storage_reads_wait_for_writes(tmp_path):
    path = tmp_path / "storage.json"
    storage = JsonFileStorage(path)
    await storage.set_item("a", "1")

    await storage._lock.acquire()
    reader = asyncio.create_task(storage.get_item("a"))
    await asyncio.sleep(0.01)
    assert not reader.done()
    storage._lock.release()

    assert await reader == "1"
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]
