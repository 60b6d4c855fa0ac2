from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    async def get_item(self, key: str) -> Optional[str]:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStorage:
    """String key-value storage backed by a single JSON document on disk."""

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = asyncio.Lock()

    def load(self) -> dict[str, str]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return {str(k): str(v) for k, v in data.items()}
        except Exception:
            return {}
        return {}

    def save(self, mapping: dict[str, str]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_name(f"{self._file_path.name}.tmp")
        tmp_path.write_text(
            json.dumps(mapping, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        os.replace(tmp_path, self._file_path)

    def _set(self, key: str, value: str) -> None:
        mapping = self.load()
        mapping[str(key)] = str(value)
        self.save(mapping)

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            mapping = await asyncio.to_thread(self.load)
        return mapping.get(str(key))

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._set, key, value)


async def load_string_set(storage: KeyValueStorage, key: str) -> Optional[set[str]]:
    raw = await storage.get_item(key)
    if not raw:
        return None
    values = json.loads(raw)
    if not isinstance(values, list):
        return None
    return {str(v) for v in values}


async def save_string_set(storage: KeyValueStorage, key: str, values: set[str]) -> None:
    await storage.set_item(key, json.dumps(sorted(values), ensure_ascii=False))


__all__ = ["KeyValueStorage", "MemoryStorage", "JsonFileStorage", "load_string_set", "save_string_set"]
