from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .player import PlayerHandle, pause_and_release

logger = logging.getLogger("reelfeed.player_pool")

DEFAULT_MAX_SIZE = 5


@dataclass
class PoolEntry:
    url: str
    handle: PlayerHandle
    created_at: float = field(default_factory=time.time)


class PlayerPool:
    """Reusable player handles keyed by URL, meant for the first few feed items."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self._max_size = max(1, int(max_size))
        self._by_url: dict[str, PoolEntry] = {}

    def upsert(self, url: str, handle: PlayerHandle) -> None:
        """Store ``handle`` under ``url``. A previous handle for the URL is not released."""
        if not url:
            return
        by_url = dict(self._by_url)
        by_url.pop(url, None)
        by_url[url] = PoolEntry(url=url, handle=handle)

        evicted = []
        while len(by_url) > self._max_size:
            oldest = next(iter(by_url))
            evicted.append(by_url.pop(oldest))
        self._by_url = by_url

        for entry in evicted:
            logger.debug(f"[PlayerPool] Evicting {entry.url}")
            pause_and_release(entry.handle)

    def get(self, url: str) -> Optional[PlayerHandle]:
        if not url:
            return None
        entry = self._by_url.get(url)
        return entry.handle if entry else None

    def urls(self) -> list[str]:
        return list(self._by_url)

    def release_all(self) -> None:
        entries = list(self._by_url.values())
        self._by_url = {}
        for entry in entries:
            pause_and_release(entry.handle)
        if entries:
            logger.debug(f"[PlayerPool] Released {len(entries)} handle(s)")

    def release_except(self, keep_urls: Iterable[str]) -> None:
        keep = {url for url in keep_urls if url}
        current = self._by_url
        self._by_url = {url: entry for url, entry in current.items() if url in keep}
        released = [entry for url, entry in current.items() if url not in keep]
        for entry in released:
            pause_and_release(entry.handle)
        if released:
            logger.debug(f"[PlayerPool] Released {len(released)} handle(s), kept {len(self._by_url)}")

    def __contains__(self, url: object) -> bool:
        return url in self._by_url

    def __len__(self) -> int:
        return len(self._by_url)


__all__ = ["PlayerPool", "PoolEntry", "DEFAULT_MAX_SIZE"]
