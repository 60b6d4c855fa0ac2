from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from .player import PlayerHandle, pause_and_mute

logger = logging.getLogger("reelfeed.playback_registry")


class PlaybackOwner(str, Enum):
    FEED = "feed"
    REELS = "reels"


@dataclass
class RegistryEntry:
    owner: PlaybackOwner
    url: str
    handle: PlayerHandle
    created_at: float = field(default_factory=time.time)


class PlaybackRegistry:
    """
    Tracks which player handles each feed surface owns.

    Surfaces only ever pause their own handles, so the main feed and reels can
    coexist without silencing each other.
    """

    def __init__(self) -> None:
        self._by_owner_url: dict[tuple[PlaybackOwner, str], RegistryEntry] = {}

    def register(self, owner: PlaybackOwner, url: str, handle: PlayerHandle) -> None:
        if not owner or not url or handle is None:
            return
        owner = PlaybackOwner(owner)
        self._by_owner_url = {
            **self._by_owner_url,
            (owner, url): RegistryEntry(owner=owner, url=url, handle=handle),
        }

    def unregister(
        self,
        owner: PlaybackOwner,
        url: str,
        handle: Optional[PlayerHandle] = None,
    ) -> None:
        if not owner or not url:
            return
        key = (PlaybackOwner(owner), url)
        existing = self._by_owner_url.get(key)
        if existing is None:
            return
        # A stale unregister must not evict a newer registration.
        if handle is not None and existing.handle is not handle:
            return
        by_owner_url = dict(self._by_owner_url)
        del by_owner_url[key]
        self._by_owner_url = by_owner_url

    def get(self, owner: PlaybackOwner, url: str) -> Optional[PlayerHandle]:
        entry = self._by_owner_url.get((PlaybackOwner(owner), url))
        return entry.handle if entry else None

    def entries(self, owner: Optional[PlaybackOwner] = None) -> list[RegistryEntry]:
        return [
            entry
            for entry in self._by_owner_url.values()
            if owner is None or entry.owner == owner
        ]

    def pause_all(self, owner: Optional[PlaybackOwner] = None) -> None:
        for entry in self.entries(owner):
            pause_and_mute(entry.handle)

    def pause_all_except(self, owner: PlaybackOwner, keep_urls: Iterable[str]) -> None:
        keep = {url for url in keep_urls if url}
        for entry in self.entries(PlaybackOwner(owner)):
            if entry.url in keep:
                continue
            pause_and_mute(entry.handle)

    def __len__(self) -> int:
        return len(self._by_owner_url)


__all__ = ["PlaybackOwner", "PlaybackRegistry", "RegistryEntry"]
