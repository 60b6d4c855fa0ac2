"""
Local-first like state.

The in-memory set is the single source of truth for the UI. A toggle is
applied immediately, persisted in the background, and committed to the
backend; when the commit fails the toggle is reverted and the error is
re-raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

from .api import PublicVideosApi
from .storage import KeyValueStorage, load_string_set, save_string_set

logger = logging.getLogger("reelfeed.engagement")

LIKED_VIDEOS_KEY = "@liked_videos_v1"
LIKED_PROPERTIES_KEY = "@liked_properties_v1"

Identifier = Union[str, int]


class _LocalLikeSet:
    def __init__(self, storage: KeyValueStorage, storage_key: str) -> None:
        self._storage = storage
        self._storage_key = storage_key
        self._liked: set[str] = set()
        self._hydrated = False
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def liked_ids(self) -> frozenset[str]:
        return frozenset(self._liked)

    async def hydrate(self) -> None:
        try:
            stored = await load_string_set(self._storage, self._storage_key)
            if stored is not None:
                self._liked = stored
        except Exception as e:
            logger.warning(f"[Engagement] Could not read {self._storage_key}: {e}")
        finally:
            self._hydrated = True

    def is_liked(self, identifier: Identifier) -> bool:
        return str(identifier) in self._liked

    def _apply(self, identifier: str, liked: bool) -> None:
        updated = set(self._liked)
        if liked:
            updated.add(identifier)
        else:
            updated.discard(identifier)
        self._liked = updated

    def _schedule_persist(self) -> None:
        task = asyncio.create_task(self._persist(frozenset(self._liked)))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _persist(self, snapshot: frozenset[str]) -> None:
        try:
            await save_string_set(self._storage, self._storage_key, set(snapshot))
        except Exception as e:
            logger.warning(f"[Engagement] Could not persist {self._storage_key}: {e}")

    async def flush(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending))


class EngagementStore(_LocalLikeSet):
    """Video likes, synced with ``POST /videos/{id}/like``."""

    def __init__(self, storage: KeyValueStorage, api: PublicVideosApi) -> None:
        super().__init__(storage, LIKED_VIDEOS_KEY)
        self._api = api
        self._likes_count: dict[str, int] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def get_likes_count(self, video_id: Identifier, fallback: int) -> int:
        return self._likes_count.get(str(video_id), fallback)

    def _shift_count(self, video_id: str, liked: bool) -> None:
        current = self._likes_count.get(video_id)
        if current is not None:
            self._likes_count[video_id] = max(0, current + (1 if liked else -1))

    def _restore_count(self, video_id: str, count: Optional[int]) -> None:
        if count is None:
            self._likes_count.pop(video_id, None)
        else:
            self._likes_count[video_id] = count

    async def toggle_like(self, video_id: Identifier) -> dict[str, Any]:
        vid = str(video_id)
        # Toggles of one id are serialized; different ids run concurrently.
        lock = self._locks.setdefault(vid, asyncio.Lock())
        self._lock_users[vid] = self._lock_users.get(vid, 0) + 1
        try:
            async with lock:
                return await self._toggle(vid)
        finally:
            self._lock_users[vid] -= 1
            if not self._lock_users[vid]:
                del self._lock_users[vid]
                del self._locks[vid]

    async def _toggle(self, vid: str) -> dict[str, Any]:
        was_liked = self.is_liked(vid)
        previous_count = self._likes_count.get(vid)
        next_liked = not was_liked

        self._apply(vid, next_liked)
        self._shift_count(vid, next_liked)
        self._schedule_persist()

        try:
            response = await self._api.set_like(video_id=vid, liked=next_liked)
        except Exception as e:
            logger.warning(f"[Engagement] Like toggle for {vid} failed, reverting: {e}")
            self._apply(vid, was_liked)
            self._restore_count(vid, previous_count)
            self._schedule_persist()
            raise

        likes_count: Optional[int] = response.data.likes_count if response.data else None
        if likes_count is None:
            return {}
        self._likes_count[vid] = likes_count
        return {"likes_count": likes_count}


class PropertyLikeStore(_LocalLikeSet):
    """
    Likes keyed by property reference.

    Used by entry points that open a listing without a video id. Purely local,
    no backend call.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        super().__init__(storage, LIKED_PROPERTIES_KEY)

    async def toggle_like(self, property_reference: Identifier) -> bool:
        ref = str(property_reference)
        next_liked = not self.is_liked(ref)
        self._apply(ref, next_liked)
        self._schedule_persist()
        return next_liked


__all__ = ["EngagementStore", "PropertyLikeStore", "LIKED_VIDEOS_KEY", "LIKED_PROPERTIES_KEY"]
