from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

from .api import PublicVideosApi
from .models import VideoRecord

logger = logging.getLogger("reelfeed.feed_cache")

PAGE1_KEY = "page1"
DEFAULT_PER_PAGE = 50


@dataclass
class CacheEntry:
    items: list[VideoRecord]
    loaded_at: float


class FeedCache:
    """
    Caches the first page of public videos.

    Concurrent ``warm`` calls for a key share one request; a failed request
    is never cached and its error reaches every waiter.
    """

    def __init__(self, api: PublicVideosApi) -> None:
        self._api = api
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Future[list[VideoRecord]]] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    def peek(self, key: str = PAGE1_KEY) -> Optional[list[VideoRecord]]:
        entry = self._entries.get(key)
        return entry.items if entry else None

    def loaded_at(self, key: str = PAGE1_KEY) -> Optional[float]:
        entry = self._entries.get(key)
        return entry.loaded_at if entry else None

    def is_in_flight(self, key: str = PAGE1_KEY) -> bool:
        return key in self._in_flight

    def set(self, key: str, items: list[VideoRecord]) -> None:
        self._entries[key] = CacheEntry(items=list(items), loaded_at=time.time())

    def clear(self) -> None:
        self._entries.clear()
        self._in_flight.clear()

    async def warm(
        self,
        key: str = PAGE1_KEY,
        *,
        per_page: int = DEFAULT_PER_PAGE,
        force: bool = False,
    ) -> list[VideoRecord]:
        cached = self.peek(key)
        if not force and cached:
            return cached

        future = self._in_flight.get(key)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self._in_flight[key] = future
            task = asyncio.create_task(self._fetch(key, per_page, future))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        # One cancelled waiter must not cancel the shared request.
        return await asyncio.shield(future)

    async def _fetch(
        self,
        key: str,
        per_page: int,
        future: asyncio.Future[list[VideoRecord]],
    ) -> None:
        try:
            page = await self._api.fetch_public_videos(page=1, per_page=per_page)
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as e:
            logger.warning(f"[FeedCache] Fetch for {key!r} failed: {e}")
            if not future.done():
                future.set_exception(e)
                # Mark retrieved so a failure nobody awaited is not logged as lost.
                future.exception()
        else:
            items = list(page.data)
            if self._in_flight.get(key) is future:
                self._entries[key] = CacheEntry(items=items, loaded_at=time.time())
            logger.debug(f"[FeedCache] Cached {len(items)} record(s) for {key!r}")
            if not future.done():
                future.set_result(items)
        finally:
            if self._in_flight.get(key) is future:
                del self._in_flight[key]

    async def warm_page1(self, *, per_page: int = DEFAULT_PER_PAGE, force: bool = False) -> list[VideoRecord]:
        return await self.warm(PAGE1_KEY, per_page=per_page, force=force)


__all__ = ["FeedCache", "CacheEntry", "PAGE1_KEY"]
