from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from .api import PublicVideosApi
from .config import DEFAULT_MEDIA_ORIGIN
from .feed_cache import FeedCache
from .feed_filter import FeedFilter, filter_videos_strict
from .mapper import map_video_to_feed_item
from .models import FeedItem, PageMeta, VideoRecord
from .player import PlayerFactory
from .player_pool import PlayerPool
from .transport import HttpTransport
from .warmup import DEFAULT_PLAY_MS, warm_up_players, warm_up_video_urls

logger = logging.getLogger("reelfeed.preload")


@dataclass
class PreloadEntry:
    items: list[FeedItem]
    loaded_at: float


class FeedPreloadStore:
    """Hands preloaded feed items from the navigating screen to the feed screen."""

    def __init__(self) -> None:
        self._single: Optional[PreloadEntry] = None
        self._by_key: dict[str, PreloadEntry] = {}

    def set_preloaded_items(self, items: list[FeedItem]) -> None:
        self._single = PreloadEntry(items=list(items), loaded_at=time.time())

    def consume_preloaded_items(self) -> Optional[list[FeedItem]]:
        entry, self._single = self._single, None
        return entry.items if entry else None

    def set_for_key(self, key: str, items: list[FeedItem]) -> None:
        self._by_key = {**self._by_key, key: PreloadEntry(items=list(items), loaded_at=time.time())}

    def peek_for_key(self, key: str) -> Optional[PreloadEntry]:
        return self._by_key.get(key)

    def consume_for_key(self, key: str) -> Optional[list[FeedItem]]:
        entry = self._by_key.get(key)
        self.clear_key(key)
        return entry.items if entry else None

    def clear_key(self, key: str) -> None:
        if key in self._by_key:
            self._by_key = {k: v for k, v in self._by_key.items() if k != key}

    def clear(self) -> None:
        self._single = None
        self._by_key = {}


@dataclass
class PreloadResult:
    items: list[FeedItem]
    key: Optional[str] = None
    meta: Optional[PageMeta] = None


class FeedPreloader:
    def __init__(
        self,
        api: PublicVideosApi,
        cache: FeedCache,
        store: FeedPreloadStore,
        pool: PlayerPool,
        *,
        player_factory: Optional[PlayerFactory] = None,
        media_origin: Optional[str] = None,
        transport: Optional[HttpTransport] = None,
    ) -> None:
        self._api = api
        self._cache = cache
        self._store = store
        self._pool = pool
        self._player_factory = player_factory
        self._media_origin = media_origin or DEFAULT_MEDIA_ORIGIN
        self._transport = transport

    def _warm_client(self) -> Optional[httpx.AsyncClient]:
        return self._transport.client if self._transport else None

    def _map(self, records: list[VideoRecord]) -> list[FeedItem]:
        return [map_video_to_feed_item(record, self._media_origin) for record in records]

    async def preload_before_navigate(self, *, per_page: int = 20, warm_count: int = 3) -> PreloadResult:
        """Fetch page 1 directly, stash it for the feed screen and warm the first URLs."""
        page = await self._api.fetch_public_videos(page=1, per_page=per_page)
        items = self._map(page.data)
        self._store.set_preloaded_items(items)

        urls = [item.video_url for item in items if item.video_url][:warm_count]
        await warm_up_video_urls(urls, client=self._warm_client())
        return PreloadResult(items=items, meta=page.meta)

    async def preload_from_cache(
        self,
        feed_filter: FeedFilter,
        *,
        warm_count: int = 3,
        warm_players: bool = True,
        strict: bool = False,
    ) -> PreloadResult:
        """
        Reuse the page-1 cache, map to feed items under the filter key and warm
        the first players into the pool.

        Strict filtering on transaction type and city is off by default: the
        feed currently shows every video regardless of the selected filter.
        """
        records = await self._cache.warm_page1()
        if strict:
            records = filter_videos_strict(records, feed_filter)
        items = self._map(records)

        key = feed_filter.key
        self._store.set_for_key(key, items)

        urls = [item.video_url for item in items if item.video_url][:warm_count]
        if warm_players and urls:
            if self._player_factory is None:
                logger.debug("[Preload] No player factory configured, warming connections only")
                await warm_up_video_urls(urls, client=self._warm_client())
            else:
                await warm_up_players(
                    urls,
                    player_factory=self._player_factory,
                    pool=self._pool,
                    count=warm_count,
                    play_ms=DEFAULT_PLAY_MS,
                    keep_in_pool=True,
                )
        logger.info(f"[Preload] {len(items)} item(s) ready for {key}")
        return PreloadResult(items=items, key=key)


__all__ = ["FeedPreloadStore", "FeedPreloader", "PreloadEntry", "PreloadResult"]
