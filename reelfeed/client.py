from __future__ import annotations

import logging
from typing import Optional

from .api import PublicVideosApi
from .config import FeedSettings
from .engagement import EngagementStore, PropertyLikeStore
from .feed_cache import FeedCache
from .hls import HlsSubtitleResolver
from .logging import setup_feed_logging
from .playback_registry import PlaybackRegistry
from .player import PlayerFactory
from .player_pool import PlayerPool
from .preload import FeedPreloader, FeedPreloadStore
from .storage import JsonFileStorage, KeyValueStorage
from .subtitles import SubtitlePreferenceStore
from .transport import HttpTransport

logger = logging.getLogger("reelfeed")


class FeedClient:
    """
    Wires one instance of every feed store.

    The application builds one per process; tests build isolated ones with
    fake storage and transports.
    """

    def __init__(
        self,
        settings: Optional[FeedSettings] = None,
        *,
        storage: Optional[KeyValueStorage] = None,
        transport: Optional[HttpTransport] = None,
        player_factory: Optional[PlayerFactory] = None,
        configure_logging: bool = True,
    ) -> None:
        self.settings = settings or FeedSettings.from_env()
        if configure_logging:
            setup_feed_logging(self.settings)
        self._transport = transport or HttpTransport(timeout=self.settings.http_timeout)
        self.storage = storage or JsonFileStorage(self.settings.storage_path)

        self.api = PublicVideosApi(self._transport, base_url=self.settings.api_base_url)
        self.cache = FeedCache(self.api)
        self.pool = PlayerPool()
        self.registry = PlaybackRegistry()
        self.preload_store = FeedPreloadStore()
        self.preloader = FeedPreloader(
            self.api,
            self.cache,
            self.preload_store,
            self.pool,
            player_factory=player_factory,
            media_origin=self.settings.media_origin,
            transport=self._transport,
        )
        self.subtitles = HlsSubtitleResolver(self._transport)
        self.subtitle_preferences = SubtitlePreferenceStore(self.storage)
        self.engagement = EngagementStore(self.storage, self.api)
        self.property_likes = PropertyLikeStore(self.storage)
        logger.info(f"FeedClient initialized: api={self.settings.api_base_url}")

    async def hydrate(self) -> None:
        await self.engagement.hydrate()
        await self.property_likes.hydrate()
        await self.subtitle_preferences.hydrate()

    async def close(self) -> None:
        self.registry.pause_all()
        self.pool.release_all()
        await self.engagement.flush()
        await self.property_likes.flush()
        await self._transport.close()

    async def __aenter__(self) -> "FeedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


__all__ = ["FeedClient"]
