"""
ReelFeed

Playback, prefetch and engagement plumbing for a vertically scrolling
property video feed.
"""

from .api import PublicVideosApi
from .client import FeedClient
from .config import FeedSettings
from .engagement import EngagementStore, PropertyLikeStore
from .exceptions import FeedAPIError, FeedConnectionError, FeedError
from .feed_cache import FeedCache
from .feed_filter import FeedFilter, filter_videos_strict
from .hls import HlsSubtitleResolver, parse_hls_subtitle_tracks
from .logging import setup_feed_logging
from .mapper import map_video_to_feed_item
from .models import FeedItem, SubtitleTrack, VideoRecord, VttCue
from .playback_registry import PlaybackOwner, PlaybackRegistry
from .player import PlayerHandle
from .player_pool import PlayerPool
from .preload import FeedPreloader, FeedPreloadStore
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from .subtitles import SubtitlePreferenceStore
from .vtt import find_active_cue, parse_vtt
from .warmup import warm_up_players, warm_up_video_urls

__version__ = "1.0.0"
__all__ = [
    "FeedClient",
    "FeedSettings",
    "setup_feed_logging",
    # Exceptions
    "FeedError",
    "FeedConnectionError",
    "FeedAPIError",
    # Backend
    "PublicVideosApi",
    "VideoRecord",
    "FeedItem",
    "map_video_to_feed_item",
    "FeedFilter",
    "filter_videos_strict",
    # Stores
    "FeedCache",
    "FeedPreloadStore",
    "FeedPreloader",
    "EngagementStore",
    "PropertyLikeStore",
    "SubtitlePreferenceStore",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    # Playback
    "PlayerHandle",
    "PlayerPool",
    "PlaybackOwner",
    "PlaybackRegistry",
    "warm_up_video_urls",
    "warm_up_players",
    # Subtitles
    "HlsSubtitleResolver",
    "SubtitleTrack",
    "parse_hls_subtitle_tracks",
    "VttCue",
    "parse_vtt",
    "find_active_cue",
]

# The FastAPI router is imported separately
# from reelfeed.api_router import create_feed_router
