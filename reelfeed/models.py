from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PlaybackInfo(FeedBaseModel):
    local_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    poster_url: Optional[str] = None
    stream_url: Optional[str] = None
    can_stream: bool = False


class SubtitlePayload(FeedBaseModel):
    language_code: Optional[str] = None
    label: Optional[str] = None
    url: Optional[str] = None
    file_path: Optional[str] = None
    status: Optional[str] = None


class CloudflareInfo(FeedBaseModel):
    status: Optional[str] = None
    playback_url: Optional[str] = None
    stream_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    requires_signed_urls: bool = False
    subtitles: Optional[list[SubtitlePayload]] = None


class VideoRecord(FeedBaseModel):
    """One entry of the public videos listing, as returned by the backend."""

    video_id: Union[int, str]
    property_reference: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    processing_status: Optional[str] = None
    playback: Optional[PlaybackInfo] = None
    cloudflare: Optional[CloudflareInfo] = None
    subtitles: Optional[list[SubtitlePayload]] = None
    listing: Optional[dict[str, Any]] = Field(default=None, alias="property")
    property_video_metadata: Optional[dict[str, Any]] = None
    agent: Optional[dict[str, Any]] = None
    engagement: Optional[dict[str, Any]] = None


class PageMeta(FeedBaseModel):
    total: Optional[int] = None
    per_page: Optional[int] = None
    current_page: Optional[int] = None
    last_page: Optional[int] = None
    has_more_pages: Optional[bool] = None


class PublicVideosPage(FeedBaseModel):
    data: list[VideoRecord] = Field(default_factory=list)
    meta: Optional[PageMeta] = None


class LikeData(FeedBaseModel):
    likes_count: Optional[int] = None


class LikeResponse(FeedBaseModel):
    data: Optional[LikeData] = None


@dataclass(frozen=True)
class RoomMarker:
    name: str
    timestamp: float


@dataclass(frozen=True)
class SubtitleOption:
    code: str
    label: Optional[str] = None
    url: Optional[str] = None
    file_path: Optional[str] = None


@dataclass(frozen=True)
class AgentSummary:
    id: str
    name: str
    agency: str
    photo: str = ""
    phone: str = ""
    email: str = ""
    agent_id: Optional[int] = None


@dataclass(frozen=True)
class FeedItem:
    id: str
    video_url: str
    thumbnail_url: str
    title: str
    description: str
    property_reference: Optional[str] = None
    transaction_type: Optional[str] = None
    property_type: Optional[str] = None
    listing_type: str = "BUY"
    city: str = ""
    area: str = ""
    price: float = 0.0
    price_to: Optional[float] = None
    currency: str = "AED"
    bedrooms: float = 0.0
    bathrooms: float = 0.0
    size_sqft: float = 0.0
    size_sqft_to: Optional[float] = None
    default_pricing: Optional[str] = None
    rooms: tuple[RoomMarker, ...] = field(default_factory=tuple)
    subtitles: tuple[SubtitleOption, ...] = field(default_factory=tuple)
    agent: Optional[AgentSummary] = None
    likes_count: int = 0
    shares_count: int = 0
    comments_count: int = 0


@dataclass(frozen=True)
class SubtitleTrack:
    uri: str
    language: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class VttCue:
    start: float
    end: float
    text: str


__all__ = [
    "PlaybackInfo",
    "SubtitlePayload",
    "CloudflareInfo",
    "VideoRecord",
    "PageMeta",
    "PublicVideosPage",
    "LikeData",
    "LikeResponse",
    "RoomMarker",
    "SubtitleOption",
    "AgentSummary",
    "FeedItem",
    "SubtitleTrack",
    "VttCue",
]
