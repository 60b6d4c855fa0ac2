"""
Map backend video records to feed items.

Playback URL preference:
1. HLS stream URL when the backend says the video can stream.
2. Cloudflare stream/playback URLs pointing at real media.
3. The local MP4 URL, made absolute against the media origin.
4. Empty string, so the UI can show a placeholder.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional

from .config import DEFAULT_MEDIA_ORIGIN
from .models import AgentSummary, FeedItem, RoomMarker, SubtitleOption, SubtitlePayload, VideoRecord

EXCLUDED_SUBTITLE_LANGUAGES = frozenset({"es"})


def to_absolute_url(maybe_path: Optional[str], origin: str = DEFAULT_MEDIA_ORIGIN) -> str:
    if not maybe_path:
        return ""
    if maybe_path.startswith("http://") or maybe_path.startswith("https://"):
        return maybe_path
    origin = origin.rstrip("/")
    if maybe_path.startswith("/"):
        return f"{origin}{maybe_path}"
    return f"{origin}/{maybe_path}"


def is_direct_media_url(url: Optional[str]) -> bool:
    if not url:
        return False
    lowered = url.lower()
    return (
        ".m3u8" in lowered
        or ".mp4" in lowered
        or "/manifest/" in lowered
    )


def pick_playback_url(record: VideoRecord, origin: str = DEFAULT_MEDIA_ORIGIN) -> str:
    playback = record.playback
    if playback and playback.can_stream and is_direct_media_url(playback.stream_url):
        return playback.stream_url or ""

    cloudflare = record.cloudflare
    if cloudflare:
        # Playable before Cloudflare reports READY as long as the URL is real media.
        if is_direct_media_url(cloudflare.stream_url):
            return cloudflare.stream_url or ""
        if is_direct_media_url(cloudflare.playback_url):
            return cloudflare.playback_url or ""

    if playback and playback.local_url:
        return to_absolute_url(playback.local_url, origin)

    return ""


def _prettify_room_key(key: str) -> str:
    if not key:
        return ""
    text = key.replace("_", " ")
    text = re.sub(r"([a-z])([A-Z])", r"\1 \2", text).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text)


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value) if value.strip() else 0.0
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _map_rooms(room_timestamps: Any) -> tuple[RoomMarker, ...]:
    if not isinstance(room_timestamps, dict):
        return ()
    rooms = []
    for key, value in room_timestamps.items():
        start = value.get("start", 0) if isinstance(value, dict) else 0
        timestamp = _to_number(start)
        if timestamp >= 0:
            rooms.append(RoomMarker(name=_prettify_room_key(str(key)), timestamp=timestamp))
    rooms.sort(key=lambda room: room.timestamp)
    return tuple(rooms)


def _map_subtitles(raw: list[SubtitlePayload], origin: str) -> tuple[SubtitleOption, ...]:
    options = []
    for subtitle in raw:
        status = str(subtitle.status or "").upper()
        if status and status != "READY":
            continue
        code = str(subtitle.language_code or "")
        if not code or code in EXCLUDED_SUBTITLE_LANGUAGES:
            continue
        options.append(
            SubtitleOption(
                code=code,
                label=subtitle.label,
                url=to_absolute_url(subtitle.url, origin) if subtitle.url else None,
                file_path=subtitle.file_path,
            )
        )
    return tuple(options)


def _nested(data: Optional[dict[str, Any]], *keys: str) -> Any:
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def map_video_to_feed_item(record: VideoRecord, origin: str = DEFAULT_MEDIA_ORIGIN) -> FeedItem:
    listing = record.listing or {}
    meta = listing.get("meta") if isinstance(listing.get("meta"), dict) else {}

    thumbnail = ""
    if record.cloudflare and record.cloudflare.thumbnail_url:
        thumbnail = record.cloudflare.thumbnail_url
    elif record.playback and record.playback.thumbnail_url:
        thumbnail = record.playback.thumbnail_url

    raw_subtitles = record.subtitles
    if raw_subtitles is None and record.cloudflare is not None:
        raw_subtitles = record.cloudflare.subtitles

    default_pricing = listing.get("default_pricing") or None
    is_offplan = listing.get("type") == "offplan"

    price_from = _to_number(_nested(listing, "price", "from"))
    price_to = _to_number(_nested(listing, "price", "to"))
    square_from = _to_number(_nested(listing, "square", "from"))
    square_to = _to_number(_nested(listing, "square", "to"))

    if is_offplan:
        price = price_from or price_to
    elif default_pricing is None:
        price = _to_number(meta.get("sale_price"))
    elif default_pricing == "week":
        price = _to_number(meta.get("week_price"))
    elif default_pricing == "year":
        price = _to_number(meta.get("year_price"))
    else:
        price = _to_number(meta.get("month_price"))

    if is_offplan:
        bedrooms = _to_number(_nested(listing, "bedrooms", "from"))
        bathrooms = _to_number(_nested(listing, "bathrooms", "from"))
        size_sqft = square_from or square_to
    else:
        bedrooms = _to_number(meta.get("bedrooms"))
        bathrooms = _to_number(meta.get("bathrooms"))
        size_sqft = _to_number(meta.get("square"))

    agent = record.agent or {}
    employee = agent.get("company_employee") if isinstance(agent.get("company_employee"), dict) else {}
    agent_id = agent.get("agent_id")
    if agent_id is None:
        agent_id = employee.get("id")
    agent_name = str(employee.get("name") or "").strip() or "Agent"
    engagement = record.engagement or {}

    return FeedItem(
        id=str(record.video_id),
        video_url=pick_playback_url(record, origin),
        thumbnail_url=thumbnail,
        title=listing.get("title") or listing.get("name") or record.title or "Untitled",
        description=listing.get("description") or record.description or "",
        property_reference=(
            record.property_reference
            or listing.get("reference_id")
            or listing.get("referenceId")
        ),
        transaction_type=meta.get("type") or listing.get("type"),
        property_type=listing.get("type"),
        listing_type="RENT" if listing.get("type") == "rent" else "BUY",
        city=str(_nested(listing, "emirate", "name") or ""),
        area=str(_nested(listing, "district", "name") or ""),
        price=price,
        price_to=price_to if is_offplan and price_to and price_to != price else None,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        size_sqft=size_sqft,
        size_sqft_to=square_to if is_offplan and square_to and square_to != size_sqft else None,
        default_pricing=default_pricing,
        rooms=_map_rooms(_nested(record.property_video_metadata, "room_timestamps")),
        subtitles=_map_subtitles(raw_subtitles or [], origin),
        agent=AgentSummary(
            id=str(agent_id if agent_id is not None else "1"),
            name=agent_name,
            agency="Saqan",
            photo=str(_nested(employee, "avatar", "url") or ""),
            phone=str(employee.get("phone") or ""),
            email=str(employee.get("email") or ""),
            agent_id=agent_id if isinstance(agent_id, int) else None,
        ),
        likes_count=int(_to_number(engagement.get("likes_count"))),
        shares_count=int(_to_number(engagement.get("shares_count"))),
        comments_count=int(_to_number(engagement.get("comments_count"))),
    )


__all__ = ["map_video_to_feed_item", "pick_playback_url", "is_direct_media_url", "to_absolute_url"]
