from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .client import FeedClient
from .exceptions import FeedAPIError, FeedError
from .feed_filter import FeedFilter
from .vtt import find_active_cue


class PreloadRequest(BaseModel):
    transaction_type: str = Field(default="BUY")
    city: str = Field(default="")
    warm_count: int = Field(default=3, ge=0, le=10)
    warm_players: bool = True
    strict: bool = False


class SubtitleRequest(BaseModel):
    video_url: str = Field(..., description="HLS master playlist or MP4 URL")
    language_code: str
    subtitle_url: Optional[str] = None
    time: Optional[float] = Field(default=None, ge=0.0)


def _error_status(exc: FeedError) -> int:
    if isinstance(exc, FeedAPIError) and exc.status_code >= 400:
        return exc.status_code
    return 502


def create_feed_router(client: FeedClient, *, prefix: str = "/api/feed") -> APIRouter:
    """Create a FastAPI router exposing feed operations to a web front end."""
    router = APIRouter(prefix=prefix)

    @router.post("/preload")
    async def preload(request: PreloadRequest) -> dict[str, Any]:
        try:
            result = await client.preloader.preload_from_cache(
                FeedFilter(transaction_type=request.transaction_type, city=request.city),
                warm_count=request.warm_count,
                warm_players=request.warm_players,
                strict=request.strict,
            )
        except FeedError as exc:
            raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
        return {"key": result.key, "items": [asdict(item) for item in result.items]}

    @router.get("/preload/{key}")
    async def consume_preload(key: str) -> dict[str, Any]:
        items = client.preload_store.consume_for_key(key)
        if items is None:
            raise HTTPException(status_code=404, detail=f"No preloaded items for {key}")
        return {"key": key, "items": [asdict(item) for item in items]}

    @router.get("/likes/{video_id}")
    async def like_state(video_id: str) -> dict[str, Any]:
        return {"video_id": video_id, "liked": client.engagement.is_liked(video_id)}

    @router.post("/likes/{video_id}/toggle")
    async def toggle_like(video_id: str) -> dict[str, Any]:
        try:
            result = await client.engagement.toggle_like(video_id)
        except FeedError as exc:
            raise HTTPException(status_code=_error_status(exc), detail=str(exc)) from exc
        return {"video_id": video_id, "liked": client.engagement.is_liked(video_id), **result}

    @router.post("/subtitles")
    async def subtitles(request: SubtitleRequest) -> dict[str, Any]:
        cues = await client.subtitles.load_cues(
            request.video_url,
            request.language_code,
            subtitle_url=request.subtitle_url,
        )
        payload: dict[str, Any] = {"cues": [asdict(cue) for cue in cues]}
        if request.time is not None:
            payload["active"] = find_active_cue(cues, request.time)
        return payload

    return router


__all__ = ["create_feed_router"]
