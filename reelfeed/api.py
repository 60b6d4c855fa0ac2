from __future__ import annotations

import logging
from typing import Optional, Union

from .config import DEFAULT_API_BASE_URL
from .exceptions import FeedAPIError
from .models import LikeData, LikeResponse, PublicVideosPage
from .transport import HttpTransport

logger = logging.getLogger("reelfeed.api")


class PublicVideosApi:
    """Client for the public videos endpoints."""

    def __init__(
        self,
        transport: Optional[HttpTransport] = None,
        base_url: str = DEFAULT_API_BASE_URL,
    ) -> None:
        self._transport = transport or HttpTransport()
        self._base_url = base_url.rstrip("/")

    async def fetch_public_videos(self, *, page: int = 1, per_page: int = 20) -> PublicVideosPage:
        payload = await self._transport.request_json(
            "GET",
            f"{self._base_url}/videos",
            params={"per_page": per_page, "page": page},
        )
        if not isinstance(payload, dict):
            raise FeedAPIError("Unexpected videos payload", detail=payload)
        page_data = PublicVideosPage.model_validate(payload)
        logger.debug(f"[Api] videos page={page} per_page={per_page} -> {len(page_data.data)} records")
        return page_data

    async def set_like(self, *, video_id: Union[int, str], liked: bool) -> LikeResponse:
        payload = await self._transport.request_json(
            "POST",
            f"{self._base_url}/videos/{video_id}/like",
            json={"liked": bool(liked)},
        )
        # `data` may arrive as an empty PHP array; only an integer count is read.
        data = payload.get("data") if isinstance(payload, dict) else None
        likes_count = data.get("likes_count") if isinstance(data, dict) else None
        if isinstance(likes_count, bool) or not isinstance(likes_count, int):
            if likes_count is not None:
                logger.debug(f"[Api] Ignoring likes_count={likes_count!r} for video {video_id}")
            return LikeResponse()
        return LikeResponse(data=LikeData(likes_count=likes_count))


__all__ = ["PublicVideosApi"]
