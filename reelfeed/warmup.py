"""
Best-effort warm-up for remote video URLs.

The first playback of a video pays for DNS, TLS and the initial buffer. A small
ranged request ahead of time primes the connection, and a short muted
playback forces the native player to start buffering before the user swipes
to the item. Nothing here ever raises to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

import httpx

from .player import (
    PlayerFactory,
    PlayerHandle,
    is_hls_url,
    pause_handle,
    play_handle,
    release_handle,
)
from .player_pool import PlayerPool

logger = logging.getLogger("reelfeed.warmup")

MAX_WARM_URLS = 3
DEFAULT_WARM_BYTES = 512 * 1024
DEFAULT_WARM_TIMEOUT = 8.0
DEFAULT_PLAY_MS = 350


async def _range_request(client: httpx.AsyncClient, url: str, num_bytes: int, timeout: float) -> None:
    headers = {"Range": f"bytes=0-{num_bytes - 1}", "Accept": "*/*"}
    async with client.stream("GET", url, headers=headers, timeout=timeout) as response:
        # Servers that ignore Range still only get read up to num_bytes.
        received = 0
        async for chunk in response.aiter_bytes():
            received += len(chunk)
            if received >= num_bytes:
                break


async def _warm_one(client: httpx.AsyncClient, url: str, num_bytes: int, timeout: float) -> None:
    try:
        await asyncio.wait_for(_range_request(client, url, num_bytes, timeout), timeout=timeout)
    except Exception as e:
        logger.debug(f"[Warmup] Range request to {url} failed: {e}")


async def warm_up_video_urls(
    urls: Iterable[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    num_bytes: int = DEFAULT_WARM_BYTES,
    timeout: float = DEFAULT_WARM_TIMEOUT,
) -> None:
    targets = [url for url in urls if url][:MAX_WARM_URLS]
    if not targets:
        return

    owns_client = client is None
    http_client = client or httpx.AsyncClient(follow_redirects=True)
    try:
        await asyncio.gather(
            *(_warm_one(http_client, url, max(1, num_bytes), timeout) for url in targets)
        )
    finally:
        if owns_client:
            await http_client.aclose()


def _create_player(factory: PlayerFactory, url: str) -> Optional[PlayerHandle]:
    hls = is_hls_url(url)
    try:
        # HLS cannot use the native disk cache.
        handle = factory(url, use_caching=not hls, content_type="hls" if hls else "auto")
    except Exception as e:
        logger.warning(f"[Warmup] Could not create player for {url}: {e}")
        return None
    try:
        handle.muted = True
        handle.volume = 0
        handle.loop = True
    except Exception as e:
        logger.debug(f"[Warmup] Could not configure player for {url}: {e}")
    return handle


async def warm_up_players(
    urls: Iterable[str],
    *,
    player_factory: PlayerFactory,
    pool: PlayerPool,
    count: int = MAX_WARM_URLS,
    play_ms: int = DEFAULT_PLAY_MS,
    keep_in_pool: bool = False,
) -> list[PlayerHandle]:
    """Buffer the first ``count`` videos with muted playback for ``play_ms``."""
    targets = [url for url in urls if url][:count]
    warmed: list[tuple[PlayerHandle, bool]] = []

    for url in targets:
        existing = pool.get(url)
        if existing is not None:
            warmed.append((existing, False))
            continue
        handle = _create_player(player_factory, url)
        if handle is None:
            continue
        if keep_in_pool:
            pool.upsert(url, handle)
        warmed.append((handle, True))

    for handle, _ in warmed:
        play_handle(handle)

    try:
        await asyncio.sleep(play_ms / 1000.0)
    finally:
        # Also runs on cancellation: a handle is never left playing or unreleased.
        for handle, _ in warmed:
            pause_handle(handle)

        if not keep_in_pool:
            for handle, created in warmed:
                if created:
                    release_handle(handle)

    logger.debug(f"[Warmup] Warmed {len(warmed)} player(s), keep_in_pool={keep_in_pool}")
    return [handle for handle, _ in warmed]


__all__ = ["warm_up_video_urls", "warm_up_players", "MAX_WARM_URLS"]
