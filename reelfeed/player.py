from __future__ import annotations

import logging
import re
from typing import Any, Callable, Protocol

logger = logging.getLogger("reelfeed.player")

_HLS_RE = re.compile(r"\.m3u8(\?|$)", re.IGNORECASE)


class PlayerHandle(Protocol):
    """Native video player resource. Must be released explicitly."""

    muted: bool
    volume: float
    loop: bool

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def release(self) -> None:
        ...


PlayerFactory = Callable[..., PlayerHandle]


def is_hls_url(url: str) -> bool:
    return bool(_HLS_RE.search(url or ""))


def _attempt(label: str, action: Callable[[], Any]) -> bool:
    try:
        action()
        return True
    except Exception as e:
        logger.debug(f"[Player] {label} failed: {e}")
        return False


def mute_handle(handle: PlayerHandle) -> bool:
    def _mute() -> None:
        handle.muted = True
        handle.volume = 0

    return _attempt("mute", _mute)


def pause_handle(handle: PlayerHandle) -> bool:
    return _attempt("pause", handle.pause)


def play_handle(handle: PlayerHandle) -> bool:
    return _attempt("play", handle.play)


def release_handle(handle: PlayerHandle) -> bool:
    return _attempt("release", handle.release)


def pause_and_mute(handle: PlayerHandle) -> None:
    mute_handle(handle)
    pause_handle(handle)


def pause_and_release(handle: PlayerHandle) -> None:
    pause_handle(handle)
    release_handle(handle)


__all__ = [
    "PlayerHandle",
    "PlayerFactory",
    "is_hls_url",
    "mute_handle",
    "pause_handle",
    "play_handle",
    "release_handle",
    "pause_and_mute",
    "pause_and_release",
]
