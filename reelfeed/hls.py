"""
Subtitle discovery from HLS manifests.

A master playlist declares subtitle renditions with lines such as:

    #EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="subs",LANGUAGE="en",NAME="English",URI="subs/en.m3u8"

The rendition URI points at a media playlist whose non-comment lines are
WebVTT segment URIs.
"""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlsplit

from .exceptions import FeedError
from .models import SubtitleTrack, VttCue
from .transport import HttpTransport
from .vtt import parse_vtt

logger = logging.getLogger("reelfeed.hls")

MEDIA_DIRECTIVE = "#EXT-X-MEDIA:"
PLAYLIST_ACCEPT = "application/x-mpegURL"
VTT_ACCEPT = "text/vtt"

_ATTRIBUTE_RE = re.compile(r'([A-Z0-9-]+)=("[^"]*"|[^,]*)')
_HTML_RE = re.compile(r"^\s*<!doctype html", re.IGNORECASE)


def absolutize_url(maybe_relative: str, base_url: str) -> str:
    try:
        if not urlsplit(base_url).scheme:
            return maybe_relative
        return urljoin(base_url, maybe_relative)
    except ValueError:
        return maybe_relative


def parse_attribute_list(text: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for match in _ATTRIBUTE_RE.finditer(text):
        value = match.group(2) or ""
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        attrs[match.group(1)] = value
    return attrs


def parse_hls_subtitle_tracks(manifest_text: str, base_url: str) -> list[SubtitleTrack]:
    tracks: list[SubtitleTrack] = []
    for line in manifest_text.splitlines():
        if not line.startswith(MEDIA_DIRECTIVE):
            continue
        attrs = parse_attribute_list(line[len(MEDIA_DIRECTIVE):])
        if attrs.get("TYPE") != "SUBTITLES":
            continue
        uri = attrs.get("URI")
        if not uri:
            continue
        tracks.append(
            SubtitleTrack(
                uri=absolutize_url(uri, base_url),
                language=attrs.get("LANGUAGE"),
                name=attrs.get("NAME"),
            )
        )
    return tracks


def find_track(tracks: list[SubtitleTrack], language_code: str) -> Optional[SubtitleTrack]:
    wanted = (language_code or "").lower()
    for track in tracks:
        if (track.language or "").lower() == wanted:
            return track
    return None


def parse_segment_uris(playlist_text: str, playlist_url: str) -> list[str]:
    segments = []
    for raw in playlist_text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        segments.append(absolutize_url(line, playlist_url))
    return segments


class HlsSubtitleResolver:
    """Resolves and loads subtitle cues for a playing video."""

    def __init__(self, transport: Optional[HttpTransport] = None) -> None:
        self._transport = transport or HttpTransport()

    async def resolve_subtitle_track(self, master_url: str, language_code: str) -> Optional[str]:
        response = await self._transport.get_text(master_url, headers={"Accept": PLAYLIST_ACCEPT})
        if response is None:
            return None
        track = find_track(parse_hls_subtitle_tracks(response.text, master_url), language_code)
        return track.uri if track else None

    async def fetch_subtitle_segment_uris(self, playlist_url: str) -> list[str]:
        response = await self._transport.get_text(playlist_url, headers={"Accept": PLAYLIST_ACCEPT})
        if response is None:
            return []
        return parse_segment_uris(response.text, playlist_url)

    async def fetch_vtt(self, url: str) -> Optional[str]:
        response = await self._transport.get_text(url, headers={"Accept": VTT_ACCEPT})
        if response is None:
            return None
        content_type = response.headers.get("content-type", "")
        text = response.text
        # Some CDNs answer 403s with an HTML page behind a redirect.
        if "text/html" in content_type or _HTML_RE.match(text):
            return None
        return text

    async def load_cues(
        self,
        video_url: str,
        language_code: str,
        subtitle_url: Optional[str] = None,
    ) -> list[VttCue]:
        vtt_text = None
        # Backend /storage/ URLs are usually access-protected.
        if subtitle_url and "/storage/" not in subtitle_url:
            try:
                vtt_text = await self.fetch_vtt(subtitle_url)
            except FeedError as e:
                logger.debug(f"[Subtitles] Direct subtitle URL {subtitle_url} failed: {e}")

        try:
            if not vtt_text and video_url:
                playlist_url = await self.resolve_subtitle_track(video_url, language_code)
                if playlist_url:
                    segments = await self.fetch_subtitle_segment_uris(playlist_url)
                    if segments:
                        vtt_text = await self.fetch_vtt(segments[0])
        except FeedError as e:
            logger.warning(f"[Subtitles] Failed to load {language_code!r} for {video_url}: {e}")
            return []

        if not vtt_text:
            return []
        return parse_vtt(vtt_text)


__all__ = [
    "HlsSubtitleResolver",
    "absolutize_url",
    "find_track",
    "parse_attribute_list",
    "parse_hls_subtitle_tracks",
    "parse_segment_uris",
]
