import httpx
import pytest

from reelfeed.hls import (
    HlsSubtitleResolver,
    absolutize_url,
    parse_attribute_list,
    parse_hls_subtitle_tracks,
)
from reelfeed.exceptions import FeedError
from reelfeed.models import SubtitleTrack
from reelfeed.transport import HttpTransport

MASTER = (
    "#EXTM3U\n"
    '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",LANGUAGE="en",URI="audio/en.m3u8"\n'
    '#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="s1",LANGUAGE="en",NAME="English",URI="subs/en.m3u8"\n'
    '#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="s1",LANGUAGE="AR",NAME="Arabic, MSA",URI="https://cdn.example/ar.m3u8"\n'
    '#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="s1",LANGUAGE="fr",NAME="French"\n'
    '#EXT-X-STREAM-INF:BANDWIDTH=800000,SUBTITLES="s1"\n'
    "video/720.m3u8\n"
)

SUB_PLAYLIST = (
    "#EXTM3U\n"
    "#EXT-X-TARGETDURATION:600\n"
    "\n"
    "#EXTINF:600.0,\n"
    "seg-0.vtt\n"
    "  https://other.example/seg-1.vtt  \n"
    "#EXT-X-ENDLIST\n"
)

VTT = "WEBVTT\n\n00:00:00.500 --> 00:00:02.000\nWelcome home\n"


def test_parse_hls_subtitle_track_example():
    line = '#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="s1",LANGUAGE="en",NAME="English",URI="subs/en.m3u8"'
    tracks = parse_hls_subtitle_tracks(line, "https://x/master.m3u8")
    assert tracks == [SubtitleTrack(uri="https://x/subs/en.m3u8", language="en", name="English")]


def test_parse_hls_skips_non_subtitles_and_missing_uri():
    tracks = parse_hls_subtitle_tracks(MASTER, "https://cdn.example/v/master.m3u8")
    assert [t.language for t in tracks] == ["en", "AR"]
    assert tracks[0].uri == "https://cdn.example/v/subs/en.m3u8"
    assert tracks[1].uri == "https://cdn.example/ar.m3u8"
    assert tracks[1].name == "Arabic, MSA"


def test_parse_attribute_list_quoted_and_unquoted():
    attrs = parse_attribute_list('TYPE=SUBTITLES,DEFAULT=NO,NAME="A, B",URI=""')
    assert attrs == {"TYPE": "SUBTITLES", "DEFAULT": "NO", "NAME": "A, B", "URI": ""}


def test_absolutize_url_falls_back_to_raw_value():
    assert absolutize_url("seg.vtt", "not a url") == "seg.vtt"
    assert absolutize_url("../a.vtt", "https://x/y/z.m3u8") == "https://x/a.vtt"


def _resolver(routes: dict[str, httpx.Response]) -> tuple[HlsSubtitleResolver, list[str]]:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requested.append(url)
        if url in routes:
            return routes[url]
        return httpx.Response(404, text="missing")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HlsSubtitleResolver(HttpTransport(client=client)), requested


@pytest.mark.asyncio
async def test_resolve_subtitle_track_case_insensitive():
    resolver, _ = _resolver({"https://cdn.example/v/master.m3u8": httpx.Response(200, text=MASTER)})
    uri = await resolver.resolve_subtitle_track("https://cdn.example/v/master.m3u8", "ar")
    assert uri == "https://cdn.example/ar.m3u8"
    assert await resolver.resolve_subtitle_track("https://cdn.example/v/master.m3u8", "de") is None


@pytest.mark.asyncio
async def test_resolve_subtitle_track_non_ok_returns_none():
    resolver, _ = _resolver({})
    assert await resolver.resolve_subtitle_track("https://cdn.example/v/master.m3u8", "en") is None


@pytest.mark.asyncio
async def test_fetch_subtitle_segment_uris():
    resolver, _ = _resolver({"https://cdn.example/v/subs/en.m3u8": httpx.Response(200, text=SUB_PLAYLIST)})
    segments = await resolver.fetch_subtitle_segment_uris("https://cdn.example/v/subs/en.m3u8")
    assert segments == [
        "https://cdn.example/v/subs/seg-0.vtt",
        "https://other.example/seg-1.vtt",
    ]


@pytest.mark.asyncio
async def test_fetch_vtt_rejects_html():
    resolver, _ = _resolver(
        {
            "https://cdn.example/a.vtt": httpx.Response(
                200, text="<!DOCTYPE html><p>denied</p>", headers={"content-type": "text/html"}
            ),
            "https://cdn.example/b.vtt": httpx.Response(200, text="<!doctype html>"),
        }
    )
    assert await resolver.fetch_vtt("https://cdn.example/a.vtt") is None
    assert await resolver.fetch_vtt("https://cdn.example/b.vtt") is None


@pytest.mark.asyncio
async def test_load_cues_from_master_playlist():
    resolver, requested = _resolver(
        {
            "https://cdn.example/v/master.m3u8": httpx.Response(200, text=MASTER),
            "https://cdn.example/v/subs/en.m3u8": httpx.Response(200, text=SUB_PLAYLIST),
            "https://cdn.example/v/subs/seg-0.vtt": httpx.Response(
                200, text=VTT, headers={"content-type": "text/vtt"}
            ),
        }
    )
    cues = await resolver.load_cues(
        "https://cdn.example/v/master.m3u8",
        "EN",
        subtitle_url="https://www.saqan.com/storage/subs/en.vtt",
    )
    assert [c.text for c in cues] == ["Welcome home"]
    assert not any("/storage/" in url for url in requested)


@pytest.mark.asyncio
async def test_load_cues_prefers_direct_url():
    resolver, requested = _resolver(
        {"https://cdn.example/text/en.vtt": httpx.Response(200, text=VTT)}
    )
    cues = await resolver.load_cues("https://cdn.example/v/master.m3u8", "en", "https://cdn.example/text/en.vtt")
    assert len(cues) == 1
    assert requested == ["https://cdn.example/text/en.vtt"]


@pytest.mark.asyncio
async def test_load_cues_network_failure_degrades_to_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    resolver = HlsSubtitleResolver(HttpTransport(client=client))
    assert await resolver.load_cues("https://cdn.example/v/master.m3u8", "en") == []


@pytest.mark.asyncio
async def test_load_cues_malformed_urls_degrade_to_empty():
    resolver, requested = _resolver({})
    assert await resolver.load_cues("http://[::1/x", "en") == []
    assert await resolver.load_cues("https://cdn.example/v/master.m3u8", "en", "http://[::1/sub.vtt") == []
    assert requested == ["https://cdn.example/v/master.m3u8"]


@pytest.mark.asyncio
async def test_url_errors_surface_as_feed_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise ValueError("unknown url type")

    transport = HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    with pytest.raises(FeedError):
        await transport.get_text("https://cdn.example/v/master.m3u8")
    assert await HlsSubtitleResolver(transport).load_cues("https://cdn.example/v/master.m3u8", "en") == []
