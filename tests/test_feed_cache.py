import asyncio

import pytest

from reelfeed.exceptions import FeedConnectionError
from reelfeed.feed_cache import FeedCache
from reelfeed.models import PublicVideosPage, VideoRecord


class _FakeApi:
    def __init__(self, records=None, fail_times: int = 0):
        self.records = records if records is not None else [VideoRecord(video_id=1), VideoRecord(video_id=2)]
        self.fail_times = fail_times
        self.calls = []
        self.gate = asyncio.Event()
        self.gate.set()

    async def fetch_public_videos(self, *, page=1, per_page=20):
        self.calls.append({"page": page, "per_page": per_page})
        await self.gate.wait()
        if self.fail_times:
            self.fail_times -= 1
            raise FeedConnectionError("Network request failed")
        return PublicVideosPage(data=list(self.records))


@pytest.mark.asyncio
async def test_concurrent_warm_is_single_flight():
    api = _FakeApi()
    api.gate.clear()
    cache = FeedCache(api)

    first = asyncio.create_task(cache.warm())
    second = asyncio.create_task(cache.warm())
    await asyncio.sleep(0)
    assert cache.is_in_flight()
    api.gate.set()
    a, b = await asyncio.gather(first, second)

    assert len(api.calls) == 1
    assert api.calls[0] == {"page": 1, "per_page": 50}
    assert a is b
    assert [r.video_id for r in a] == [1, 2]
    assert not cache.is_in_flight()


@pytest.mark.asyncio
async def test_cached_result_short_circuits():
    api = _FakeApi()
    cache = FeedCache(api)

    first = await cache.warm_page1()
    assert cache.loaded_at() is not None
    again = await cache.warm_page1()

    assert len(api.calls) == 1
    assert again is first
    assert cache.peek() is first


@pytest.mark.asyncio
async def test_force_refetches():
    api = _FakeApi()
    cache = FeedCache(api)
    await cache.warm()
    await cache.warm(force=True, per_page=10)
    assert len(api.calls) == 2
    assert api.calls[1]["per_page"] == 10


@pytest.mark.asyncio
async def test_empty_result_is_not_treated_as_cached():
    api = _FakeApi(records=[])
    cache = FeedCache(api)
    assert await cache.warm() == []
    assert await cache.warm() == []
    assert len(api.calls) == 2


@pytest.mark.asyncio
async def test_failure_reaches_every_waiter_and_is_not_cached():
    api = _FakeApi(fail_times=1)
    api.gate.clear()
    cache = FeedCache(api)

    waiters = [asyncio.create_task(cache.warm()) for _ in range(3)]
    await asyncio.sleep(0)
    api.gate.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert len(api.calls) == 1
    assert all(isinstance(r, FeedConnectionError) for r in results)
    assert cache.peek() is None
    assert not cache.is_in_flight()

    recovered = await cache.warm()
    assert len(recovered) == 2
    assert len(api.calls) == 2


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_fetch():
    api = _FakeApi()
    api.gate.clear()
    cache = FeedCache(api)

    impatient = asyncio.create_task(cache.warm())
    patient = asyncio.create_task(cache.warm())
    await asyncio.sleep(0)
    impatient.cancel()
    api.gate.set()

    result = await patient
    await asyncio.gather(impatient, return_exceptions=True)
    assert len(result) == 2
    assert impatient.cancelled()


@pytest.mark.asyncio
async def test_clear_resets_state():
    api = _FakeApi()
    cache = FeedCache(api)
    await cache.warm()
    cache.clear()
    assert cache.peek() is None
    assert cache.loaded_at() is None
    await cache.warm()
    assert len(api.calls) == 2


def test_set_populates_cache():
    cache = FeedCache(_FakeApi())
    cache.set("page1", [VideoRecord(video_id=9)])
    assert [r.video_id for r in cache.peek()] == [9]
