"""Async HTTP helpers and a tiny token-bucket for rate limiting."""
from typing import Optional
import asyncio, time
import httpx


class AsyncTokenBucket:
    """Token bucket shared by all concurrent child fetches.

    A caller that finds the bucket short reserves what it needs before
    sleeping: the balance drops to zero and `_last` moves forward to the
    moment its tokens become available. The next caller therefore refills
    from that future point and queues behind it instead of spending the same
    tokens twice.
    """

    def __init__(self, rate: float, capacity: float = None):
        self.rate = rate
        self.capacity = capacity or rate
        self._tokens = self.capacity
        self._last = time.monotonic()
        self._lock = asyncio.Lock()

    async def take(self, tokens: float = 1.0):
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last
            self._last = now
            self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
            if tokens <= self._tokens:
                self._tokens -= tokens
                return
            # wait until tokens available, then spend them
            needed = tokens - self._tokens
            wait = needed / self.rate
            self._tokens = 0.0
            self._last = now + wait
        await asyncio.sleep(wait)


class HTTPClient:
    def __init__(self, rate_limit_rps: float = 5.0, timeout: float = 10,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._bucket = AsyncTokenBucket(rate_limit_rps)

    async def get(self, url: str, params: Optional[dict] = None) -> httpx.Response:
        await self._bucket.take(1.0)
        return await self._client.get(url, params=params)

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self) -> 'HTTPClient':
        return self

    async def __aexit__(self, *exc):
        await self.close()
