"""Remote snapshot provider.

Fetches one `ProtocolSnapshot` per child protocol from the public protocol
API. Daily data comes from `updatedProtocol/{slug}`, hourly data from
`hourly/{slug}`; both are requested with `includeAggregatedTvl=true` so the
global tokens / tokensInUsd series are present.

`fetch_many` fans out over all children and waits for every response. Any
single failure propagates; there is no partial result.
"""
from __future__ import annotations
import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx
from loguru import logger

from tvl_rollup.core.config import ProviderSettings
from tvl_rollup.core.custom_types import ProtocolSnapshot
from tvl_rollup.core.errors import ProviderError
from tvl_rollup.directory import sluggify
from .http import HTTPClient


class SnapshotProvider:
    def __init__(self, settings: Optional[ProviderSettings] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or ProviderSettings()
        self.client = HTTPClient(rate_limit_rps=self.settings.rate_limit_rps,
                                 timeout=self.settings.timeout_sec, transport=transport)

    def build_url(self, protocol: Dict[str, Any], use_hourly_data: bool) -> str:
        base = self.settings.hourly_url if use_hourly_data else self.settings.protocol_url
        return f"{base}/{sluggify(protocol['name'])}"

    async def fetch(self, protocol: Dict[str, Any], use_hourly_data: bool) -> ProtocolSnapshot:
        url = self.build_url(protocol, use_hourly_data)
        try:
            r = await self.client.get(url, params={'includeAggregatedTvl': 'true'})
        except httpx.HTTPError as e:
            raise ProviderError(url, message=f"{type(e).__name__}: {e}") from e
        if r.status_code >= 400:
            raise ProviderError(url, status=r.status_code)
        try:
            payload = r.json()
        except ValueError as e:
            raise ProviderError(url, status=r.status_code, message="invalid json") from e
        if not isinstance(payload, dict):
            raise ProviderError(url, status=r.status_code, message="unexpected payload shape")
        snap = ProtocolSnapshot.from_dict(payload)
        snap.metadata.setdefault('name', protocol['name'])
        logger.debug("fetched {} tvl_points={} chains={}", url, len(snap.tvl), len(snap.chain_tvls))
        return snap

    async def fetch_many(self, protocols: Sequence[Dict[str, Any]], use_hourly_data: bool) -> List[ProtocolSnapshot]:
        """Snapshots for every protocol, in the order given.

        The first failure cancels the fetches still in flight and is re-raised
        once they have unwound.
        """
        logger.info("fetching {} child snapshots hourly={}", len(protocols), use_hourly_data)
        tasks = [asyncio.ensure_future(self.fetch(p, use_hourly_data)) for p in protocols]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            pending = [t for t in tasks if not t.done()]
            for t in pending:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.warning("snapshot fan-out aborted, cancelled {} pending fetches", len(pending))
            raise

    async def close(self):
        await self.client.close()

    async def __aenter__(self) -> 'SnapshotProvider':
        return self

    async def __aexit__(self, *exc):
        await self.close()


__all__ = ['SnapshotProvider']
