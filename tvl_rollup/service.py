"""End-to-end parent snapshot construction: resolve -> fetch -> aggregate -> guard."""
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from tvl_rollup.core.custom_types import ParentProtocol, ParentSnapshot
from tvl_rollup.core.errors import NoChildrenError, ProviderError
from tvl_rollup.directory import ProtocolDirectory
from tvl_rollup.providers.snapshots import SnapshotProvider
from tvl_rollup.rollup.aggregator import aggregate_parent
from tvl_rollup.rollup.size_guard import MAX_RESPONSE_BYTES, apply_size_guard


async def build_parent_snapshot(
    parent: ParentProtocol,
    directory: ProtocolDirectory,
    provider: SnapshotProvider,
    *,
    use_hourly_data: bool = False,
    skip_aggregated_tvl: bool = False,
    now: Optional[int] = None,
    max_response_bytes: int = MAX_RESPONSE_BYTES,
) -> ParentSnapshot:
    children = directory.resolve_children(parent)
    snapshots = await provider.fetch_many(children, use_hourly_data)
    result = aggregate_parent(parent, snapshots, use_hourly_data=use_hourly_data,
                              skip_aggregated_tvl=skip_aggregated_tvl, now=now)
    apply_size_guard(result, max_response_bytes)
    return result


def error_payload(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """(status, body) for callers that answer over HTTP."""
    if isinstance(exc, NoChildrenError):
        return 404, {'message': exc.reason}
    if isinstance(exc, ProviderError):
        return 502, {'message': str(exc)}
    logger.opt(exception=exc).error("unexpected error building parent snapshot")
    return 500, {'message': 'Internal error'}


__all__ = ['build_parent_snapshot', 'error_payload']
