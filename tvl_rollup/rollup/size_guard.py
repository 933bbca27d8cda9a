"""Response size guard.

Per-chain token series dominate the payload of large parents. When the
serialized result reaches the threshold they are dropped wholesale (set to
null) for every chain; locked-value series and global token series stay.
"""
from __future__ import annotations
import json

from loguru import logger

from tvl_rollup.core.custom_types import ParentSnapshot

MAX_RESPONSE_BYTES = 5_800_000


def serialized_size(result: ParentSnapshot) -> int:
    """UTF-8 byte length of the compact JSON encoding of `result`."""
    return len(json.dumps(result.to_dict(), separators=(',', ':'), ensure_ascii=False).encode('utf-8'))


def apply_size_guard(result: ParentSnapshot, threshold: int = MAX_RESPONSE_BYTES) -> bool:
    """Null out per-chain tokens/tokensInUsd when the result is too large.

    Mutates `result` and returns True when truncation happened.
    """
    size = serialized_size(result)
    if size < threshold:
        return False
    for chain in result.chain_tvls.values():
        chain.tokens = None
        chain.tokens_in_usd = None
    logger.warning("[size_guard] parent={} bytes={} threshold={} dropped per-chain token series for {} chains",
                   result.parent.id, size, threshold, len(result.chain_tvls))
    return True


__all__ = ['MAX_RESPONSE_BYTES', 'serialized_size', 'apply_size_guard']
