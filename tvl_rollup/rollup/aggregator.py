"""Parent protocol aggregation.

Children are folded one at a time into a `ParentAccumulator`, longest global
tvl series first, so the most complete child establishes the canonical date
axis that later children's trailing samples round onto.

    snapshots (directory order)
      -> sort by len(tvl) desc
      -> reduce(fold_child)          per chain: tvl, tokensInUsd, tokens
                                     global:    tokensInUsd, tokens, tvl
      -> buckets back to date-sorted series
      -> raises / hallmarks / otherProtocols
"""
from __future__ import annotations
from dataclasses import dataclass
from functools import reduce, partial
from typing import List, Optional, Sequence

from loguru import logger

from tvl_rollup.core.custom_types import ParentProtocol, ParentSnapshot, ProtocolSnapshot
from tvl_rollup.core.errors import NoChildrenError
from tvl_rollup.core.timeutils import now_seconds
from .granularity import rounding_enabled as _rounding_enabled
from .hallmarks import merge_hallmarks, merge_raises
from .merger import ParentAccumulator, merge_token_series, merge_tvl_series


@dataclass(frozen=True)
class FoldOptions:
    rounding_enabled: bool
    skip_aggregated_tvl: bool
    now: int


def processing_order(snapshots: Sequence[ProtocolSnapshot]) -> List[ProtocolSnapshot]:
    """Longest global tvl series first; ties keep their directory order."""
    return sorted(snapshots, key=lambda s: len(s.tvl), reverse=True)


def fold_child(opts: FoldOptions, acc: ParentAccumulator, child: ProtocolSnapshot) -> ParentAccumulator:
    """Fold one child into `acc` and hand it back to the next step."""
    for name, value in child.current_chain_tvls.items():
        acc.current_chain_tvls[name] = acc.current_chain_tvls.get(name, 0) + value

    for position, (name, series) in enumerate(child.chain_tvls.items()):
        chain_acc = acc.chain(name)
        kw = dict(rounding_enabled=opts.rounding_enabled, is_first_chain=position == 0, now=opts.now)
        merge_tvl_series(series.tvl, chain_acc.tvl, **kw)
        merge_token_series(series.tokens_in_usd, chain_acc.tokens_in_usd, **kw)
        merge_token_series(series.tokens, chain_acc.tokens, **kw)

    if not opts.skip_aggregated_tvl:
        kw = dict(rounding_enabled=opts.rounding_enabled, now=opts.now)
        merge_token_series(child.tokens_in_usd, acc.tokens_in_usd, **kw)
        merge_token_series(child.tokens, acc.tokens, **kw)
        merge_tvl_series(child.tvl, acc.tvl, **kw)

    logger.debug("folded child name={} tvl_points={} chains={} buckets={}",
                 child.metadata.get('name'), len(child.tvl), len(child.chain_tvls), len(acc.tvl))
    return acc


def aggregate_parent(
    parent: ParentProtocol,
    snapshots: Sequence[ProtocolSnapshot],
    *,
    use_hourly_data: bool = False,
    skip_aggregated_tvl: bool = False,
    now: Optional[int] = None,
) -> ParentSnapshot:
    """Combine child snapshots (in directory order) into one parent snapshot.

    `now` bounds the trailing-date rounding window; pass a fixed value for
    reproducible output.
    """
    if not snapshots:
        raise NoChildrenError(parent.id)

    opts = FoldOptions(
        rounding_enabled=_rounding_enabled(use_hourly_data, snapshots),
        skip_aggregated_tvl=skip_aggregated_tvl,
        now=now_seconds() if now is None else now,
    )
    ordered = processing_order(snapshots)
    acc = reduce(partial(fold_child, opts), ordered, ParentAccumulator())

    result = ParentSnapshot(
        parent=parent,
        tvl=acc.tvl.to_tvl_points(),
        tokens=acc.tokens.to_token_points(),
        tokens_in_usd=acc.tokens_in_usd.to_token_points(),
        chain_tvls={name: chain.to_series() for name, chain in acc.chains.items()},
        current_chain_tvls=dict(acc.current_chain_tvls),
        raises=merge_raises(ordered),
        hallmarks=merge_hallmarks(ordered),
        other_protocols=snapshots[0].other_protocols,
        is_parent_protocol=True,
    )
    logger.info("aggregated parent={} children={} rounding={} tvl_points={} chains={}",
                parent.id, len(snapshots), opts.rounding_enabled, len(result.tvl), len(result.chain_tvls))
    return result


__all__ = ['FoldOptions', 'processing_order', 'fold_child', 'aggregate_parent']
