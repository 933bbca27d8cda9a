"""Series merging into per-metric date buckets.

Accumulator layout:
  ParentAccumulator
    current_chain_tvls: chain -> summed current value
    chains: chain -> ChainAccumulator(tvl, tokens, tokens_in_usd)
    tvl / tokens / tokens_in_usd: global BucketSeries

Each BucketSeries maps a canonical date to a summed value (float for locked
value, token -> amount for token series). Once a date is admitted it is the
bucket later children round onto.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Union

from tvl_rollup.core.custom_types import ChainSeries, TokenAmounts, TokensPoint, TvlPoint
from .aligner import align_date

BucketValue = Union[float, TokenAmounts]


@dataclass
class BucketSeries:
    buckets: Dict[int, BucketValue] = field(default_factory=dict)

    def __contains__(self, date: object) -> bool:
        return date in self.buckets

    def __iter__(self) -> Iterator[int]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)

    def __getitem__(self, date: int) -> BucketValue:
        return self.buckets[date]

    def add_value(self, date: int, value: float) -> None:
        self.buckets[date] = self.buckets.get(date, 0) + value

    def add_tokens(self, date: int, tokens: TokenAmounts) -> None:
        bucket = self.buckets.setdefault(date, {})
        for token, amount in tokens.items():
            bucket[token] = bucket.get(token, 0) + amount

    def dates(self) -> List[int]:
        return sorted(self.buckets)

    def to_tvl_points(self) -> List[TvlPoint]:
        return [TvlPoint(date=d, total_liquidity_usd=self.buckets[d]) for d in self.dates()]

    def to_token_points(self) -> List[TokensPoint]:
        return [TokensPoint(date=d, tokens=dict(self.buckets[d])) for d in self.dates()]


@dataclass
class ChainAccumulator:
    tvl: BucketSeries = field(default_factory=BucketSeries)
    tokens: BucketSeries = field(default_factory=BucketSeries)
    tokens_in_usd: BucketSeries = field(default_factory=BucketSeries)

    def to_series(self) -> ChainSeries:
        return ChainSeries(
            tvl=self.tvl.to_tvl_points(),
            tokens=self.tokens.to_token_points(),
            tokens_in_usd=self.tokens_in_usd.to_token_points(),
        )


@dataclass
class ParentAccumulator:
    current_chain_tvls: Dict[str, float] = field(default_factory=dict)
    chains: Dict[str, ChainAccumulator] = field(default_factory=dict)
    tvl: BucketSeries = field(default_factory=BucketSeries)
    tokens: BucketSeries = field(default_factory=BucketSeries)
    tokens_in_usd: BucketSeries = field(default_factory=BucketSeries)

    def chain(self, name: str) -> ChainAccumulator:
        return self.chains.setdefault(name, ChainAccumulator())


def merge_tvl_series(
    series: Sequence[TvlPoint],
    buckets: BucketSeries,
    *,
    rounding_enabled: bool,
    is_first_chain: bool = False,
    now: Optional[int] = None,
) -> BucketSeries:
    """Add every locked-value sample into its aligned bucket."""
    for index, point in enumerate(series):
        date = align_date(series, index, buckets, rounding_enabled=rounding_enabled,
                          is_first_chain=is_first_chain, now=now)
        buckets.add_value(date, point.total_liquidity_usd)
    return buckets


def merge_token_series(
    series: Optional[Sequence[TokensPoint]],
    buckets: BucketSeries,
    *,
    rounding_enabled: bool,
    is_first_chain: bool = False,
    now: Optional[int] = None,
) -> BucketSeries:
    """Add every per-token sample into its aligned bucket. Absent series are skipped."""
    if not series:
        return buckets
    for index, point in enumerate(series):
        date = align_date(series, index, buckets, rounding_enabled=rounding_enabled,
                          is_first_chain=is_first_chain, now=now)
        buckets.add_tokens(date, point.tokens)
    return buckets


__all__ = [
    'BucketSeries', 'ChainAccumulator', 'ParentAccumulator',
    'merge_tvl_series', 'merge_token_series',
]
