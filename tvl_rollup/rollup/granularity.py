"""Granularity classification of locked-value series (hourly vs daily)."""
from __future__ import annotations
from typing import Iterable, Sequence

from tvl_rollup.core.custom_types import ProtocolSnapshot, TvlPoint
from tvl_rollup.core.timeutils import SECONDS_PER_DAY


def is_hourly(series: Sequence[TvlPoint]) -> bool:
    """Fewer than two samples, or a first gap under one day, counts as hourly."""
    if len(series) < 2:
        return True
    return series[1].date - series[0].date < SECONDS_PER_DAY


def all_hourly(snapshots: Iterable[ProtocolSnapshot]) -> bool:
    return all(is_hourly(s.tvl) for s in snapshots)


def rounding_enabled(use_hourly_data: bool, snapshots: Iterable[ProtocolSnapshot]) -> bool:
    """Trailing-date rounding only runs for daily requests with at least one daily child."""
    return not use_hourly_data and not all_hourly(snapshots)


__all__ = ['is_hourly', 'all_hourly', 'rounding_enabled']
