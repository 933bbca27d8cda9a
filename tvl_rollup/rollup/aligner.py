"""Date alignment for the trailing sample of a series.

Protocols snapshot "today" at different times of day. Without alignment every
child would open its own bucket a few hours apart from its peers for the
newest, not yet settled point. The aligner moves that last sample onto an
existing bucket when the previous sample is a settled 00:00 UTC daily point.

Only the last sample of a series is ever moved. Earlier samples always keep
their own date.
"""
from __future__ import annotations
from typing import Collection, Iterable, Optional, Sequence

from tvl_rollup.core.timeutils import is_utc_midnight_hour, now_seconds


def nearest_existing_date(buckets: Iterable[int], prev_date: int, now: int) -> Optional[int]:
    """Earliest bucket date in the half-open window (prev_date, now]."""
    return min((d for d in buckets if prev_date < d <= now), default=None)


def align_date(
    series: Sequence,
    index: int,
    buckets: Collection[int],
    *,
    rounding_enabled: bool,
    is_first_chain: bool = False,
    now: Optional[int] = None,
) -> int:
    """Return the bucket date for `series[index]`.

    `series` holds objects with a `date` attribute (epoch seconds) and
    `buckets` is the accumulator for the same metric (and chain). Per-chain
    callers pass `is_first_chain=True` for the first chain of a child; that
    chain anchors the axis and is never rounded. Global series pass False.
    """
    date = series[index].date

    if not rounding_enabled or is_first_chain:
        return date
    if index != len(series) - 1 or index == 0:
        return date
    if date in buckets:
        return date

    prev_date = series[index - 1].date
    if not prev_date or not is_utc_midnight_hour(prev_date):
        return date

    match = nearest_existing_date(buckets, prev_date, now_seconds() if now is None else now)
    return date if match is None else match


__all__ = ['align_date', 'nearest_existing_date']
