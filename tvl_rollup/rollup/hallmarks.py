"""Merging of the non-temporal extras: hallmarks and raises."""
from __future__ import annotations
from typing import Any, Dict, Iterable, List

from tvl_rollup.core.custom_types import Hallmark, ProtocolSnapshot


def merge_hallmarks(snapshots: Iterable[ProtocolSnapshot]) -> List[Hallmark]:
    """Union of all children's hallmarks keyed by date.

    A later child's description replaces an earlier one on the same date.
    Output is sorted by date ascending.
    """
    by_date: Dict[int, str] = {}
    for snap in snapshots:
        for date, desc in snap.hallmarks or []:
            by_date[date] = desc
    return sorted(by_date.items())


def merge_raises(snapshots: Iterable[ProtocolSnapshot]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for snap in snapshots:
        out.extend(snap.raises or [])
    return out


__all__ = ['merge_hallmarks', 'merge_raises']
