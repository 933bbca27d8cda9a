"""Parent protocol rollup.

Combines the time series of child protocols into a single parent series:
granularity classification, trailing-date alignment, per-bucket summation,
hallmark/raise merging and a size guard on the final payload.
"""

from .granularity import is_hourly, all_hourly, rounding_enabled
from .aligner import align_date
from .merger import BucketSeries, ChainAccumulator, ParentAccumulator, merge_tvl_series, merge_token_series
from .hallmarks import merge_hallmarks, merge_raises
from .size_guard import MAX_RESPONSE_BYTES, serialized_size, apply_size_guard
from .aggregator import aggregate_parent, fold_child, processing_order

__all__ = [
    'is_hourly', 'all_hourly', 'rounding_enabled', 'align_date',
    'BucketSeries', 'ChainAccumulator', 'ParentAccumulator', 'merge_tvl_series', 'merge_token_series',
    'merge_hallmarks', 'merge_raises', 'MAX_RESPONSE_BYTES', 'serialized_size', 'apply_size_guard',
    'aggregate_parent', 'fold_child', 'processing_order',
]
