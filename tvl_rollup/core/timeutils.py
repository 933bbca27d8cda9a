"""
Time-Related Utilities
----------------------

Epoch-second helpers used by the rollup. Snapshot dates are integer epoch
seconds in UTC; the date-rounding heuristic only needs the UTC hour of a
sample and the current wall-clock time.
"""

import time
from datetime import datetime, timezone

SECONDS_PER_DAY = 86_400


def now_seconds() -> int:
    """Current wall-clock time as integer epoch seconds."""
    return int(round(time.time()))


def utc_hour(ts: int) -> int:
    """Hour-of-day (0-23, UTC) of an epoch-second timestamp."""
    return datetime.fromtimestamp(ts, tz=timezone.utc).hour


def is_utc_midnight_hour(ts: int) -> bool:
    """
    True when `ts` falls in the 00:xx UTC hour. Daily snapshot feeds stamp
    settled samples at 00:00 UTC, so this marks a genuine daily point.
    """
    return utc_hour(ts) == 0
