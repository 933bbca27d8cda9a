"""Remote data providers.

  - http.py: async httpx client with a token-bucket rate limiter
  - snapshots.py: per-protocol snapshot fetch and concurrent fan-out
"""

from .http import AsyncTokenBucket, HTTPClient
from .snapshots import SnapshotProvider

__all__ = ['AsyncTokenBucket', 'HTTPClient', 'SnapshotProvider']
