"""Exceptions raised by the rollup and its collaborators."""
from __future__ import annotations
from typing import Optional


class NoChildrenError(LookupError):
    """Parent has no child protocols to combine (or a child shadows the parent).

    Callers answering HTTP should treat this as a not-found response.
    """

    def __init__(self, parent: str, reason: str = "Protocol is not in our database"):
        super().__init__(f"{reason}: {parent}")
        self.parent = parent
        self.reason = reason


class ProviderError(Exception):
    """Remote snapshot fetch failed."""

    def __init__(self, url: str, status: Optional[int] = None, message: str = ""):
        super().__init__(f"snapshot fetch failed url={url} status={status} {message}".strip())
        self.url = url
        self.status = status


__all__ = ['NoChildrenError', 'ProviderError']
