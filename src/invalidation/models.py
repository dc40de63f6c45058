# src/invalidation/models.py — v1
"""Invalidation strategy variants selectable per call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

StrategyKind = Literal["none", "exact", "hierarchical", "pattern"]


@dataclass(frozen=True)
class Invalidation:
    """What a write should remove from the cache.

    ``url`` left as None means "the URL of the request being made".
    """

    kind: StrategyKind
    url: str | None = None
    pattern: str | None = None

    @classmethod
    def none(cls) -> Invalidation:
        """Skip invalidation entirely."""
        return cls(kind="none")

    @classmethod
    def exact(cls, url: str | None = None) -> Invalidation:
        return cls(kind="exact", url=url)

    @classmethod
    def hierarchical(cls, url: str | None = None) -> Invalidation:
        """Drop url (default: request URL) and everything beneath it."""
        return cls(kind="hierarchical", url=url)

    @classmethod
    def matching(cls, pattern: str) -> Invalidation:
        """Drop every entry whose URL matches a segment pattern."""
        return cls(kind="pattern", pattern=pattern)
