# src/cache/base_cache_store.py — v3
"""Abstract cache store interface.

Stores are policy-agnostic: pattern removal takes a matcher built by the
invalidation layer and only asks it whether an entry URL matches.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from restcache.cache.models import CacheEntry, CacheKey


@runtime_checkable
class UrlMatcher(Protocol):
    """Anything that can decide whether a cached URL is covered."""

    def matches(self, url: str) -> bool: ...


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    def get(self, key: CacheKey) -> CacheEntry | None:
        """Retrieve a copy of the entry stored under key, or None on a miss."""

    @abstractmethod
    def set(self, key: CacheKey, entry: CacheEntry) -> None:
        """Store entry under key, replacing any previous entry."""

    @abstractmethod
    def reserve(self, key: CacheKey, url: str) -> int:
        """Register an in-flight fill for key and return its ticket.

        Any removal that covers key or url before fill() voids the ticket.
        """

    @abstractmethod
    def fill(self, ticket: int, entry: CacheEntry) -> bool:
        """Store entry for a reserved ticket; False if the ticket was voided."""

    @abstractmethod
    def release(self, ticket: int) -> None:
        """Forget a ticket without storing anything. Unknown tickets are ignored."""

    @abstractmethod
    def remove_exact(self, key: CacheKey) -> CacheEntry | None:
        """Remove the entry for key. Absent keys are ignored."""

    @abstractmethod
    def remove_pattern(self, matcher: UrlMatcher) -> list[CacheEntry]:
        """Remove every entry whose URL satisfies matcher."""

    @abstractmethod
    def clear(self) -> int:
        """Remove all entries and return how many were removed."""

    @abstractmethod
    def keys(self) -> list[CacheKey]:
        """Snapshot of the stored keys."""

    @abstractmethod
    def entries(self) -> list[CacheEntry]:
        """Snapshot (copies) of the stored entries."""

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        return key in self.keys()
