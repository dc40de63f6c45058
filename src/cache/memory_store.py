# src/cache/memory_store.py — v2
"""In-process cache store (default CACHE_BACKEND=memory).

Entries live in a dict guarded by a re-entrant lock, so a reader never sees a
half-applied invalidation and concurrent set/remove on the same key resolve
last-writer-wins. Nothing expires on its own.

Read-through fills go reserve() -> fetch -> fill(). A removal that covers a
reserved key while its fetch is in flight voids the ticket, so a response
fetched before a write can never land in the cache after that write's
invalidation.
"""

from __future__ import annotations

import itertools
import logging
import threading

from restcache.cache.base_cache_store import BaseCacheStore, UrlMatcher
from restcache.cache.models import CacheEntry, CacheKey

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store."""

    def __init__(self) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._pending: dict[int, tuple[CacheKey, str]] = {}
        self._tickets = itertools.count(1)
        self._lock = threading.RLock()

    def get(self, key: CacheKey) -> CacheEntry | None:
        """Retrieve a copy of the entry for key."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.model_copy(deep=True)

    def set(self, key: CacheKey, entry: CacheEntry) -> None:
        """Store a private copy of entry."""
        stored = entry.model_copy(deep=True)
        with self._lock:
            self._entries[key] = stored

    def reserve(self, key: CacheKey, url: str) -> int:
        with self._lock:
            ticket = next(self._tickets)
            self._pending[ticket] = (key, url)
        return ticket

    def fill(self, ticket: int, entry: CacheEntry) -> bool:
        """Store entry under the reserved key unless a removal voided it."""
        stored = entry.model_copy(deep=True)
        with self._lock:
            reserved = self._pending.pop(ticket, None)
            if reserved is None:
                logger.debug("Discarded fill for %s: invalidated in flight", stored.url)
                return False
            self._entries[reserved[0]] = stored
        return True

    def release(self, ticket: int) -> None:
        with self._lock:
            self._pending.pop(ticket, None)

    def remove_exact(self, key: CacheKey) -> CacheEntry | None:
        """Remove one key; returns the removed entry if there was one."""
        with self._lock:
            self._void(lambda k, _url: k == key)
            return self._entries.pop(key, None)

    def remove_pattern(self, matcher: UrlMatcher) -> list[CacheEntry]:
        """Remove all entries whose URL matches."""
        with self._lock:
            self._void(lambda _key, url: matcher.matches(url))
            doomed = [k for k, e in self._entries.items() if matcher.matches(e.url)]
            removed = [self._entries.pop(k) for k in doomed]
        if removed:
            logger.debug("Removed %d entries matching %r", len(removed), matcher)
        return removed

    def clear(self) -> int:
        """Drop everything."""
        with self._lock:
            self._void(lambda _key, _url: True)
            count = len(self._entries)
            self._entries.clear()
        return count

    def keys(self) -> list[CacheKey]:
        with self._lock:
            return list(self._entries)

    def entries(self) -> list[CacheEntry]:
        with self._lock:
            snapshot = list(self._entries.values())
        return [e.model_copy(deep=True) for e in snapshot]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _void(self, covers) -> None:
        # Caller holds the lock.
        voided = [t for t, (key, url) in self._pending.items() if covers(key, url)]
        for ticket in voided:
            del self._pending[ticket]
