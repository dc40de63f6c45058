# src/client/context.py — v1
"""Explicit cache context: the state one cached client works against.

Nothing here is module-global, so independent contexts (one per test, one per
API) never see each other's entries or events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from restcache.cache.base_cache_store import BaseCacheStore
from restcache.cache.cache_factory import create_cache_store
from restcache.cache.fingerprint import READ_METHODS, HashAlgorithm, Params, build_key
from restcache.cache.models import CacheKey
from restcache.config.settings import Settings
from restcache.events.event_log import EventLog
from restcache.invalidation.policy import InvalidationPolicy


@dataclass
class CacheContext:
    """Store, event log and the rules that tie them to requests."""

    store: BaseCacheStore = field(default_factory=create_cache_store)
    events: EventLog = field(default_factory=EventLog)
    policy: InvalidationPolicy = field(default_factory=InvalidationPolicy)
    read_methods: frozenset[str] = READ_METHODS
    key_algorithm: HashAlgorithm = "sha256"
    cache_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> CacheContext:
        """Build a context and start the event log if configured."""
        context = cls(
            store=create_cache_store(settings),
            events=EventLog(fmt=settings.event_log_format),
            policy=InvalidationPolicy.from_settings(settings),
            read_methods=frozenset(settings.cache_read_methods_list),
            key_algorithm=settings.cache_key_algorithm,
            cache_enabled=settings.cache_enabled,
        )
        if settings.event_log_enabled:
            context.events.start(settings.event_log_destination)
        return context

    def is_read(self, method: str) -> bool:
        return method.upper() in self.read_methods

    def key_for(
        self, method: str, url: str, params: Params = None, body: Any = None,
    ) -> CacheKey:
        return build_key(method, url, params, body=body, algorithm=self.key_algorithm)

    def reset(self) -> None:
        """Empty the store and forget event history (sink binding is kept)."""
        self.store.clear()
        self.events.reset()
