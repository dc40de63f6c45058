# src/client/cached_client.py — v1
"""Public client: cached reads, invalidating writes, store and log control.

Usage:
    from restcache import CachedClient

    async with CachedClient("https://api.example.com") as api:
        projects = await api.get("/projects/")
        await api.put("/projects/1", json={"name": "renamed"})
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from restcache.cache.base_cache_store import UrlMatcher
from restcache.cache.fingerprint import Params
from restcache.cache.models import CachedResponse
from restcache.client.context import CacheContext
from restcache.client.dispatcher import RequestDispatcher
from restcache.config.settings import Settings
from restcache.events.models import EventCategory, EventFormat, LogEvent
from restcache.events.sinks import BaseLogSink
from restcache.invalidation.matchers import (
    ExactUrlMatcher,
    HierarchicalMatcher,
    InvalidPatternError,
    PathPattern,
)
from restcache.invalidation.models import Invalidation
from restcache.transport.base_transport import BaseTransport
from restcache.transport.httpx_transport import HttpxTransport


class CachedClient:
    """Caching REST client.

    Args:
        base_url: Base URL for the default httpx transport.
        transport: Custom transport; the client will not close it.
        context: Cache context to share; a fresh one is created otherwise.
        settings: Settings used for the default transport and context.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: BaseTransport | None = None,
        context: CacheContext | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._owns_transport = transport is None
        if transport is None:
            if settings is None:
                transport = HttpxTransport(base_url=base_url or "")
            else:
                transport = HttpxTransport.from_settings(settings, base_url=base_url)
        self._owns_context = context is None
        if context is None:
            context = CacheContext.from_settings(settings) if settings else CacheContext()
        self.context = context
        self._dispatcher = RequestDispatcher(transport, context)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CachedClient:
        return cls(settings=settings or Settings())

    async def __aenter__(self) -> CachedClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the owned transport and stop the owned event log."""
        if self._owns_transport:
            await self._dispatcher.transport.aclose()
        if self._owns_context:
            self.context.events.stop()

    # --- Requests ---

    async def request(
        self,
        method: str,
        url: str,
        params: Params = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        return await self._dispatcher.dispatch(
            method, url, params=params, json=json, headers=headers, invalidate=invalidate,
        )

    async def get(
        self, url: str, params: Params = None, headers: dict[str, str] | None = None,
    ) -> CachedResponse:
        """Cached GET."""
        return await self.request("GET", url, params=params, headers=headers)

    async def head(
        self, url: str, params: Params = None, headers: dict[str, str] | None = None,
    ) -> CachedResponse:
        """Cached HEAD."""
        return await self.request("HEAD", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        json: Any = None,
        params: Params = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        """Create; drops the exact URL by default."""
        return await self.request("POST", url, params, json, headers, invalidate)

    async def put(
        self,
        url: str,
        json: Any = None,
        params: Params = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        """Replace; drops the URL and everything beneath it by default."""
        return await self.request("PUT", url, params, json, headers, invalidate)

    async def patch(
        self,
        url: str,
        json: Any = None,
        params: Params = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        """Update; drops the URL and everything beneath it by default."""
        return await self.request("PATCH", url, params, json, headers, invalidate)

    async def delete(
        self,
        url: str,
        json: Any = None,
        params: Params = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        """Delete; drops the URL and everything beneath it by default."""
        return await self.request("DELETE", url, params, json, headers, invalidate)

    # --- Store management ---

    def clear_cache(self) -> int:
        """Drop every cached entry."""
        count = self.context.store.clear()
        self.context.events.emit(EventCategory.CACHE_CLEAR, message=f"{count} entries")
        return count

    def drop_exact(self, url: str) -> int:
        """Drop all cached variants of exactly this URL."""
        return self._drop(ExactUrlMatcher(url))

    def drop_prefix(self, url: str) -> int:
        """Drop url and everything beneath it (segment-aware)."""
        return self._drop(HierarchicalMatcher(url))

    def drop_pattern(self, pattern: str) -> int:
        """Drop entries matching a segment pattern ("*", trailing "**").

        Raises:
            InvalidPatternError: Malformed pattern; nothing is dropped.
        """
        try:
            matcher = PathPattern(pattern)
        except InvalidPatternError as exc:
            self.context.events.fail(exc)
        return self._drop(matcher)

    def drop_request(self, url: str, params: Params = None, method: str = "GET") -> int:
        """Drop the single entry for one read request."""
        key = self.context.key_for(method, url, params)
        entry = self.context.store.remove_exact(key)
        if entry is None:
            return 0
        self.context.events.emit(
            EventCategory.CACHE_DROP, method=entry.method, url=entry.url, key=key,
        )
        return 1

    def _drop(self, matcher: UrlMatcher) -> int:
        removed = self.context.store.remove_pattern(matcher)
        for entry in removed:
            self.context.events.emit(
                EventCategory.CACHE_DROP, method=entry.method, url=entry.url, key=entry.key,
            )
        return len(removed)

    # --- Event log control ---

    def start_log(
        self, destination: str | Path | BaseLogSink = "stderr", fmt: EventFormat | None = None,
    ) -> None:
        """Start recording events to destination."""
        self.context.events.start(destination, fmt=fmt)

    def stop_log(self) -> None:
        self.context.events.stop()

    def log_message(self, text: str) -> LogEvent | None:
        """Add a custom message to the event stream."""
        return self.context.events.message(text)
