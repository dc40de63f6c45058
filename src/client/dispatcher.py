# src/client/dispatcher.py — v2
"""Request dispatcher: decides per verb what to cache and what to drop.

Reads:  key -> store lookup -> hit: return copy
                           -> miss: transport -> store -> return
Writes: resolve invalidation -> transport -> drop matching entries -> return

Writes never consult the cache and their responses are never stored.
A failed request leaves the store exactly as it was. A read whose fetch is
overtaken by an invalidation of its URL is returned but not stored.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from restcache.cache.fingerprint import Params, canonical_params
from restcache.cache.models import CacheEntry, CachedResponse
from restcache.client.context import CacheContext
from restcache.events.models import EventCategory
from restcache.invalidation.matchers import InvalidPatternError
from restcache.invalidation.models import Invalidation
from restcache.transport.base_transport import BaseTransport, TransportError

logger = logging.getLogger(__name__)


class RequestDispatcher:
    """Runs one logical HTTP call against a cache context and a transport."""

    def __init__(self, transport: BaseTransport, context: CacheContext | None = None) -> None:
        self.transport = transport
        self.context = context or CacheContext()

    async def dispatch(
        self,
        method: str,
        url: str,
        params: Params = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        invalidate: Invalidation | None = None,
    ) -> CachedResponse:
        """Perform a request through the cache.

        Raises:
            TransportError: Propagated unchanged from the transport.
            InvalidPatternError: If a pattern override is malformed.
            ValueError: If an invalidation override is given for a read.
        """
        method = method.upper()
        t0 = time.monotonic()
        if self.context.is_read(method):
            if invalidate is not None:
                raise ValueError(f"{method} does not invalidate; drop entries explicitly")
            return await self._read(method, url, params, json, headers, t0)
        return await self._write(method, url, params, json, headers, invalidate, t0)

    async def _read(
        self,
        method: str,
        url: str,
        params: Params,
        json: Any,
        headers: dict[str, str] | None,
        t0: float,
    ) -> CachedResponse:
        ctx = self.context
        if not ctx.cache_enabled:
            return await self._fetch(method, url, params, json, headers, t0)

        key = ctx.key_for(method, url, params, body=json)
        entry = ctx.store.get(key)
        if entry is not None:
            ctx.events.emit(EventCategory.CACHE_HIT, method=method, url=url, key=key)
            return entry.response

        ticket = ctx.store.reserve(key, url)
        try:
            response = await self._fetch(method, url, params, json, headers, t0)
            if not response.is_success:
                # Only reachable when the transport does not raise on error statuses.
                return response
            stored = ctx.store.fill(
                ticket,
                CacheEntry(
                    key=key,
                    method=method,
                    url=url,
                    params=canonical_params(params),
                    response=response,
                ),
            )
        finally:
            ctx.store.release(ticket)

        if stored:
            ctx.events.emit(EventCategory.CACHE_SET, method=method, url=url, key=key)
        return response

    async def _write(
        self,
        method: str,
        url: str,
        params: Params,
        json: Any,
        headers: dict[str, str] | None,
        invalidate: Invalidation | None,
        t0: float,
    ) -> CachedResponse:
        ctx = self.context
        try:
            matcher = ctx.policy.resolve(method, url, invalidate)
        except InvalidPatternError as exc:
            ctx.events.fail(exc, method=method, url=url)

        response = await self._fetch(method, url, params, json, headers, t0)
        if matcher is None or not response.is_success:
            return response

        removed = ctx.store.remove_pattern(matcher)
        for entry in removed:
            ctx.events.emit(
                EventCategory.CACHE_DROP, method=entry.method, url=entry.url, key=entry.key,
            )
        logger.debug("%s %s dropped %d cache entries", method, url, len(removed))
        return response

    async def _fetch(
        self,
        method: str,
        url: str,
        params: Params,
        json: Any,
        headers: dict[str, str] | None,
        t0: float,
    ) -> CachedResponse:
        try:
            response = await self.transport.perform(
                method, url, params=params, json=json, headers=headers,
            )
        except TransportError as exc:
            duration_ms = (time.monotonic() - t0) * 1000
            logger.warning("%s %s failed: %s", method, url, exc)
            self.context.events.fail(
                exc,
                message=f"failed: {exc}",
                category=EventCategory.HTTP,
                method=method,
                url=url,
                status_code=exc.status_code,
                duration_ms=duration_ms,
            )

        duration_ms = (time.monotonic() - t0) * 1000
        self.context.events.emit(
            EventCategory.HTTP,
            method=method,
            url=url,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        return response
