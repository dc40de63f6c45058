# tests/conftest.py — v3
"""Shared test fixtures for all unit and integration tests.

Provides a recording fake transport, an in-memory event sink and fresh cache
contexts. No network access: all I/O is faked.
"""

from __future__ import annotations

import asyncio
import json as jsonlib
from typing import Any

import pytest

from restcache.cache.models import CachedResponse
from restcache.client.cached_client import CachedClient
from restcache.client.context import CacheContext
from restcache.client.dispatcher import RequestDispatcher
from restcache.events.sinks import MemorySink
from restcache.transport.base_transport import BaseTransport, TransportError


class FakeTransport(BaseTransport):
    """Transport double that records calls and echoes requests as JSON.

    Responses can be scripted per (METHOD, url) with set_status() or made to
    fail with fail_on(), or held in flight with hold().
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, Any, Any]] = []
        self._statuses: dict[tuple[str, str], int] = {}
        self._failures: dict[tuple[str, str], TransportError] = {}
        self._gates: dict[tuple[str, str], asyncio.Event] = {}
        self.closed = False

    def set_status(self, method: str, url: str, status: int) -> None:
        self._statuses[(method.upper(), url)] = status

    def fail_on(self, method: str, url: str, status_code: int | None = None) -> None:
        method = method.upper()
        self._failures[(method, url)] = TransportError(
            f"{method} {url} failed", method, url, status_code=status_code,
        )

    def hold(self, method: str, url: str) -> asyncio.Event:
        """Make requests for (method, url) wait until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(method.upper(), url)] = gate
        return gate

    def calls_for(self, method: str, url: str) -> int:
        return sum(1 for m, u, _, _ in self.calls if m == method.upper() and u == url)

    async def perform(
        self,
        method: str,
        url: str,
        params: Any = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> CachedResponse:
        method = method.upper()
        self.calls.append((method, url, params, json))
        gate = self._gates.get((method, url))
        if gate is not None:
            await gate.wait()
        failure = self._failures.get((method, url))
        if failure is not None:
            raise failure
        body = {"method": method, "url": url, "call": len(self.calls), "json": json}
        return CachedResponse(
            status_code=self._statuses.get((method, url), 200),
            method=method,
            url=url,
            headers=(("content-type", "application/json"),),
            content=jsonlib.dumps(body).encode("utf-8"),
        )

    async def aclose(self) -> None:
        self.closed = True


# === FIXTURES ===


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def context() -> CacheContext:
    """Fresh, isolated cache context."""
    return CacheContext()


@pytest.fixture
def logged_context(context: CacheContext, sink: MemorySink) -> CacheContext:
    """Context whose event log is already recording into the memory sink."""
    context.events.start(sink)
    return context


@pytest.fixture
def dispatcher(transport: FakeTransport, logged_context: CacheContext) -> RequestDispatcher:
    return RequestDispatcher(transport, logged_context)


@pytest.fixture
def client(transport: FakeTransport, logged_context: CacheContext) -> CachedClient:
    return CachedClient(transport=transport, context=logged_context)
