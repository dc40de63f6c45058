# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests.

The real HttpxTransport is exercised end to end against an in-process
httpx.MockTransport, so no network or containers are needed. The mock
API keeps a tiny resource tree and counts the requests it serves.
"""

from __future__ import annotations

import json
from collections import Counter

import httpx
import pytest
import pytest_asyncio

from restcache.client.cached_client import CachedClient
from restcache.client.context import CacheContext
from restcache.events.sinks import MemorySink
from restcache.transport.httpx_transport import HttpxTransport

BASE_URL = "https://api.test"


class MockApi:
    """In-process REST API backing httpx.MockTransport."""

    def __init__(self) -> None:
        self.resources: dict[str, object] = {}
        self.hits: Counter[tuple[str, str]] = Counter()
        self.fail_paths: dict[str, int] = {}

    def served(self, method: str, path: str) -> int:
        return self.hits[(method, path)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.hits[(request.method, path)] += 1
        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], json={"error": "unavailable"})
        if request.method in ("GET", "HEAD"):
            if path not in self.resources:
                return httpx.Response(404, json={"error": "not found"})
            body = {
                "path": path,
                "query": dict(request.url.params),
                "value": self.resources[path],
                "served": self.served(request.method, path),
            }
            return httpx.Response(200, json=body)
        if request.method in ("POST", "PUT", "PATCH"):
            payload = json.loads(request.content or b"null")
            self.resources[path] = payload
            return httpx.Response(201 if request.method == "POST" else 200, json=payload)
        if request.method == "DELETE":
            self.resources.pop(path, None)
            return httpx.Response(204)
        return httpx.Response(405)


@pytest.fixture
def api() -> MockApi:
    api = MockApi()
    for path in ("/a", "/a/b", "/projects/", "/projects/1", "/projects/1/users",
                 "/projects/10", "/projects/42"):
        api.resources[path] = {"name": path}
    return api


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest_asyncio.fixture
async def api_client(api: MockApi, sink: MemorySink):
    """CachedClient over HttpxTransport routed to the mock API, logging to sink."""
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(api.handler))
    context = CacheContext()
    context.events.start(sink)
    client = CachedClient(transport=HttpxTransport(client=http), context=context)
    yield client
    await client.aclose()
    await http.aclose()
