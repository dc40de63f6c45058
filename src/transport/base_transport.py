# src/transport/base_transport.py — v1
"""Abstract transport interface: the only place network I/O happens."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from restcache.cache.fingerprint import Params
from restcache.cache.models import CachedResponse


class TransportError(Exception):
    """Network or HTTP-level failure of a single request."""

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        response: CachedResponse | None = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        super().__init__(message)


class BaseTransport(ABC):
    """Performs one HTTP request and returns an immutable response."""

    @abstractmethod
    async def perform(
        self,
        method: str,
        url: str,
        params: Params = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> CachedResponse:
        """Execute the request.

        Raises:
            TransportError: On connection problems, timeouts or error statuses.
        """

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
