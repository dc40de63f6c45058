# src/transport/httpx_transport.py — v2
"""Transport backed by httpx.AsyncClient."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from restcache.cache.fingerprint import Params
from restcache.cache.models import CachedResponse
from restcache.transport.base_transport import BaseTransport, TransportError

if TYPE_CHECKING:
    from restcache.config.settings import Settings

logger = logging.getLogger(__name__)


class HttpxTransport(BaseTransport):
    """Async HTTP transport.

    Args:
        base_url: Prefix for relative request URLs.
        timeout: Per-request timeout in seconds.
        raise_for_status: Treat 4xx/5xx responses as TransportError.
        follow_redirects: Let httpx follow redirects.
        client: Pre-built client (the transport will not close it).
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        raise_for_status: bool = True,
        follow_redirects: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            follow_redirects=follow_redirects,
        )
        self._raise_for_status = raise_for_status

    @classmethod
    def from_settings(cls, settings: Settings, base_url: str | None = None) -> HttpxTransport:
        return cls(
            base_url=settings.api_base_url if base_url is None else base_url,
            timeout=settings.transport_timeout_s,
            raise_for_status=settings.transport_raise_for_status,
            follow_redirects=settings.transport_follow_redirects,
        )

    async def perform(
        self,
        method: str,
        url: str,
        params: Params = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> CachedResponse:
        method = method.upper()
        t0 = time.monotonic()
        try:
            resp = await self._client.request(
                method, url, params=params, json=json, headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"{method} {url} timed out: {exc}", method, url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", method, url) from exc
        except httpx.InvalidURL as exc:
            # Not an HTTPError subclass.
            raise TransportError(f"{method} {url} is invalid: {exc}", method, url) from exc
        elapsed_ms = (time.monotonic() - t0) * 1000

        response = CachedResponse(
            status_code=resp.status_code,
            method=method,
            url=url,
            headers=tuple(resp.headers.multi_items()),
            content=resp.content,
            elapsed_ms=elapsed_ms,
        )
        if self._raise_for_status and not resp.is_success:
            logger.warning("%s %s returned %d", method, url, resp.status_code)
            raise TransportError(
                f"{method} {url} returned HTTP {resp.status_code}",
                method, url,
                status_code=resp.status_code,
                response=response,
            )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
