# src/__init__.py — v1
"""restcache: a caching layer for REST API clients.

Reads are served from an in-process cache, successful writes invalidate the
affected entries, and an optional event log records HTTP and cache activity.
"""

from restcache.client.cached_client import CachedClient
from restcache.client.context import CacheContext
from restcache.client.dispatcher import RequestDispatcher
from restcache.invalidation.matchers import InvalidPatternError
from restcache.invalidation.models import Invalidation
from restcache.transport.base_transport import BaseTransport, TransportError
from restcache.version import __version__

__all__ = [
    "BaseTransport",
    "CacheContext",
    "CachedClient",
    "Invalidation",
    "InvalidPatternError",
    "RequestDispatcher",
    "TransportError",
    "__version__",
]
