# src/cache/fingerprint.py — v2
"""Deterministic request fingerprinting (cache keys).

A key is the hex digest of a canonical JSON description of the request:
upper-cased method, normalised URL, sorted query parameters and, when given,
a canonical JSON body. Two logically identical reads hash to the same key no
matter how the caller ordered its parameters.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Sequence
from typing import Any, Literal
from urllib.parse import parse_qsl, urlsplit

from restcache.cache.models import CacheKey, ParamPairs

HashAlgorithm = Literal["sha256", "sha512", "blake2b"]

Params = Mapping[str, Any] | Sequence[tuple[str, Any]] | None

READ_METHODS = frozenset({"GET", "HEAD"})
WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

_DEFAULT_PORTS = {"http": 80, "https": 443}


def build_key(
    method: str,
    url: str,
    params: Params = None,
    body: Any = None,
    algorithm: HashAlgorithm = "sha256",
) -> CacheKey:
    """Compute the cache key for a request.

    Args:
        method: HTTP verb (case-insensitive).
        url: Absolute or relative URL; its query string is merged with params.
        params: Extra query parameters (mapping or sequence of pairs).
        body: Optional JSON-serialisable body that should affect the key.
        algorithm: hashlib digest name.

    Returns:
        Hex digest string.
    """
    base, query = _split_query(url)
    description: dict[str, Any] = {
        "method": method.upper(),
        "url": base,
        "params": [list(p) for p in canonical_params(params, query)],
    }
    if body is not None:
        description["body"] = body
    raw = json.dumps(description, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.new(algorithm, raw.encode("utf-8")).hexdigest()


def canonical_params(params: Params = None, extra: ParamPairs = ()) -> ParamPairs:
    """Flatten params into a sorted tuple of (name, value) string pairs.

    List values expand to repeated pairs, None values are dropped and
    booleans render as "true"/"false".
    """
    pairs: list[tuple[str, str]] = list(extra)
    items = params.items() if isinstance(params, Mapping) else (params or ())
    for name, value in items:
        values = value if isinstance(value, (list, tuple)) else [value]
        for v in values:
            if v is None:
                continue
            pairs.append((str(name), _stringify(v)))
    return tuple(sorted(pairs))


def canonical_url(url: str) -> str:
    """Normalise a URL for keying (query string and fragment kept apart).

    Scheme and host are lower-cased, default ports dropped and empty path
    segments collapsed. A trailing slash is kept, so "/p" and "/p/" key
    apart; invalidation matching ignores it.
    """
    origin, segments = split_url(url)
    path = "/" + "/".join(segments)
    if segments and urlsplit(url.strip()).path.endswith("/"):
        path += "/"
    return origin + path


def split_url(url: str) -> tuple[str, tuple[str, ...]]:
    """Split a URL into (origin, path segments).

    Origin is "scheme://host[:port]" lower-cased, or "" for relative URLs.
    Segments are the non-empty "/"-separated path components.
    """
    parts = urlsplit(url.strip())
    origin = ""
    if parts.scheme and parts.netloc:
        scheme = parts.scheme.lower()
        host = (parts.hostname or "").lower()
        port = parts.port
        if port is not None and port != _DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"
        origin = f"{scheme}://{host}"
    segments = tuple(s for s in parts.path.split("/") if s)
    return origin, segments


def _split_query(url: str) -> tuple[str, ParamPairs]:
    parts = urlsplit(url.strip())
    query = tuple(parse_qsl(parts.query, keep_blank_values=True))
    return canonical_url(url), query


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
