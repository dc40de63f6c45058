# src/cache/models.py — v1
"""Cache domain models: CachedResponse, CacheEntry.

Entries are frozen pydantic models. The store hands out deep copies, so a
caller can never mutate what is held in the cache.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CacheKey = str

ParamPairs = tuple[tuple[str, str], ...]


class CachedResponse(BaseModel):
    """Immutable snapshot of a transport response."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    method: str
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    content: bytes = b""
    elapsed_ms: float = 0.0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        """Body decoded with the declared charset (utf-8 fallback)."""
        return self.content.decode(self._charset(), errors="replace")

    def json(self) -> Any:  # type: ignore[override]
        """Parse the body as JSON."""
        return json.loads(self.text)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup (first match)."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default

    def _charset(self) -> str:
        content_type = self.header("content-type") or ""
        for part in content_type.split(";"):
            part = part.strip()
            if part.lower().startswith("charset="):
                return part.split("=", 1)[1].strip('"') or "utf-8"
        return "utf-8"


class CacheEntry(BaseModel):
    """Single cache entry: a stored response plus the key it lives under."""

    model_config = ConfigDict(frozen=True)

    key: CacheKey
    method: str
    url: str
    params: ParamPairs = ()
    response: CachedResponse
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
