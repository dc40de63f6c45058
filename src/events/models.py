# src/events/models.py — v1
"""Event log domain models: EventCategory, LogEvent."""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

EventFormat = Literal["text", "json"]


class EventCategory(str, Enum):
    """Kinds of activity recorded by the event log."""

    HTTP = "HTTP"
    CACHE_SET = "CACHE SET"
    CACHE_HIT = "CACHE HIT"
    CACHE_DROP = "CACHE DROP"
    CACHE_CLEAR = "CACHE CLEAR"
    MESSAGE = "MESSAGE"
    ERROR = "ERROR"


class LogEvent(BaseModel):
    """One immutable entry of the event stream."""

    model_config = ConfigDict(frozen=True)

    sequence: int
    timestamp: datetime
    category: EventCategory
    method: str | None = None
    url: str | None = None
    status_code: int | None = None
    duration_ms: float | None = None
    key: str | None = None
    message: str | None = None

    def render(self, fmt: EventFormat = "text") -> str:
        """Render as a single line for a log sink."""
        if fmt == "json":
            return json.dumps(self.as_dict(), default=str)

        parts = [self.timestamp.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3], self.category.value]
        if self.method:
            parts.append(self.method)
        if self.url:
            parts.append(self.url)
        if self.status_code is not None:
            parts.append(str(self.status_code))
        if self.duration_ms is not None:
            parts.append(f"{self.duration_ms:.1f}ms")
        if self.message:
            parts.append(f"- {self.message}")
        return " ".join(parts)

    def as_dict(self) -> dict[str, Any]:
        """Non-None fields, category as its display value."""
        data = self.model_dump(exclude_none=True)
        data["category"] = self.category.value
        data["timestamp"] = self.timestamp.isoformat()
        return data
