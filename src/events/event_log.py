# src/events/event_log.py — v1
"""Ordered, append-only stream of HTTP and cache events.

The log is inactive until start() binds it to a sink. While active, each
emit() appends the event to the in-memory history and writes exactly one
line to the sink before returning, so the stream never runs ahead of or
behind the operation it documents. While inactive, emit() does nothing.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn

from restcache.events.models import EventCategory, EventFormat, LogEvent
from restcache.events.sinks import BaseLogSink, create_sink

logger = logging.getLogger(__name__)


class EventLog:
    """Caller-controlled diagnostic event stream."""

    def __init__(self, fmt: EventFormat = "text") -> None:
        self._fmt: EventFormat = fmt
        self._sink: BaseLogSink | None = None
        self._owns_sink = False
        self._events: list[LogEvent] = []
        self._sequence = 0
        self._lock = threading.Lock()

    @property
    def is_active(self) -> bool:
        return self._sink is not None

    @property
    def events(self) -> tuple[LogEvent, ...]:
        """Everything emitted since construction or the last reset()."""
        with self._lock:
            return tuple(self._events)

    def start(
        self,
        destination: str | Path | BaseLogSink,
        fmt: EventFormat | None = None,
    ) -> None:
        """Bind the log to a destination; replaces any previous binding."""
        sink, owned = create_sink(destination)
        self.stop()
        with self._lock:
            self._sink = sink
            self._owns_sink = owned
            if fmt is not None:
                self._fmt = fmt
        logger.debug("Event log started (%s)", type(sink).__name__)

    def stop(self) -> None:
        """Unbind the sink, closing it if the log opened it."""
        with self._lock:
            sink, owned = self._sink, self._owns_sink
            self._sink = None
            self._owns_sink = False
        if sink is not None and owned:
            sink.close()

    def reset(self) -> None:
        """Forget the history and restart sequence numbers."""
        with self._lock:
            self._events.clear()
            self._sequence = 0

    def emit(
        self,
        category: EventCategory,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        duration_ms: float | None = None,
        key: str | None = None,
        message: str | None = None,
    ) -> LogEvent | None:
        """Record one event. No-op returning None while inactive."""
        with self._lock:
            if self._sink is None:
                return None
            self._sequence += 1
            event = LogEvent(
                sequence=self._sequence,
                timestamp=datetime.now(timezone.utc),
                category=category,
                method=method,
                url=url,
                status_code=status_code,
                duration_ms=duration_ms,
                key=key,
                message=message,
            )
            self._events.append(event)
            self._sink.write(event.render(self._fmt))
        return event

    def message(self, text: str) -> LogEvent | None:
        """Interleave a custom caller message."""
        return self.emit(EventCategory.MESSAGE, message=text)

    def fail(
        self,
        error: BaseException,
        message: str | None = None,
        category: EventCategory = EventCategory.ERROR,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        duration_ms: float | None = None,
    ) -> NoReturn:
        """Log an event (ERROR unless told otherwise) for error, then raise it."""
        self.emit(
            category,
            method=method,
            url=url,
            status_code=status_code,
            duration_ms=duration_ms,
            message=message or f"{type(error).__name__}: {error}",
        )
        raise error
