# src/events/sinks.py — v1
"""Destinations for rendered event lines."""

from __future__ import annotations

import logging
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO


class BaseLogSink(ABC):
    """Receives one rendered line per event."""

    @abstractmethod
    def write(self, line: str) -> None:
        """Write a single line (no trailing newline)."""

    def close(self) -> None:
        """Release resources. Default: nothing to release."""


class StreamSink(BaseLogSink):
    """Writes to an already-open text stream (not closed by us)."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, line: str) -> None:
        self._stream.write(line + "\n")
        self._stream.flush()


class FileSink(BaseLogSink):
    """Appends lines to a file, creating parent directories."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle: TextIO | None = self.path.open("a", encoding="utf-8")

    def write(self, line: str) -> None:
        if self._handle is None:
            raise ValueError(f"FileSink for {self.path} is closed")
        self._handle.write(line + "\n")
        self._handle.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class LoggerSink(BaseLogSink):
    """Forwards lines to a stdlib logger at INFO."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("restcache.events")

    def write(self, line: str) -> None:
        self._logger.info(line)


class MemorySink(BaseLogSink):
    """Keeps lines in memory."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._lock = threading.Lock()

    def write(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)


def create_sink(destination: str | Path | BaseLogSink) -> tuple[BaseLogSink, bool]:
    """Resolve a destination into a sink.

    Args:
        destination: "stdout", "stderr", "logging", a file path, or a sink.

    Returns:
        (sink, owned) where owned tells the caller whether it should close
        the sink when done with it.
    """
    if isinstance(destination, BaseLogSink):
        return destination, False
    if destination == "stdout":
        return StreamSink(sys.stdout), True
    if destination == "stderr":
        return StreamSink(sys.stderr), True
    if destination == "logging":
        return LoggerSink(), True
    if not str(destination).strip():
        raise ValueError("Event log destination is empty")
    return FileSink(destination), True
