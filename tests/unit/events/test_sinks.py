# tests/unit/events/test_sinks.py — v1
"""Tests for events/sinks.py — sink implementations and create_sink()."""

from __future__ import annotations

import io
import logging
import sys

import pytest

from restcache.events.sinks import (
    FileSink,
    LoggerSink,
    MemorySink,
    StreamSink,
    create_sink,
)


class TestStreamSink:
    def test_writes_lines(self):
        buf = io.StringIO()
        sink = StreamSink(buf)
        sink.write("a")
        sink.write("b")
        assert buf.getvalue() == "a\nb\n"


class TestFileSink:
    def test_appends_and_creates_dirs(self, tmp_path):
        path = tmp_path / "nested" / "events.log"
        sink = FileSink(path)
        sink.write("one")
        sink.close()
        sink = FileSink(path)
        sink.write("two")
        sink.close()
        assert path.read_text(encoding="utf-8") == "one\ntwo\n"

    def test_write_after_close(self, tmp_path):
        sink = FileSink(tmp_path / "e.log")
        sink.close()
        with pytest.raises(ValueError, match="closed"):
            sink.write("x")


class TestLoggerSink:
    def test_forwards_to_logger(self, caplog):
        with caplog.at_level(logging.INFO, logger="restcache.events"):
            LoggerSink().write("CACHE HIT GET /a")
        assert "CACHE HIT GET /a" in caplog.text


class TestCreateSink:
    def test_existing_sink_not_owned(self):
        sink = MemorySink()
        assert create_sink(sink) == (sink, False)

    def test_stdout_stderr(self):
        out, owned = create_sink("stdout")
        assert isinstance(out, StreamSink) and owned
        assert out._stream is sys.stdout
        err, _ = create_sink("stderr")
        assert err._stream is sys.stderr

    def test_logging(self):
        sink, owned = create_sink("logging")
        assert isinstance(sink, LoggerSink) and owned

    def test_path(self, tmp_path):
        sink, owned = create_sink(tmp_path / "x.log")
        assert isinstance(sink, FileSink) and owned
        sink.close()

    def test_empty(self):
        with pytest.raises(ValueError, match="empty"):
            create_sink("  ")
