# src/main.py — v3
"""CLI entry point: fetch and replay commands.

Usage:
    restcache fetch <url> [<url> ...] [options]
    restcache replay <trace.jsonl> [options]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from restcache.config.settings import ConfigurationError, Settings
from restcache.logging.logger import get_logger, setup_logging
from restcache.version import __version__

logger = get_logger("cli")


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = _load_settings()
    if settings is None:
        return 1
    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    args.settings = settings
    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="restcache",
        description=f"restcache v{__version__}: caching REST client diagnostics",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- fetch ---
    p_fetch = subparsers.add_parser(
        "fetch", help="GET URLs through one cached client",
    )
    p_fetch.add_argument("urls", nargs="+", help="URLs (relative to --base-url if set)")
    p_fetch.add_argument("--base-url", default=None, help="API base URL")
    p_fetch.add_argument(
        "-n", "--repeat", type=int, default=2,
        help="Rounds over the URL list (default: 2)",
    )
    p_fetch.add_argument(
        "--events", default=None,
        help="Event log destination: stdout, stderr, logging or a file path",
    )
    p_fetch.set_defaults(func=_cmd_fetch)

    # --- replay ---
    p_replay = subparsers.add_parser(
        "replay", help="Replay a JSON Lines request trace",
    )
    p_replay.add_argument("trace", type=Path, help="Path to the trace file")
    p_replay.add_argument("--base-url", default=None, help="API base URL")
    p_replay.add_argument(
        "--events", default=None,
        help="Event log destination: stdout, stderr, logging or a file path",
    )
    p_replay.set_defaults(func=_cmd_replay)

    return parser


async def _cmd_fetch(args: argparse.Namespace) -> int:
    """GET every URL, args.repeat times, and report hits."""
    from restcache.client.cached_client import CachedClient
    from restcache.events.models import EventCategory

    if args.repeat < 1:
        logger.error("--repeat must be >= 1")
        return 1

    async with CachedClient(base_url=args.base_url, settings=args.settings) as client:
        _start_events(client, args.events)
        for round_no in range(1, args.repeat + 1):
            for url in args.urls:
                before = len(client.context.events.events)
                response = await client.get(url)
                new = client.context.events.events[before:]
                cached = any(e.category == EventCategory.CACHE_HIT for e in new)
                print(
                    f"[{round_no}] {response.status_code} {url} "
                    f"{len(response.content)}B {'cached' if cached else 'fetched'}"
                )
        _print_summary(client.context.events.events)
    return 0


async def _cmd_replay(args: argparse.Namespace) -> int:
    """Replay a trace of requests and print a summary."""
    from restcache.client.cached_client import CachedClient
    from restcache.transport.base_transport import TransportError

    trace_path: Path = args.trace
    if not trace_path.exists():
        logger.error("File not found: %s", trace_path)
        return 1

    records = _load_trace(trace_path)
    failures = 0
    async with CachedClient(base_url=args.base_url, settings=args.settings) as client:
        _start_events(client, args.events)
        for record in records:
            if "message" in record:
                client.log_message(str(record["message"]))
                continue
            if record.get("clear"):
                client.clear_cache()
                continue
            try:
                await client.request(
                    record.get("method", "GET"),
                    record["url"],
                    params=record.get("params"),
                    json=record.get("json"),
                    invalidate=_parse_invalidation(record.get("invalidate")),
                )
            except TransportError as exc:
                failures += 1
                logger.warning("Request failed: %s", exc)
        _print_summary(client.context.events.events, failures=failures)
    return 0


def _load_settings() -> Settings | None:
    """Load settings from the environment; None if they are invalid.

    Runs before logging is configured, so problems go straight to stderr.
    """
    try:
        return Settings()
    except (ConfigurationError, ValidationError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return None


def _start_events(client: Any, destination: str | None) -> None:
    """Start the event log; history is needed for the summary either way."""
    from restcache.events.sinks import MemorySink

    client.start_log(destination or MemorySink())


def _load_trace(path: Path) -> list[dict[str, Any]]:
    """Read a JSON Lines trace, skipping blank and '#' lines."""
    records: list[dict[str, Any]] = []
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}:{lineno}: invalid JSON ({exc.msg})") from exc
        if not isinstance(record, dict):
            raise ValueError(f"{path}:{lineno}: expected an object")
        if "url" not in record and "message" not in record and not record.get("clear"):
            raise ValueError(f"{path}:{lineno}: record needs 'url', 'message' or 'clear'")
        records.append(record)
    return records


def _parse_invalidation(value: Any) -> Any:
    """Map a trace "invalidate" value onto an Invalidation variant."""
    from restcache.invalidation.models import Invalidation

    if value is None:
        return None
    if value == "none":
        return Invalidation.none()
    if value == "exact":
        return Invalidation.exact()
    if value == "hierarchical":
        return Invalidation.hierarchical()
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind == "exact":
            return Invalidation.exact(value.get("url"))
        if kind == "hierarchical":
            return Invalidation.hierarchical(value.get("url"))
        if kind == "pattern":
            return Invalidation.matching(str(value.get("pattern", "")))
    raise ValueError(f"Unsupported invalidate value: {value!r}")


def _print_summary(events: Any, failures: int = 0) -> None:
    """Print counts per event category."""
    counts = Counter(e.category.value for e in events)
    print("\nSummary:")
    print(f"  Transport calls: {counts.get('HTTP', 0)}")
    print(f"  Cache hits:      {counts.get('CACHE HIT', 0)}")
    print(f"  Cache sets:      {counts.get('CACHE SET', 0)}")
    print(f"  Cache drops:     {counts.get('CACHE DROP', 0)}")
    if failures:
        print(f"  Failures:        {failures}")


if __name__ == "__main__":
    sys.exit(main())
