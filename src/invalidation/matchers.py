# src/invalidation/matchers.py — v1
"""URL matchers used to select cache entries for removal.

All matching is done on path segments: "/projects/1" covers
"/projects/1/users" but never "/projects/10". Query strings and fragments
are ignored, so every parameter variant of a resource is covered.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from restcache.cache.fingerprint import split_url

WILDCARD = "*"
RECURSIVE_WILDCARD = "**"


class InvalidPatternError(ValueError):
    """Raised when an invalidation pattern cannot be parsed."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid invalidation pattern {pattern!r}: {reason}")


class ExactUrlMatcher:
    """Matches the resource at url and nothing below it."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._origin, self._segments = split_url(url)

    def matches(self, url: str) -> bool:
        origin, segments = split_url(url)
        return origin == self._origin and segments == self._segments

    def __repr__(self) -> str:
        return f"ExactUrlMatcher({self.url!r})"


class HierarchicalMatcher:
    """Matches the resource at root and every resource beneath it."""

    def __init__(self, root: str) -> None:
        self.root = root
        self._origin, self._segments = split_url(root)

    def matches(self, url: str) -> bool:
        origin, segments = split_url(url)
        if origin != self._origin or len(segments) < len(self._segments):
            return False
        return segments[: len(self._segments)] == self._segments

    def __repr__(self) -> str:
        return f"HierarchicalMatcher({self.root!r})"


class PathPattern:
    """Segment-wise URL pattern.

    "*" matches exactly one segment; a trailing "**" matches zero or more
    segments. Everything else is compared literally.

    Example:
        >>> PathPattern("/projects/*/users").matches("/projects/7/users")
        True
        >>> PathPattern("/projects/1/**").matches("/projects/10")
        False
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._origin, self._segments, self._recursive = _parse_pattern(pattern)

    def matches(self, url: str) -> bool:
        origin, segments = split_url(url)
        if origin != self._origin:
            return False
        fixed = len(self._segments)
        if self._recursive:
            if len(segments) < fixed:
                return False
        elif len(segments) != fixed:
            return False
        return all(
            expected == WILDCARD or expected == actual
            for expected, actual in zip(self._segments, segments)
        )

    def __repr__(self) -> str:
        return f"PathPattern({self.pattern!r})"


def _parse_pattern(pattern: str) -> tuple[str, tuple[str, ...], bool]:
    """Validate pattern and return (origin, fixed segments, recursive)."""
    if not isinstance(pattern, str) or not pattern.strip():
        raise InvalidPatternError(str(pattern), "pattern is empty")

    text = pattern.strip()
    parts = urlsplit(text)
    if "?" in text or "#" in text:
        raise InvalidPatternError(pattern, "query strings and fragments are not allowed")
    if parts.scheme and not parts.netloc:
        raise InvalidPatternError(pattern, "absolute pattern has no host")
    if not parts.scheme and not text.startswith("/"):
        raise InvalidPatternError(pattern, "pattern must start with '/' or be an absolute URL")

    origin, segments = split_url(text)
    recursive = False
    if segments and segments[-1] == RECURSIVE_WILDCARD:
        recursive = True
        segments = segments[:-1]

    for segment in segments:
        if segment == RECURSIVE_WILDCARD:
            raise InvalidPatternError(pattern, "'**' is only allowed as the last segment")
        if WILDCARD in segment and segment != WILDCARD:
            raise InvalidPatternError(
                pattern, f"segment {segment!r} mixes '*' with other characters"
            )
    return origin, segments, recursive
