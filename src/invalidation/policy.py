# src/invalidation/policy.py — v1
"""Per-verb invalidation policy.

Default blast radius of a successful write:

    POST    exact         creation adds a subresource; only the collection changes
    PUT     hierarchical  replacement invalidates the resource and its children
    PATCH   hierarchical  same radius as PUT
    DELETE  hierarchical  the resource and its children are gone

Clearing the whole cache is never implied by a verb; it is an explicit
store operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from restcache.cache.base_cache_store import UrlMatcher
from restcache.invalidation.matchers import ExactUrlMatcher, HierarchicalMatcher, PathPattern
from restcache.invalidation.models import Invalidation, StrategyKind

if TYPE_CHECKING:
    from restcache.config.settings import Settings

DEFAULT_STRATEGIES: dict[str, StrategyKind] = {
    "POST": "exact",
    "PUT": "hierarchical",
    "PATCH": "hierarchical",
    "DELETE": "hierarchical",
}


class InvalidationPolicy:
    """Turns (verb, url, override) into a matcher for the cache store."""

    def __init__(self, strategies: dict[str, StrategyKind] | None = None) -> None:
        self._strategies = dict(DEFAULT_STRATEGIES)
        if strategies:
            self._strategies.update({k.upper(): v for k, v in strategies.items()})

    @classmethod
    def from_settings(cls, settings: Settings) -> InvalidationPolicy:
        return cls(
            {
                "POST": settings.invalidation_post,
                "PUT": settings.invalidation_put,
                "PATCH": settings.invalidation_patch,
                "DELETE": settings.invalidation_delete,
            }
        )

    def strategy_for(self, method: str) -> StrategyKind:
        """Default strategy for a verb ("none" for verbs without one)."""
        return self._strategies.get(method.upper(), "none")

    def resolve(
        self,
        method: str,
        url: str,
        override: Invalidation | None = None,
    ) -> UrlMatcher | None:
        """Build the matcher for a write, or None when nothing is dropped.

        Raises:
            InvalidPatternError: If a pattern override is malformed.
        """
        strategy = override or Invalidation(kind=self.strategy_for(method))
        target = strategy.url or url

        if strategy.kind == "none":
            return None
        if strategy.kind == "exact":
            return ExactUrlMatcher(target)
        if strategy.kind == "hierarchical":
            return HierarchicalMatcher(target)
        if strategy.kind == "pattern":
            return PathPattern(strategy.pattern or "")

        raise ValueError(f"Unsupported invalidation strategy: {strategy.kind!r}")
