# tests/unit/invalidation/test_matchers.py — v1
"""Tests for invalidation/matchers.py — segment-aware URL matching."""

from __future__ import annotations

import pytest

from restcache.invalidation.matchers import (
    ExactUrlMatcher,
    HierarchicalMatcher,
    InvalidPatternError,
    PathPattern,
)


class TestExactUrlMatcher:
    def test_same_url(self):
        assert ExactUrlMatcher("/projects/").matches("/projects/")

    def test_trailing_slash_insensitive(self):
        assert ExactUrlMatcher("/projects/").matches("/projects")

    def test_query_variants_match(self):
        assert ExactUrlMatcher("/projects").matches("/projects?page=2")

    def test_children_do_not_match(self):
        assert not ExactUrlMatcher("/projects/").matches("/projects/42")

    def test_origin_must_match(self):
        m = ExactUrlMatcher("https://a.example.com/x")
        assert m.matches("https://A.example.com/x")
        assert not m.matches("https://b.example.com/x")
        assert not m.matches("/x")


class TestHierarchicalMatcher:
    def test_root_and_children(self):
        m = HierarchicalMatcher("/projects/1")
        assert m.matches("/projects/1")
        assert m.matches("/projects/1/users")
        assert m.matches("/projects/1/users/7?active=true")

    def test_no_string_prefix_false_match(self):
        m = HierarchicalMatcher("/projects/1")
        assert not m.matches("/projects/10")
        assert not m.matches("/projects/10/users")
        assert not m.matches("/projects/1x")

    def test_parent_not_matched(self):
        assert not HierarchicalMatcher("/projects/1").matches("/projects")

    def test_root_slash_matches_everything_relative(self):
        m = HierarchicalMatcher("/")
        assert m.matches("/a")
        assert m.matches("/a/b/c")

    def test_absolute_root(self):
        m = HierarchicalMatcher("http://api.local/v1")
        assert m.matches("http://api.local/v1/projects")
        assert not m.matches("http://api.local/v10/projects")


class TestPathPattern:
    def test_single_wildcard(self):
        p = PathPattern("/projects/*/users")
        assert p.matches("/projects/1/users")
        assert p.matches("/projects/abc/users")
        assert not p.matches("/projects/1/users/2")
        assert not p.matches("/projects/users")

    def test_recursive_wildcard(self):
        p = PathPattern("/projects/1/**")
        assert p.matches("/projects/1")
        assert p.matches("/projects/1/a/b")
        assert not p.matches("/projects/10")

    def test_literal(self):
        p = PathPattern("/a/b")
        assert p.matches("/a/b/")
        assert not p.matches("/a/bb")

    def test_absolute_pattern(self):
        p = PathPattern("https://api.example.com/v1/*")
        assert p.matches("https://api.example.com/v1/x")
        assert not p.matches("/v1/x")

    @pytest.mark.parametrize(
        "pattern",
        ["", "   ", "projects/*", "/a/**/b", "/a/b*", "/a?x=1", "/a#frag", "http:///a"],
    )
    def test_invalid_patterns(self, pattern):
        with pytest.raises(InvalidPatternError):
            PathPattern(pattern)

    def test_invalid_pattern_is_value_error(self):
        with pytest.raises(ValueError, match="Invalid invalidation pattern"):
            PathPattern("nope")
