# tests/unit/config/test_settings.py — v3
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from restcache.cache.fingerprint import READ_METHODS, WRITE_METHODS
from restcache.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_transport(self):
        s = Settings(_env_file=None)
        assert s.api_base_url == ""
        assert s.transport_timeout_s == 10.0
        assert s.transport_raise_for_status is True

    def test_default_cache(self):
        s = Settings(_env_file=None)
        assert s.cache_enabled is True
        assert s.cache_backend == "memory"
        assert s.cache_read_methods_list == ["GET", "HEAD"]

    def test_default_invalidation(self):
        s = Settings(_env_file=None)
        assert s.invalidation_post == "exact"
        assert s.invalidation_put == "hierarchical"
        assert s.invalidation_patch == "hierarchical"
        assert s.invalidation_delete == "hierarchical"

    def test_default_event_log_disabled(self):
        s = Settings(_env_file=None)
        assert s.event_log_enabled is False
        assert s.event_log_format == "text"


class TestSettingsValidation:
    def test_v01_empty_read_methods(self):
        with pytest.raises(ConfigurationError, match="at least one"):
            Settings(_env_file=None, cache_read_methods=" , ")

    def test_v02_write_verb_as_read(self):
        with pytest.raises(ConfigurationError, match="write verbs"):
            Settings(_env_file=None, cache_read_methods="GET,POST")

    @pytest.mark.parametrize("verb", sorted(WRITE_METHODS))
    def test_v02_every_write_verb_rejected(self, verb):
        with pytest.raises(ConfigurationError, match="write verbs"):
            Settings(_env_file=None, cache_read_methods=f"GET,{verb.lower()}")

    def test_all_read_verbs_accepted(self):
        s = Settings(_env_file=None, cache_read_methods=",".join(sorted(READ_METHODS)))
        assert set(s.cache_read_methods_list) == READ_METHODS

    def test_v03_unknown_read_verb(self):
        with pytest.raises(ConfigurationError, match="only supports"):
            Settings(_env_file=None, cache_read_methods="GET,OPTIONS")

    def test_v04_event_log_without_destination(self):
        with pytest.raises(ConfigurationError, match="EVENT_LOG_DESTINATION"):
            Settings(_env_file=None, event_log_enabled=True, event_log_destination=" ")

    def test_multiple_errors_joined(self):
        with pytest.raises(ConfigurationError, match="; "):
            Settings(
                _env_file=None,
                cache_read_methods="PUT",
                event_log_enabled=True,
                event_log_destination="",
            )

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="transport_timeout_s"):
            Settings(_env_file=None, transport_timeout_s=0)

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, invalidation_post="everything")

    def test_read_methods_normalized(self):
        s = Settings(_env_file=None, cache_read_methods=" get ")
        assert s.cache_read_methods_list == ["GET"]


class TestSettingsEnv:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("RESTCACHE_INVALIDATION_POST", "hierarchical")
        monkeypatch.setenv("RESTCACHE_API_BASE_URL", "https://api.test")
        s = Settings(_env_file=None)
        assert s.invalidation_post == "hierarchical"
        assert s.api_base_url == "https://api.test"

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("RESTCACHE_CACHE_ENABLED=false\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.cache_enabled is False


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(_env_file=None, event_log_format="json")
        assert s.event_log_format == "json"

    def test_propagates_configuration_error(self):
        with pytest.raises(ConfigurationError):
            load_settings(_env_file=None, cache_read_methods="DELETE")
