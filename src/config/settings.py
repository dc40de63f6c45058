# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Every field can be set through a RESTCACHE_-prefixed environment variable,
e.g. RESTCACHE_API_BASE_URL or RESTCACHE_INVALIDATION_POST.
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from restcache.cache.fingerprint import READ_METHODS, WRITE_METHODS

StrategyName = Literal["none", "exact", "hierarchical"]


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="RESTCACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Transport ===
    api_base_url: str = ""
    transport_timeout_s: float = 10.0
    transport_raise_for_status: bool = True
    transport_follow_redirects: bool = True

    # === Cache ===
    cache_enabled: bool = True
    cache_backend: Literal["memory"] = "memory"
    cache_key_algorithm: Literal["sha256", "sha512", "blake2b"] = "sha256"
    cache_read_methods: str = "GET,HEAD"

    # === Invalidation (default strategy per write verb) ===
    invalidation_post: StrategyName = "exact"
    invalidation_put: StrategyName = "hierarchical"
    invalidation_patch: StrategyName = "hierarchical"
    invalidation_delete: StrategyName = "hierarchical"

    # === Event log ===
    event_log_enabled: bool = False
    event_log_destination: str = "stderr"
    event_log_format: Literal["text", "json"] = "text"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str | None = None

    # --- Validators ---

    @field_validator("transport_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError("transport_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        methods = self.cache_read_methods_list
        if not methods:
            errors.append("CACHE_READ_METHODS must name at least one verb")
        if set(methods) & WRITE_METHODS:
            errors.append("CACHE_READ_METHODS must not include write verbs")
        elif set(methods) - READ_METHODS:
            errors.append(
                f"CACHE_READ_METHODS only supports {sorted(READ_METHODS)}"
            )

        if self.event_log_enabled and not self.event_log_destination.strip():
            errors.append("EVENT_LOG_ENABLED requires EVENT_LOG_DESTINATION")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def cache_read_methods_list(self) -> list[str]:
        """Parse comma-separated read verbs (upper-cased)."""
        return [m.strip().upper() for m in self.cache_read_methods.split(",") if m.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
