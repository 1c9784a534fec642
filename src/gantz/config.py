"""Configuration management for gantz application.

This module provides centralized configuration management using environment variables
and Streamlit secrets as fallback.
"""

import os
from typing import Any

import streamlit as st

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_ADMIN_EMAIL = "2601@gantz.com"
DEFAULT_HOME_VIDEO_URL = "https://youtu.be/kuQ8kiBuFd4?si=afx3Gy9G_0rSwl5v"
DEFAULT_PAGE_SIZE = 24


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        """Initialize configuration."""
        self._cache = {}

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables or Streamlit secrets.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        value = os.getenv(key)

        # Secrets are only readable inside a running Streamlit app
        if value is None:
            try:
                value = st.secrets.get(key)
            except Exception:  # nosec B110
                pass

        if value is None:
            value = default

        if value is not None:
            try:
                if cast_type is bool:
                    if isinstance(value, str):
                        value = value.lower() in ("true", "1", "yes", "on")  # type: ignore[assignment]
                    else:
                        value = bool(value)  # type: ignore[assignment]
                elif cast_type is not str:
                    value = cast_type(value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Failed to cast config value '{key}' to {cast_type.__name__}: {e}")
                value = default

        self._cache[cache_key] = value
        return value

    def is_development(self) -> bool:
        """Check if running in development mode."""
        environment = self.get("ENVIRONMENT", "development").lower()
        return environment in ["development", "dev", "local", "test"]

    def is_production(self) -> bool:
        """Check if running in production mode."""
        environment = self.get("ENVIRONMENT", "development").lower()
        return environment in ["production", "prod"]

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get environment variable with type casting."""
    return get_config().get(key, default, cast_type)


def is_development() -> bool:
    """Check if running in development mode."""
    return get_config().is_development()


def is_production() -> bool:
    """Check if running in production mode."""
    return get_config().is_production()


def get_admin_email() -> str:
    """Get the single admin identity."""
    return str(get_env("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL))


def get_database_path() -> str:
    """Get DuckDB database file path."""
    return str(get_env("DATABASE_PATH", "data/gantz.duckdb"))


def get_feed_page_size() -> int:
    """Get gallery page size."""
    return int(get_env("FEED_PAGE_SIZE", DEFAULT_PAGE_SIZE, int))


def get_home_video_url() -> str:
    """Get the video shown on the landing page."""
    return str(get_env("HOME_VIDEO_URL", DEFAULT_HOME_VIDEO_URL))


def get_home_links() -> list[tuple[str, str]]:
    """Get external links shown on the landing page.

    HOME_LINKS is a comma separated list of ``label|url`` entries.
    """
    raw = str(get_env("HOME_LINKS", "푸슝|https://pushoong.com"))
    links = []
    for entry in raw.split(","):
        label, sep, href = entry.partition("|")
        if sep and label.strip() and href.strip():
            links.append((label.strip(), href.strip()))
    return links
