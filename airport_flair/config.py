"""
Central configuration loaded from environment variables with sensible defaults.
Registry sources and link templates can be overridden per deployment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class SourceConfig:
    primary_source: str = os.getenv(
        "FLAIR_PRIMARY_SOURCE",
        "https://raw.githubusercontent.com/s5kf/airport_flair/main/airports_filtered.json",
    )
    group_source: str = os.getenv(
        "FLAIR_GROUP_SOURCE", str(_PACKAGE_DIR / "data" / "metro_areas.json")
    )
    request_timeout: float = float(os.getenv("FLAIR_SOURCE_TIMEOUT", "30"))
    user_agent: str = os.getenv("FLAIR_USER_AGENT", "airport-flair/0.4")


@dataclass(frozen=True)
class MarkupConfig:
    # {query} is replaced with the URL-encoded display name
    search_url: str = os.getenv("FLAIR_SEARCH_URL", "https://www.google.com/search?q={query}")
    # {region} is replaced with the lowercase two-letter region code
    flag_url: str = os.getenv(
        "FLAIR_FLAG_URL",
        "https://cdnjs.cloudflare.com/ajax/libs/flag-icon-css/4.1.5/flags/4x3/{region}.svg",
    )
    link_target: str = os.getenv("FLAIR_LINK_TARGET", "_blank")


@dataclass(frozen=True)
class Settings:
    sources: SourceConfig = field(default_factory=SourceConfig)
    markup: MarkupConfig = field(default_factory=MarkupConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")
    # comma-separated module names logged at DEBUG, e.g. "lifecycle,scanner"
    debug_modules: str = os.getenv("FLAIR_DEBUG", "")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
