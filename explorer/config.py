"""
Navigator Configuration

Unified configuration for the navigator and its collaborators.
Every section has working defaults; ExplorerConfig.from_env() applies
environment overrides for deployment.

ENVIRONMENT:
============
EXPLORER_API_URL          Base URL of the similarity service
EXPLORER_API_TIMEOUT      Request timeout in seconds
EXPLORER_SESSION_COOKIE   Session cookie forwarded with every request
EXPLORER_RECENT_PATH      JSON file for recent searches (memory if unset)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import os


@dataclass
class ProviderConfig:
    """Configuration for the HTTP graph provider."""
    base_url: str = "http://localhost:3456"
    timeout: float = 30.0
    user_agent: str = "ExploreNavigator/1.0"
    session_cookie: Optional[str] = None
    cookie_name: str = "aperture_session"


@dataclass
class FetchLimits:
    """Request sizes for each data source."""
    browse_limit: int = 20
    focused_limit: int = 15
    focused_depth: int = 3
    search_limit: int = 20


@dataclass
class ProgressConfig:
    """Progress simulator tick rate."""
    interval_seconds: float = 0.3


@dataclass
class RecentSearchConfig:
    """Recent-query persistence."""
    storage_path: Optional[str] = None  # None keeps recent searches in memory
    max_entries: int = 5


@dataclass
class ExplorerConfig:
    """Unified configuration for the navigator."""
    provider: ProviderConfig = None
    limits: FetchLimits = None
    progress: ProgressConfig = None
    recent: RecentSearchConfig = None

    def __post_init__(self):
        self.provider = self.provider or ProviderConfig()
        self.limits = self.limits or FetchLimits()
        self.progress = self.progress or ProgressConfig()
        self.recent = self.recent or RecentSearchConfig()

    @classmethod
    def from_env(cls) -> 'ExplorerConfig':
        """Build a config from defaults plus environment overrides."""
        provider = ProviderConfig()
        provider.base_url = os.environ.get("EXPLORER_API_URL", provider.base_url)
        timeout = os.environ.get("EXPLORER_API_TIMEOUT")
        if timeout:
            provider.timeout = float(timeout)
        provider.session_cookie = os.environ.get("EXPLORER_SESSION_COOKIE")

        recent = RecentSearchConfig(
            storage_path=os.environ.get("EXPLORER_RECENT_PATH") or None
        )

        return cls(provider=provider, recent=recent)
