"""
Base Contracts and Shared Types

These are the foundational types used across the navigator.
All types here are IMMUTABLE and represent pure data.

ERROR STATES:
=============
Fetch failures are data, not exceptions. Every failure is classified
with an explicit FetchOutcome so a network blip and a genuinely empty
result remain distinguishable internally, even though both render the
same empty state.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


# =============================================================================
# MEDIA IDENTITY
# =============================================================================

class MediaType(Enum):
    """Kind of library item a graph node stands for."""
    MOVIE = "movie"
    SERIES = "series"

    @property
    def route_segment(self) -> str:
        """Path segment of the detail page for this media type."""
        return "movies" if self is MediaType.MOVIE else "series"


class MediaFilter(Enum):
    """Media restriction applied to semantic search."""
    MOVIE = "movie"
    SERIES = "series"
    BOTH = "both"


class BrowseCategory(Enum):
    """
    Fixed preset data sources for the browse mode.

    Each value is also the backend graph endpoint segment.
    """
    AI_MOVIES = "ai-movies"
    AI_SERIES = "ai-series"
    WATCHING = "watching"
    TOP_MOVIES = "top-movies"
    TOP_SERIES = "top-series"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    BrowseCategory.AI_MOVIES: "My AI Movie Picks",
    BrowseCategory.AI_SERIES: "My AI Series Picks",
    BrowseCategory.WATCHING: "Shows You Watch",
    BrowseCategory.TOP_MOVIES: "Top Picks Movies",
    BrowseCategory.TOP_SERIES: "Top Picks Series",
}


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class FetchOutcome(Enum):
    """
    Classification of a completed fetch.

    Every outcome except SUCCESS renders as the same empty state.
    """
    SUCCESS = "success"
    EMPTY = "empty"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    INVALID_RESPONSE = "invalid_response"

    @property
    def is_failure(self) -> bool:
        return self not in (FetchOutcome.SUCCESS, FetchOutcome.EMPTY)


@dataclass(frozen=True)
class FetchFailure:
    """
    Immutable failure record with full context.
    Failures are data: they can be stored, logged and queried.
    """
    outcome: FetchOutcome
    message: str
    occurred_at: datetime
    http_status: Optional[int] = None

    def __post_init__(self):
        if not self.outcome.is_failure:
            raise ValueError(f"{self.outcome.value} is not a failure outcome")

    @staticmethod
    def create(
        outcome: FetchOutcome,
        message: str,
        http_status: Optional[int] = None
    ) -> FetchFailure:
        return FetchFailure(
            outcome=outcome,
            message=message,
            occurred_at=datetime.now(timezone.utc),
            http_status=http_status,
        )
