"""
Navigator State Contracts

Snapshots of navigator, fetcher and display state.

MODE AS A TAGGED UNION:
=======================
The active discovery mode is exactly one of

    Idle | Browsing(category) | Focused(node_id, media_type) | Searching(query, media_filter)

so "search results", "focus" and "browse category" can never be active
together. Activating one mode replaces the previous variant wholesale.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .base import MediaType, MediaFilter, BrowseCategory, FetchFailure, FetchOutcome
from .graph import GraphData, GraphNode


# =============================================================================
# NAVIGATION
# =============================================================================

@dataclass(frozen=True)
class NavigationHistoryEntry:
    """A node that was the traversal center before the user drilled further."""
    node_id: str
    media_type: MediaType
    title: str

    @staticmethod
    def from_node(node: GraphNode) -> NavigationHistoryEntry:
        return NavigationHistoryEntry(
            node_id=node.id,
            media_type=node.media_type,
            title=node.title,
        )


@dataclass(frozen=True)
class DetailRoute:
    """Outbound navigation target for a node's detail page."""
    media_type: MediaType
    node_id: str

    @property
    def path(self) -> str:
        return f"/{self.media_type.route_segment}/{self.node_id}"

    @staticmethod
    def for_node(node: GraphNode) -> DetailRoute:
        return DetailRoute(media_type=node.media_type, node_id=node.id)


# =============================================================================
# LOADING STATUS
# =============================================================================

class LoadingPhase(Enum):
    """Phases a simulated progress readout moves through."""
    SEARCHING = "searching"
    CLUSTERING = "clustering"
    FETCHING = "fetching"
    VALIDATING = "validating"
    BUILDING = "building"


@dataclass(frozen=True)
class LoadingStatus:
    """
    Transient, simulated progress readout.
    Discarded once a real result or error arrives.
    """
    phase: LoadingPhase
    message: str
    progress: float
    detail: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.progress <= 100.0:
            raise ValueError(f"progress out of range: {self.progress}")


# =============================================================================
# FETCHER STATE
# =============================================================================

class FetchPhase(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FetchState:
    """
    Immutable snapshot of one source fetcher.

    INVARIANT: failure is None unless phase is ERROR. data holds the
    last loaded graph; a refetch keeps it while LOADING and an ERROR
    clears it.
    """
    phase: FetchPhase = FetchPhase.IDLE
    data: Optional[GraphData] = None
    status: Optional[LoadingStatus] = None
    failure: Optional[FetchFailure] = None
    outcome: Optional[FetchOutcome] = None
    generation: int = 0

    @property
    def loading(self) -> bool:
        return self.phase is FetchPhase.LOADING


@dataclass(frozen=True)
class SemanticSearchState:
    query: str = ""
    loading: bool = False
    results: Optional[GraphData] = None


# =============================================================================
# MODE (Tagged union)
# =============================================================================

@dataclass(frozen=True)
class Idle:
    """Nothing selected; the explorer shows its empty state."""
    pass


@dataclass(frozen=True)
class Browsing:
    category: BrowseCategory


@dataclass(frozen=True)
class Focused:
    node_id: str
    media_type: MediaType


@dataclass(frozen=True)
class Searching:
    query: str
    media_filter: MediaFilter = MediaFilter.BOTH


Mode = Union[Idle, Browsing, Focused, Searching]


# =============================================================================
# DISPLAY
# =============================================================================

class DisplaySource(Enum):
    """Which data source won display precedence."""
    SEARCH = "search"
    FOCUSED = "focused"
    BROWSE = "browse"
    NONE = "none"


@dataclass(frozen=True)
class DisplayState:
    """The single {data, loading, status} tuple handed to the render layer."""
    data: Optional[GraphData]
    loading: bool
    status: Optional[LoadingStatus]
    source: DisplaySource

    @staticmethod
    def empty() -> DisplayState:
        return DisplayState(data=None, loading=False, status=None, source=DisplaySource.NONE)
