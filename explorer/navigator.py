"""
Navigator Controller
====================

Orchestration surface of the explorer. Handles node clicks (drill in),
node double-clicks (exit to the detail page), history navigation, mode
switches and start over.

STATE MACHINE:
==============
Three mutually exclusive modes, each owning one fetcher:

    Browsing(category)      -> BrowseCategoryFetcher
    Focused(node, type)     -> FocusedNodeFetcher
    Searching(query)        -> SemanticSearchFetcher

plus Idle. Moving to a mode always clears the other two fetchers.
Within Focused, a drill-in pushes the current center and refocuses
without leaving the mode.

CONCURRENCY:
============
Operations are coroutines. Each mutates mode and selection state before
its first await, so overlapping operations interleave like UI events.
A superseded operation's fetch still completes, but the fetcher's
generation guard discards its result.
"""

from __future__ import annotations
from typing import Callable, Optional, Tuple
import random

from .config import ExplorerConfig
from .contracts import (
    BrowseCategory, Browsing, DetailRoute, DisplayState, Focused, GraphNode,
    Idle, MediaFilter, MediaType, Mode, NavigationHistoryEntry, Searching,
    SemanticSearchState,
)
from .navigation import Breadcrumb, NavigationHistoryStack
from .observability import DiagnosticsCollector, DiagnosticEventType
from .recent import (
    InMemoryRecentQueryStore, JsonFileRecentQueryStore, RecentQueryStore, RecentSearches,
)
from .resolver import resolve_display
from .sources import (
    BrowseCategoryFetcher, FocusedNodeFetcher, GraphProvider, SemanticSearchFetcher,
)
from .temporal import LogicalClock


class NavigatorClosed(RuntimeError):
    """Raised when an operation is attempted after teardown."""
    pass


def parse_focus(value: Optional[str]) -> Optional[Focused]:
    """
    Parse a "movie:123" / "series:456" focus parameter.

    Returns None for anything malformed.
    """
    if not value:
        return None
    kind, _, node_id = value.partition(":")
    try:
        media_type = MediaType(kind)
    except ValueError:
        return None
    if not node_id:
        return None
    return Focused(node_id=node_id, media_type=media_type)


class ExploreNavigator:
    """
    One explorer session.

    The navigator never observes fetch exceptions; failed fetches surface
    only as empty display data.
    """

    def __init__(
        self,
        provider: GraphProvider,
        config: Optional[ExplorerConfig] = None,
        recent_store: Optional[RecentQueryStore] = None,
        diagnostics: Optional[DiagnosticsCollector] = None,
        clock: Optional[LogicalClock] = None,
        rng: Optional[random.Random] = None,
        on_exit: Optional[Callable[[DetailRoute], None]] = None,
        initial_focus: Optional[Focused] = None
    ):
        self._config = config or ExplorerConfig()
        self._diagnostics = diagnostics or DiagnosticsCollector()
        self._on_exit = on_exit
        self._initial_focus = initial_focus

        shared = dict(
            diagnostics=self._diagnostics,
            clock=clock,
            progress_interval=self._config.progress.interval_seconds,
            rng=rng,
        )
        limits = self._config.limits
        self._browse = BrowseCategoryFetcher(provider, limit=limits.browse_limit, **shared)
        self._focused = FocusedNodeFetcher(
            provider, limit=limits.focused_limit, depth=limits.focused_depth, **shared
        )
        self._search = SemanticSearchFetcher(
            provider,
            limit=limits.search_limit,
            exclusive_with=(self._browse, self._focused),
            **shared,
        )

        self._history = NavigationHistoryStack()
        self._recent = RecentSearches(
            recent_store or self._default_store(),
            max_entries=self._config.recent.max_entries,
        )

        self._mode: Mode = Idle()
        self._media_filter = MediaFilter.BOTH
        self._closed = False

    def _default_store(self) -> RecentQueryStore:
        if self._config.recent.storage_path:
            return JsonFileRecentQueryStore(self._config.recent.storage_path, self._diagnostics)
        return InMemoryRecentQueryStore()

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def display(self) -> DisplayState:
        """The single data set and loading status to render."""
        return resolve_display(
            self._mode,
            self._search.search_state,
            self._search.state,
            self._focused.state,
            self._browse.state,
        )

    @property
    def search_state(self) -> SemanticSearchState:
        return self._search.search_state

    @property
    def focused_id(self) -> Optional[str]:
        return self._focused.focus_id

    @property
    def browse_category(self) -> Optional[BrowseCategory]:
        return self._browse.category

    @property
    def history(self) -> Tuple[NavigationHistoryEntry, ...]:
        return self._history.entries

    @property
    def breadcrumbs(self) -> Tuple[Breadcrumb, ...]:
        current = self._focused.current_entry if isinstance(self._mode, Focused) else None
        return self._history.breadcrumbs(current)

    @property
    def recent_searches(self) -> Tuple[str, ...]:
        return self._recent.items

    @property
    def media_filter(self) -> MediaFilter:
        return self._media_filter

    @property
    def cross_media(self) -> bool:
        return self._browse.cross_media

    @property
    def diagnostics(self) -> DiagnosticsCollector:
        return self._diagnostics

    @property
    def fetchers(self) -> Tuple[BrowseCategoryFetcher, FocusedNodeFetcher, SemanticSearchFetcher]:
        return self._browse, self._focused, self._search

    @property
    def title(self) -> str:
        if isinstance(self._mode, Searching):
            return f'Search: "{self._mode.query}"'
        if isinstance(self._mode, Browsing):
            return self._mode.category.label
        return "Explore"

    @property
    def show_refresh(self) -> bool:
        return (
            self._search.search_state.results is not None
            or self._browse.category is not None
            or self._focused.focus_id is not None
        )

    @property
    def focus_param(self) -> Optional[str]:
        """Focus parameter for URL synchronization, e.g. "movie:123"."""
        if isinstance(self._mode, Focused):
            return f"{self._mode.media_type.value}:{self._mode.node_id}"
        return None

    @property
    def closed(self) -> bool:
        return self._closed

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def start(self) -> DisplayState:
        """Load the initial focus, if the session was opened on one."""
        self._ensure_open()
        focus = self._initial_focus
        self._initial_focus = None
        if focus is None:
            return self.display

        self._search.clear()
        self._browse.clear()
        self._history.reset()
        self._set_mode(focus)
        await self._focused.set_focus(focus.node_id, focus.media_type)
        return self.display

    async def select_browse_category(self, category: BrowseCategory) -> DisplayState:
        self._ensure_open()
        self._search.clear()
        self._focused.clear()
        self._history.reset()
        self._set_mode(Browsing(category))

        await self._browse.select(category)
        return self.display

    async def on_node_click(self, node: GraphNode) -> DisplayState:
        """Drill into a node (rabbit-hole navigation)."""
        self._ensure_open()
        if node.is_center:
            return self.display

        search = self._search.search_state
        if isinstance(self._mode, Searching) or search.loading or search.results is not None:
            self._history.start_from_search(self._search.query)
            self._search.clear()
        elif isinstance(self._mode, Focused):
            current = self._focused.current_entry
            if current is not None and current.node_id != node.id:
                self._history.push(current)
        else:
            self._browse.clear()
            self._history.reset()

        self._set_mode(Focused(node_id=node.id, media_type=node.media_type))
        await self._focused.set_focus(node.id, node.media_type, node.title)
        return self.display

    def on_node_double_click(self, node: GraphNode) -> DetailRoute:
        """Leave the explorer for the node's detail page."""
        self._ensure_open()
        route = DetailRoute.for_node(node)
        self._diagnostics.record(
            DiagnosticEventType.MODE_CHANGED, "navigator", "exit", node.id,
            metadata={"route": route.path},
        )
        if self._on_exit is not None:
            self._on_exit(route)
        return route

    async def run_search(self, query: str) -> DisplayState:
        self._ensure_open()
        if not query or not query.strip():
            return self.display

        self._recent.add(query)
        self._history.reset()
        self._set_mode(Searching(query=query, media_filter=self._media_filter))

        await self._search.search(query, self._media_filter)
        return self.display

    async def go_to_history(self, index: int) -> DisplayState:
        """
        Jump back to a prior center. Index 0 means "no history" and is
        equivalent to start_over().
        """
        self._ensure_open()
        if index == 0:
            return await self.start_over()

        target = self._history.go_to(index)
        if target is None:
            return self.display

        self._diagnostics.record(
            DiagnosticEventType.HISTORY_NAVIGATED, "navigator", "go_to", target.node_id,
            metadata={"index": str(index), "remaining": str(len(self._history))},
        )
        self._set_mode(Focused(node_id=target.node_id, media_type=target.media_type))
        await self._focused.go_to_history_index(index)
        return self.display

    async def start_over(self) -> DisplayState:
        """
        Re-run the active (or originating) search, or clear focus and history.
        """
        self._ensure_open()
        query = self._mode.query if isinstance(self._mode, Searching) else self._history.origin_query
        if query:
            return await self.run_search(query)

        self._history.reset()
        self._focused.clear()
        if isinstance(self._mode, Focused):
            self._set_mode(Idle())
        return self.display

    async def refresh(self) -> DisplayState:
        """Re-run the current search, or refetch the current browse or focus data."""
        self._ensure_open()
        if isinstance(self._mode, Searching):
            return await self.run_search(self._mode.query)
        if isinstance(self._mode, Browsing):
            await self._browse.refetch()
        elif isinstance(self._mode, Focused):
            await self._focused.refetch()
        return self.display

    def clear_search(self) -> DisplayState:
        """Drop search results together with any traversal started from them."""
        self._ensure_open()
        self._search.clear()
        self._focused.clear()
        self._history.reset()
        if isinstance(self._mode, (Searching, Focused)):
            self._set_mode(Idle())
        return self.display

    def set_media_filter(self, media_filter: MediaFilter) -> None:
        """Media restriction for subsequent searches."""
        self._ensure_open()
        self._media_filter = media_filter

    async def set_cross_media(self, enabled: bool) -> DisplayState:
        self._ensure_open()
        await self._browse.set_cross_media(enabled)
        return self.display

    def remove_recent_search(self, query: str) -> Tuple[str, ...]:
        self._ensure_open()
        return self._recent.remove(query)

    def close(self) -> None:
        """
        Teardown. Stops every progress simulator and invalidates every
        fetcher so late completions cannot touch state.
        """
        if self._closed:
            return
        self._closed = True
        for fetcher in (self._browse, self._focused, self._search):
            fetcher.invalidate()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _set_mode(self, mode: Mode) -> None:
        previous = self._mode
        self._mode = mode
        self._diagnostics.record(
            DiagnosticEventType.MODE_CHANGED, "navigator", "set_mode",
            metadata={"from": type(previous).__name__, "to": type(mode).__name__},
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise NavigatorClosed("Navigator session has been closed")
