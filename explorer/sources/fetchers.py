"""
Source Fetchers
===============

Three independent asynchronous data sources, each a small state machine
over {idle, loading, success, error}:

- BrowseCategoryFetcher:  graph for a fixed browse category
- FocusedNodeFetcher:     similarity graph centered on one node,
                          with its own traversal memory
- SemanticSearchFetcher:  graph for a free-text query

STALE COMPLETIONS:
==================
Every load captures the fetcher's generation when it starts. When the
provider answers, the result is applied only if the generation is still
current. Selecting something else, clearing the fetcher, or a newer load
all bump the generation, so an abandoned request resolving late is
discarded entirely. The network request itself is never aborted.

ERRORS:
=======
Network failures, non-2xx statuses and empty results all leave the
fetcher with loading cleared and no graph to show. The FetchOutcome keeps
them apart internally. Nothing raises past this module.
"""

from __future__ import annotations
from typing import Awaitable, Callable, Optional, Sequence, Tuple
import asyncio
import random

from ..contracts import (
    BrowseCategory, FetchFailure, FetchOutcome, FetchPhase, FetchState,
    GraphData, LoadingStatus, MediaFilter, MediaType,
    NavigationHistoryEntry, SemanticSearchState,
)
from ..observability import DiagnosticsCollector, DiagnosticEventType
from ..progress import (
    PhaseSchedule, ProgressSimulator,
    BROWSE_SCHEDULE, SEARCH_SCHEDULE, similarity_schedule,
)
from ..temporal import LogicalClock
from .providers import GraphProvider, ProviderResponse


ProviderCall = Callable[[], Awaitable[ProviderResponse]]


class SourceFetcher:
    """
    Base fetcher: state, generation guard and progress simulation.

    Subclasses decide what to request; this class decides whether the
    answer is still wanted.
    """

    name = "source"

    def __init__(
        self,
        provider: GraphProvider,
        schedule: PhaseSchedule,
        diagnostics: Optional[DiagnosticsCollector] = None,
        clock: Optional[LogicalClock] = None,
        progress_interval: float = 0.3,
        rng: Optional[random.Random] = None
    ):
        self._provider = provider
        self._diagnostics = diagnostics or DiagnosticsCollector()
        self._progress = ProgressSimulator(
            schedule,
            clock=clock,
            interval_seconds=progress_interval,
            rng=rng,
            diagnostics=self._diagnostics,
            name=f"{self.name}.progress",
        )

        self._phase = FetchPhase.IDLE
        self._data: Optional[GraphData] = None
        self._failure: Optional[FetchFailure] = None
        self._outcome: Optional[FetchOutcome] = None
        self._generation = 0

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def state(self) -> FetchState:
        return FetchState(
            phase=self._phase,
            data=self._data,
            status=self._progress.status,
            failure=self._failure,
            outcome=self._outcome,
            generation=self._generation,
        )

    @property
    def data(self) -> Optional[GraphData]:
        return self._data

    @property
    def loading(self) -> bool:
        return self._phase is FetchPhase.LOADING

    @property
    def status(self) -> Optional[LoadingStatus]:
        return self._progress.status

    @property
    def failure(self) -> Optional[FetchFailure]:
        return self._failure

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def progress(self) -> ProgressSimulator:
        return self._progress

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def invalidate(self) -> None:
        """
        Drop any in-flight work's effect on state and return to idle.

        The underlying request keeps running; its answer will be discarded.
        """
        self._generation += 1
        self._progress.stop()
        self._phase = FetchPhase.IDLE
        self._data = None
        self._failure = None
        self._outcome = None

    def clear(self) -> None:
        """Deactivate this source. Subclasses also drop their selection."""
        self.invalidate()

    async def _load(self, call: ProviderCall, entity_id: str) -> FetchState:
        self._generation += 1
        generation = self._generation

        self._phase = FetchPhase.LOADING
        self._failure = None
        self._outcome = None
        self._progress.start()
        self._diagnostics.record(
            DiagnosticEventType.FETCH_STARTED, self.name, "load", entity_id,
            metadata={"generation": str(generation)},
        )

        try:
            response = await call()
        except asyncio.CancelledError:
            if generation == self._generation:
                self.invalidate()
            raise
        except Exception as e:
            # Providers must not raise; a broken one still may not cross this boundary
            response = ProviderResponse.failed(
                FetchOutcome.NETWORK_ERROR, f"{type(e).__name__}: {e}"
            )

        if generation != self._generation:
            self._diagnostics.record(
                DiagnosticEventType.STALE_COMPLETION, self.name, "discard", entity_id,
                metadata={"generation": str(generation), "current": str(self._generation)},
            )
            return self.state

        self._progress.stop()
        self._apply(response, entity_id)
        return self.state

    def _apply(self, response: ProviderResponse, entity_id: str) -> None:
        if response.success:
            self._phase = FetchPhase.SUCCESS
            self._data = response.data
            self._outcome = FetchOutcome.EMPTY if response.data.is_empty else FetchOutcome.SUCCESS
            self._diagnostics.record(
                DiagnosticEventType.FETCH_SUCCEEDED, self.name, "load", entity_id,
                metadata={
                    "outcome": self._outcome.value,
                    "nodes": str(len(response.data.nodes)),
                    "latency_ms": f"{response.latency_ms:.0f}",
                },
            )
            return

        self._phase = FetchPhase.ERROR
        self._data = None
        self._outcome = response.error_code
        self._failure = FetchFailure.create(
            response.error_code,
            response.error_message or response.error_code.value,
            http_status=response.http_status,
        )
        metadata = {"outcome": response.error_code.value, "message": self._failure.message}
        if response.http_status is not None:
            metadata["http_status"] = str(response.http_status)
        self._diagnostics.record(
            DiagnosticEventType.FETCH_FAILED, self.name, "load", entity_id, metadata=metadata,
        )


# =============================================================================
# BROWSE CATEGORY
# =============================================================================

class BrowseCategoryFetcher(SourceFetcher):
    """
    Graph for a fixed browse category plus the cross-media toggle.

    Re-fetches whenever the category or the toggle changes.
    """

    name = "browse"

    def __init__(self, provider: GraphProvider, limit: int = 20, cross_media: bool = False, **kwargs):
        super().__init__(provider, BROWSE_SCHEDULE, **kwargs)
        self._limit = limit
        self._category: Optional[BrowseCategory] = None
        self._cross_media = cross_media

    @property
    def category(self) -> Optional[BrowseCategory]:
        return self._category

    @property
    def cross_media(self) -> bool:
        return self._cross_media

    async def select(self, category: BrowseCategory) -> FetchState:
        self._category = category
        return await self.refetch()

    async def set_cross_media(self, enabled: bool) -> FetchState:
        changed = enabled != self._cross_media
        self._cross_media = enabled
        if changed and self._category is not None:
            return await self.refetch()
        return self.state

    async def refetch(self) -> FetchState:
        category = self._category
        if category is None:
            return self.state
        cross_media = self._cross_media
        return await self._load(
            lambda: self._provider.browse(category, self._limit, cross_media),
            category.value,
        )

    def clear(self) -> None:
        self._category = None
        self.invalidate()


# =============================================================================
# FOCUSED NODE
# =============================================================================

class FocusedNodeFetcher(SourceFetcher):
    """
    Similarity graph centered on one node.

    TRAVERSAL MEMORY:
    =================
    set_focus() can be called repeatedly while drilling in; each call
    pushes the current center before moving on, so the fetcher can step
    back without the caller re-deriving history. The navigator's history
    stack is the user-visible projection of the same path.
    """

    name = "focused"

    def __init__(self, provider: GraphProvider, limit: int = 15, depth: int = 3, **kwargs):
        super().__init__(provider, similarity_schedule(depth), **kwargs)
        self._limit = limit
        self._depth = depth
        self._focus_id: Optional[str] = None
        self._focus_type: MediaType = MediaType.MOVIE
        self._focus_title: Optional[str] = None
        self._history: Tuple[NavigationHistoryEntry, ...] = ()
        self._origin: Optional[NavigationHistoryEntry] = None

    @property
    def focus_id(self) -> Optional[str]:
        return self._focus_id

    @property
    def focus_type(self) -> MediaType:
        return self._focus_type

    @property
    def history(self) -> Tuple[NavigationHistoryEntry, ...]:
        return self._history

    @property
    def current_entry(self) -> Optional[NavigationHistoryEntry]:
        """The current focus as a history entry, titled from the loaded center when known."""
        if self._focus_id is None:
            return None
        center = self._data.center if self._data else None
        if center is not None and center.id == self._focus_id:
            return NavigationHistoryEntry.from_node(center)
        return NavigationHistoryEntry(
            node_id=self._focus_id,
            media_type=self._focus_type,
            title=self._focus_title or self._focus_id,
        )

    async def set_focus(
        self,
        node_id: str,
        media_type: MediaType,
        title: Optional[str] = None
    ) -> FetchState:
        """Drill into a node, remembering the current center."""
        if node_id == self._focus_id and self._phase is not FetchPhase.IDLE:
            return self.state

        current = self.current_entry
        if current is not None:
            self._history = self._history + (current,)

        self._move_to(node_id, media_type, title)
        if self._origin is None:
            self._origin = self.current_entry
        return await self.refetch()

    async def go_back(self) -> FetchState:
        if not self._history:
            return self.state
        previous = self._history[-1]
        self._history = self._history[:-1]
        self._move_to(previous.node_id, previous.media_type, previous.title)
        return await self.refetch()

    async def go_to_history_index(self, index: int) -> FetchState:
        """Jump back to history[index], dropping it and everything after."""
        if index < 0 or index >= len(self._history):
            return self.state
        target = self._history[index]
        self._history = self._history[:index]
        self._move_to(target.node_id, target.media_type, target.title)
        return await self.refetch()

    async def start_over(self) -> FetchState:
        """Return to the node the traversal started from."""
        self._history = ()
        if self._origin is None:
            self.clear()
            return self.state
        self._move_to(self._origin.node_id, self._origin.media_type, self._origin.title)
        return await self.refetch()

    async def refetch(self) -> FetchState:
        node_id = self._focus_id
        if node_id is None:
            self.invalidate()
            return self.state
        media_type = self._focus_type
        return await self._load(
            lambda: self._provider.similar(node_id, media_type, self._limit, self._depth),
            f"{media_type.value}:{node_id}",
        )

    def clear(self) -> None:
        self._focus_id = None
        self._focus_title = None
        self._history = ()
        self._origin = None
        self.invalidate()

    def _move_to(self, node_id: str, media_type: MediaType, title: Optional[str]) -> None:
        self._focus_id = node_id
        self._focus_type = media_type
        self._focus_title = title


# =============================================================================
# SEMANTIC SEARCH
# =============================================================================

class SemanticSearchFetcher(SourceFetcher):
    """
    Graph for a free-text query.

    Starting a search clears every fetcher it is exclusive with, so a
    search always pre-empts browse and focus state.
    """

    name = "search"

    def __init__(
        self,
        provider: GraphProvider,
        limit: int = 20,
        exclusive_with: Sequence[SourceFetcher] = (),
        **kwargs
    ):
        super().__init__(provider, SEARCH_SCHEDULE, **kwargs)
        self._limit = limit
        self._exclusive_with = tuple(exclusive_with)
        self._query = ""
        self._media_filter = MediaFilter.BOTH

    @property
    def query(self) -> str:
        return self._query

    @property
    def media_filter(self) -> MediaFilter:
        return self._media_filter

    @property
    def search_state(self) -> SemanticSearchState:
        return SemanticSearchState(
            query=self._query,
            loading=self.loading,
            results=self._data,
        )

    async def search(self, query: str, media_filter: MediaFilter = MediaFilter.BOTH) -> FetchState:
        for other in self._exclusive_with:
            other.clear()

        self._query = query
        self._media_filter = media_filter
        self._data = None
        return await self._load(
            lambda: self._provider.search(query, media_filter, self._limit),
            query,
        )

    async def refetch(self) -> FetchState:
        if not self._query:
            return self.state
        return await self.search(self._query, self._media_filter)

    def clear(self) -> None:
        self._query = ""
        self.invalidate()
