"""
Display Resolver Tests
======================

PRECEDENCE TESTED:
search loading > search results > focused > browse > empty
"""

from explorer.contracts import (
    BrowseCategory, Browsing, DisplaySource, FetchPhase, FetchState, Focused, Idle,
    LoadingPhase, LoadingStatus, MediaType, Searching, SemanticSearchState,
)
from explorer.resolver import resolve_display

from .fixtures import NOIR_GRAPH, TOP_MOVIES_GRAPH, make_graph


FOCUS_GRAPH = make_graph(["f1", "f2"], center="x1")
STATUS = LoadingStatus(phase=LoadingPhase.SEARCHING, message="Searching your library...", progress=12.0)

IDLE = FetchState()
FOCUSED_DONE = FetchState(phase=FetchPhase.SUCCESS, data=FOCUS_GRAPH)
BROWSE_DONE = FetchState(phase=FetchPhase.SUCCESS, data=TOP_MOVIES_GRAPH)


class TestPrecedence:

    def test_search_loading_wins_over_everything(self):
        display = resolve_display(
            Searching("noir"),
            SemanticSearchState(query="noir", loading=True),
            FetchState(phase=FetchPhase.LOADING, status=STATUS),
            FOCUSED_DONE,
            BROWSE_DONE,
        )
        assert display.loading
        assert display.data is None
        assert display.status == STATUS
        assert display.source == DisplaySource.SEARCH

    def test_search_results_win_over_focus(self):
        display = resolve_display(
            Focused("x1", MediaType.MOVIE),
            SemanticSearchState(query="noir", results=NOIR_GRAPH),
            IDLE,
            FOCUSED_DONE,
            IDLE,
        )
        assert display.data == NOIR_GRAPH
        assert not display.loading
        assert display.status is None

    def test_focused(self):
        display = resolve_display(
            Focused("x1", MediaType.MOVIE), SemanticSearchState(), IDLE, FOCUSED_DONE, BROWSE_DONE,
        )
        assert display.data == FOCUS_GRAPH
        assert display.source == DisplaySource.FOCUSED

    def test_browse(self):
        display = resolve_display(
            Browsing(BrowseCategory.TOP_MOVIES), SemanticSearchState(), IDLE, IDLE, BROWSE_DONE,
        )
        assert display.data == TOP_MOVIES_GRAPH
        assert display.source == DisplaySource.BROWSE

    def test_browse_loading_passes_status(self):
        loading = FetchState(phase=FetchPhase.LOADING, status=STATUS)
        display = resolve_display(
            Browsing(BrowseCategory.TOP_MOVIES), SemanticSearchState(), IDLE, IDLE, loading,
        )
        assert display.loading
        assert display.status == STATUS

    def test_empty(self):
        display = resolve_display(Idle(), SemanticSearchState(), IDLE, IDLE, IDLE)
        assert display.data is None
        assert not display.loading
        assert display.source == DisplaySource.NONE
