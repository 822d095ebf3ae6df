"""
Source Fetcher and Provider Tests
=================================

AXIOMS UNDER TEST:
==================
1. A stale completion never reaches fetcher state
2. Failures surface as typed states, never exceptions
3. The HTTP provider classifies every transport outcome
"""

import asyncio

import httpx
import pytest

from explorer.config import ProviderConfig
from explorer.contracts import (
    BrowseCategory, FetchOutcome, FetchPhase, GraphData, MediaFilter, MediaType,
)
from explorer.observability import DiagnosticsCollector, DiagnosticEventType
from explorer.sources import (
    BrowseCategoryFetcher, FocusedNodeFetcher, HttpGraphProvider, MockGraphProvider,
    SemanticSearchFetcher,
)

from .fixtures import NOIR_GRAPH, TOP_MOVIES_GRAPH, TOP_SERIES_GRAPH, make_graph


# =============================================================================
# STALE COMPLETION TESTS
# =============================================================================

class TestStaleCompletions:
    """
    A request superseded before it resolves must be discarded entirely.
    """

    def test_superseded_browse_is_discarded(self):
        async def scenario():
            provider = MockGraphProvider()
            provider.set_browse(BrowseCategory.TOP_MOVIES, TOP_MOVIES_GRAPH)
            provider.set_browse(BrowseCategory.TOP_SERIES, TOP_SERIES_GRAPH)
            gate = provider.hold("browse", "top-movies")
            diagnostics = DiagnosticsCollector()
            fetcher = BrowseCategoryFetcher(provider, diagnostics=diagnostics)

            slow = asyncio.ensure_future(fetcher.select(BrowseCategory.TOP_MOVIES))
            await asyncio.sleep(0)
            await fetcher.select(BrowseCategory.TOP_SERIES)

            gate.set()
            await slow

            assert fetcher.data == TOP_SERIES_GRAPH
            assert fetcher.category == BrowseCategory.TOP_SERIES
            assert len(diagnostics.get_entries(DiagnosticEventType.STALE_COMPLETION)) == 1

        asyncio.run(scenario())

    def test_cleared_fetcher_ignores_late_answer(self):
        async def scenario():
            provider = MockGraphProvider()
            gate = provider.hold("search", "noir")
            fetcher = SemanticSearchFetcher(provider)

            pending = asyncio.ensure_future(fetcher.search("noir"))
            await asyncio.sleep(0)
            assert fetcher.loading
            assert fetcher.status is not None

            fetcher.clear()
            gate.set()
            await pending

            assert fetcher.data is None
            assert fetcher.state.phase == FetchPhase.IDLE
            assert fetcher.status is None
            assert not fetcher.progress.has_timer

        asyncio.run(scenario())


# =============================================================================
# FAILURE TESTS
# =============================================================================

class TestFailureStates:

    @pytest.mark.parametrize("outcome", [
        FetchOutcome.NETWORK_ERROR,
        FetchOutcome.TIMEOUT,
        FetchOutcome.HTTP_ERROR,
        FetchOutcome.INVALID_RESPONSE,
    ])
    def test_failure_leaves_no_data(self, outcome):
        async def scenario():
            provider = MockGraphProvider()
            provider.fail("browse", "ai-movies", outcome)
            fetcher = BrowseCategoryFetcher(provider)

            state = await fetcher.select(BrowseCategory.AI_MOVIES)

            assert state.phase == FetchPhase.ERROR
            assert state.data is None
            assert not state.loading
            assert state.status is None
            assert state.failure.outcome == outcome

        asyncio.run(scenario())

    def test_empty_result_is_success_without_nodes(self):
        async def scenario():
            provider = MockGraphProvider()
            provider.set_search("nothing", GraphData())
            fetcher = SemanticSearchFetcher(provider)

            state = await fetcher.search("nothing")

            assert state.phase == FetchPhase.SUCCESS
            assert state.outcome == FetchOutcome.EMPTY
            assert state.data.is_empty

        asyncio.run(scenario())

    def test_raising_provider_is_contained(self):
        class BrokenProvider(MockGraphProvider):
            async def browse(self, category, limit, cross_media):
                raise RuntimeError("boom")

        async def scenario():
            fetcher = BrowseCategoryFetcher(BrokenProvider())
            state = await fetcher.select(BrowseCategory.WATCHING)
            assert state.phase == FetchPhase.ERROR
            assert state.failure.outcome == FetchOutcome.NETWORK_ERROR

        asyncio.run(scenario())


# =============================================================================
# FETCHER BEHAVIOR
# =============================================================================

class TestBrowseCategoryFetcher:

    def test_cross_media_toggle_refetches(self):
        async def scenario():
            provider = MockGraphProvider()
            fetcher = BrowseCategoryFetcher(provider, limit=20)
            await fetcher.select(BrowseCategory.AI_MOVIES)
            await fetcher.set_cross_media(True)
            await fetcher.set_cross_media(True)

            assert provider.calls == [
                ("browse", BrowseCategory.AI_MOVIES, 20, False),
                ("browse", BrowseCategory.AI_MOVIES, 20, True),
            ]

        asyncio.run(scenario())

    def test_refetch_keeps_graph_while_loading(self):
        async def scenario():
            provider = MockGraphProvider()
            provider.set_browse(BrowseCategory.TOP_MOVIES, TOP_MOVIES_GRAPH)
            fetcher = BrowseCategoryFetcher(provider)
            await fetcher.select(BrowseCategory.TOP_MOVIES)

            gate = provider.hold("browse", "top-movies")
            pending = asyncio.ensure_future(fetcher.refetch())
            await asyncio.sleep(0)

            assert fetcher.state.phase == FetchPhase.LOADING
            assert fetcher.state.data == TOP_MOVIES_GRAPH

            provider.fail("browse", "top-movies", FetchOutcome.HTTP_ERROR)
            gate.set()
            state = await pending
            assert state.phase == FetchPhase.ERROR
            assert state.data is None

        asyncio.run(scenario())

    def test_toggle_without_category_does_not_fetch(self):
        async def scenario():
            provider = MockGraphProvider()
            fetcher = BrowseCategoryFetcher(provider)
            await fetcher.set_cross_media(True)
            assert provider.calls == []
            assert fetcher.cross_media

        asyncio.run(scenario())


class TestFocusedNodeFetcher:

    def test_requests_with_limit_and_depth(self):
        async def scenario():
            provider = MockGraphProvider()
            fetcher = FocusedNodeFetcher(provider, limit=15, depth=3)
            await fetcher.set_focus("603", MediaType.MOVIE)
            assert provider.calls == [("similar", "603", MediaType.MOVIE, 15, 3)]
            assert fetcher.data.center.id == "603"

        asyncio.run(scenario())

    def test_drilling_builds_history(self):
        async def scenario():
            fetcher = FocusedNodeFetcher(MockGraphProvider())
            await fetcher.set_focus("a", MediaType.MOVIE)
            await fetcher.set_focus("b", MediaType.MOVIE)
            await fetcher.set_focus("c", MediaType.SERIES)

            assert [e.node_id for e in fetcher.history] == ["a", "b"]
            assert fetcher.history[0].title == "Title a"

            await fetcher.go_to_history_index(1)
            assert fetcher.focus_id == "b"
            assert [e.node_id for e in fetcher.history] == ["a"]

            await fetcher.go_back()
            assert fetcher.focus_id == "a"
            assert fetcher.history == ()

        asyncio.run(scenario())

    def test_same_focus_is_noop(self):
        async def scenario():
            provider = MockGraphProvider()
            fetcher = FocusedNodeFetcher(provider)
            await fetcher.set_focus("a", MediaType.MOVIE)
            await fetcher.set_focus("a", MediaType.MOVIE)
            assert len(provider.calls) == 1
            assert fetcher.history == ()

        asyncio.run(scenario())

    def test_start_over_returns_to_origin(self):
        async def scenario():
            fetcher = FocusedNodeFetcher(MockGraphProvider())
            await fetcher.set_focus("a", MediaType.MOVIE)
            await fetcher.set_focus("b", MediaType.MOVIE)
            await fetcher.start_over()
            assert fetcher.focus_id == "a"
            assert fetcher.history == ()

        asyncio.run(scenario())


class TestSemanticSearchFetcher:

    def test_search_clears_exclusive_fetchers(self):
        async def scenario():
            provider = MockGraphProvider()
            browse = BrowseCategoryFetcher(provider)
            focused = FocusedNodeFetcher(provider)
            search = SemanticSearchFetcher(provider, exclusive_with=(browse, focused))

            await browse.select(BrowseCategory.TOP_MOVIES)
            await search.search("noir", MediaFilter.MOVIE)

            assert browse.category is None
            assert browse.data is None
            assert search.search_state.results is not None
            assert provider.calls[-1] == ("search", "noir", MediaFilter.MOVIE, 20)

        asyncio.run(scenario())


# =============================================================================
# HTTP PROVIDER
# =============================================================================

def http_provider(handler) -> HttpGraphProvider:
    config = ProviderConfig(base_url="http://aperture.test", session_cookie="s3cret")
    return HttpGraphProvider(config, transport=httpx.MockTransport(handler))


class TestHttpGraphProvider:
    """Transport outcomes map to explicit error codes."""

    def test_browse_request_shape(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=TOP_MOVIES_GRAPH.to_payload())

        response = asyncio.run(http_provider(handler).browse(BrowseCategory.TOP_MOVIES, 20, True))

        assert response.success
        assert response.data == TOP_MOVIES_GRAPH
        request = seen[0]
        assert request.url.path == "/api/similarity/graph/top-movies"
        assert request.url.params["limit"] == "20"
        assert request.url.params["crossMedia"] == "true"
        assert "aperture_session=s3cret" in request.headers["cookie"]

    def test_search_extracts_graph(self):
        def handler(request):
            assert request.url.params["q"] == "noir thrillers"
            assert request.url.params["type"] == "both"
            assert request.url.params["graph"] == "true"
            return httpx.Response(200, json={"results": [], "graph": NOIR_GRAPH.to_payload()})

        response = asyncio.run(http_provider(handler).search("noir thrillers", MediaFilter.BOTH, 20))
        assert response.data == NOIR_GRAPH

    def test_similarity_payload_is_converted(self):
        payload = {
            "center": {"id": "603", "type": "movie", "title": "The Matrix"},
            "connections": [
                {
                    "item": {"id": "604", "type": "movie", "title": "The Matrix Reloaded"},
                    "similarity": 0.91,
                    "reasons": [{"type": "collection", "value": "The Matrix Collection"}],
                },
            ],
        }

        def handler(request):
            assert request.url.path == "/api/similarity/movie/603"
            assert request.url.params["depth"] == "1"
            return httpx.Response(200, json=payload)

        response = asyncio.run(http_provider(handler).similar("603", MediaType.MOVIE, 15, 1))

        assert response.success
        assert response.data.center.title == "The Matrix"
        assert response.data.edges[0].similarity == 0.91

    def test_http_error_keeps_status_and_message(self):
        def handler(request):
            return httpx.Response(500, json={"error": "embedding service down"})

        response = asyncio.run(http_provider(handler).search("noir", MediaFilter.BOTH, 20))

        assert not response.success
        assert response.error_code == FetchOutcome.HTTP_ERROR
        assert response.http_status == 500
        assert response.error_message == "embedding service down"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        response = asyncio.run(http_provider(handler).browse(BrowseCategory.WATCHING, 20, False))
        assert response.error_code == FetchOutcome.TIMEOUT

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        response = asyncio.run(http_provider(handler).browse(BrowseCategory.WATCHING, 20, False))
        assert response.error_code == FetchOutcome.NETWORK_ERROR

    def test_unreadable_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        response = asyncio.run(http_provider(handler).browse(BrowseCategory.WATCHING, 20, False))
        assert response.error_code == FetchOutcome.INVALID_RESPONSE

    def test_search_without_graph_is_invalid(self):
        def handler(request):
            return httpx.Response(200, json={"results": []})

        response = asyncio.run(http_provider(handler).search("noir", MediaFilter.BOTH, 20))
        assert response.error_code == FetchOutcome.INVALID_RESPONSE


def test_make_graph_fixture_is_star():
    graph = make_graph(["a", "b"], center="c")
    assert graph.center.id == "c"
    assert all(edge.source == "c" for edge in graph.edges)
