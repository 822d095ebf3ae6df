"""
Navigation History Stack Tests
==============================

INVARIANTS TESTED:
1. go_to(k) for 0 < k < len leaves exactly k entries and returns entry k
2. go_to(0) and go_to(len) leave the stack unchanged
3. Breadcrumb indices are unique and each node crumb refocuses its node
"""

import asyncio

import pytest
from hypothesis import given, strategies as st

from explorer.contracts import BrowseCategory, Idle, MediaType, NavigationHistoryEntry, Searching
from explorer.navigation import NavigationHistoryStack
from explorer.navigation.history import START_OVER_LABEL
from explorer.sources import MockGraphProvider

from .fixtures import NOIR_GRAPH, TOP_MOVIES_GRAPH, create_navigator


def entry(node_id: str) -> NavigationHistoryEntry:
    return NavigationHistoryEntry(node_id=node_id, media_type=MediaType.MOVIE, title=f"Title {node_id}")


def stack_of(*ids: str) -> NavigationHistoryStack:
    stack = NavigationHistoryStack()
    for node_id in ids:
        stack.push(entry(node_id))
    return stack


class TestGoTo:

    def test_truncates_and_returns_target(self):
        stack = stack_of("a", "b", "c", "d")
        target = stack.go_to(2)
        assert target.node_id == "c"
        assert [e.node_id for e in stack.entries] == ["a", "b"]

    def test_index_zero_is_not_a_jump(self):
        stack = stack_of("a", "b")
        assert stack.go_to(0) is None
        assert len(stack) == 2

    def test_current_node_index_is_noop(self):
        stack = stack_of("a", "b")
        assert stack.go_to(2) is None
        assert len(stack) == 2

    def test_out_of_range(self):
        stack = stack_of("a")
        assert stack.go_to(-1) is None
        assert stack.go_to(7) is None
        assert len(stack) == 1


@given(
    st.lists(st.text(alphabet="abcdefgh", min_size=1, max_size=4), min_size=1, max_size=12),
    st.data(),
)
def test_go_to_leaves_exactly_k_entries(ids, data):
    stack = stack_of(*ids)
    k = data.draw(st.integers(min_value=1, max_value=len(ids)))

    stack.go_to(k)

    assert len(stack) == k
    assert [e.node_id for e in stack.entries] == ids[:k]


class TestSearchOrigin:

    def test_start_from_search_clears_entries(self):
        stack = stack_of("a", "b")
        stack.start_from_search("noir thrillers")
        assert len(stack) == 0
        assert stack.origin_query == "noir thrillers"

    def test_reset_drops_origin(self):
        stack = NavigationHistoryStack()
        stack.start_from_search("noir thrillers")
        stack.reset()
        assert stack.origin_query is None


class TestBreadcrumbs:

    def test_trail_with_search_origin(self):
        stack = NavigationHistoryStack()
        stack.start_from_search("noir")
        stack.push(entry("n3"))
        stack.push(entry("n7"))

        crumbs = stack.breadcrumbs(current=entry("x1"))

        assert [c.index for c in crumbs] == [0, None, 1, None]
        assert crumbs[0].is_search
        assert crumbs[0].label == '"noir"'
        assert [c.node_id for c in crumbs[1:]] == ["n3", "n7", "x1"]

    def test_trail_without_origin_has_home_crumb(self):
        crumbs = stack_of("m1", "m2").breadcrumbs(current=entry("m3"))

        assert crumbs[0].index == 0
        assert crumbs[0].node_id is None
        assert crumbs[0].label == START_OVER_LABEL
        assert not crumbs[0].is_search
        assert [c.index for c in crumbs] == [0, None, 1, None]

    def test_first_center_is_not_selectable(self):
        crumbs = stack_of("m1").breadcrumbs(current=entry("m2"))
        assert [(c.node_id, c.selectable) for c in crumbs] == [
            (None, True), ("m1", False), ("m2", False),
        ]

    def test_empty_trail(self):
        assert NavigationHistoryStack().breadcrumbs() == ()


@given(st.integers(min_value=0, max_value=10), st.booleans())
def test_breadcrumb_indices_are_unique(depth, from_search):
    stack = NavigationHistoryStack()
    if from_search:
        stack.start_from_search("noir")
    for i in range(depth):
        stack.push(entry(f"n{i}"))

    indices = [c.index for c in stack.breadcrumbs(current=entry("now")) if c.selectable]

    assert indices.count(0) == 1
    assert len(indices) == len(set(indices))


# =============================================================================
# BREADCRUMBS THROUGH THE NAVIGATOR
# =============================================================================

async def drill(from_search: bool, depth: int):
    provider = MockGraphProvider()
    provider.set_search("noir thrillers", NOIR_GRAPH)
    provider.set_browse(BrowseCategory.TOP_MOVIES, TOP_MOVIES_GRAPH)
    nav = create_navigator(provider)

    if from_search:
        await nav.run_search("noir thrillers")
        await nav.on_node_click(nav.display.data.node("n3"))
    else:
        await nav.select_browse_category(BrowseCategory.TOP_MOVIES)
        await nav.on_node_click(nav.display.data.node("m1"))
    for _ in range(depth):
        leaf = next(n for n in nav.display.data.nodes if not n.is_center)
        await nav.on_node_click(leaf)
    return nav


class TestNavigatorBreadcrumbs:
    """Selecting a node crumb lands on that node."""

    @pytest.mark.parametrize("from_search", [True, False])
    def test_node_crumbs_refocus_their_node(self, from_search):
        async def scenario():
            nav = await drill(from_search, 3)
            crumbs = nav.breadcrumbs
            indices = [c.index for c in crumbs if c.selectable]
            assert len(indices) == len(set(indices))

            targets = [c for c in crumbs if c.selectable and c.node_id is not None]
            assert targets
            for crumb in targets:
                replay = await drill(from_search, 3)
                await replay.go_to_history(crumb.index)
                assert replay.focused_id == crumb.node_id
                replay.close()
            nav.close()

        asyncio.run(scenario())

    def test_home_crumb_after_browse_starts_over(self):
        async def scenario():
            nav = await drill(False, 1)
            home = nav.breadcrumbs[0]
            assert home.label == START_OVER_LABEL

            display = await nav.go_to_history(home.index)

            assert nav.mode == Idle()
            assert display.data is None
            nav.close()

        asyncio.run(scenario())

    def test_search_crumb_reruns_search(self):
        async def scenario():
            nav = await drill(True, 1)
            home = nav.breadcrumbs[0]
            assert home.is_search

            await nav.go_to_history(home.index)

            assert nav.mode == Searching("noir thrillers")
            nav.close()

        asyncio.run(scenario())
