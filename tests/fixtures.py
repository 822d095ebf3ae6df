"""
Navigator Test Fixtures

Explicit graphs and navigator factories for deterministic testing.
"""

import random
from typing import Optional, Sequence

from explorer.config import ExplorerConfig, ProgressConfig
from explorer.contracts import (
    ConnectionReason, ConnectionType, GraphData, GraphEdge, GraphNode, MediaType,
)
from explorer.navigator import ExploreNavigator
from explorer.observability import DiagnosticsCollector
from explorer.recent import InMemoryRecentQueryStore
from explorer.sources import MockGraphProvider


# =============================================================================
# GRAPH FIXTURES
# =============================================================================

def make_node(
    node_id: str,
    media_type: MediaType = MediaType.MOVIE,
    title: Optional[str] = None,
    center: bool = False
) -> GraphNode:
    return GraphNode(
        id=node_id,
        media_type=media_type,
        title=title or f"Title {node_id}",
        is_center=center,
    )


def make_graph(
    ids: Sequence[str],
    center: Optional[str] = None,
    media_type: MediaType = MediaType.MOVIE
) -> GraphData:
    """Star graph around `center` (or a chain when there is no center)."""
    nodes = []
    if center is not None:
        nodes.append(make_node(center, media_type, center=True))
    nodes.extend(make_node(i, media_type) for i in ids)

    edges = []
    for i, node in enumerate(nodes[1:], start=1):
        anchor = nodes[0] if center is not None else nodes[i - 1]
        edges.append(GraphEdge(
            source=anchor.id,
            target=node.id,
            similarity=round(0.9 - i * 0.05, 2),
            reasons=(ConnectionReason(ConnectionType.GENRE, "Thriller"),),
        ))
    return GraphData(nodes=tuple(nodes), edges=tuple(edges))


NOIR_GRAPH = make_graph(["n1", "n2", "n3", "n4", "n5"])
FEEL_GOOD_GRAPH = make_graph(["c1", "c2", "c3"])
TOP_MOVIES_GRAPH = make_graph(["m1", "m2"])
TOP_SERIES_GRAPH = make_graph(["s1", "s2"], media_type=MediaType.SERIES)


# =============================================================================
# NAVIGATOR FIXTURES
# =============================================================================

FAST_CONFIG = ExplorerConfig(progress=ProgressConfig(interval_seconds=0.01))


def create_navigator(
    provider: Optional[MockGraphProvider] = None,
    recent: Sequence[str] = (),
    **kwargs
) -> ExploreNavigator:
    """Navigator over a mock provider with seeded progress messages."""
    kwargs.setdefault("config", FAST_CONFIG)
    kwargs.setdefault("diagnostics", DiagnosticsCollector(session="test"))
    return ExploreNavigator(
        provider or MockGraphProvider(),
        recent_store=InMemoryRecentQueryStore(recent),
        rng=random.Random(7),
        **kwargs
    )


def active_sources(navigator: ExploreNavigator) -> int:
    """How many of {search results, focus, browse category} are active."""
    search = navigator.search_state
    return sum((
        search.results is not None or search.loading,
        navigator.focused_id is not None,
        navigator.browse_category is not None,
    ))
