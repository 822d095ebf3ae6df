"""
Mock Graph Provider
===================

Deterministic in-memory provider for tests and offline demos.

GUARANTEES:
- Same request -> identical graph
- Explicit failure modes can be triggered per request or globally
- Requests can be held in flight until a test releases them
- No network access
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple
import asyncio
import hashlib

from ...contracts import (
    BrowseCategory, ConnectionReason, ConnectionType, FetchOutcome,
    GraphData, GraphEdge, GraphNode, MediaFilter, MediaType,
)
from .base import GraphProvider, ProviderResponse


RequestKey = Tuple[str, str]


class MockGraphProvider(GraphProvider):
    """
    Deterministic mock provider.

    Canned graphs take precedence; otherwise a graph is derived from a
    hash of the request so repeated runs see the same nodes.
    """

    def __init__(self, failure_mode: Optional[FetchOutcome] = None, latency_seconds: float = 0.0):
        """
        Args:
            failure_mode: If set, every request fails with this outcome
            latency_seconds: Simulated latency per request
        """
        self._failure_mode = failure_mode
        self._latency = latency_seconds
        self._canned: Dict[RequestKey, GraphData] = {}
        self._failures: Dict[RequestKey, FetchOutcome] = {}
        self._gates: Dict[RequestKey, asyncio.Event] = {}
        self.calls: List[Tuple] = []

    @property
    def provider_id(self) -> str:
        return "mock"

    # =========================================================================
    # SCRIPTING
    # =========================================================================

    def set_browse(self, category: BrowseCategory, graph: GraphData) -> None:
        self._canned[("browse", category.value)] = graph

    def set_similar(self, node_id: str, graph: GraphData) -> None:
        self._canned[("similar", node_id)] = graph

    def set_search(self, query: str, graph: GraphData) -> None:
        self._canned[("search", query)] = graph

    def fail(self, kind: str, key: str, outcome: FetchOutcome) -> None:
        """Make one request fail, e.g. fail("search", "noir", FetchOutcome.TIMEOUT)."""
        self._failures[(kind, key)] = outcome

    def hold(self, kind: str, key: str) -> asyncio.Event:
        """
        Hold a request in flight until the returned event is set.
        """
        gate = asyncio.Event()
        self._gates[(kind, key)] = gate
        return gate

    # =========================================================================
    # PROVIDER INTERFACE
    # =========================================================================

    async def browse(self, category: BrowseCategory, limit: int, cross_media: bool) -> ProviderResponse:
        self.calls.append(("browse", category, limit, cross_media))
        key = ("browse", category.value)
        return await self._respond(key, lambda: _derived_graph(
            seed=f"browse|{category.value}|{cross_media}",
            prefix=category.value,
            count=min(limit, 6),
            media_type=MediaType.SERIES if "series" in category.value or category is BrowseCategory.WATCHING else MediaType.MOVIE,
        ))

    async def similar(self, node_id: str, media_type: MediaType, limit: int, depth: int) -> ProviderResponse:
        self.calls.append(("similar", node_id, media_type, limit, depth))
        key = ("similar", node_id)
        return await self._respond(key, lambda: _derived_graph(
            seed=f"similar|{node_id}|{depth}",
            prefix=node_id,
            count=min(limit, 5),
            media_type=media_type,
            center=GraphNode(id=node_id, media_type=media_type, title=f"Title {node_id}", is_center=True),
        ))

    async def search(self, query: str, media_filter: MediaFilter, limit: int) -> ProviderResponse:
        self.calls.append(("search", query, media_filter, limit))
        key = ("search", query)
        media_type = MediaType.SERIES if media_filter is MediaFilter.SERIES else MediaType.MOVIE
        return await self._respond(key, lambda: _derived_graph(
            seed=f"search|{query}|{media_filter.value}",
            prefix="q",
            count=min(limit, 5),
            media_type=media_type,
        ))

    async def _respond(self, key: RequestKey, derive) -> ProviderResponse:
        requested_at = datetime.now(timezone.utc)

        gate = self._gates.pop(key, None)
        if gate is not None:
            await gate.wait()
        if self._latency:
            await asyncio.sleep(self._latency)

        outcome = self._failures.get(key) or self._failure_mode
        if outcome is not None:
            return ProviderResponse.failed(
                outcome,
                f"Mock provider configured to fail: {outcome.value}",
                http_status=500 if outcome is FetchOutcome.HTTP_ERROR else None,
                requested_at=requested_at,
            )

        graph = self._canned.get(key)
        if graph is None:
            graph = derive()
        return ProviderResponse.ok(graph, requested_at=requested_at)


def _derived_graph(
    seed: str,
    prefix: str,
    count: int,
    media_type: MediaType,
    center: Optional[GraphNode] = None
) -> GraphData:
    """Deterministic graph derived from a request seed."""
    digest = hashlib.sha256(seed.encode()).hexdigest()
    nodes = [center] if center else []
    edges = []

    for i in range(count):
        token = digest[i * 4:(i + 1) * 4]
        node = GraphNode(
            id=f"{prefix}-{token}",
            media_type=media_type,
            title=f"{prefix.title()} {token.upper()}",
        )
        nodes.append(node)
        anchor = center.id if center else (nodes[0].id if i > 0 else None)
        if anchor and anchor != node.id:
            edges.append(GraphEdge(
                source=anchor,
                target=node.id,
                similarity=round(0.5 + int(token, 16) / 0x1FFFF, 3),
                reasons=(ConnectionReason(ConnectionType.SIMILARITY, "embedding"),),
            ))

    return GraphData(nodes=tuple(nodes), edges=tuple(edges))
