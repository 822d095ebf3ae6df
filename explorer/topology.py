"""
Graph Topology
==============

Structural view of the displayed GraphData.

ALLOWED:
- Connection-type legend counts
- Per-node connection info (neighbors and the reasons linking them)
- Structural metrics (density, connectivity, diameter)
- Path finding between two displayed nodes

Layout and rendering stay with the external graph component.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import networkx as nx

from .contracts import ConnectionReason, ConnectionType, GraphData


@dataclass(frozen=True)
class GraphMetrics:
    """Immutable structural metrics for a displayed graph."""
    node_count: int
    edge_count: int
    density: float
    is_connected: bool
    connected_components_count: int
    diameter: Optional[int] = None  # Only for connected graphs


@dataclass(frozen=True)
class LegendEntry:
    connection_type: ConnectionType
    label: str
    color: str
    edge_count: int


@dataclass(frozen=True)
class NodeConnection:
    """One neighbor of a node and why they are connected."""
    node_id: str
    title: str
    similarity: float
    reasons: Tuple[ConnectionReason, ...]


class GraphTopology:
    """
    networkx-backed view of one GraphData.

    Built once per displayed graph and discarded with it.
    """

    def __init__(self, data: Optional[GraphData] = None):
        self._data = data or GraphData()
        self._graph = nx.Graph()

        for node in self._data.nodes:
            self._graph.add_node(node.id, title=node.title, is_center=node.is_center)

        for edge in self._data.edges:
            # Edges to nodes outside the payload are dropped
            if edge.source in self._graph and edge.target in self._graph:
                self._graph.add_edge(edge.source, edge.target, edge=edge)

    def legend(self) -> List[LegendEntry]:
        """Connection types present in the graph, in declaration order."""
        counts: Dict[ConnectionType, int] = {}
        for _, _, attrs in self._graph.edges(data=True):
            for connection_type in attrs["edge"].connection_types:
                counts[connection_type] = counts.get(connection_type, 0) + 1

        return [
            LegendEntry(
                connection_type=ct,
                label=ct.label,
                color=ct.color,
                edge_count=counts[ct],
            )
            for ct in ConnectionType
            if ct in counts
        ]

    def connections(self, node_id: str) -> List[NodeConnection]:
        """Neighbors of a node, strongest similarity first."""
        if node_id not in self._graph:
            return []

        result = []
        for neighbor in self._graph.neighbors(node_id):
            edge = self._graph.edges[node_id, neighbor]["edge"]
            result.append(NodeConnection(
                node_id=neighbor,
                title=self._graph.nodes[neighbor]["title"],
                similarity=edge.similarity,
                reasons=edge.reasons,
            ))
        result.sort(key=lambda c: (-c.similarity, c.node_id))
        return result

    def compute_metrics(self) -> GraphMetrics:
        if not self._graph:
            return GraphMetrics(0, 0, 0.0, False, 0, None)

        is_connected = nx.is_connected(self._graph)

        diameter = None
        if is_connected and len(self._graph) > 1:
            diameter = nx.diameter(self._graph)

        return GraphMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            density=nx.density(self._graph),
            is_connected=is_connected,
            connected_components_count=nx.number_connected_components(self._graph),
            diameter=diameter,
        )
