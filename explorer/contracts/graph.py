"""
Graph Contracts

Immutable graph data as delivered by the similarity service.

WIRE FORMAT:
============
GraphData      {"nodes": [...], "edges": [...]}
GraphNode      {"id", "type", "title", "isCenter", "year"?, "poster_url"?, "genres"?}
GraphEdge      {"source", "target", "similarity", "reasons": [{"type", "value"}]}

A depth-1 similarity response has a different shape:
               {"center": {...}, "connections": [{"item", "similarity", "reasons"}]}
and is converted into GraphData with the center node flagged.

GraphData is replaced wholesale on every fetch. Nothing here mutates.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .base import MediaType


class ConnectionType(Enum):
    """Relationship kinds that can connect two graph nodes."""
    DIRECTOR = "director"
    ACTOR = "actor"
    COLLECTION = "collection"
    GENRE = "genre"
    KEYWORD = "keyword"
    STUDIO = "studio"
    NETWORK = "network"
    SIMILARITY = "similarity"
    AI_DIVERSE = "ai_diverse"

    @property
    def color(self) -> str:
        return CONNECTION_COLORS[self]

    @property
    def label(self) -> str:
        return CONNECTION_LABELS[self]


CONNECTION_COLORS: Dict[ConnectionType, str] = {
    ConnectionType.DIRECTOR: "#3B82F6",
    ConnectionType.ACTOR: "#14B8A6",
    ConnectionType.COLLECTION: "#F59E0B",
    ConnectionType.GENRE: "#8B5CF6",
    ConnectionType.KEYWORD: "#EC4899",
    ConnectionType.STUDIO: "#F97316",
    ConnectionType.NETWORK: "#22C55E",
    ConnectionType.SIMILARITY: "#6B7280",
    ConnectionType.AI_DIVERSE: "#10B981",
}

CONNECTION_LABELS: Dict[ConnectionType, str] = {
    ConnectionType.DIRECTOR: "Same Director",
    ConnectionType.ACTOR: "Shared Cast",
    ConnectionType.COLLECTION: "Same Collection",
    ConnectionType.GENRE: "Shared Genre",
    ConnectionType.KEYWORD: "Shared Themes",
    ConnectionType.STUDIO: "Same Studio",
    ConnectionType.NETWORK: "Same Network",
    ConnectionType.SIMILARITY: "Similar Content",
    ConnectionType.AI_DIVERSE: "AI Discovery",
}


class InvalidGraphPayload(ValueError):
    """Raised when a wire payload cannot be read as graph data."""
    pass


@dataclass(frozen=True)
class ConnectionReason:
    """Why two nodes are connected (e.g. genre=Thriller)."""
    type: ConnectionType
    value: str

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> ConnectionReason:
        raw_type = payload.get("type", ConnectionType.SIMILARITY.value)
        try:
            reason_type = ConnectionType(raw_type)
        except ValueError:
            # Unknown kinds from newer backends degrade to plain similarity
            reason_type = ConnectionType.SIMILARITY
        return ConnectionReason(type=reason_type, value=str(payload.get("value", "")))


@dataclass(frozen=True)
class GraphNode:
    """
    A library item in the similarity graph.

    Exactly one node per similarity graph is the traversal center.
    Search and browse graphs may have several or none.
    """
    id: str
    media_type: MediaType
    title: str
    is_center: bool = False
    year: Optional[int] = None
    poster_url: Optional[str] = None
    genres: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.id or not isinstance(self.id, str):
            raise ValueError("GraphNode id must be a non-empty string")

    @staticmethod
    def from_payload(payload: Dict[str, Any], is_center: Optional[bool] = None) -> GraphNode:
        try:
            node_id = str(payload["id"])
            media_type = MediaType(payload["type"])
        except (KeyError, ValueError) as e:
            raise InvalidGraphPayload(f"Malformed graph node: {e}") from e

        if is_center is None:
            is_center = bool(payload.get("isCenter", False))

        return GraphNode(
            id=node_id,
            media_type=media_type,
            title=str(payload.get("title", "")),
            is_center=is_center,
            year=payload.get("year"),
            poster_url=payload.get("poster_url") or payload.get("posterUrl"),
            genres=tuple(payload.get("genres") or ()),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.media_type.value,
            "title": self.title,
            "isCenter": self.is_center,
            "year": self.year,
            "poster_url": self.poster_url,
            "genres": list(self.genres),
        }


@dataclass(frozen=True)
class GraphEdge:
    """Connection between two nodes, typed by relationship kind."""
    source: str
    target: str
    similarity: float = 0.0
    reasons: Tuple[ConnectionReason, ...] = field(default_factory=tuple)

    @property
    def connection_types(self) -> Tuple[ConnectionType, ...]:
        """Distinct relationship kinds, in reason order."""
        seen = []
        for reason in self.reasons:
            if reason.type not in seen:
                seen.append(reason.type)
        return tuple(seen) or (ConnectionType.SIMILARITY,)

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> GraphEdge:
        try:
            source = payload["source"]
            target = payload["target"]
        except KeyError as e:
            raise InvalidGraphPayload(f"Malformed graph edge: missing {e}") from e

        # Rendered graphs may hand back resolved node objects instead of ids
        if isinstance(source, dict):
            source = source.get("id")
        if isinstance(target, dict):
            target = target.get("id")

        return GraphEdge(
            source=str(source),
            target=str(target),
            similarity=float(payload.get("similarity", payload.get("weight", 0.0)) or 0.0),
            reasons=tuple(ConnectionReason.from_payload(r) for r in payload.get("reasons") or ()),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "similarity": self.similarity,
            "reasons": [{"type": r.type.value, "value": r.value} for r in self.reasons],
        }


@dataclass(frozen=True)
class GraphData:
    """
    A complete graph as produced by one fetch.

    OWNERSHIP:
    ==========
    Held exclusively by the fetcher that produced it until the display
    resolver supersedes it. Never merged with another GraphData.
    """
    nodes: Tuple[GraphNode, ...] = field(default_factory=tuple)
    edges: Tuple[GraphEdge, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return len(self.nodes) == 0

    @property
    def center(self) -> Optional[GraphNode]:
        """The traversal center, if this graph has one."""
        for node in self.nodes:
            if node.is_center:
                return node
        return None

    def node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @staticmethod
    def from_payload(payload: Any) -> GraphData:
        """Parse the {"nodes", "edges"} wire shape."""
        if not isinstance(payload, dict):
            raise InvalidGraphPayload("Graph payload must be an object")
        if "center" in payload and "connections" in payload:
            return GraphData.from_similarity_payload(payload)

        nodes = payload.get("nodes")
        if not isinstance(nodes, list):
            raise InvalidGraphPayload("Graph payload has no node list")

        return GraphData(
            nodes=tuple(GraphNode.from_payload(n) for n in nodes),
            edges=tuple(GraphEdge.from_payload(e) for e in payload.get("edges") or ()),
        )

    @staticmethod
    def from_similarity_payload(payload: Dict[str, Any]) -> GraphData:
        """Convert a depth-1 {"center", "connections"} response."""
        center_payload = payload.get("center")
        if not isinstance(center_payload, dict):
            raise InvalidGraphPayload("Similarity payload has no center")

        center = GraphNode.from_payload(center_payload, is_center=True)
        nodes = [center]
        edges = []
        for connection in payload.get("connections") or ():
            item = GraphNode.from_payload(connection.get("item") or {}, is_center=False)
            nodes.append(item)
            edges.append(GraphEdge(
                source=center.id,
                target=item.id,
                similarity=float(connection.get("similarity", 0.0) or 0.0),
                reasons=tuple(
                    ConnectionReason.from_payload(r) for r in connection.get("reasons") or ()
                ),
            ))

        return GraphData(nodes=tuple(nodes), edges=tuple(edges))

    def to_payload(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_payload() for n in self.nodes],
            "edges": [e.to_payload() for e in self.edges],
        }
