"""
API Mapper
==========

Transforms navigator state into JSON-ready DTOs for the render layer.
Graph data is passed through in the service's own wire shape so the
graph component can consume it unchanged.
"""
from typing import Any, Dict, Optional

from ..contracts import (
    Browsing, DetailRoute, DisplayState, Focused, LoadingStatus, Mode, Searching,
)
from ..navigator import ExploreNavigator
from ..topology import GraphTopology


def map_navigator_to_dto(navigator: ExploreNavigator) -> Dict[str, Any]:
    """
    Map the full navigator session to an ExploreStateDTO.

    Only the resolved display tuple is exposed; the individual fetchers
    stay internal.
    """
    display = navigator.display

    return {
        "mode": map_mode(navigator.mode),
        "title": navigator.title,
        "focus": navigator.focus_param,
        "show_refresh": navigator.show_refresh,
        "display": map_display(display),
        "graph": _map_topology(display),
        "history": [
            {
                "index": i,
                "id": entry.node_id,
                "type": entry.media_type.value,
                "title": entry.title,
            }
            for i, entry in enumerate(navigator.history)
        ],
        "breadcrumbs": [
            {
                "index": crumb.index,
                "label": crumb.label,
                "id": crumb.node_id,
                "is_search": crumb.is_search,
                "selectable": crumb.selectable,
            }
            for crumb in navigator.breadcrumbs
        ],
        "recent_searches": list(navigator.recent_searches),
        "media_filter": navigator.media_filter.value,
        "cross_media": navigator.cross_media,
    }


def map_mode(mode: Mode) -> Dict[str, Any]:
    if isinstance(mode, Browsing):
        return {"kind": "browsing", "category": mode.category.value}
    if isinstance(mode, Focused):
        return {"kind": "focused", "id": mode.node_id, "type": mode.media_type.value}
    if isinstance(mode, Searching):
        return {"kind": "searching", "query": mode.query, "filter": mode.media_filter.value}
    return {"kind": "idle"}


def map_display(display: DisplayState) -> Dict[str, Any]:
    return {
        "source": display.source.value,
        "loading": display.loading,
        "status": map_status(display.status),
        "data": display.data.to_payload() if display.data is not None else None,
    }


def map_status(status: Optional[LoadingStatus]) -> Optional[Dict[str, Any]]:
    if status is None:
        return None
    return {
        "phase": status.phase.value,
        "message": status.message,
        "progress": round(status.progress, 1),
        "detail": status.detail,
    }


def map_route(route: DetailRoute) -> Dict[str, Any]:
    return {
        "path": route.path,
        "id": route.node_id,
        "type": route.media_type.value,
    }


def _map_topology(display: DisplayState) -> Optional[Dict[str, Any]]:
    """Legend and structural metrics for the displayed graph."""
    if display.data is None:
        return None

    topology = GraphTopology(display.data)
    metrics = topology.compute_metrics()
    return {
        "legend": [
            {
                "type": entry.connection_type.value,
                "label": entry.label,
                "color": entry.color,
                "count": entry.edge_count,
            }
            for entry in topology.legend()
        ],
        "metrics": {
            "node_count": metrics.node_count,
            "edge_count": metrics.edge_count,
            "density": metrics.density,
            "is_connected": metrics.is_connected,
            "components": metrics.connected_components_count,
            "diameter": metrics.diameter,
        },
    }
