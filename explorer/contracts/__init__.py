"""
Contracts Module

Immutable data types shared by every navigator layer.

DESIGN PRINCIPLES:
==================
1. All contract types are immutable (frozen dataclasses)
2. Failures are explicit data, never silent
3. Graph data is replaced wholesale, never patched
4. The active mode is a tagged union, never parallel flags
"""

from .base import (
    MediaType, MediaFilter, BrowseCategory, FetchOutcome, FetchFailure,
)
from .graph import (
    ConnectionType, ConnectionReason, GraphNode, GraphEdge, GraphData,
    InvalidGraphPayload, CONNECTION_COLORS, CONNECTION_LABELS,
)
from .state import (
    NavigationHistoryEntry, DetailRoute,
    LoadingPhase, LoadingStatus,
    FetchPhase, FetchState, SemanticSearchState,
    Mode, Idle, Browsing, Focused, Searching,
    DisplaySource, DisplayState,
)

__all__ = [
    'MediaType', 'MediaFilter', 'BrowseCategory', 'FetchOutcome', 'FetchFailure',
    'ConnectionType', 'ConnectionReason', 'GraphNode', 'GraphEdge', 'GraphData',
    'InvalidGraphPayload', 'CONNECTION_COLORS', 'CONNECTION_LABELS',
    'NavigationHistoryEntry', 'DetailRoute',
    'LoadingPhase', 'LoadingStatus',
    'FetchPhase', 'FetchState', 'SemanticSearchState',
    'Mode', 'Idle', 'Browsing', 'Focused', 'Searching',
    'DisplaySource', 'DisplayState',
]
