"""
Exploration Graph Navigator

This package implements the state machine behind the "Explore" experience
of the media recommendation dashboard. A user moves between three
competing discovery modes while a single graph view is shown.

LAYER STRUCTURE:
================

1. CONTRACTS (contracts/)
   - Immutable graph, navigation and loading-state types
   - The Mode tagged union (Idle | Browsing | Focused | Searching)

2. PROGRESS SIMULATOR (progress/)
   - Synthetic phased progress for backend calls with no observable progress
   - Owns the only recurring background task

3. SOURCE FETCHERS (sources/)
   - Browse-category, focused-node and semantic-search data sources
   - Generation guards discard abandoned completions
   - Graph providers (HTTP and in-memory)

4. NAVIGATION (navigation/)
   - History stack of prior traversal centers

5. RECENT QUERIES (recent.py)
   - Bounded, de-duplicated list of past free-text queries

6. DISPLAY RESOLVER (resolver.py)
   - Pure precedence function producing the single display tuple

7. NAVIGATOR CONTROLLER (navigator.py)
   - Orchestration surface for clicks, searches, history and mode switches

8. TOPOLOGY (topology.py)
   - networkx legend, neighbor and structural metrics for the displayed graph

9. API (api/)
   - FastAPI surface hosting one navigator session

CONSTRAINTS ENFORCED:
=====================
- At most one of {search results, focus, browse category} is active
- A stale completion never reaches displayed state
- Fetch failures never raise past the fetcher boundary
"""

from .contracts import (
    MediaType, MediaFilter, BrowseCategory, ConnectionType,
    GraphNode, GraphEdge, GraphData,
    NavigationHistoryEntry, LoadingStatus, LoadingPhase,
    Mode, Idle, Browsing, Focused, Searching,
    DisplayState, DisplaySource, DetailRoute,
)
from .config import ExplorerConfig
from .navigator import ExploreNavigator, parse_focus

__all__ = [
    'MediaType', 'MediaFilter', 'BrowseCategory', 'ConnectionType',
    'GraphNode', 'GraphEdge', 'GraphData',
    'NavigationHistoryEntry', 'LoadingStatus', 'LoadingPhase',
    'Mode', 'Idle', 'Browsing', 'Focused', 'Searching',
    'DisplayState', 'DisplaySource', 'DetailRoute',
    'ExplorerConfig',
    'ExploreNavigator', 'parse_focus',
]
