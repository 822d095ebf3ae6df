"""
Display Resolver

Pure precedence function deciding which single data set and loading
status the explorer renders. Re-evaluated on every render; no side effects.

PRECEDENCE (highest first):
===========================
1. Semantic search loading, or holding non-null results
2. A focused node is set
3. A browse category is selected
4. Nothing: empty state

A search therefore always pre-empts browse or focus state, even when
those fetchers still have requests in flight.
"""

from __future__ import annotations

from .contracts import (
    Browsing, DisplaySource, DisplayState, FetchState, Focused, Mode,
    SemanticSearchState,
)


def resolve_display(
    mode: Mode,
    search: SemanticSearchState,
    search_fetch: FetchState,
    focused: FetchState,
    browse: FetchState
) -> DisplayState:
    """Resolve the single {data, loading, status} tuple to render."""
    if search.loading:
        return DisplayState(
            data=None,
            loading=True,
            status=search_fetch.status,
            source=DisplaySource.SEARCH,
        )
    if search.results is not None:
        return DisplayState(
            data=search.results,
            loading=False,
            status=None,
            source=DisplaySource.SEARCH,
        )

    if isinstance(mode, Focused):
        return DisplayState(
            data=focused.data,
            loading=focused.loading,
            status=focused.status,
            source=DisplaySource.FOCUSED,
        )

    if isinstance(mode, Browsing):
        return DisplayState(
            data=browse.data,
            loading=browse.loading,
            status=browse.status,
            source=DisplaySource.BROWSE,
        )

    return DisplayState.empty()
