"""
Source Fetchers Layer

Independent asynchronous data sources that each own their own
loading, error and result state.
"""

from .fetchers import (
    SourceFetcher, BrowseCategoryFetcher, FocusedNodeFetcher, SemanticSearchFetcher,
)
from .providers import GraphProvider, ProviderResponse, MockGraphProvider, HttpGraphProvider

__all__ = [
    'SourceFetcher', 'BrowseCategoryFetcher', 'FocusedNodeFetcher', 'SemanticSearchFetcher',
    'GraphProvider', 'ProviderResponse', 'MockGraphProvider', 'HttpGraphProvider',
]
