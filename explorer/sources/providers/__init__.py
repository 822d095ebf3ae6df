"""
Graph Provider Package

Pluggable data providers behind the source fetchers.
"""

from .base import GraphProvider, ProviderResponse
from .mock import MockGraphProvider
from .http import HttpGraphProvider

__all__ = [
    'GraphProvider', 'ProviderResponse', 'MockGraphProvider', 'HttpGraphProvider',
]
