"""
Navigation Layer

History of traversal centers for rabbit-hole navigation.
"""

from .history import NavigationHistoryStack, Breadcrumb

__all__ = ['NavigationHistoryStack', 'Breadcrumb']
