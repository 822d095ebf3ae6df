"""
Recent-Query Store

Bounded, de-duplicated, most-recent-first list of past free-text queries.

PERSISTENCE:
============
The list is kept behind an injected RecentQueryStore (get/set of the whole
list), so the navigator never touches storage directly. Unreadable
persisted data is treated as an empty list and reported, never raised.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import json

from .observability import DiagnosticsCollector, DiagnosticEventType


MAX_RECENT_SEARCHES = 5


class RecentQueryStore(ABC):
    """Key-value persistence for the recent-query list."""

    @abstractmethod
    def get(self) -> List[str]:
        pass

    @abstractmethod
    def set(self, queries: Sequence[str]) -> None:
        pass


class InMemoryRecentQueryStore(RecentQueryStore):
    def __init__(self, initial: Sequence[str] = ()):
        self._queries = list(initial)

    def get(self) -> List[str]:
        return list(self._queries)

    def set(self, queries: Sequence[str]) -> None:
        self._queries = list(queries)


class JsonFileRecentQueryStore(RecentQueryStore):
    """
    Recent queries persisted as a JSON array in a file.

    A missing, unreadable or malformed file reads as an empty list.
    """

    def __init__(self, path: Path, diagnostics: Optional[DiagnosticsCollector] = None):
        self._path = Path(path)
        self._diagnostics = diagnostics

    def get(self) -> List[str]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self._report("read", str(e))
            return []

        if not isinstance(data, list):
            self._report("read", "stored value is not a list")
            return []
        return [q for q in data if isinstance(q, str)]

    def set(self, queries: Sequence[str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, 'w', encoding='utf-8') as f:
                json.dump(list(queries), f)
        except OSError as e:
            self._report("write", str(e))

    def _report(self, action: str, message: str) -> None:
        if self._diagnostics:
            self._diagnostics.record(
                DiagnosticEventType.STORE_ERROR, "recent", action, str(self._path),
                metadata={"message": message},
            )


class RecentSearches:
    """
    The recent-query list.

    INVARIANTS:
    ===========
    - At most max_entries items
    - No duplicates
    - Most recent first
    """

    def __init__(self, store: Optional[RecentQueryStore] = None, max_entries: int = MAX_RECENT_SEARCHES):
        self._store = store or InMemoryRecentQueryStore()
        self._max_entries = max_entries
        self._items: Tuple[str, ...] = self._normalize(self._store.get())

    @property
    def items(self) -> Tuple[str, ...]:
        return self._items

    def add(self, query: str) -> Tuple[str, ...]:
        """Record a query as the most recent one."""
        self._items = self._normalize([query] + [q for q in self._items if q != query])
        self._store.set(list(self._items))
        return self._items

    def remove(self, query: str) -> Tuple[str, ...]:
        self._items = tuple(q for q in self._items if q != query)
        self._store.set(list(self._items))
        return self._items

    def clear(self) -> None:
        self._items = ()
        self._store.set([])

    def _normalize(self, queries: Sequence[str]) -> Tuple[str, ...]:
        unique: List[str] = []
        for query in queries:
            if query not in unique:
                unique.append(query)
        return tuple(unique[:self._max_entries])
