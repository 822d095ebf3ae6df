"""
Navigation History Stack
========================

The user-visible record of how the current focus was reached.

CONTRACT:
=========
push(entry)   -> append the current center before moving to a new focus
go_to(index)  -> truncate to `index` entries and return the entry at
                 `index` as the node to refocus on
reset()       -> empty the stack

INVARIANTS:
===========
- The stack never contains the currently focused node, only nodes that
  were previously the center
- Entries are ordered oldest first
- UI index 0 means "no history" and must be handled by the caller as a
  start over; go_to(0) is never a jump to the first entry
- Breadcrumb indices are unique; only the home crumb carries index 0
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..contracts import NavigationHistoryEntry


START_OVER_LABEL = "Start over"


@dataclass(frozen=True)
class Breadcrumb:
    """
    One step of the history trail, as handed to the render layer.

    index is the go_to_history target, or None for a label that cannot
    be selected.
    """
    index: Optional[int]
    label: str
    node_id: Optional[str]
    is_search: bool = False

    @property
    def selectable(self) -> bool:
        return self.index is not None


class NavigationHistoryStack:
    """
    Ordered stack of prior traversal centers.

    Also remembers the search a traversal started from, so the trail can
    lead back to those results.
    """

    def __init__(self):
        self._entries: List[NavigationHistoryEntry] = []
        self._origin_query: Optional[str] = None

    @property
    def entries(self) -> Tuple[NavigationHistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def origin_query(self) -> Optional[str]:
        """Search query the current traversal was started from, if any."""
        return self._origin_query

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: NavigationHistoryEntry) -> None:
        self._entries.append(entry)

    def go_to(self, index: int) -> Optional[NavigationHistoryEntry]:
        """
        Jump back to the entry at `index`.

        Returns the entry to refocus on, or None when `index` is not a
        jump target. index == len(stack) is the current node itself: the
        stack is left unchanged and None is returned.
        """
        if index <= 0 or index >= len(self._entries):
            return None
        target = self._entries[index]
        del self._entries[index:]
        return target

    def reset(self) -> None:
        self._entries.clear()
        self._origin_query = None

    def start_from_search(self, query: str) -> None:
        """Begin a fresh traversal whose origin is a search result set."""
        self._entries.clear()
        self._origin_query = query

    def breadcrumbs(self, current: Optional[NavigationHistoryEntry] = None) -> Tuple[Breadcrumb, ...]:
        """
        Trail for display: one home crumb at index 0 (the search origin,
        or a plain start over), each prior center, then the current node.

        Index 0 always starts over, so the first prior center and the
        current node are labels only (index None). Entries 1..len-1 carry
        their own jump index, and no two crumbs share an index.
        """
        if not self._entries and current is None and not self._origin_query:
            return ()

        if self._origin_query:
            trail = [Breadcrumb(index=0, label=f'"{self._origin_query}"', node_id=None, is_search=True)]
        else:
            trail = [Breadcrumb(index=0, label=START_OVER_LABEL, node_id=None)]

        for i, entry in enumerate(self._entries):
            trail.append(Breadcrumb(index=i or None, label=entry.title, node_id=entry.node_id))

        if current is not None:
            trail.append(Breadcrumb(index=None, label=current.title, node_id=current.node_id))
        return tuple(trail)
