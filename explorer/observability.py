"""
Observability & Diagnostics

RESPONSIBILITY: Record what the navigator did, for diagnostics only.
ALLOWED INPUTS: Events from fetchers, simulator, history and controller
OUTPUTS: Append-only diagnostic entries, mirrored to the logging module

WHAT THIS LAYER MUST NOT DO:
============================
- Modify navigator behavior
- Make decisions based on recorded data
- Raise into the component that reports an event

Fetch failures end here. They are recorded and logged, and the
navigator and display resolver only ever observe empty results.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple
import hashlib
import logging

logger = logging.getLogger(__name__)


class DiagnosticEventType(Enum):
    """Explicit diagnostic event types."""
    FETCH_STARTED = "fetch_started"
    FETCH_SUCCEEDED = "fetch_succeeded"
    FETCH_FAILED = "fetch_failed"
    STALE_COMPLETION = "stale_completion"
    MODE_CHANGED = "mode_changed"
    PROGRESS_STARTED = "progress_started"
    PROGRESS_STOPPED = "progress_stopped"
    HISTORY_NAVIGATED = "history_navigated"
    STORE_ERROR = "store_error"


_LOG_LEVELS = {
    DiagnosticEventType.FETCH_FAILED: logging.WARNING,
    DiagnosticEventType.STORE_ERROR: logging.WARNING,
    DiagnosticEventType.STALE_COMPLETION: logging.INFO,
    DiagnosticEventType.MODE_CHANGED: logging.INFO,
}


@dataclass(frozen=True)
class DiagnosticEntry:
    """Immutable diagnostic log entry."""
    entry_id: str
    event_type: DiagnosticEventType
    timestamp: datetime
    component: str
    action: str
    entity_id: Optional[str] = None
    metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def get(self, key: str) -> Optional[str]:
        for k, v in self.metadata:
            if k == key:
                return v
        return None


class DiagnosticsCollector:
    """
    Append-only diagnostics collector.

    One collector is shared by every component of a navigator session.
    Entries are never modified or removed.
    """

    def __init__(self, session: str = "explore"):
        self._session = session
        self._entries: List[DiagnosticEntry] = []
        self._sequence: int = 0

    def record(
        self,
        event_type: DiagnosticEventType,
        component: str,
        action: str,
        entity_id: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None
    ) -> DiagnosticEntry:
        """Record a diagnostic event and mirror it to the logger."""
        self._sequence += 1
        entry_hash = hashlib.sha256(
            f"{self._session}|{component}|{action}|{self._sequence}".encode()
        ).hexdigest()[:16]

        entry = DiagnosticEntry(
            entry_id=f"diag_{entry_hash}",
            event_type=event_type,
            timestamp=datetime.now(timezone.utc),
            component=component,
            action=action,
            entity_id=entity_id,
            metadata=tuple(sorted((k, str(v)) for k, v in (metadata or {}).items())),
        )
        self._entries.append(entry)

        logger.log(
            _LOG_LEVELS.get(event_type, logging.DEBUG),
            "[%s] %s %s%s",
            component,
            action,
            entity_id or "",
            "".join(f" {k}={v}" for k, v in entry.metadata),
        )
        return entry

    def get_entries(
        self,
        event_type: Optional[DiagnosticEventType] = None,
        component: Optional[str] = None
    ) -> List[DiagnosticEntry]:
        """Get entries, optionally filtered."""
        entries = self._entries

        if event_type:
            entries = [e for e in entries if e.event_type == event_type]

        if component:
            entries = [e for e in entries if e.component == component]

        return list(entries)
