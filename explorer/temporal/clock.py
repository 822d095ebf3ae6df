"""
Logical Clock for Progress Simulation
=====================================

Injectable millisecond clock used by the progress simulator.

MODES:
======
1. LIVE mode: reads the monotonic system clock
2. MANUAL mode: time only moves when advance() is called

GUARANTEES:
- Never goes backwards in either mode
- Given the same advance() sequence, produces identical readings
"""

from __future__ import annotations
from dataclasses import dataclass
import time


@dataclass
class LogicalClock:
    """
    Injectable clock for elapsed-time measurement.

    All progress timing reads go through this clock so tests can step
    time explicitly instead of sleeping.
    """
    _is_live: bool = True
    _manual_ms: float = 0.0

    def now_ms(self) -> float:
        """Current logical time in milliseconds."""
        if self._is_live:
            return time.monotonic() * 1000.0
        return self._manual_ms

    def advance(self, milliseconds: float) -> float:
        """Move a manual clock forward. Returns the new reading."""
        if self._is_live:
            raise RuntimeError("Cannot advance a live clock")
        if milliseconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._manual_ms += milliseconds
        return self._manual_ms

    @classmethod
    def live(cls) -> 'LogicalClock':
        """Create clock in LIVE mode (uses the monotonic system clock)."""
        return cls(_is_live=True)

    @classmethod
    def manual(cls, start_ms: float = 0.0) -> 'LogicalClock':
        """Create clock in MANUAL mode starting at start_ms."""
        return cls(_is_live=False, _manual_ms=start_ms)

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "MANUAL"
        return f"LogicalClock({mode}, {self.now_ms():.0f}ms)"
