"""
Progress Simulator
==================

Owns the one recurring background activity of the navigator: an asyncio
task that republishes a simulated LoadingStatus on a fixed interval while
a slow fetch is in flight.

LIFECYCLE:
==========
start()  -> records the start time, publishes the initial status,
            launches the ticking task (superseding any previous run)
stop()   -> cancels the task, clears the handle, nulls the status

Each run carries its own token. A tick that was already scheduled when
stop() ran sees a foreign token and exits without touching state.
Stopping never cancels the network request being simulated.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Callable, Optional
import asyncio
import random

from ..contracts import LoadingStatus
from ..observability import DiagnosticsCollector, DiagnosticEventType
from ..temporal import LogicalClock
from .schedule import PhaseSchedule, compute_status, initial_status


StatusListener = Callable[[Optional[LoadingStatus]], None]


class ProgressSimulator:
    """
    Time-driven progress readout for one fetcher.

    GUARANTEES:
    ===========
    1. Progress is non-decreasing within a single run
    2. Progress never reaches 100
    3. After stop(), no further status is published for that run
    """

    def __init__(
        self,
        schedule: PhaseSchedule,
        clock: Optional[LogicalClock] = None,
        interval_seconds: float = 0.3,
        rng: Optional[random.Random] = None,
        on_update: Optional[StatusListener] = None,
        diagnostics: Optional[DiagnosticsCollector] = None,
        name: str = "progress"
    ):
        self._schedule = schedule
        self._clock = clock or LogicalClock.live()
        self._interval = interval_seconds
        self._rng = rng or random.Random()
        self._on_update = on_update
        self._diagnostics = diagnostics
        self._name = name

        self._status: Optional[LoadingStatus] = None
        self._task: Optional[asyncio.Task] = None
        self._run_token: Optional[object] = None
        self._started_ms: float = 0.0

    @property
    def status(self) -> Optional[LoadingStatus]:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._run_token is not None

    @property
    def has_timer(self) -> bool:
        """Whether a ticking task handle is held."""
        return self._task is not None

    @property
    def schedule(self) -> PhaseSchedule:
        return self._schedule

    def start(self) -> LoadingStatus:
        """
        Begin a new run. Must be called from within a running event loop.

        A run already in progress is stopped first.
        """
        loop = asyncio.get_running_loop()
        if self.is_running:
            self.stop()

        token = object()
        self._run_token = token
        self._started_ms = self._clock.now_ms()
        self._publish(initial_status(self._schedule, self._rng))
        self._task = loop.create_task(self._tick_loop(token))

        if self._diagnostics:
            self._diagnostics.record(
                DiagnosticEventType.PROGRESS_STARTED, self._name, "start",
                metadata={"interval_s": str(self._interval)},
            )
        return self._status

    def tick(self) -> Optional[LoadingStatus]:
        """Recompute and publish the status for the current run."""
        if not self.is_running:
            return None

        elapsed = self._clock.now_ms() - self._started_ms
        status = compute_status(self._schedule, elapsed, self._rng)

        # Clock readings may jitter; the readout itself must never go back
        if self._status is not None and status.progress < self._status.progress:
            status = replace(status, progress=self._status.progress)

        self._publish(status)
        return status

    def stop(self) -> None:
        """End the current run. Safe to call when nothing is running."""
        was_running = self.is_running

        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._run_token = None

        if self._status is not None:
            self._publish(None)

        if was_running and self._diagnostics:
            self._diagnostics.record(
                DiagnosticEventType.PROGRESS_STOPPED, self._name, "stop"
            )

    async def _tick_loop(self, token: object) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if token is not self._run_token:
                return
            self.tick()

    def _publish(self, status: Optional[LoadingStatus]) -> None:
        self._status = status
        if self._on_update is not None:
            self._on_update(status)
