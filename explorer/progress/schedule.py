"""
Progress Schedules
==================

Deterministic time functions for simulated progress.

The backend exposes no real progress for long-running graph requests, so
the readout is a pure function of elapsed time: a sequence of bounded
phases that ramp linearly, followed by one open-ended phase that
approaches a ceiling asymptotically. Completion is signaled by the fetch
resolving, never by the schedule.

INVARIANTS:
===========
- Progress is non-decreasing in elapsed time
- Progress never exceeds the ceiling, and the ceiling is below 100
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import math
import random

from ..contracts import LoadingPhase, LoadingStatus


@dataclass(frozen=True)
class PhaseSpec:
    """
    One phase of a schedule.

    ends_at_ms is None for the final open-ended phase, whose end_progress
    is then the asymptotic ceiling.
    """
    phase: LoadingPhase
    ends_at_ms: Optional[float]
    start_progress: float
    end_progress: float
    messages: Tuple[str, ...]
    details: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PhaseSchedule:
    """Ordered phases with their timing and message pools."""
    phases: Tuple[PhaseSpec, ...]
    initial_progress: float = 5.0
    settle_ms: float = 3000.0

    def __post_init__(self):
        if not self.phases:
            raise ValueError("Schedule needs at least one phase")
        if self.phases[-1].ends_at_ms is not None:
            raise ValueError("Final phase must be open-ended")
        if any(p.ends_at_ms is None for p in self.phases[:-1]):
            raise ValueError("Only the final phase may be open-ended")
        if self.phases[-1].end_progress >= 100.0:
            raise ValueError("Ceiling must stay below 100")

        previous_end_ms = 0.0
        previous_progress = self.initial_progress
        for spec in self.phases:
            if spec.start_progress < previous_progress or spec.end_progress < spec.start_progress:
                raise ValueError(f"Progress must not decrease in phase {spec.phase.value}")
            if spec.ends_at_ms is not None:
                if spec.ends_at_ms <= previous_end_ms:
                    raise ValueError(f"Phase {spec.phase.value} ends before it starts")
                previous_end_ms = spec.ends_at_ms
            previous_progress = spec.end_progress

    @property
    def ceiling(self) -> float:
        return self.phases[-1].end_progress

    def phase_at(self, elapsed_ms: float) -> Tuple[PhaseSpec, float]:
        """Phase active at elapsed_ms, with the time that phase started."""
        started_ms = 0.0
        for spec in self.phases:
            if spec.ends_at_ms is None or elapsed_ms < spec.ends_at_ms:
                return spec, started_ms
            started_ms = spec.ends_at_ms
        return self.phases[-1], started_ms


# =============================================================================
# PURE STATUS FUNCTION
# =============================================================================

def progress_at(schedule: PhaseSchedule, elapsed_ms: float) -> float:
    """Progress percentage after elapsed_ms."""
    elapsed_ms = max(0.0, elapsed_ms)
    spec, started_ms = schedule.phase_at(elapsed_ms)
    in_phase = elapsed_ms - started_ms

    if spec.ends_at_ms is None:
        span = spec.end_progress - spec.start_progress
        return spec.end_progress - span * math.exp(-in_phase / schedule.settle_ms)

    duration = spec.ends_at_ms - started_ms
    progress = spec.start_progress + (in_phase / duration) * (spec.end_progress - spec.start_progress)
    return min(spec.end_progress, progress)


def compute_status(
    schedule: PhaseSchedule,
    elapsed_ms: float,
    rng: Optional[random.Random] = None
) -> LoadingStatus:
    """
    Loading status after elapsed_ms.

    Message and detail are drawn from the phase pools on every call and
    are not stable between ticks.
    """
    rng = rng or random
    spec, _ = schedule.phase_at(max(0.0, elapsed_ms))
    return LoadingStatus(
        phase=spec.phase,
        message=rng.choice(spec.messages),
        detail=rng.choice(spec.details) if spec.details else None,
        progress=progress_at(schedule, elapsed_ms),
    )


def initial_status(schedule: PhaseSchedule, rng: Optional[random.Random] = None) -> LoadingStatus:
    """Status published the moment an operation starts."""
    rng = rng or random
    first = schedule.phases[0]
    return LoadingStatus(
        phase=first.phase,
        message=rng.choice(first.messages),
        progress=schedule.initial_progress,
    )


# =============================================================================
# SCHEDULES
# =============================================================================

def _pool(*items: str) -> Tuple[str, ...]:
    return tuple(items)


SEARCH_SCHEDULE = PhaseSchedule(phases=(
    PhaseSpec(
        phase=LoadingPhase.SEARCHING,
        ends_at_ms=2000.0,
        start_progress=5.0,
        end_progress=30.0,
        messages=_pool(
            "Searching your library...",
            "Finding matching content...",
            "Analyzing your query...",
        ),
        details=_pool(
            "Generating query embedding",
            "Comparing with library content",
            "Ranking by relevance",
        ),
    ),
    PhaseSpec(
        phase=LoadingPhase.CLUSTERING,
        ends_at_ms=6000.0,
        start_progress=30.0,
        end_progress=80.0,
        messages=_pool(
            "AI discovering themes...",
            "Finding thematic connections...",
            "Grouping related content...",
        ),
        details=_pool(
            "Analyzing shared themes",
            "Identifying clusters",
            "Building meaningful connections",
        ),
    ),
    PhaseSpec(
        phase=LoadingPhase.BUILDING,
        ends_at_ms=None,
        start_progress=80.0,
        end_progress=95.0,
        messages=_pool(
            "Building visualization...",
            "Arranging results...",
            "Finalizing graph...",
        ),
        details=_pool(
            "Calculating layout",
            "Preparing display",
        ),
    ),
))


_FETCHING_MESSAGES = _pool(
    "Finding similar content...",
    "Exploring your library...",
    "Discovering connections...",
)
_FETCHING_DETAILS = _pool(
    "Analyzing embeddings",
    "Computing similarity scores",
    "Finding related titles",
)
_VALIDATING_MESSAGES = _pool(
    "Validating connections...",
    "Filtering false positives...",
    "AI quality check in progress...",
)
_VALIDATING_DETAILS = _pool(
    "Checking genre compatibility",
    "Verifying thematic relationships",
    "Consulting AI for edge cases",
)
_BUILDING_MESSAGES = _pool(
    "Building graph visualization...",
    "Arranging nodes...",
    "Finalizing connections...",
)
_BUILDING_DETAILS = _pool(
    "Calculating optimal layout",
    "Preparing visual elements",
)


BROWSE_SCHEDULE = PhaseSchedule(
    phases=(
        PhaseSpec(LoadingPhase.FETCHING, 1000.0, 5.0, 40.0, _FETCHING_MESSAGES, _FETCHING_DETAILS),
        PhaseSpec(LoadingPhase.VALIDATING, 4000.0, 40.0, 90.0, _VALIDATING_MESSAGES, _VALIDATING_DETAILS),
        PhaseSpec(LoadingPhase.BUILDING, None, 90.0, 95.0, _BUILDING_MESSAGES),
    ),
    settle_ms=2000.0,
)


def similarity_schedule(depth: int) -> PhaseSchedule:
    """
    Schedule for a focused-node similarity fetch.

    Deeper traversals validate more connections, so validation starts
    and ends later.
    """
    validating_at = 1500.0 if depth > 1 else 500.0
    building_at = 8000.0 if depth > 1 else 2000.0
    return PhaseSchedule(
        phases=(
            PhaseSpec(LoadingPhase.FETCHING, validating_at, 5.0, 30.0, _FETCHING_MESSAGES, _FETCHING_DETAILS),
            PhaseSpec(LoadingPhase.VALIDATING, building_at, 30.0, 90.0, _VALIDATING_MESSAGES, _VALIDATING_DETAILS),
            PhaseSpec(LoadingPhase.BUILDING, None, 90.0, 95.0, _BUILDING_MESSAGES, _BUILDING_DETAILS),
        ),
        settle_ms=2000.0,
    )


def schedules() -> Sequence[PhaseSchedule]:
    """Every built-in schedule."""
    return (SEARCH_SCHEDULE, BROWSE_SCHEDULE, similarity_schedule(1), similarity_schedule(3))
