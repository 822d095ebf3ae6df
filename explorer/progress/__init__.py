"""
Progress Simulation Layer

Synthetic phased progress for long-running graph requests whose real
backend progress is not observable.
"""

from .schedule import (
    PhaseSpec, PhaseSchedule,
    SEARCH_SCHEDULE, BROWSE_SCHEDULE, similarity_schedule, schedules,
    compute_status, initial_status, progress_at,
)
from .simulator import ProgressSimulator

__all__ = [
    'PhaseSpec', 'PhaseSchedule',
    'SEARCH_SCHEDULE', 'BROWSE_SCHEDULE', 'similarity_schedule', 'schedules',
    'compute_status', 'initial_status', 'progress_at',
    'ProgressSimulator',
]
